"""Generation failure categories.

Each category is reported to the operator as-is; none is retried or
downgraded to a template.
"""


class GenerationError(Exception):
    """Dynamic view generation failed."""

    category = "generation_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingCredentialError(GenerationError):
    """No credential configured for the generation collaborator."""

    category = "missing_credential"


class GenerationFailedError(GenerationError):
    """Collaborator call failed (transport, quota, timeout)."""

    category = "generation_failed"


class InvalidJSONResponseError(GenerationError):
    """Reply was not a single JSON object."""

    category = "invalid_json"


class InvalidTreeResponseError(GenerationError):
    """Reply was JSON but not shaped like a UI tree."""

    category = "invalid_tree"
