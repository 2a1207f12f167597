"""Input validation with strong typing."""

from dataclasses import dataclass
from typing import Any
from returns.result import Result, Success, Failure

from pydantic import BaseModel, Field, field_validator, ConfigDict


# Validation limits
MAX_JSON_DEPTH = 20
MAX_DESCRIPTION_LENGTH = 500


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True, validate_assignment=True, extra="forbid", frozen=True
    )


class GenerationRequest(RequestValidator):
    """Validated dynamic-view generation request."""

    prompt: str = Field(min_length=1)
    data_source: str | None = Field(default=None)

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        """Ensure prompt is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Prompt cannot be empty")
        return stripped


class ActionRequest(RequestValidator):
    """Validated user action, as sent by an interactive widget."""

    type: str = Field(min_length=1)
    args: dict[str, Any] = Field(default_factory=dict)
    description: str = Field(min_length=1, max_length=MAX_DESCRIPTION_LENGTH)


def validate_json_size(data: str, max_size: int, name: str = "JSON") -> None:
    """
    Validate encoded size of a JSON payload.

    Raises:
        ValidationError: If size exceeds limit
    """
    size = len(data.encode("utf-8"))
    if size > max_size:
        raise ValidationError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_json_depth(obj: Any, max_depth: int = MAX_JSON_DEPTH, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth.

    Raises:
        ValidationError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise ValidationError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)


def validate_reply(raw: str, parsed: dict[str, Any], max_size: int) -> Result[None, ValidationResult]:
    """
    Check a parsed model reply against size and depth limits.

    Returns:
        Success(None) or Failure describing the first exceeded limit
    """
    try:
        validate_json_size(raw, max_size, "Model reply")
        validate_json_depth(parsed)
    except ValidationError as e:
        return Failure(ValidationResult(str(e), field="reply"))
    return Success(None)
