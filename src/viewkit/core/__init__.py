"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import (
    ValidationError,
    ValidationResult,
    GenerationRequest,
    ActionRequest,
    validate_json_size,
    validate_json_depth,
    validate_reply,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import strip_code_fences, parse_json_object, safe_json_dumps, JSONParseError
from .hash import etag, hash_string
from .tracing import trace_operation, trace_operation_async


def create_container(settings: Settings | None = None, **overrides):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings, **overrides)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Validation
    "ValidationError",
    "ValidationResult",
    "GenerationRequest",
    "ActionRequest",
    "validate_json_size",
    "validate_json_depth",
    "validate_reply",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "strip_code_fences",
    "parse_json_object",
    "safe_json_dumps",
    "JSONParseError",
    # DI
    "create_container",
    # Hashing
    "etag",
    "hash_string",
    # Tracing
    "trace_operation",
    "trace_operation_async",
]
