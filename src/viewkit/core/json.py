"""Fast JSON decoding/encoding with msgspec and orjson."""

from typing import Any
import json

import msgspec
import orjson


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


_decoder = msgspec.json.Decoder()


def strip_code_fences(text: str) -> str:
    """
    Remove a markdown fence wrapping the whole text.

    Handles ```json / ``` openers with or without a language tag and a
    closing fence. Text that is not fenced is only whitespace-stripped.

    Args:
        text: Raw model reply

    Returns:
        Unwrapped text
    """
    content = text.strip()
    if not content.startswith("```"):
        return content

    first_newline = content.find("\n")
    if first_newline == -1:
        # Single line: ```{...}```
        content = content[3:]
        if content.lower().startswith("json"):
            content = content[4:]
    else:
        content = content[first_newline + 1:]

    content = content.rstrip()
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def parse_json_object(text: str) -> dict[str, Any]:
    """
    Parse text as exactly one JSON object.

    No repair and no brace hunting: a reply that is not a JSON object is an
    error for the caller to label.

    Raises:
        JSONParseError: If the text is not valid JSON or not an object
    """
    try:
        result = _decoder.decode(text.encode("utf-8"))
    except msgspec.DecodeError as e:
        raise JSONParseError(f"Invalid JSON: {e}", e) from e

    if not isinstance(result, dict):
        raise JSONParseError(f"Expected object, got {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, *, indent: int = 0, sort_keys: bool = False) -> str:
    """
    Encode object to JSON string using orjson.

    Args:
        obj: Object to encode
        indent: 2 for pretty output, 0 for compact
        sort_keys: Deterministic key order (used for injected blobs)

    Returns:
        JSON string
    """
    option = 0
    if indent:
        option |= orjson.OPT_INDENT_2
    if sort_keys:
        option |= orjson.OPT_SORT_KEYS
    try:
        return orjson.dumps(obj, option=option).decode("utf-8")
    except TypeError:
        # Integers outside 64-bit range and other edge cases
        return json.dumps(obj, indent=indent or None, sort_keys=sort_keys, default=str)
