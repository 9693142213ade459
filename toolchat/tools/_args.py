"""Argument decoding shared by the tool handlers."""

from __future__ import annotations

import json
from typing import Any, Dict

from toolchat.errors import ValidationError


def decode_arguments(raw_arguments: bytes) -> Dict[str, Any]:
    """
    Decode the model's raw JSON arguments into a dict.

    Raises
    ------
    ValidationError
        If the payload is not valid JSON or not a JSON object.
    """
    if not raw_arguments or not raw_arguments.strip():
        return {}
    try:
        payload = json.loads(raw_arguments)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ValidationError(f"invalid JSON arguments: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValidationError(f"arguments must be a JSON object, got {type(payload).__name__}")
    return payload


def require_str(args: Dict[str, Any], key: str, *, allow_empty: bool = False) -> str:
    """Return ``args[key]`` as a string, rejecting missing, non-string or (optionally) empty values."""
    if key not in args or args[key] is None:
        raise ValidationError(f"missing required parameter '{key}'")
    value = args[key]
    if not isinstance(value, str):
        raise ValidationError(f"parameter '{key}' must be a string")
    if not allow_empty and not value:
        raise ValidationError(f"{key} cannot be empty")
    return value


def optional_str(args: Dict[str, Any], key: str, default: str) -> str:
    value = args.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise ValidationError(f"parameter '{key}' must be a string")
    return value


def string_property(description: str) -> Dict[str, str]:
    return {"type": "string", "description": description}


def object_schema(properties: Dict[str, Any], required: list) -> Dict[str, Any]:
    """JSON schema for a flat argument object; ``required`` is always a list."""
    return {"type": "object", "properties": properties, "required": list(required)}
