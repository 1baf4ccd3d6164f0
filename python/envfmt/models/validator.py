"""
envfmt/models/validator.py

Shape checks for boto3 response fragments. Each SDK adapter pulls the one
field it needs out of a response dict and validates it here before any of
it reaches the rest of envfmt.
"""

from functools import lru_cache
from typing import Any, Mapping, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

T = TypeVar("T")

_REQUIRED: Any = object()


@lru_cache(maxsize=None)
def _adapter(expected_type: Any) -> TypeAdapter:
    return TypeAdapter(expected_type)


def validate_response_field(
    response: Mapping[str, Any],
    field: str,
    expected_type: Type[T],
    default: Any = _REQUIRED,
) -> T:
    """
    Validate response[field] against expected_type.

    A field that is absent or null falls back to `default`. With no default
    it raises KeyError, so callers can tell "missing" from "malformed".

    Raises:
        KeyError: If the field is absent or null and no default was given.
        ValueError: If the field does not match expected_type.
    """
    value = response.get(field)
    if value is None:
        if default is _REQUIRED:
            raise KeyError(field)
        value = default
    try:
        return _adapter(expected_type).validate_python(value)
    except ValidationError as e:
        raise ValueError(f"Response field '{field}' is malformed: {e}") from e
