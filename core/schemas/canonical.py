"""
Canonical JSON

One byte-exact rendering per value. The persisted record, the AI score
reveal hash and the raw content passthrough all serialize through here, so
two equal values always upload (and hash) as the same bytes.

Rendering rules:
    keys sorted, separators "," and ":" with no spaces
    None values dropped from objects
    datetimes in UTC, ISO-8601 with a "Z" suffix
    enums by value, bytes as lowercase hex
    NaN and Infinity rejected
"""

import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import PayloadValidationException, SerializationException


CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def ensure_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """2026-01-27T21:35:00Z, with .ffffff only when there are microseconds."""
    moment = ensure_utc(dt)
    pattern = "%Y-%m-%dT%H:%M:%SZ" if moment.microsecond == 0 else "%Y-%m-%dT%H:%M:%S.%fZ"
    return moment.strftime(pattern)


def _child_path(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce a value to plain JSON types.

    `path` names the position inside the root value ("features.moisture",
    "outputs[2]") and is reported in the raised exception.

    Raises:
        SerializationException: non-finite float or unsupported type
    """
    if value is None or isinstance(value, (bool, int, str)):
        # bool is an int subclass; both pass through unchanged
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise SerializationException(
                message=f"Non-finite number at '{path or '<root>'}': {value}",
                details={"path": path, "value": str(value)},
            )
        return value

    if isinstance(value, datetime):
        return format_datetime_canonical(value)

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, BaseModel):
        return canonicalize_value(
            value.model_dump(mode="python", by_alias=True, exclude_none=True),
            path,
        )

    if isinstance(value, dict):
        return {
            str(key): canonicalize_value(item, _child_path(path, key))
            for key, item in value.items()
            if item is not None
        }

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{index}]") for index, item in enumerate(value)]

    if isinstance(value, bytes):
        return value.hex()

    raise SerializationException(
        message=f"Unsupported type at '{path or '<root>'}': {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def ensure_serializable(value: Any, subject: str) -> None:
    """
    Reject client input that has no canonical rendering.

    Raises:
        PayloadValidationException: carries the offending position as `field_path`
    """
    try:
        canonicalize_value(value)
    except SerializationException as e:
        raise PayloadValidationException(
            f"Invalid {subject}: {e.message}",
            field_path=e.details.get("path"),
        ) from e


def dumps_canonical(obj: Any) -> str:
    """
    Render `obj` as canonical JSON text.

        >>> dumps_canonical({"b": 2, "a": 1, "at": datetime(2026, 1, 27, 21, 35)})
        '{"a":1,"at":"2026-01-27T21:35:00Z","b":2}'

    Raises:
        SerializationException: the value cannot be rendered
    """
    plain = canonicalize_value(obj)
    try:
        return json.dumps(
            plain,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise SerializationException(
            message=f"Canonical JSON encoding failed: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def dumps_canonical_bytes(obj: Any) -> bytes:
    """Canonical JSON encoded as UTF-8, ready for upload or hashing."""
    return dumps_canonical(obj).encode("utf-8")


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    try:
        return dumps_canonical(obj1) == dumps_canonical(obj2)
    except SerializationException:
        return False
