"""
Hash Input Formatting

Field display rules for building hash inputs. Stage hashes join fields
with HASH_FIELD_DELIMITER in a fixed order; the textual form of every
field is part of the hash's reproducibility contract, and must stay
byte-for-byte stable so that digests already anchored on chain can be
recomputed.

Display rules:
- format_number:   shortest round-trip decimal, never an exponent,
                   integral values without a fractional part (100.0 -> "100")
- format_debug_number: shortest round-trip decimal keeping ".0"
                   (100.0 -> "100.0"), exponent form "1e16" / "1.5e-7"
- format_optional_reading: "Some(<debug number>)" or "None"
- format_variant:  PascalCase variant name ("sun_drying" -> "SunDrying")
- format_timestamp: "YYYY-MM-DD HH:MM:SS[.fff|.ffffff] UTC"
"""
from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from core.schemas.canonical import ensure_utc


HASH_FIELD_DELIMITER = "-"


def _special_float(value: float) -> Optional[str]:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return None


def format_number(value: float) -> str:
    """
    Render a number in plain display form.

    Examples:
        >>> format_number(100.0)
        '100'
        >>> format_number(12.5)
        '12.5'
        >>> format_number(1e16)
        '10000000000000000'
    """
    value = float(value)
    special = _special_float(value)
    if special is not None:
        return special

    text = repr(value)
    if "e" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_debug_number(value: float) -> str:
    """
    Render a number in debug form.

    Examples:
        >>> format_debug_number(22.0)
        '22.0'
        >>> format_debug_number(1e16)
        '1e16'
        >>> format_debug_number(1.5e-07)
        '1.5e-7'
    """
    value = float(value)
    special = _special_float(value)
    if special is not None:
        return special

    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        text = f"{mantissa}e{int(exponent)}"
    return text


def format_optional_reading(value: Optional[float]) -> str:
    """Render an optional sensor reading as Some(<debug number>) or None."""
    if value is None:
        return "None"
    return f"Some({format_debug_number(value)})"


def format_variant(value: Any) -> str:
    """Render an enum member (or its snake_case value) as a PascalCase name."""
    raw = value.value if isinstance(value, Enum) else str(value)
    return "".join(part.capitalize() for part in raw.split("_"))


def format_timestamp(dt: datetime) -> str:
    """
    Render a timestamp in UTC display form.

    Fractional seconds are omitted when zero, written with 3 digits when
    they are whole milliseconds, and with 6 digits otherwise.

    Example:
        >>> format_timestamp(datetime(2026, 3, 1, 8, 0, 5, 250000, tzinfo=timezone.utc))
        '2026-03-01 08:00:05.250 UTC'
    """
    utc_dt = ensure_utc(dt)
    base = utc_dt.strftime("%Y-%m-%d %H:%M:%S")
    micros = utc_dt.microsecond
    if micros == 0:
        fraction = ""
    elif micros % 1000 == 0:
        fraction = f".{micros // 1000:03d}"
    else:
        fraction = f".{micros:06d}"
    return f"{base}{fraction} UTC"


def join_fields(*fields: str) -> str:
    """Join already-formatted fields with the hash field delimiter."""
    return HASH_FIELD_DELIMITER.join(fields)


__all__ = [
    "HASH_FIELD_DELIMITER",
    "format_number",
    "format_debug_number",
    "format_optional_reading",
    "format_variant",
    "format_timestamp",
    "join_fields",
]
