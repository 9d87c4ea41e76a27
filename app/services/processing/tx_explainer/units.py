"""Integer-safe unit conversion and display helpers.

Amounts are carried as decimal strings from the moment they leave the
upstream payload. Nothing here routes a whole amount through `float`, so
micro-STX values wider than a double's 53-bit mantissa convert exactly.
"""

import math
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

MICRO_STX_DECIMALS = 6

# Largest integer a JavaScript client can hold without rounding
MAX_SAFE_INTEGER = 2**53 - 1

ELLIPSIS = "…"


def to_decimal_string(value: Any) -> Optional[str]:
    """Render an integer-like value as a plain decimal string.

    Accepts ints of any size, digit strings (optionally ``0x``-prefixed hex, as
    some decoders emit), and integral floats. Returns None for anything else.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return format(Decimal(value), "f")
    if isinstance(value, Decimal):
        if value != value.to_integral_value():
            return None
        return format(value.quantize(Decimal(1)), "f")
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            try:
                return str(int(text, 16))
            except ValueError:
                return None
        if text.startswith("-"):
            return text if _is_ascii_digits(text[1:]) else None
        return text if _is_ascii_digits(text) else None
    return None


def as_text(value: Any) -> Optional[str]:
    """Strings pass through; numbers become decimal strings; anything else is None."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return to_decimal_string(value)
    return None


def _is_ascii_digits(text: str) -> bool:
    return bool(text) and text.isascii() and text.isdigit()


def split_units(
    amount: Any, decimals: int = MICRO_STX_DECIMALS
) -> Optional[Tuple[str, str]]:
    """Split a smallest-unit amount into whole and fraction digit strings.

    The fraction has its trailing zeros stripped and is empty for whole
    amounts.

    >>> split_units("1500000")
    ('1', '5')
    >>> split_units("42")
    ('0', '000042')
    """
    digits = to_decimal_string(amount)
    if digits is None:
        return None

    negative = digits.startswith("-")
    digits = digits.lstrip("-").lstrip("0") or "0"

    if decimals <= 0:
        whole, fraction = digits, ""
    else:
        padded = digits.rjust(decimals + 1, "0")
        whole = padded[:-decimals]
        fraction = padded[-decimals:].rstrip("0")

    if negative and (whole != "0" or fraction):
        whole = f"-{whole}"
    return whole, fraction


def format_units(amount: Any, decimals: int = MICRO_STX_DECIMALS) -> Optional[str]:
    """Format a smallest-unit amount as a human decimal string ("1.5")."""
    parts = split_units(amount, decimals)
    if parts is None:
        return None
    whole, fraction = parts
    return f"{whole}.{fraction}" if fraction else whole


def format_stx(micro_stx: Any) -> Optional[str]:
    """Format micro-STX with the unit suffix ("1.5 STX")."""
    formatted = format_units(micro_stx)
    return f"{formatted} STX" if formatted is not None else None


def shorten_address(address: Optional[str], head: int = 6, tail: int = 4) -> Optional[str]:
    """Shorten an address to ``head…tail``.

    Addresses no longer than ``head + tail + 3`` are returned unchanged, so
    shortening an already-short value is a no-op.
    """
    if not address:
        return address
    if len(address) <= head + tail + 3:
        return address
    return f"{address[:head]}{ELLIPSIS}{address[-tail:]}"


def shorten_contract_id(contract_id: Optional[str]) -> Optional[str]:
    """Shorten the principal part of ``ADDRESS.contract-name``, keeping the name."""
    if not contract_id or "." not in contract_id:
        return shorten_address(contract_id)
    address, name = contract_id.split(".", 1)
    return f"{shorten_address(address)}.{name}"


def format_timestamp(value: Any) -> Optional[str]:
    """Normalize a block timestamp to an ISO-8601 UTC string.

    ISO strings pass through untouched; epoch values (seconds, or
    milliseconds when implausibly large for seconds) are converted.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if not _is_ascii_digits(text):
            return text
        value = int(text)
    if not isinstance(value, (int, float)):
        return None

    try:
        seconds = float(value)
        if seconds > 1e12:
            seconds /= 1000
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return moment.isoformat().replace("+00:00", "Z")


def to_int(value: Any) -> Optional[int]:
    digits = to_decimal_string(value)
    return int(digits) if digits is not None else None


def to_json_safe(value: Any) -> Any:
    """Recursively convert a decoded payload into strictly JSON-safe values.

    Integers outside the JavaScript safe range become decimal strings, bytes
    become ``0x`` hex, and unknown objects fall back to ``str``.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value if abs(value) <= MAX_SAFE_INTEGER else str(value)
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return to_json_safe(value.value)
    if isinstance(value, dict):
        return {str(key): to_json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_safe(item) for item in value]
    return str(value)
