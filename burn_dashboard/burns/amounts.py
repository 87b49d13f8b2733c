"""
Exact token amount arithmetic.

Raw amounts are Python ints in the token's smallest unit. They are rescaled
between decimal precisions with integer multiply / floor-divide and only turned
into strings for display. Floats never touch a raw amount.
"""

from __future__ import annotations

from burn_dashboard.burn_logging import get_logger

logger = get_logger(__name__)


def normalize_raw_amount(raw: int, from_decimals: int, to_decimals: int) -> int:
    """
    Re-express `raw` (at `from_decimals`) at `to_decimals`.

    Up-scaling is exact. Down-scaling floor-divides and drops the remainder;
    that only happens when a source reports more decimals than the mint, so
    it is logged rather than raised.

        >>> normalize_raw_amount(100, 2, 4)
        10000
        >>> normalize_raw_amount(12345, 4, 2)
        123
    """
    if from_decimals == to_decimals:
        return raw
    if from_decimals < to_decimals:
        return raw * 10 ** (to_decimals - from_decimals)
    scaled, dropped = divmod(raw, 10 ** (from_decimals - to_decimals))
    if dropped:
        logger.warning(
            "burn_amount_truncated",
            raw=str(raw),
            from_decimals=from_decimals,
            to_decimals=to_decimals,
            dropped=str(dropped),
        )
    return scaled


def _ascii_digits(text: str) -> bool:
    return text.isascii() and text.isdigit()


def format_raw_amount(raw: int, decimals: int) -> str:
    """
    Render a raw amount as a plain decimal string without trailing fractional zeros.

        >>> format_raw_amount(1234500, 6)
        '1.2345'
        >>> format_raw_amount(5_000_000, 6)
        '5'
    """
    negative = raw < 0
    int_part, frac_part = divmod(-raw if negative else raw, 10**decimals)
    text = str(int_part)
    if decimals > 0:
        frac = str(frac_part).rjust(decimals, "0").rstrip("0")
        if frac:
            text = f"{text}.{frac}"
    return f"-{text}" if negative else text


def parse_ui_amount(text: str, decimals: int) -> int:
    """
    Inverse of format_raw_amount: decimal string -> raw int at `decimals`.

    Raises ValueError for non-numeric input or more fractional digits than
    `decimals` can hold (that would need rounding).
    """
    s = text.strip()
    negative = s.startswith("-")
    if negative:
        s = s[1:]
    int_str, _, frac_str = s.partition(".")
    if not _ascii_digits(int_str) or (frac_str and not _ascii_digits(frac_str)):
        raise ValueError(f"not a decimal amount: {text!r}")
    if len(frac_str) > decimals:
        raise ValueError(f"{text!r} has more than {decimals} fractional digits")
    raw = int(int_str) * 10**decimals + int(frac_str.ljust(decimals, "0") or "0")
    return -raw if negative else raw


def parse_raw_amount(value: object) -> int | None:
    """Raw amount from an RPC field (string or int). None when unparsable or negative."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        raw = value
    elif isinstance(value, str):
        text = value.strip()
        if not _ascii_digits(text):
            return None
        try:
            raw = int(text)
        except ValueError:
            # over the int max_str_digits limit
            return None
    else:
        return None
    return raw if raw >= 0 else None
