"""CSV parsing utilities for ad platform exports.

This module provides the low-level cell handling shared by the report parser
and the campaign models: quote-aware field splitting and tolerant numeric
normalization for exports that mix locale conventions.
"""

import logging
import math
import re
from typing import Any, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

# Placeholder some platforms print instead of an empty metric
EMPTY_PLACEHOLDER = "--"

# ASCII letters plus currency signs ($, ¢, £, ¤, ¥ and the U+20A0 block)
_STRIP_CHARS = re.compile(r"[A-Za-z$\u00a2-\u00a5\u20a0-\u20cf]")
_SURROUNDING_QUOTES = re.compile(r'^"|"$')
# Longest leading float literal, mirroring lenient prefix parsing
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def strip_quotes(value: str) -> str:
    """Remove one leading and one trailing double quote, then trim."""
    return _SURROUNDING_QUOTES.sub("", value).strip()


def split_fields(line: str, delimiter: str) -> list[str]:
    """Split one line into trimmed cells, respecting double-quoted sections.

    A double quote toggles the "inside quotes" state and is not copied into
    the cell. The delimiter only separates cells outside quotes. Rows are not
    padded, so a short row yields fewer cells than the header.

    Args:
        line: Raw line of text
        delimiter: Single-character field delimiter

    Returns:
        List of trimmed cell values

    Examples:
        >>> split_fields('"Campaña A";"1.000";10', ";")
        ['Campaña A', '1.000', '10']
        >>> split_fields('"Shoes, Summer",125.50', ",")
        ['Shoes, Summer', '125.50']
    """
    cells: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    cells.append("".join(current).strip())
    return cells


def get_field(values: Sequence[str], index: int, default: str = "") -> str:
    """Bounds-checked cell access.

    Unresolved columns are represented by index -1, which must never wrap
    around to the last cell.
    """
    if index < 0 or index >= len(values):
        return default
    return values[index]


def normalize_number(value: Any) -> float:
    """Normalize a textual number from an ad platform export.

    Exports mix thousands and decimal separator conventions, so the separator
    meaning is resolved heuristically:

    - Both "," and ".": the rightmost one is the decimal point, the other is
      a thousands separator ("1.234,56" → 1234.56, "1,234.56" → 1234.56)
    - Only ",": exactly three digits after the last comma means thousands
      ("77,625" → 77625), anything else is a decimal comma ("12,5" → 12.5)
    - Only ".": exactly three digits after the last dot, or more than one dot,
      means thousands ("208.562" → 208562), otherwise a decimal point

    Empty values, the "--" placeholder, anything unparseable and values too
    large for a finite float become 0.
    Malformed cells never raise.

    Args:
        value: Raw cell value (string, number or None)

    Returns:
        Normalized float value
    """
    if value is None:
        return 0.0

    if isinstance(value, bool):
        return float(value)

    if isinstance(value, (int, float)):
        if pd.isna(value):
            return 0.0
        try:
            number = float(value)
        except OverflowError:
            return 0.0
        return number if math.isfinite(number) else 0.0

    if not isinstance(value, str):
        value = str(value)

    if value == "" or value == EMPTY_PLACEHOLDER:
        return 0.0

    cleaned = strip_quotes(value)
    cleaned = _STRIP_CHARS.sub("", cleaned).strip()

    if cleaned == "":
        return 0.0

    has_comma = "," in cleaned
    has_dot = "." in cleaned

    if has_comma and has_dot:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".", 1)
        else:
            cleaned = cleaned.replace(",", "")
    elif has_comma:
        parts = cleaned.split(",")
        if len(parts[-1]) == 3:
            cleaned = cleaned.replace(",", "")
        else:
            cleaned = cleaned.replace(",", ".", 1)
    elif has_dot:
        parts = cleaned.split(".")
        if len(parts[-1]) == 3 or len(parts) > 2:
            cleaned = cleaned.replace(".", "")

    match = _LEADING_FLOAT.match(cleaned)
    if not match:
        logger.debug(f"Unable to parse numeric value: '{value}', returning 0")
        return 0.0

    try:
        result = float(match.group(0))
    except (ValueError, OverflowError):
        result = math.inf

    if not math.isfinite(result):
        logger.debug(f"Unable to parse numeric value: '{value}', returning 0")
        return 0.0
    return result
