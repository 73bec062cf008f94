"""
Numeric value parsing for guidance statements

Pulls a single figure or a (min, max) range out of a guidance sentence.

Magnitude words are detected on the whole input, not on the matched numeral:
if "billion" appears anywhere in the text every currency figure is scaled by
1e9, otherwise "million" scales by 1e6. One statement is assumed to talk about
one order of magnitude, so "$500 million to $1.2 billion" comes back as two
billion-scaled bounds. Percentages are never scaled.
"""
import re
from typing import Callable, Optional

from .domain import ValueRange

_NUMERAL = r"([\d,]+(?:\.\d+)?)"
_MAGNITUDE = r"(?:million|billion)"

BILLION = 1e9
MILLION = 1e6


def _parse_number(raw: str) -> Optional[float]:
    """Strip thousands separators and parse as a decimal"""
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


def magnitude_multiplier(text: str) -> float:
    """Scale factor implied by the magnitude words anywhere in text"""
    lowered = text.lower()
    if "billion" in lowered:
        return BILLION
    if "million" in lowered:
        return MILLION
    return 1.0


def _scaled(match: re.Match, text: str) -> Optional[float]:
    number = _parse_number(match.group(1))
    if number is None:
        return None
    return number * magnitude_multiplier(text)


def _unscaled(match: re.Match, text: str) -> Optional[float]:
    return _parse_number(match.group(1))


def _scaled_range(match: re.Match, text: str) -> Optional[ValueRange]:
    low = _parse_number(match.group(1))
    high = _parse_number(match.group(2))
    if low is None or high is None:
        return None
    multiplier = magnitude_multiplier(text)
    return ValueRange(min=low * multiplier, max=high * multiplier)


def _unscaled_range(match: re.Match, text: str) -> Optional[ValueRange]:
    low = _parse_number(match.group(1))
    high = _parse_number(match.group(2))
    if low is None or high is None:
        return None
    return ValueRange(min=low, max=high)


# Ordered (pattern, handler) tables, first successful handler wins
VALUE_PATTERNS: list[tuple[re.Pattern, Callable[[re.Match, str], Optional[float]]]] = [
    (re.compile(r"\$" + _NUMERAL + r"\s*" + _MAGNITUDE, re.IGNORECASE), _scaled),
    (re.compile(r"([\d.]+)\s*%"), _unscaled),
    (re.compile(r"\$" + _NUMERAL), _scaled),
]

RANGE_PATTERNS: list[tuple[re.Pattern, Callable[[re.Match, str], Optional[ValueRange]]]] = [
    (
        re.compile(
            r"between\s+\$" + _NUMERAL + r"\s*" + _MAGNITUDE + r"?\s+and\s+\$" + _NUMERAL + r"\s*" + _MAGNITUDE,
            re.IGNORECASE,
        ),
        _scaled_range,
    ),
    (
        re.compile(
            r"\$" + _NUMERAL + r"\s*" + _MAGNITUDE + r"?\s*(?:to|-)\s*\$" + _NUMERAL + r"\s*" + _MAGNITUDE,
            re.IGNORECASE,
        ),
        _scaled_range,
    ),
    (re.compile(r"([\d.]+)\s*%\s*(?:to|-)\s*([\d.]+)\s*%", re.IGNORECASE), _unscaled_range),
]


def extract_value(text: str) -> Optional[float]:
    """
    Extract a single guided figure from text.

    Tries "$N million|billion", then "N%", then a bare "$N".

    Example:
        extract_value("We expect revenue of $1.5 billion") → 1500000000.0
        extract_value("margins of 12.3%") → 12.3
    """
    for pattern, handler in VALUE_PATTERNS:
        match = pattern.search(text)
        if match:
            # First matching pattern decides, even if its numeral is unparseable
            return handler(match, text)
    return None


def extract_range(text: str) -> Optional[ValueRange]:
    """
    Extract a (min, max) range from text.

    A pattern whose numerals do not both parse is skipped in favour of the
    next one.

    Example:
        extract_range("guidance of $10 million to $15 million")
        → ValueRange(min=10000000.0, max=15000000.0)
    """
    for pattern, handler in RANGE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        value_range = handler(match, text)
        if value_range is not None:
            return value_range
    return None
