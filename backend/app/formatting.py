from __future__ import annotations

import math
import re
from typing import Literal, Optional

Polarity = Literal["positive", "negative"]
MarketTone = Literal["open", "closed", "other"]

NOT_AVAILABLE = "N/A"

POLARITY_COLORS: dict[str, str] = {"positive": "green", "negative": "red"}
TONE_COLORS: dict[str, str] = {"open": "green", "closed": "red", "other": "yellow"}

_LEADING_NUMBER_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_WHITESPACE_RE = re.compile(r"\s+")


def parse_float(value: object) -> Optional[float]:
    """Lenient float parsing: takes the leading number of a string, like parseFloat."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER_RE.match(str(value))
        if not match:
            return None
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _group(number: float, max_fraction_digits: int = 3) -> str:
    text = f"{number:,.{max_fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_market_cap(value: object) -> str:
    number = parse_float(value)
    if number is None:
        return NOT_AVAILABLE
    if number >= 1e12:
        return f"${number / 1e12:.2f}T"
    if number >= 1e9:
        return f"${number / 1e9:.2f}B"
    if number >= 1e6:
        return f"${number / 1e6:.2f}M"
    return f"${_group(number)}"


def format_positive_ratio(value: object) -> str:
    number = parse_float(value)
    if number is None or number <= 0:
        return NOT_AVAILABLE
    return f"{number:.2f}"


def format_dividend_yield(value: object) -> str:
    number = parse_float(value)
    if number is None or number <= 0:
        return NOT_AVAILABLE
    return f"{number * 100:.2f}%"


def format_decimal(value: object) -> str:
    number = parse_float(value)
    if number is None:
        return NOT_AVAILABLE
    return f"{number:.2f}"


def format_currency(value: object) -> str:
    number = parse_float(value)
    if number is None:
        return NOT_AVAILABLE
    sign = "-" if number < 0 and round(abs(number), 2) != 0 else ""
    return f"{sign}${abs(number):,.2f}"


def format_volume(value: object) -> str:
    number = parse_float(value)
    if number is None:
        return NOT_AVAILABLE
    return f"{int(number):,}"


def change_polarity(change_percent: Optional[str]) -> Polarity:
    # Sign character, not numeric value: "-0.00%" is negative.
    if change_percent and "-" in change_percent:
        return "negative"
    return "positive"


def market_status_tone(status: Optional[str]) -> MarketTone:
    lowered = (status or "").lower()
    if "open" in lowered:
        return "open"
    if "closed" in lowered:
        return "closed"
    return "other"


def company_website(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    return f"https://{_WHITESPACE_RE.sub('', name.lower())}.com"
