"""Decimal parsing and formatting for string-encoded cells"""
import math
import re
from typing import List, Optional, Tuple

# Plain decimal literal: sign, digits with optional fraction or leading-dot fraction, exponent
DECIMAL_RE = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$')


def parse_decimal(value: str) -> Optional[float]:
    """
    Parse a cell as a finite decimal number.

    Returns None for anything that is not a plain decimal literal
    (inf/nan, hex, digit-group underscores, empty strings).
    """
    if value is None:
        return None
    text = str(value).strip()
    if not DECIMAL_RE.match(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def parse_decimals(values: List[str]) -> Tuple[List[float], int]:
    """Parse every value, returning (parsed_values, total_considered)."""
    texts = [str(v).strip() for v in values if v is not None]
    texts = [t for t in texts if t]
    parsed = []
    for text in texts:
        number = parse_decimal(text)
        if number is not None:
            parsed.append(number)
    return parsed, len(texts)


def format_number(value: float) -> str:
    """
    Format a number for min/max constraints.

    Up to 15 significant digits, no trailing '.0' on whole values:
    3.0 -> '3', 2.5 -> '2.5', 1e20 -> '1e+20'
    """
    return '%.15g' % value


def is_whole(value: float) -> bool:
    return value == math.floor(value)
