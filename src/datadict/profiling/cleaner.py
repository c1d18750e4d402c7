"""Cell cleaning - trim values, drop missing-value tokens, count what's left"""
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..config.settings import DEFAULT_MISSING_TOKENS


@dataclass
class CleanedColumn:
    """Non-missing, trimmed cells of one column plus basic counts"""
    values: List[str] = field(default_factory=list)
    n_total: int = 0

    @property
    def n_clean(self) -> int:
        return len(self.values)

    @property
    def n_unique(self) -> int:
        return len(set(self.values))

    @property
    def uniqueness_ratio(self) -> float:
        if self.n_clean == 0:
            return 0.0
        return self.n_unique / self.n_clean

    @property
    def completeness(self) -> float:
        if self.n_total == 0:
            return 0.0
        return self.n_clean / self.n_total

    def distinct(self) -> List[str]:
        """Distinct values in first-seen order."""
        return list(dict.fromkeys(self.values))


def _is_null(value) -> bool:
    # Readers may hand over None or a float NaN for an empty cell
    return value is None or (isinstance(value, float) and math.isnan(value))


def is_missing(value, missing_tokens: Iterable[str] = DEFAULT_MISSING_TOKENS) -> bool:
    """Check whether a raw cell counts as missing."""
    if _is_null(value):
        return True
    text = str(value).strip()
    return text == '' or text in missing_tokens


def clean_column(
    raw_values: Iterable,
    missing_tokens: Optional[Iterable[str]] = None,
) -> CleanedColumn:
    """
    Trim every cell and drop the missing ones, preserving order.

    Args:
        raw_values: Cells as read from the file (strings, None for nulls)
        missing_tokens: Tokens meaning "no data"; defaults to DEFAULT_MISSING_TOKENS

    Returns:
        CleanedColumn with the surviving values and the original row count
    """
    tokens = frozenset(DEFAULT_MISSING_TOKENS if missing_tokens is None else missing_tokens)

    n_total = 0
    values = []
    for raw in raw_values:
        n_total += 1
        if _is_null(raw):
            continue
        text = str(raw).strip()
        if text == '' or text in tokens:
            continue
        values.append(text)

    return CleanedColumn(values=values, n_total=n_total)
