"""Measurement unit inference from variable name and magnitude"""
import re
from typing import Callable, List, Tuple

# (name pattern, unit chooser taking the column mean) - first match wins
UNIT_RULES: List[Tuple[str, Callable[[float], str]]] = [
    (r'\b(rt|reaction_?time|response_?time|latency|duration)\b',
     lambda mean: 'milliseconds' if mean > 100 else 'seconds'),
    (r'time_?elapsed|elapsed_?time',
     lambda mean: 'milliseconds' if mean > 1000 else 'seconds'),
    (r'\bage\b', lambda mean: 'years'),
    (r'\b(score|rating|points)\b', lambda mean: 'points'),
    (r'\b(percent|pct|proportion)\b',
     lambda mean: 'proportion' if mean <= 1 else 'percent'),
]


def infer_unit(name: str, mean_value: float) -> str:
    """
    Guess the unit of a numeric variable.

    Timing names switch between seconds and milliseconds on magnitude;
    percent-like names switch between proportion and percent.
    Returns "" when no rule applies.
    """
    name_lower = name.lower()
    for pattern, choose in UNIT_RULES:
        if re.search(pattern, name_lower):
            return choose(mean_value)
    return ""
