"""Column type classification - no user input needed.

Runs an ordered chain of detectors over a cleaned column. The first detector
that recognises the column decides its type and stops the chain:

1. identifier   - id-like name with mostly unique values -> string, unique
2. json         - every sampled cell is a JSON array/object -> string + pattern
3. boolean      - text booleans, or 0/1 with a boolean-ish name
4. numeric      - >= 90% of cells parse as numbers -> integer/number/categorical codes
5. string       - short low-cardinality text -> categorical, otherwise string
"""
import logging
from statistics import fmean
from typing import Callable, List, Optional, Tuple

from ..utils.numbers import parse_decimals, format_number, is_whole
from .cleaner import CleanedColumn
from .models import (
    VariableProfile, make_categories,
    STRING, INTEGER, NUMBER, BOOLEAN, CATEGORICAL,
)
from .patterns import (
    ID_PATTERNS, BOOLEAN_NAME_PATTERNS, RESPONSE_NAME_PATTERNS,
    NUMERIC_CATEGORY_PATTERNS, STRONG_CATEGORY_PATTERNS,
    JSON_ARRAY_RE, JSON_OBJECT_RE, BOOLEAN_PAIRS, BOOLEAN_WORDS,
    matches_any,
)
from .units import infer_unit

logger = logging.getLogger(__name__)

# Thresholds
REQUIRED_COMPLETENESS = 0.95    # required = completeness above this
ID_UNIQUENESS = 0.5             # id-like names need this share of distinct values
JSON_SAMPLE_SIZE = 100          # cells checked for JSON shape
NUMERIC_PARSE_RATIO = 0.90      # share of cells that must parse as numbers
MAX_CODE_LEVELS = 3             # integer codes allowed to become categorical
CODE_RANGE = (0, 10)            # integer codes must sit inside this range
MAX_AVG_TEXT_LENGTH = 50        # longer text is never categorical
MAX_TEXT_LENGTH = 200
MAX_NAMED_CATEGORIES = 20       # levels allowed when the name says "category"
MAX_REPEATED_CATEGORIES = 20    # levels allowed for heavily repeated values
REPEATED_UNIQUENESS = 0.05
MIN_REPEATED_ROWS = 20
MAX_SHORT_CATEGORIES = 10       # levels allowed for short labels
MAX_SHORT_LABEL_LENGTH = 30


def detect_identifier(name: str, cleaned: CleanedColumn) -> Optional[dict]:
    """Identifier-like name whose values are mostly distinct."""
    if not matches_any(name, ID_PATTERNS):
        return None
    n_unique, n_clean = cleaned.n_unique, cleaned.n_clean
    if cleaned.uniqueness_ratio > ID_UNIQUENESS or n_unique >= n_clean * ID_UNIQUENESS:
        return {'type': STRING, 'unique': True}
    return None


def detect_json_string(name: str, cleaned: CleanedColumn) -> Optional[dict]:
    """Cells holding serialized JSON arrays or objects."""
    sample = cleaned.values[:JSON_SAMPLE_SIZE]
    if not sample:
        return None
    if all(JSON_ARRAY_RE.match(v) for v in sample):
        return {'type': STRING, 'pattern': 'JSON array'}
    if all(JSON_OBJECT_RE.match(v) for v in sample):
        return {'type': STRING, 'pattern': 'JSON object'}
    return None


def detect_boolean(name: str, cleaned: CleanedColumn) -> Optional[dict]:
    """
    Two-valued (or constant) columns that read as true/false.

    A 0/1 column only counts when the name suggests a flag and does not
    suggest a coded response (response_key, choice, button...).
    """
    if cleaned.n_unique > 2:
        return None

    distinct = cleaned.distinct()
    lowered = sorted(v.lower() for v in distinct)

    is_text_boolean = any(lowered == sorted(pair) for pair in BOOLEAN_PAIRS)
    is_01_boolean = (
        lowered == ['0', '1']
        and matches_any(name, BOOLEAN_NAME_PATTERNS)
        and not matches_any(name, RESPONSE_NAME_PATTERNS)
    )
    is_single_boolean = cleaned.n_unique == 1 and lowered[0] in BOOLEAN_WORDS

    if is_text_boolean or is_01_boolean or is_single_boolean:
        return {'type': BOOLEAN, 'categorical_values': make_categories(distinct)}
    return None


def _is_code_sequence(codes: List[float]) -> bool:
    """Two or more consecutive integers inside CODE_RANGE."""
    if len(codes) < 2:
        return False
    steps_of_one = all(b - a == 1 for a, b in zip(codes, codes[1:]))
    return steps_of_one and codes[0] >= CODE_RANGE[0] and codes[-1] <= CODE_RANGE[1]


def detect_numeric(name: str, cleaned: CleanedColumn) -> Optional[dict]:
    """
    Columns where at least 90% of cells parse as decimals.

    Unparseable cells are dropped from min/max/mean. Two or three consecutive
    small integer codes become categorical when the name suggests grouping or
    there are exactly two codes.
    """
    parsed, total = parse_decimals(cleaned.values)
    if not parsed or total == 0 or len(parsed) / total < NUMERIC_PARSE_RATIO:
        return None

    is_integer = all(is_whole(v) for v in parsed)
    codes = sorted(set(parsed))

    if len(codes) <= MAX_CODE_LEVELS and is_integer and _is_code_sequence(codes):
        if matches_any(name, NUMERIC_CATEGORY_PATTERNS) or len(codes) == 2:
            return {
                'type': CATEGORICAL,
                'categorical_values': make_categories([format_number(c) for c in codes]),
            }

    return {
        'type': INTEGER if is_integer else NUMBER,
        'min_value': format_number(codes[0]),
        'max_value': format_number(codes[-1]),
        'unit': infer_unit(name, fmean(parsed)),
    }


def detect_string(name: str, cleaned: CleanedColumn) -> Optional[dict]:
    """Fallback: short, repetitive text is categorical, everything else string."""
    lengths = [len(v) for v in cleaned.values]
    if sum(lengths) / len(lengths) > MAX_AVG_TEXT_LENGTH or max(lengths) > MAX_TEXT_LENGTH:
        return {'type': STRING}

    n_unique, n_clean = cleaned.n_unique, cleaned.n_clean
    distinct = cleaned.distinct()

    named_category = (
        matches_any(name, STRONG_CATEGORY_PATTERNS) and n_unique <= MAX_NAMED_CATEGORIES
    )
    repeated_levels = (
        2 <= n_unique <= MAX_REPEATED_CATEGORIES
        and cleaned.uniqueness_ratio < REPEATED_UNIQUENESS
        and n_clean >= MIN_REPEATED_ROWS
    )
    short_labels = (
        2 <= n_unique <= MAX_SHORT_CATEGORIES
        and fmean(len(v) for v in distinct) < MAX_SHORT_LABEL_LENGTH
    )

    if named_category or repeated_levels or short_labels:
        return {'type': CATEGORICAL, 'categorical_values': make_categories(distinct)}
    return {'type': STRING}


# Evaluated in order; the first detector returning a result wins
DETECTORS: List[Tuple[str, Callable[[str, CleanedColumn], Optional[dict]]]] = [
    ('identifier', detect_identifier),
    ('json', detect_json_string),
    ('boolean', detect_boolean),
    ('numeric', detect_numeric),
    ('string', detect_string),
]


def classify_column(
    name: str,
    cleaned: CleanedColumn,
    detectors: Optional[List[Tuple[str, Callable]]] = None,
) -> VariableProfile:
    """
    Infer type, constraints and vocabulary for one cleaned column.

    Args:
        name: Variable name from the file header
        cleaned: Output of clean_column for that variable
        detectors: Override the detector chain (defaults to DETECTORS)

    Returns:
        VariableProfile with type-specific fields, required and unique set.
        Description and provenance are left for the caller.
    """
    profile = VariableProfile(name=name)
    if cleaned.n_clean == 0:
        return profile

    profile.required = cleaned.completeness > REQUIRED_COMPLETENESS
    profile.unique = cleaned.n_unique == cleaned.n_clean

    for detector_name, detect in (DETECTORS if detectors is None else detectors):
        result = detect(name, cleaned)
        if result is None:
            continue
        for attr, value in result.items():
            setattr(profile, attr, value)
        logger.debug(f"{name}: {detector_name} detector -> {profile.type}")
        return profile

    return profile
