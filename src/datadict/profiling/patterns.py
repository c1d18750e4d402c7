"""Variable-name pattern sets used by the classifier, unit and description rules.

Each set is matched against the lower-cased variable name with re.search.
Note that '_' is a word character, so r'\bid\b' does not fire on 'participant_id';
those names are caught by the anchored patterns instead.
"""
import re
from typing import Iterable

# Identifier-like names (checked together with a uniqueness threshold)
ID_PATTERNS = [
    r'\bid\b', r'\bids\b', r'_id$', r'^id_',
    r'\buuid\b', r'\bguid\b', r'\bkey\b', r'\bcode$',
    r'^subject', r'^participant', r'^child_?id',
    r'^session_?id', r'^trial_?id', r'^user_?id', r'^record_?id',
]

# Names that make a 0/1 column a boolean
BOOLEAN_NAME_PATTERNS = [
    r'\bcorrect\b', r'\bsuccess\b', r'\bvalid\b', r'\bcomplete\b',
    r'\bfinished\b', r'\bdone\b', r'\bfailed\b', r'\berror\b',
    r'\btimeout\b', r'\bflag\b', r'\bis_', r'\bhas_', r'\bwas_',
]

# Names that mark a 0/1 column as a coded response, not a boolean
RESPONSE_NAME_PATTERNS = [
    r'\bresponse\b', r'\bresp\b', r'\bchoice\b', r'\bbutton\b',
    r'\bkey\b', r'\banswer\b', r'\bselect',
]

# Names that let small integer codes become categorical
NUMERIC_CATEGORY_PATTERNS = [
    r'\bgroup\b', r'\bcondition\b', r'\btreatment\b',
    r'\bcategory\b', r'\btype\b', r'\bclass\b',
    r'\blevel\b', r'\bfactor\b', r'\barm\b',
]

# Names that make a short text column categorical (up to 20 levels)
STRONG_CATEGORY_PATTERNS = [
    r'\bcondition\b', r'\bgroup\b', r'\btreatment\b', r'\barm\b',
    r'\bcategory\b', r'\btype\b', r'\bclass\b', r'\blevel\b',
    r'\bfactor\b', r'\bstatus\b', r'\bstate\b', r'\bphase\b',
    r'\bwave\b', r'\bcohort\b',
]

# Whole-cell JSON shapes
JSON_ARRAY_RE = re.compile(r'^\[.*\]$', re.DOTALL)
JSON_OBJECT_RE = re.compile(r'^\{.*\}$', re.DOTALL)

# Text spellings of booleans
BOOLEAN_PAIRS = [
    ('false', 'true'), ('f', 't'), ('n', 'y'), ('no', 'yes'),
]
BOOLEAN_WORDS = {'true', 'false', 'yes', 'no', 't', 'f', 'y', 'n'}


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    """True if the lower-cased name matches any of the patterns."""
    name_lower = name.lower()
    return any(re.search(p, name_lower) for p in patterns)
