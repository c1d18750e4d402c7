"""Canned variable descriptions from name patterns"""
import re
from typing import Callable, List, Optional, Tuple

from .models import STRING, INTEGER, NUMBER, BOOLEAN, CATEGORICAL

# Fallback sentence per value type
TYPE_DESCRIPTIONS = {
    INTEGER: 'Numeric variable (whole numbers)',
    NUMBER: 'Numeric variable (decimal numbers)',
    BOOLEAN: 'Boolean variable (true/false)',
    CATEGORICAL: 'Categorical variable',
    STRING: 'Text variable',
}
UNKNOWN_TYPE_DESCRIPTION = 'Unknown variable type'


def _matches(pattern: str, exclude: Optional[str] = None) -> Callable[[str, str], bool]:
    """Build a predicate on (name, name_lower) testing the lower-cased name."""
    def predicate(name: str, name_lower: str) -> bool:
        if not re.search(pattern, name_lower):
            return False
        return not (exclude and re.search(exclude, name_lower))
    return predicate


def _participant_id(name: str, name_lower: str) -> bool:
    # Case matters here: 'sub_ID' and 'subjectId' count, 'SUB_ID' does not
    return bool(
        re.search(r'^(participant|subject|sub)_?(id|ID|Id)$', name)
        or re.search(r'\bparticipant_?id\b', name)
    )


def _failed_resource(name_lower: str) -> str:
    resource = re.sub(r'^failed_', '', name_lower)
    return f"List of {resource} resources that failed to load"


# (predicate(name, name_lower), description or builder(name_lower)) - first match wins
DESCRIPTION_RULES: List[Tuple[Callable[[str, str], bool], object]] = [
    (_participant_id, 'Unique identifier for each participant in the study'),
    (_matches(r'\bchild_?id\b'), 'Unique identifier for each child participant'),
    (_matches(r'\bsession_?id\b'), 'Unique identifier for each session'),
    (_matches(r'\btrial_?id\b'), 'Unique identifier for each trial'),
    (_matches(r'\btrial_?type\b'), 'Type of trial or experimental event'),
    (_matches(r'\btrial_?index\b|\btrial_?num(ber)?\b'),
     'Sequential trial number within the experiment'),
    (_matches(r'\btrial\b', exclude=r'type|index|id'), 'Trial number or trial identifier'),
    (_matches(r'\brt\b|\breaction_?time\b|\bresponse_?time\b'),
     'Response time or reaction time measurement'),
    (_matches(r'\btime_?elapsed\b|\belapsed_?time\b'),
     'Total time elapsed since experiment start'),
    (_matches(r'\btimestamp\b'), 'Timestamp of the event'),
    (_matches(r'\btimeout\b'), 'Whether the trial timed out'),
    (_matches(r'\bduration\b'), 'Duration of the event'),
    (_matches(r'\bresponse\b', exclude=r'time'), 'Participant response or response value'),
    (_matches(r'\baccuracy\b|\bcorrect\b|\bacc\b'), 'Accuracy or correctness of response'),
    (_matches(r'\bsuccess\b'), 'Whether the action was successful'),
    (_matches(r'\bcondition\b'), 'Experimental condition or group assignment'),
    (_matches(r'\bgroup\b'), 'Group assignment'),
    (_matches(r'\bblock\b'), 'Block number in the experimental design'),
    (_matches(r'\bsession\b', exclude=r'id'), 'Session number or session identifier'),
    (_matches(r'\bstimulus\b|\bstim\b'), 'Stimulus identifier or stimulus information'),
    (_matches(r'\bage\b'), 'Age of the participant'),
    (_matches(r'\bgender\b|\bsex\b'), 'Gender or biological sex of the participant'),
    (_matches(r'\bscore\b|\brating\b'), 'Score or rating value'),
    (_matches(r'internal_node_id'), 'Internal node identifier from the experiment framework'),
    (_matches(r'^failed_'), _failed_resource),
]


def describe_variable(name: str, var_type: str = STRING) -> str:
    """
    Produce a human-readable description for a variable.

    Args:
        name: Variable name as it appears in the file header
        var_type: Inferred value type, used only by the fallback sentence

    Returns:
        Description from the first matching rule, or
        "Variable: <name> - <type sentence>"
    """
    name_lower = name.lower()
    for predicate, result in DESCRIPTION_RULES:
        if predicate(name, name_lower):
            return result(name_lower) if callable(result) else result

    type_desc = TYPE_DESCRIPTIONS.get(var_type, UNKNOWN_TYPE_DESCRIPTION)
    return f"Variable: {name} - {type_desc}"
