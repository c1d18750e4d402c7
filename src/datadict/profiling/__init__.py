"""Column type inference and data-dictionary profiling - no user input needed"""
from .cleaner import CleanedColumn, clean_column, is_missing
from .classifier import classify_column, DETECTORS
from .units import infer_unit, UNIT_RULES
from .descriptions import describe_variable, DESCRIPTION_RULES, TYPE_DESCRIPTIONS
from .models import (
    CategoricalValue,
    VariableProfile,
    DataDictionary,
    VARIABLE_TYPES,
    SCHEMA_TYPE_ALIASES,
)
from .aggregate import build_dictionary, collect_categorical_values, profile_variable
