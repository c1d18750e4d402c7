"""Test column type classification and detector precedence.

Tests cover:
1. Empty columns and required/unique flags
2. Identifier detection
3. JSON string detection
4. Boolean detection, including 0/1 name rules
5. Numeric detection, parse ratio boundary and integer-code categories
6. String/categorical fallback
7. Detector chain ordering and determinism
"""
import pytest

from datadict.profiling.classifier import (
    classify_column,
    detect_identifier,
    detect_boolean,
    DETECTORS,
)
from datadict.profiling.cleaner import clean_column


def classify(name, raw):
    return classify_column(name, clean_column(raw))


def category_values(profile):
    return [c.value for c in profile.categorical_values]


# ============================================================================
# Test 1: Empty columns, required and unique
# ============================================================================

class TestBasics:
    """Degenerate input and the generic flags."""

    def test_empty_column_is_plain_string(self):
        profile = classify('notes', ['', 'NA', None])
        assert profile.type == 'string'
        assert profile.required is False
        assert profile.unique is False
        assert profile.categorical_values == []
        assert profile.unit == ''
        assert profile.min_value == ''
        assert profile.pattern == ''

    def test_required_above_95_percent(self):
        raw = [str(i) for i in range(96)] + ['NA'] * 4      # 0.96
        assert classify('value', raw).required is True

    def test_not_required_at_exactly_95_percent(self):
        raw = [str(i) for i in range(95)] + ['NA'] * 5      # 0.95
        assert classify('value', raw).required is False

    def test_unique_when_all_distinct(self):
        assert classify('value', ['1.5', '2.5', '3.5']).unique is True
        assert classify('value', ['1.5', '1.5', '3.5']).unique is False

    def test_idempotent(self):
        raw = ['3', '1', '2', '2', 'NA', '10']
        first = classify('score', raw)
        second = classify('score', raw)
        assert first.to_dict() == second.to_dict()


# ============================================================================
# Test 2: Identifiers
# ============================================================================

class TestIdentifier:
    """Identifier-like names with mostly distinct values."""

    def test_participant_id_all_unique(self):
        profile = classify('participant_id', ['p1', 'p2', 'p3'])
        assert profile.type == 'string'
        assert profile.unique is True

    def test_numeric_ids_stay_string(self):
        profile = classify('subject', ['101', '102', '103', '104'])
        assert profile.type == 'string'
        assert profile.min_value == ''

    def test_unique_forced_at_half_uniqueness(self):
        # 2 distinct of 4 -> ratio 0.5, n_unique >= n_clean * 0.5
        profile = classify('record_id', ['a', 'a', 'b', 'b'])
        assert profile.type == 'string'
        assert profile.unique is True

    def test_repeated_ids_fall_through(self):
        # 1 distinct of 4 - not an identifier column
        cleaned = clean_column(['x', 'x', 'x', 'x'])
        assert detect_identifier('user_id', cleaned) is None

    @pytest.mark.parametrize('name', [
        'id', 'ID', 'ids', 'trial_id', 'id_number', 'uuid', 'guid', 'key',
        'postal code', 'subject_nr', 'participant', 'childid', 'sessionid',
    ])
    def test_id_names(self, name):
        cleaned = clean_column(['a', 'b', 'c'])
        assert detect_identifier(name, cleaned) == {'type': 'string', 'unique': True}

    @pytest.mark.parametrize('name', ['identity', 'video', 'response_key', 'keys', 'codes'])
    def test_non_id_names(self, name):
        cleaned = clean_column(['a', 'b', 'c'])
        assert detect_identifier(name, cleaned) is None


# ============================================================================
# Test 3: JSON strings
# ============================================================================

class TestJsonStrings:
    """Serialized JSON cells get a pattern hint."""

    def test_json_array(self):
        profile = classify('view_history', ['[1,2]', '[]', '["a"]'])
        assert profile.type == 'string'
        assert profile.pattern == 'JSON array'

    def test_json_object(self):
        profile = classify('payload', ['{"a": 1}', '{}'])
        assert profile.type == 'string'
        assert profile.pattern == 'JSON object'

    def test_mixed_is_not_json(self):
        profile = classify('payload', ['{"a": 1}', '[1]', 'plain'])
        assert profile.pattern == ''

    def test_only_first_100_checked(self):
        raw = ['[1]'] * 100 + ['not json']
        assert classify('payload', raw).pattern == 'JSON array'


# ============================================================================
# Test 4: Booleans
# ============================================================================

class TestBoolean:
    """Text booleans and flag-named 0/1 columns."""

    @pytest.mark.parametrize('raw', [
        ['true', 'false', 'true'],
        ['True', 'False'],
        ['t', 'f'],
        ['Y', 'N', 'Y'],
        ['yes', 'no'],
    ])
    def test_text_pairs(self, raw):
        profile = classify('answered', raw)
        assert profile.type == 'boolean'

    def test_values_sorted_with_original_case(self):
        profile = classify('answered', ['Yes', 'No', 'Yes'])
        assert category_values(profile) == ['No', 'Yes']
        assert [c.label for c in profile.categorical_values] == ['No', 'Yes']
        assert all(c.description == '' for c in profile.categorical_values)

    def test_is_correct_zero_one(self):
        profile = classify('is_correct', ['1', '0', '1'])
        assert profile.type == 'boolean'
        assert category_values(profile) == ['0', '1']

    @pytest.mark.parametrize('name', ['correct', 'timeout', 'has_audio', 'was_skipped', 'error'])
    def test_flag_names_zero_one(self, name):
        assert classify(name, ['0', '1']).type == 'boolean'

    def test_response_key_zero_one_is_categorical(self):
        profile = classify('response_key', ['0', '1'])
        assert profile.type == 'categorical'
        assert category_values(profile) == ['0', '1']

    def test_response_name_vetoes_flag_name(self):
        # 'correct' suggests a flag but 'response' wins the veto
        assert classify('correct response', ['0', '1']).type == 'categorical'

    def test_single_boolean_word(self):
        profile = classify('consented', ['TRUE', 'TRUE'])
        assert profile.type == 'boolean'
        assert category_values(profile) == ['TRUE']

    def test_single_one_is_not_boolean(self):
        cleaned = clean_column(['1', '1'])
        assert detect_boolean('is_valid', cleaned) is None

    def test_three_values_never_boolean(self):
        cleaned = clean_column(['yes', 'no', 'maybe'])
        assert detect_boolean('answered', cleaned) is None


# ============================================================================
# Test 5: Numbers
# ============================================================================

class TestNumeric:
    """Numeric parsing, ranges, units and integer-code categories."""

    def test_integer_range_and_unit(self):
        profile = classify('age', ['23', '31', '45', '19'])
        assert profile.type == 'integer'
        assert profile.min_value == '19'
        assert profile.max_value == '45'
        assert profile.unit == 'years'

    def test_decimal(self):
        profile = classify('rt', ['512.5', '430.25', '601'])
        assert profile.type == 'number'
        assert profile.min_value == '430.25'
        assert profile.max_value == '601'
        assert profile.unit == 'milliseconds'

    def test_whole_floats_are_integers(self):
        profile = classify('count', ['1.0', '2.0', '7'])
        assert profile.type == 'integer'
        assert profile.max_value == '7'

    def test_negative_and_exponent(self):
        profile = classify('offset', ['-1.5', '2e3', '+4'])
        assert profile.type == 'number'
        assert profile.min_value == '-1.5'
        assert profile.max_value == '2000'

    def test_parse_ratio_exactly_90_percent_is_numeric(self):
        raw = [str(i) for i in range(1, 10)] + ['oops']      # 9 of 10
        profile = classify('value', raw)
        assert profile.type == 'integer'
        assert profile.min_value == '1'
        assert profile.max_value == '9'

    def test_parse_ratio_below_90_percent_is_not_numeric(self):
        raw = [str(i) for i in range(1, 9)] + ['oops']       # 8 of 9
        profile = classify('value', raw)
        assert profile.type not in ('integer', 'number')
        assert profile.min_value == ''

    @pytest.mark.parametrize('cell', ['inf', 'nan', '0x1A', '1_000', '1,5'])
    def test_non_decimal_cells_rejected(self, cell):
        profile = classify('value', [cell, 'abc'])
        assert profile.type not in ('integer', 'number')

    def test_condition_zero_one_is_categorical(self):
        profile = classify('condition', ['0', '1', '0', '1'])
        assert profile.type == 'categorical'
        assert category_values(profile) == ['0', '1']

    def test_three_codes_need_category_name(self):
        assert classify('group', ['1', '2', '3', '2']).type == 'categorical'
        assert classify('rating', ['1', '2', '3', '2']).type == 'integer'

    def test_two_codes_any_name(self):
        profile = classify('stimulus_side', ['1', '2', '1'])
        assert profile.type == 'categorical'
        assert category_values(profile) == ['1', '2']

    def test_codes_must_be_contiguous(self):
        assert classify('group', ['1', '3']).type == 'integer'

    def test_codes_must_fit_range(self):
        assert classify('group', ['10', '11']).type == 'integer'
        assert classify('group', ['-1', '0']).type == 'integer'

    def test_single_code_stays_integer(self):
        profile = classify('level', ['2', '2', '2'])
        assert profile.type == 'integer'
        assert profile.min_value == profile.max_value == '2'

    def test_whole_float_codes_formatted(self):
        profile = classify('arm', ['0.0', '1.0'])
        assert category_values(profile) == ['0', '1']


# ============================================================================
# Test 6: Strings and categories
# ============================================================================

class TestStringCategorical:
    """Fallback path for text that didn't parse as numbers."""

    def test_short_labels_are_categorical(self):
        profile = classify('hand', ['left', 'right', 'left'])
        assert profile.type == 'categorical'
        assert category_values(profile) == ['left', 'right']

    def test_named_category_with_many_levels(self):
        levels = [f"level {chr(65 + i)}" for i in range(15)]
        profile = classify('status', levels)
        assert profile.type == 'categorical'
        assert len(profile.categorical_values) == 15

    def test_named_category_over_20_levels_is_string(self):
        raw = [f"s{i}" for i in range(21)]
        assert classify('status', raw).type == 'string'

    def test_repeated_levels(self):
        raw = ['alpha', 'beta', 'gamma'] * 10 + ['delta'] * 70   # 4 of 100
        profile = classify('site', raw)
        assert profile.type == 'categorical'

    def test_long_text_is_string(self):
        raw = ['x' * 60, 'y' * 60]
        assert classify('condition', raw).type == 'string'

    def test_single_very_long_cell_is_string(self):
        raw = ['a', 'b', 'c' * 201]
        assert classify('condition', raw).type == 'string'

    def test_free_text_is_string(self):
        raw = [f"comment number {i}" for i in range(30)]
        profile = classify('notes', raw)
        assert profile.type == 'string'
        assert profile.categorical_values == []

    def test_single_text_value_is_string(self):
        assert classify('notes', ['hello', 'hello']).type == 'string'

    def test_categories_sorted_lexicographically(self):
        profile = classify('colour', ['red', 'Blue', 'green', 'red'])
        assert category_values(profile) == ['Blue', 'green', 'red']


# ============================================================================
# Test 7: Detector chain
# ============================================================================

class TestDetectorChain:
    """Order of detectors decides ambiguous columns."""

    def test_detector_order(self):
        assert [name for name, _ in DETECTORS] == ['identifier', 'json', 'boolean', 'numeric', 'string']

    def test_identifier_beats_numeric(self):
        profile = classify('trial_id', ['1', '2', '3'])
        assert profile.type == 'string'
        assert profile.unique is True

    def test_boolean_beats_numeric_categorical(self):
        # Both boolean (flag name) and two-code override could apply
        assert classify('is_practice', ['0', '1']).type == 'boolean'

    def test_custom_chain(self):
        chain = [('always', lambda name, cleaned: {'type': 'number'})]
        profile = classify_column('anything', clean_column(['a']), detectors=chain)
        assert profile.type == 'number'

    def test_chain_without_match_keeps_defaults(self):
        profile = classify_column('anything', clean_column(['a', 'b']), detectors=[])
        assert profile.type == 'string'
        assert profile.unique is True
