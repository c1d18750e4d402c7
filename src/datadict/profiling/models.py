"""Profile dataclasses - the property bag handed to serializers"""
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple

from ..utils.numbers import format_number

# Value types a variable can be assigned
STRING = 'string'
INTEGER = 'integer'
NUMBER = 'number'
BOOLEAN = 'boolean'
CATEGORICAL = 'categorical'

VARIABLE_TYPES = (STRING, INTEGER, NUMBER, BOOLEAN, CATEGORICAL)

# Schema.org valueType spellings accepted when reading existing metadata
SCHEMA_TYPE_ALIASES = {
    'text': STRING,
    'string': STRING,
    'number': NUMBER,
    'float': NUMBER,
    'integer': INTEGER,
    'boolean': BOOLEAN,
    'categorical': CATEGORICAL,
}


def _given(data: dict, key: str, default=None):
    """data[key] unless it is absent or null."""
    value = data.get(key)
    return default if value is None else value


def _as_text(value) -> str:
    """Metadata scalar as a string; None becomes '' and floats drop a trailing .0"""
    if value is None:
        return ''
    if isinstance(value, float):
        return format_number(value)
    return str(value)


@dataclass
class CategoricalValue:
    """One member of a variable's closed vocabulary"""
    value: str
    label: Optional[str] = None     # Display label, defaults to value
    description: str = ""

    def __post_init__(self):
        if self.label is None:
            self.label = self.value

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'CategoricalValue':
        return cls(
            value=str(data['value']),
            label=data.get('label'),
            description=data.get('description', ''),
        )


def make_categories(values: List[str]) -> List[CategoricalValue]:
    """Sort distinct values and wrap them as categories with label=value."""
    return [CategoricalValue(value=v) for v in sorted(set(values))]


@dataclass
class VariableProfile:
    """Everything inferred about one variable across the dataset"""
    name: str
    type: str = STRING
    unit: str = ""
    min_value: str = ""
    max_value: str = ""
    categorical_values: List[CategoricalValue] = field(default_factory=list)
    required: bool = False
    unique: bool = False
    pattern: str = ""               # Free-text hint: "JSON array"
    description: str = ""
    files: List[str] = field(default_factory=list)  # Provenance, first-seen order

    def add_file(self, file_id: str) -> None:
        """Record that a file contains this variable."""
        if file_id not in self.files:
            self.files.append(file_id)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'VariableProfile':
        return cls(
            name=data['name'],
            type=data.get('type', STRING),
            unit=data.get('unit', ''),
            min_value=data.get('min_value', ''),
            max_value=data.get('max_value', ''),
            categorical_values=[
                CategoricalValue.from_dict(c) for c in data.get('categorical_values', [])
            ],
            required=data.get('required', False),
            unique=data.get('unique', False),
            pattern=data.get('pattern', ''),
            description=data.get('description', ''),
            files=list(data.get('files', [])),
        )

    def to_property_value(self, missing_value_codes: Optional[List[str]] = None) -> dict:
        """
        Shape the profile as a Schema.org PropertyValue dict.

        Empty strings are dropped. Categories are only emitted for categorical
        variables; a category's label is dropped when it equals the value.
        """
        prop = {
            '@type': 'PropertyValue',
            'name': self.name,
        }
        if self.description:
            prop['description'] = self.description
        prop['valueType'] = self.type

        if missing_value_codes:
            prop['missingValueCodes'] = list(missing_value_codes)

        if self.unit:
            prop['unitText'] = self.unit
        if self.min_value:
            prop['minValue'] = self.min_value
        if self.max_value:
            prop['maxValue'] = self.max_value

        if self.type == CATEGORICAL and self.categorical_values:
            refs = []
            for cat in self.categorical_values:
                ref = {'value': cat.value}
                if cat.label and cat.label != cat.value:
                    ref['label'] = cat.label
                if cat.description:
                    ref['description'] = cat.description
                refs.append(ref)
            prop['valueReference'] = refs

        prop['required'] = self.required
        prop['unique'] = self.unique
        if self.pattern:
            prop['pattern'] = self.pattern
        return prop

    @classmethod
    def from_property_value(cls, prop: dict, detected: Optional['VariableProfile'] = None) -> 'VariableProfile':
        """
        Read a PropertyValue dict back into a profile, overlaying `detected`.

        Description, type, unit and categories fall back to the detected
        profile when the metadata doesn't give them; an unrecognised valueType
        keeps the detected type. Range, flags and pattern are taken from the
        metadata as-is (absent means empty / False).
        """
        detected = detected or cls(name=prop['name'])

        schema_type = _as_text(prop.get('valueType') or prop.get('@type')).lower()
        categories = list(detected.categorical_values)
        if prop.get('valueReference'):
            categories = [
                CategoricalValue(
                    value=_as_text(ref.get('value')),
                    label=_as_text(_given(ref, 'label', ref.get('value'))),
                    description=_as_text(ref.get('description')),
                )
                for ref in prop['valueReference']
            ]

        return cls(
            name=prop['name'],
            type=SCHEMA_TYPE_ALIASES.get(schema_type, detected.type),
            unit=_as_text(_given(prop, 'unitText', detected.unit)),
            min_value=_as_text(prop.get('minValue')),
            max_value=_as_text(prop.get('maxValue')),
            categorical_values=categories,
            required=bool(prop.get('required', False)),
            unique=bool(prop.get('unique', False)),
            pattern=_as_text(prop.get('pattern')),
            description=_as_text(_given(prop, 'description', detected.description)),
            files=list(detected.files),
        )


@dataclass
class DataDictionary:
    """Profiles keyed by variable name, in first-encounter order"""
    variables: Dict[str, VariableProfile] = field(default_factory=dict)
    flagged: List[str] = field(default_factory=list)     # Vocabulary too large to auto-populate
    skipped_files: List[Tuple[str, str]] = field(default_factory=list)  # (file_id, reason)

    def __contains__(self, name: str) -> bool:
        return name in self.variables

    def __getitem__(self, name: str) -> VariableProfile:
        return self.variables[name]

    def __iter__(self):
        return iter(self.variables.values())

    def __len__(self) -> int:
        return len(self.variables)

    def names(self) -> List[str]:
        return list(self.variables.keys())

    def categorical(self) -> List[VariableProfile]:
        """Profiles whose type is categorical."""
        return [p for p in self.variables.values() if p.type == CATEGORICAL]

    def skip_file(self, file_id: str, reason: str) -> None:
        if all(f != file_id for f, _ in self.skipped_files):
            self.skipped_files.append((file_id, reason))

    def to_dict(self) -> dict:
        return {
            'variables': [p.to_dict() for p in self.variables.values()],
            'flagged': list(self.flagged),
            'skipped_files': [{'file': f, 'reason': r} for f, r in self.skipped_files],
        }

    def to_property_values(self, missing_value_codes: Optional[List[str]] = None) -> List[dict]:
        """variableMeasured-style list, one PropertyValue per variable."""
        return [p.to_property_value(missing_value_codes) for p in self.variables.values()]

    def apply_property_values(self, props: List[dict]) -> List[str]:
        """
        Overlay existing variableMeasured entries on the detected profiles.

        Entries for variables not in the dictionary (or without a name) are
        ignored. Returns the names that were updated.
        """
        applied = []
        for prop in props:
            name = prop.get('name')
            if name not in self.variables:
                continue
            self.variables[name] = VariableProfile.from_property_value(prop, self.variables[name])
            applied.append(name)
        return applied

    def apply_dataset_description(self, data: dict) -> Optional[List[str]]:
        """
        Overlay a dataset_description-style dict.

        Applies its variableMeasured list and returns its global
        missingValueCodes as strings, or None when it has none.
        """
        self.apply_property_values(data.get('variableMeasured') or [])
        codes = data.get('missingValueCodes')
        if codes is None:
            return None
        if not isinstance(codes, list):
            codes = [codes]
        return [_as_text(c) for c in codes]
