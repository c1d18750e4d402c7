"""Profiler configuration dataclass"""
from dataclasses import dataclass, field, asdict
from typing import List
import json

# Tokens treated as "no data" (case-sensitive, compared after trimming)
DEFAULT_MISSING_TOKENS = (
    '', 'NA', 'N/A', 'na', 'n/a', 'null', 'NULL', 'Null', 'None', 'none', 'NONE',
    'undefined', 'NaN', '-999', 'missing', '.', '-',
)


class ConfigError(Exception):
    """Raised when a configuration file or value cannot be used."""


@dataclass
class ProfilerConfig:
    """Tunable parameters for building a data dictionary"""
    missing_tokens: List[str] = field(default_factory=lambda: list(DEFAULT_MISSING_TOKENS))
    sample_rows: int = 10000            # Rows read per file when classifying
    categorical_sample_rows: int = 1000  # Rows read per file when pooling categories
    max_categorical_values: int = 50    # Larger pooled vocabularies are flagged instead
    max_workers: int = 1                # Threads for the category re-scan (1 = sequential)

    def __post_init__(self):
        self.validate()
        self.missing_tokens = list(self.missing_tokens)

    def validate(self) -> None:
        for attr in ('sample_rows', 'categorical_sample_rows', 'max_categorical_values', 'max_workers'):
            value = getattr(self, attr)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{attr} must be a positive integer, got {value!r}")
        # A bare string is not a token list
        if not isinstance(self.missing_tokens, (list, tuple)):
            raise ConfigError(f"missing_tokens must be a list of strings, got {self.missing_tokens!r}")
        if not all(isinstance(t, str) for t in self.missing_tokens):
            raise ConfigError("missing_tokens must be a list of strings")

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: dict) -> 'ProfilerConfig':
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        defaults = cls()
        return cls(
            missing_tokens=data.get('missing_tokens', defaults.missing_tokens),
            sample_rows=data.get('sample_rows', defaults.sample_rows),
            categorical_sample_rows=data.get('categorical_sample_rows', defaults.categorical_sample_rows),
            max_categorical_values=data.get('max_categorical_values', defaults.max_categorical_values),
            max_workers=data.get('max_workers', defaults.max_workers),
        )

    @classmethod
    def from_json(cls, json_str: str) -> 'ProfilerConfig':
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")
        return cls.from_dict(data)

    def add_missing_token(self, token: str) -> None:
        """Treat another literal as missing data."""
        if token not in self.missing_tokens:
            self.missing_tokens.append(token)

    def remove_missing_token(self, token: str) -> bool:
        """Stop treating a literal as missing. Returns False if it wasn't configured."""
        if token in self.missing_tokens:
            self.missing_tokens.remove(token)
            return True
        return False
