"""Configuration persistence and environment overrides"""
import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .settings import ProfilerConfig, ConfigError

logger = logging.getLogger(__name__)

# Environment variable -> config attribute (integers)
ENV_OVERRIDES = {
    'DATADICT_SAMPLE_ROWS': 'sample_rows',
    'DATADICT_CATEGORICAL_SAMPLE_ROWS': 'categorical_sample_rows',
    'DATADICT_MAX_CATEGORICAL_VALUES': 'max_categorical_values',
    'DATADICT_MAX_WORKERS': 'max_workers',
}
ENV_MISSING_TOKENS = 'DATADICT_MISSING_TOKENS'  # Comma-separated


def _apply_env(config: ProfilerConfig) -> ProfilerConfig:
    """Override config values from environment variables."""
    for env_name, attr in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw.strip() == '':
            continue
        try:
            setattr(config, attr, int(raw))
        except ValueError:
            raise ConfigError(f"{env_name} must be an integer, got {raw!r}")
        logger.debug(f"{attr} set from {env_name}")

    tokens = os.getenv(ENV_MISSING_TOKENS)
    if tokens is not None:
        # Keep empty string as a token: blank cells are always missing anyway
        config.missing_tokens = [t.strip() for t in tokens.split(',')]
        logger.debug(f"missing_tokens set from {ENV_MISSING_TOKENS}")

    config.validate()
    return config


def load_config(path: Optional[Union[str, Path]] = None, use_env: bool = True) -> ProfilerConfig:
    """
    Load profiler configuration.

    Args:
        path: Optional JSON file; defaults are used when omitted
        use_env: Apply DATADICT_* environment overrides (reads .env if present)

    Returns:
        ProfilerConfig

    Raises:
        ConfigError: File unreadable, not valid JSON, or values out of range
    """
    if path is None:
        config = ProfilerConfig()
    else:
        try:
            text = Path(path).read_text(encoding='utf-8')
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        config = ProfilerConfig.from_json(text)

    if use_env:
        load_dotenv()
        config = _apply_env(config)
    return config


def save_config(config: ProfilerConfig, path: Union[str, Path]) -> None:
    """Write configuration as JSON."""
    Path(path).write_text(config.to_json(), encoding='utf-8')
