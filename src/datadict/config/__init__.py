"""Profiler configuration and persistence"""
from .settings import ProfilerConfig, ConfigError, DEFAULT_MISSING_TOKENS
from .repository import load_config, save_config
