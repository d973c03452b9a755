"""
Configuration for MoodShift.

Settings dataclasses, the YAML-backed ConfigManager and the fixed preset tables.
"""

from .settings import AppConfig, ConfigManager, ConfigValidationError, DEFAULT_CONFIG_PATH

__all__ = ['AppConfig', 'ConfigManager', 'ConfigValidationError', 'DEFAULT_CONFIG_PATH']
