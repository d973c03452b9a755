"""
Configuration management for MoodShift.

Provides centralized configuration loading, validation, and environment variable overrides.
"""

import os
import yaml
from dataclasses import dataclass, field, fields
from typing import Dict, Any, List, Optional, Type, TypeVar
from pathlib import Path

from ..errors import MoodShiftError


DEFAULT_CONFIG_PATH = str(Path(__file__).with_name("default_config.yaml"))

SectionT = TypeVar("SectionT")


@dataclass
class MoodConfig:
    """Parameters of the mood aggregation pipeline."""
    recent_window_days: float = 7.0
    decay_horizon_days: float = 90.0
    horizon_decay: float = 0.5
    decay_floor: float = 0.2
    saturation_window: int = 5
    saturation_min_history: int = 3
    saturation_threshold: float = 0.8
    saturation_floor: float = 0.8
    contrast_strength: float = 0.5
    baseline_scale: float = 5.0
    baseline_floor: float = 0.5
    local_utc_offset_hours: int = 3
    timeline_days: int = 30


@dataclass
class VibeConfig:
    default_strength: float = 0.4
    default_duration_hours: float = 4.0


@dataclass
class ShiftConfig:
    """Configuration for the shift rule engine."""
    no_match_policy: str = "neutral"
    seed_defaults: bool = True


@dataclass
class RecommendationConfig:
    """Configuration for recommendation engine parameters."""
    default_limit: int = 10
    max_limit: int = 50
    cache_ttl_hours: float = 168.0
    cache_depth: int = 50
    candidate_media_kind: Optional[str] = None
    like_influence: float = 0.3
    dislike_influence: float = 0.15


@dataclass
class CompatibilityConfig:
    strength_threshold: int = 65


@dataclass
class DataConfig:
    """Locations of seed data used by the CLI and API."""
    catalog_path: str = "data/catalog.json"
    interactions_path: str = "data/interactions.json"
    rules_path: Optional[str] = None


@dataclass
class LoggingConfig:
    """Configuration for logging parameters."""
    level: str = "INFO"
    format: str = "json"


@dataclass
class ServiceConfig:
    background_workers: int = 2
    version: str = "1.0.0"


@dataclass
class AppConfig:
    """Main application configuration containing all sub-configurations."""
    mood: MoodConfig = field(default_factory=MoodConfig)
    vibe: VibeConfig = field(default_factory=VibeConfig)
    shift: ShiftConfig = field(default_factory=ShiftConfig)
    recommendation: RecommendationConfig = field(default_factory=RecommendationConfig)
    compatibility: CompatibilityConfig = field(default_factory=CompatibilityConfig)
    data: DataConfig = field(default_factory=DataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)


class ConfigValidationError(MoodShiftError):
    """Raised when configuration validation fails."""
    pass


class ConfigManager:
    """Manages application configuration loading, validation, and environment overrides."""

    ENV_MAPPINGS = {
        'MOODSHIFT_LOG_LEVEL': ['logging', 'level'],
        'MOODSHIFT_LOG_FORMAT': ['logging', 'format'],
        'MOODSHIFT_CATALOG_PATH': ['data', 'catalog_path'],
        'MOODSHIFT_INTERACTIONS_PATH': ['data', 'interactions_path'],
        'MOODSHIFT_RULES_PATH': ['data', 'rules_path'],
        'MOODSHIFT_CACHE_TTL_HOURS': ['recommendation', 'cache_ttl_hours'],
        'MOODSHIFT_NO_MATCH_POLICY': ['shift', 'no_match_policy'],
        'MOODSHIFT_BACKGROUND_WORKERS': ['service', 'background_workers'],
        'MOODSHIFT_VERSION': ['service', 'version'],
    }

    def __init__(self):
        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    def load(self, config_path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
        """
        Load configuration from YAML file with environment variable overrides.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            AppConfig: Loaded and validated configuration

        Raises:
            ConfigValidationError: If configuration is invalid
            FileNotFoundError: If config file doesn't exist
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return self.load_dict(config_data)

    def load_dict(self, config_data: Dict[str, Any]) -> AppConfig:
        """Build, override and validate configuration from an in-memory mapping."""
        config_data = self._apply_env_overrides(config_data)
        config = self._create_config_from_dict(config_data)
        self.validate(config)
        self._config = config
        return config

    def from_defaults(self) -> AppConfig:
        """Validated configuration using only built-in defaults and environment overrides."""
        return self.load_dict({})

    def _create_config_from_dict(self, config_data: Dict[str, Any]) -> AppConfig:
        """Create AppConfig from dictionary data."""
        sections = {}
        for section in fields(AppConfig):
            section_cls = section.default_factory
            sections[section.name] = self._build_section(
                section_cls, config_data.get(section.name) or {}, section.name
            )
        return AppConfig(**sections)

    @staticmethod
    def _build_section(section_cls: Type[SectionT], data: Dict[str, Any], name: str) -> SectionT:
        known = {f.name for f in fields(section_cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown keys in '{name}' section: {sorted(unknown)}"
            )
        defaults = section_cls()
        values = {key: data.get(key, getattr(defaults, key)) for key in known}
        return section_cls(**values)

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration data."""
        for env_var, config_path in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue

            current = config_data
            for key in config_path[:-1]:
                if not isinstance(current.get(key), dict):
                    current[key] = {}
                current = current[key]

            final_key = config_path[-1]
            try:
                if final_key in ['background_workers']:
                    current[final_key] = int(env_value)
                elif final_key in ['cache_ttl_hours']:
                    current[final_key] = float(env_value)
                else:
                    current[final_key] = env_value
            except ValueError as e:
                raise ConfigValidationError(f"Invalid value for {env_var}: {env_value}") from e

        return config_data

    def validate(self, config: AppConfig) -> bool:
        """
        Validate configuration values.

        Args:
            config: Configuration to validate

        Returns:
            bool: True if valid

        Raises:
            ConfigValidationError: If validation fails
        """
        errors: List[str] = []

        mood = config.mood
        if mood.recent_window_days < 0:
            errors.append("Mood recent_window_days cannot be negative")
        if mood.decay_horizon_days <= mood.recent_window_days:
            errors.append("Mood decay_horizon_days must exceed recent_window_days")
        if not (0.0 <= mood.horizon_decay <= 1.0):
            errors.append("Mood horizon_decay must be between 0.0 and 1.0")
        if not (0.0 <= mood.decay_floor <= 1.0):
            errors.append("Mood decay_floor must be between 0.0 and 1.0")
        if mood.saturation_window <= 0:
            errors.append("Mood saturation_window must be positive")
        if not (0 < mood.saturation_min_history <= mood.saturation_window):
            errors.append("Mood saturation_min_history must be between 1 and saturation_window")
        if not (0.0 <= mood.saturation_floor <= 1.0):
            errors.append("Mood saturation_floor must be between 0.0 and 1.0")
        if mood.contrast_strength < 0:
            errors.append("Mood contrast_strength cannot be negative")
        if mood.baseline_scale <= 0 or mood.baseline_floor <= 0:
            errors.append("Mood baseline_scale and baseline_floor must be positive")
        if not (-12 <= mood.local_utc_offset_hours <= 14):
            errors.append("Mood local_utc_offset_hours must be between -12 and 14")
        if mood.timeline_days <= 0:
            errors.append("Mood timeline_days must be positive")

        if not (0.0 <= config.vibe.default_strength <= 1.0):
            errors.append("Vibe default_strength must be between 0.0 and 1.0")
        if config.vibe.default_duration_hours <= 0:
            errors.append("Vibe default_duration_hours must be positive")

        if config.shift.no_match_policy not in ['neutral', 'unshifted']:
            errors.append("Shift no_match_policy must be 'neutral' or 'unshifted'")

        rec = config.recommendation
        if rec.default_limit <= 0:
            errors.append("Recommendation default_limit must be positive")
        if rec.max_limit < rec.default_limit:
            errors.append("Recommendation max_limit cannot be below default_limit")
        if rec.cache_ttl_hours <= 0:
            errors.append("Recommendation cache_ttl_hours must be positive")
        if rec.cache_depth <= 0:
            errors.append("Recommendation cache_depth must be positive")
        if not (0.0 <= rec.like_influence <= 1.0):
            errors.append("Recommendation like_influence must be between 0.0 and 1.0")
        if not (0.0 <= rec.dislike_influence <= 1.0):
            errors.append("Recommendation dislike_influence must be between 0.0 and 1.0")

        if not (0 <= config.compatibility.strength_threshold <= 100):
            errors.append("Compatibility strength_threshold must be between 0 and 100")

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if config.logging.level not in valid_log_levels:
            errors.append(f"Logging level must be one of: {valid_log_levels}")

        if config.logging.format not in ['json', 'text']:
            errors.append("Logging format must be 'json' or 'text'")

        if config.service.background_workers <= 0:
            errors.append("Service background_workers must be positive")

        if errors:
            raise ConfigValidationError(f"Configuration validation failed: {'; '.join(errors)}")

        return True
