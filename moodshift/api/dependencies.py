"""
FastAPI dependency injection for MoodShift.
"""
import os
from functools import lru_cache
from typing import Optional
import logging

from fastapi import Header, HTTPException, status

from ..config.settings import ConfigManager, AppConfig, DEFAULT_CONFIG_PATH
from ..services import MoodShiftServices
from ..utils.logging import StructuredLogger


logger = logging.getLogger(__name__)


class AppState:
    """Singleton state for the MoodShift application."""

    _instance: Optional["AppState"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.config_manager = ConfigManager()
        self.config: Optional[AppConfig] = None
        self.logger: Optional[StructuredLogger] = None
        self.services: Optional[MoodShiftServices] = None
        self._initialized = True

    def initialize(self, config_path: Optional[str] = None) -> None:
        """Load configuration, build services and load seed data."""
        if self.services is not None:
            return

        config_path = config_path or os.getenv("MOODSHIFT_CONFIG", DEFAULT_CONFIG_PATH)
        try:
            self.config = self.config_manager.load(config_path)
            self.logger = StructuredLogger(
                "moodshift.api",
                level=self.config.logging.level,
                fmt=self.config.logging.format
            )
            self.services = MoodShiftServices.build(self.config, logger=self.logger)
            self.services.load_seed_data()
            self.logger.info(
                "MoodShift API initialized",
                catalog_items=len(self.services.catalog),
                active_rules=len(self.services.rules.active_rules())
            )
        except Exception as e:
            logger.error(f"Failed to initialize MoodShift: {e}")
            raise

    def shutdown(self) -> None:
        if self.services is not None:
            self.services.shutdown()


@lru_cache()
def get_app_state() -> AppState:
    """Get or create the application state singleton."""
    state = AppState()
    state.initialize()
    return state


def get_services() -> MoodShiftServices:
    """Dependency for getting the wired services."""
    return get_app_state().services


def get_current_user_id(x_user_id: Optional[str] = Header(default=None, alias="X-User-Id")) -> str:
    """Caller identity, established upstream and forwarded in the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header"
        )
    return x_user_id.strip()
