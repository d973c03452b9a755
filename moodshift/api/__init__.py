"""
API module for MoodShift REST API.
"""
from .routes import router
from .schemas import (
    MoodResponse,
    RecommendationsResponse,
    CompatibilityResponse,
    HealthResponse
)

__all__ = [
    "router",
    "MoodResponse",
    "RecommendationsResponse",
    "CompatibilityResponse",
    "HealthResponse"
]
