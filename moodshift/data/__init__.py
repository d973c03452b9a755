"""
Data module for MoodShift.

Schemas shared by every engine, interaction merging and record validation.
"""

from .schemas import (
    MOOD_DIMENSIONS,
    MoodVector,
    Interaction,
    CatalogVector,
    VibeOverride,
    UserMoodState,
    MoodSnapshot,
    DimensionCondition,
    ShiftRule,
    ScoredItem,
    RecommendationCacheEntry,
    ValidationResult
)
from .validator import DataValidator
from .interactions import merge_interactions, interaction_from_record

__all__ = [
    'MOOD_DIMENSIONS',
    'MoodVector',
    'Interaction',
    'CatalogVector',
    'VibeOverride',
    'UserMoodState',
    'MoodSnapshot',
    'DimensionCondition',
    'ShiftRule',
    'ScoredItem',
    'RecommendationCacheEntry',
    'ValidationResult',
    'DataValidator',
    'merge_interactions',
    'interaction_from_record'
]
