"""
Persistence layer module for MoodShift.

Handles catalog vectors, interaction history, shift rules, mood state,
snapshots and the recommendation cache.
"""

from .catalog import CatalogStore
from .stores import (
    InteractionSource,
    ExclusionSource,
    RuleStore,
    MoodStateStore,
    SnapshotStore,
    RecommendationCacheStore
)

__all__ = [
    'CatalogStore',
    'InteractionSource',
    'ExclusionSource',
    'RuleStore',
    'MoodStateStore',
    'SnapshotStore',
    'RecommendationCacheStore'
]
