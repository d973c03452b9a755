"""
Mood module for MoodShift.

Mood computation from rated history, the read-through mood service,
temporary vibe overlays and detached recomputation.
"""

from .engine import MoodComputationEngine, MoodComputation
from .service import MoodService, TimelinePoint
from .vibe import VibeOverlay, EffectiveMood
from .background import BackgroundRecomputer

__all__ = [
    'MoodComputationEngine',
    'MoodComputation',
    'MoodService',
    'TimelinePoint',
    'VibeOverlay',
    'EffectiveMood',
    'BackgroundRecomputer'
]
