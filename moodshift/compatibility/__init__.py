"""
Compatibility module for MoodShift.
"""

from .engine import CompatibilityEngine, CompatibilityResult, DimensionComparison

__all__ = ['CompatibilityEngine', 'CompatibilityResult', 'DimensionComparison']
