"""
Shift module for MoodShift.
"""

from .engine import ShiftRuleEngine

__all__ = ['ShiftRuleEngine']
