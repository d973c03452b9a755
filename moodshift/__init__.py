"""
MoodShift: mood-vector media recommendations.
"""

__version__ = "1.0.0"
