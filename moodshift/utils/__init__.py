"""
Utility modules for MoodShift.

Provides structured logging and other supporting functionality.
"""

from .logging import StructuredLogger, LogContext

__all__ = ['StructuredLogger', 'LogContext']
