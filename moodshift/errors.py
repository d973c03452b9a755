"""
Exception types raised by MoodShift.
"""
from typing import Iterable


class MoodShiftError(Exception):
    """Base class for all MoodShift errors."""
    pass


class UnknownVibeTemplate(MoodShiftError):
    """Raised when a vibe is requested by a template name that does not exist."""

    def __init__(self, template: str, available: Iterable[str]):
        self.template = template
        self.available = sorted(available)
        super().__init__(
            f"Unknown vibe template: {template}. Available: {', '.join(self.available)}"
        )


class CatalogItemNotFound(MoodShiftError):
    """Raised when feedback targets an item the catalog has no mood vector for."""

    def __init__(self, media_id: int, media_kind: str):
        self.media_id = media_id
        self.media_kind = media_kind
        super().__init__(f"No mood vector for {media_kind} {media_id}")
