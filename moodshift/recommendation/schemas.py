"""
Recommendation schemas for the MoodShift system.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..data.schemas import MoodVector, ScoredItem


MODE_MATCH = 'match'
MODE_SHIFT = 'shift'
RECOMMENDATION_MODES = (MODE_MATCH, MODE_SHIFT)

FEEDBACK_LIKE = 'like'
FEEDBACK_DISLIKE = 'dislike'
FEEDBACK_ACTIONS = (FEEDBACK_LIKE, FEEDBACK_DISLIKE)


@dataclass
class RecommendationRequest:
    """Request for recommendations in one mode."""
    user_id: str
    mode: str = MODE_MATCH
    limit: int = 10
    include_watched: bool = False
    force_refresh: bool = False
    max_limit: int = 50

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("User id is required")
        if self.mode not in RECOMMENDATION_MODES:
            raise ValueError(f"Mode must be one of {RECOMMENDATION_MODES}, got '{self.mode}'")
        if self.limit <= 0:
            raise ValueError("Limit must be positive")
        if self.limit > self.max_limit:
            raise ValueError(f"Limit cannot exceed {self.max_limit}")


@dataclass
class RecommendationResponse:
    """Ranked items plus the mood they were ranked against."""
    user_id: str
    mode: str
    items: List[ScoredItem]
    target_mood: Optional[MoodVector]
    generated_at: datetime
    expires_at: datetime
    from_cache: bool = False
    processing_time_ms: float = 0.0

    def __post_init__(self):
        if self.processing_time_ms < 0:
            raise ValueError("Processing time cannot be negative")


@dataclass
class FeedbackResult:
    """Outcome of a like or dislike."""
    user_id: str
    media_id: int
    media_kind: str
    action: str
    mood: MoodVector
    blacklisted: bool = False
    invalidated_entries: int = 0
