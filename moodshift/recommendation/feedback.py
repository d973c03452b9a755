"""
Recommendation feedback for MoodShift.

A like pulls the user's mood toward the item; a dislike blacklists the item
and pushes the mood away from it. Either way the user's cached lists are
dropped so the next request reflects the new mood.
"""
from typing import Optional

from ..config.settings import RecommendationConfig
from ..data.schemas import MoodVector, NEUTRAL_VALUE
from ..errors import CatalogItemNotFound
from ..mood.service import MoodService
from ..persistence.catalog import CatalogStore
from ..persistence.stores import ExclusionSource, RecommendationCacheStore
from ..utils.logging import StructuredLogger
from .schemas import FEEDBACK_ACTIONS, FEEDBACK_LIKE, FeedbackResult


FEEDBACK_TRIGGER_LABEL = "Feedback Adjustment"


class FeedbackService:
    """Applies like/dislike feedback to mood, exclusions and cache."""

    def __init__(self,
                 mood_service: MoodService,
                 catalog: CatalogStore,
                 exclusions: ExclusionSource,
                 cache: RecommendationCacheStore,
                 config: Optional[RecommendationConfig] = None,
                 logger: Optional[StructuredLogger] = None):
        self.mood_service = mood_service
        self.catalog = catalog
        self.exclusions = exclusions
        self.cache = cache
        self.config = config or RecommendationConfig()
        self.logger = logger or StructuredLogger(__name__)

    def process_feedback(self, user_id: str, media_id: int, media_kind: str, action: str) -> FeedbackResult:
        """
        Apply one piece of feedback.

        Args:
            user_id: User identifier
            media_id: Item the feedback is about
            media_kind: 'movie' or 'tv'
            action: 'like' or 'dislike'

        Returns:
            FeedbackResult with the adjusted mood

        Raises:
            ValueError: If the action is not recognized
            CatalogItemNotFound: If the item has no mood vector
        """
        if action not in FEEDBACK_ACTIONS:
            raise ValueError(f"Feedback action must be one of {FEEDBACK_ACTIONS}, got '{action}'")

        item = self.catalog.get_vector(media_id, media_kind)
        if item is None:
            raise CatalogItemNotFound(media_id, media_kind)

        with self.logger.operation_context(
            "FeedbackService", "process_feedback", user_id=user_id, media_id=media_id, action=action
        ):
            current = self.mood_service.compute_or_get_mood(user_id)
            if action == FEEDBACK_LIKE:
                adjusted = current.blend(item.mood_vector, self.config.like_influence)
                blacklisted = False
            else:
                self.exclusions.blacklist(user_id, media_id)
                push = (item.mood_vector.to_array() - NEUTRAL_VALUE) * self.config.dislike_influence
                adjusted = MoodVector.from_array(current.to_array() - push)
                blacklisted = True

            self.mood_service.set_user_mood(user_id, adjusted, FEEDBACK_TRIGGER_LABEL)
            invalidated = self.cache.invalidate(user_id)

        return FeedbackResult(
            user_id=user_id,
            media_id=media_id,
            media_kind=media_kind,
            action=action,
            mood=adjusted,
            blacklisted=blacklisted,
            invalidated_entries=invalidated,
        )
