"""
Mood service for MoodShift.

Owns the read-through mood lifecycle: serving a stored mood while it is
fresh, recomputing it when the local day has rolled over, persisting state
and daily snapshots, and building the mood timeline.
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional

import numpy as np

from ..config.settings import MoodConfig
from ..data.schemas import MoodVector, UserMoodState
from ..persistence.catalog import CatalogStore
from ..persistence.stores import InteractionSource, MoodStateStore, SnapshotStore
from ..utils.logging import StructuredLogger
from ..utils.timeutils import Clock, local_day, local_midnight_utc, utc_now
from .engine import MoodComputationEngine


@dataclass
class TimelinePoint:
    """Averaged mood for one calendar day."""
    day: str
    mood: MoodVector
    trigger_label: str


class MoodService:
    """Computes, caches and records user moods."""

    def __init__(self,
                 interactions: InteractionSource,
                 catalog: CatalogStore,
                 states: MoodStateStore,
                 snapshots: SnapshotStore,
                 config: Optional[MoodConfig] = None,
                 engine: Optional[MoodComputationEngine] = None,
                 clock: Clock = utc_now,
                 logger: Optional[StructuredLogger] = None):
        self.interactions = interactions
        self.catalog = catalog
        self.states = states
        self.snapshots = snapshots
        self.config = config or MoodConfig()
        self.engine = engine or MoodComputationEngine(self.config)
        self.clock = clock
        self.logger = logger or StructuredLogger(__name__)

    def is_stale(self, state: Optional[UserMoodState]) -> bool:
        """A stored mood is stale when it predates the most recent local midnight."""
        if state is None or state.last_updated is None:
            return True
        midnight = local_midnight_utc(self.clock(), self.config.local_utc_offset_hours)
        return state.last_updated < midnight

    def compute_or_get_mood(self, user_id: str, force_refresh: bool = False) -> MoodVector:
        """
        Return the user's mood, recomputing when forced, missing or stale.

        Args:
            user_id: User identifier
            force_refresh: Recompute even when the stored mood is fresh

        Returns:
            Current MoodVector
        """
        if not force_refresh:
            state = self.states.get(user_id)
            if not self.is_stale(state):
                return state.current_mood
        return self.update_user_mood(user_id)

    def get_stored_mood(self, user_id: str) -> MoodVector:
        """Stored mood without triggering any recomputation; neutral when absent."""
        state = self.states.get(user_id)
        return state.current_mood if state is not None else MoodVector.neutral()

    def update_user_mood(self, user_id: str, trigger_label: Optional[str] = None) -> MoodVector:
        """
        Recompute the user's mood from history and persist it.

        Args:
            user_id: User identifier
            trigger_label: Optional label stored on today's snapshot

        Returns:
            Freshly computed MoodVector
        """
        with self.logger.operation_context("MoodService", "update_user_mood", user_id=user_id) as log:
            history = self.interactions.get_interactions(user_id)
            if not history:
                log.info("No rated interactions, using neutral mood", user_id=user_id)
                mood = MoodVector.neutral()
            else:
                keys = {(i.media_id, i.media_kind) for i in history}
                catalog = self.catalog.get_vectors(keys)
                now = self.clock()
                result = self.engine.compute(history, catalog, now)
                mood = result.mood
                log.info(
                    "Mood recomputed",
                    user_id=user_id,
                    item_count=result.item_count,
                    contributing=result.contributing,
                    missing_vectors=len(keys) - len(catalog),
                )
            self._persist(user_id, mood, trigger_label)
            return mood

    def set_user_mood(self, user_id: str, mood: MoodVector,
                      trigger_label: Optional[str] = None) -> None:
        """Directly overwrite the stored mood, bypassing computation."""
        self._persist(user_id, mood.clamped(), trigger_label)
        self.logger.info("Mood set directly", user_id=user_id, trigger_label=trigger_label)

    def _persist(self, user_id: str, mood: MoodVector, trigger_label: Optional[str]) -> None:
        now = self.clock()
        state = self.states.get_or_create(user_id)
        state.current_mood = mood
        state.last_updated = now
        self.states.save(state)
        self.snapshots.upsert(
            user_id,
            local_day(now, self.config.local_utc_offset_hours),
            mood,
            trigger_label,
        )

    def recompute_quietly(self, user_id: str) -> Optional[MoodVector]:
        """Recompute for background use: failures are logged, never raised."""
        try:
            return self.update_user_mood(user_id)
        except Exception as e:
            self.logger.error(
                "Background mood recompute failed",
                exc_info=True,
                user_id=user_id,
                error_type=type(e).__name__,
            )
            return None

    def get_mood_timeline(self, user_id: str, days: Optional[int] = None) -> List[TimelinePoint]:
        """
        Daily mood averages over the last ``days`` days, oldest first.

        Args:
            user_id: User identifier
            days: Window length (config timeline_days when omitted)

        Returns:
            One TimelinePoint per day with at least one snapshot
        """
        days = days if days is not None else self.config.timeline_days
        today = local_day(self.clock(), self.config.local_utc_offset_hours)
        start = today - timedelta(days=days)

        grouped = {}
        for snapshot in self.snapshots.list_since(user_id, start):
            key = snapshot.day.isoformat()
            moods, labels = grouped.setdefault(key, ([], []))
            moods.append(snapshot.mood.to_array())
            if snapshot.trigger_label and snapshot.trigger_label not in labels:
                labels.append(snapshot.trigger_label)

        timeline = []
        for key in sorted(grouped):
            moods, labels = grouped[key]
            timeline.append(TimelinePoint(
                day=key,
                mood=MoodVector.from_array(np.mean(moods, axis=0)),
                trigger_label=', '.join(labels),
            ))
        return timeline
