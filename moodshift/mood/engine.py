"""
Mood computation engine for MoodShift.

Turns a user's rated interaction history into a single MoodVector.
"""
import math
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, Iterable, List, Mapping, Optional, Tuple
import logging

import numpy as np

from ..config.settings import MoodConfig
from ..data.schemas import (
    CatalogVector,
    Interaction,
    MoodVector,
    NEUTRAL_VALUE,
    MOOD_DIMENSIONS,
    clamp,
    round_half_up,
)


NEUTRAL_RATINGS = (5, 6)
RATING_MIDPOINT = 5.5
RATING_HALF_SPAN = 4.5
SECONDS_PER_DAY = 86400.0


@dataclass
class ContributionTrace:
    """How one interaction fed into the aggregate; useful for debugging tuning."""
    media_id: int
    influence: float
    decay: float
    saturation: float
    weight: float


@dataclass
class MoodComputation:
    """Result of a mood computation with its intermediate values."""
    mood: MoodVector
    pre_stretch: MoodVector
    baseline_weight: float
    total_weight: float
    item_count: int
    contributing: int
    traces: List[ContributionTrace]


class MoodComputationEngine:
    """Aggregates rated interactions against catalog vectors into a mood profile."""

    def __init__(self, config: Optional[MoodConfig] = None):
        """Initialize the engine.

        Args:
            config: Mood pipeline parameters (defaults used when omitted)
        """
        self.config = config or MoodConfig()
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def influence(rating: Optional[int]) -> float:
        """Polarized influence of a rating.

        Ratings 5 and 6, missing ratings and out-of-range values carry no
        influence. Otherwise (rating - 5.5) / 4.5, negative for 1-4 and
        positive for 7-10.
        """
        if rating is None or rating < 1 or rating > 10 or rating in NEUTRAL_RATINGS:
            return 0.0
        return (rating - RATING_MIDPOINT) / RATING_HALF_SPAN

    def time_decay(self, days_since: float) -> float:
        """Recency factor: 1.0 inside the recent window, linear down to the horizon value, flat after."""
        cfg = self.config
        if days_since <= cfg.recent_window_days:
            decay = 1.0
        elif days_since <= cfg.decay_horizon_days:
            progress = (days_since - cfg.recent_window_days) / (cfg.decay_horizon_days - cfg.recent_window_days)
            decay = 1.0 - progress * (1.0 - cfg.horizon_decay)
        else:
            decay = cfg.horizon_decay
        return max(cfg.decay_floor, decay)

    def saturation_factor(self, window: Iterable[MoodVector], vector: MoodVector) -> float:
        """Fatigue damping for items too similar to the recently processed ones.

        Args:
            window: Catalog vectors of the most recently processed items
            vector: Catalog vector of the current item

        Returns:
            Factor in [saturation_floor, 1.0]
        """
        cfg = self.config
        recent = list(window)
        if len(recent) < cfg.saturation_min_history:
            return 1.0
        mean_similarity = float(np.mean([v.cosine_similarity(vector) for v in recent]))
        if mean_similarity > cfg.saturation_threshold:
            return max(cfg.saturation_floor, 1.0 - (mean_similarity - cfg.saturation_threshold))
        return 1.0

    def baseline_weight(self, item_count: int) -> float:
        """Weight of the neutral regularizer; shrinks as history grows."""
        cfg = self.config
        return max(cfg.baseline_floor, cfg.baseline_scale / math.sqrt(item_count / 10 + 1))

    def contrast_stretch(self, mood: MoodVector) -> MoodVector:
        """Amplify each dimension's deviation from the neutral midpoint."""
        factor = 1.0 + self.config.contrast_strength
        stretched = NEUTRAL_VALUE + (mood.to_array() - NEUTRAL_VALUE) * factor
        return MoodVector.from_array(stretched)

    def compute(self,
                interactions: Iterable[Interaction],
                catalog: Mapping[Tuple[int, str], CatalogVector],
                now: datetime) -> MoodComputation:
        """Compute a mood vector from rated history.

        Args:
            interactions: Merged interaction history
            catalog: Catalog vectors keyed by (media_id, media_kind); items
                missing here are skipped
            now: Reference time for decay

        Returns:
            MoodComputation holding the stretched mood and intermediate values
        """
        cfg = self.config
        ordered = sorted(interactions, key=lambda i: i.occurred_at, reverse=True)
        item_count = len(ordered)

        baseline = self.baseline_weight(item_count)
        sums = np.full(len(MOOD_DIMENSIONS), NEUTRAL_VALUE * baseline, dtype=float)
        total_weight = baseline

        window: Deque[MoodVector] = deque(maxlen=cfg.saturation_window)
        traces: List[ContributionTrace] = []

        for interaction in ordered:
            influence = self.influence(interaction.rating)
            if influence == 0.0:
                continue

            item = catalog.get((interaction.media_id, interaction.media_kind))
            if item is None:
                continue
            vector = item.mood_vector

            days_since = (now - interaction.occurred_at).total_seconds() / SECONDS_PER_DAY
            decay = self.time_decay(days_since)
            saturation = self.saturation_factor(window, vector)
            window.append(vector)

            weight = abs(influence) * decay * saturation
            if weight <= 0:
                continue

            values = vector.to_array()
            contribution = 100.0 - values if influence < 0 else values
            sums += contribution * weight
            total_weight += weight
            traces.append(ContributionTrace(
                media_id=interaction.media_id,
                influence=influence,
                decay=decay,
                saturation=saturation,
                weight=weight,
            ))

        averaged = MoodVector(**{
            dim: round_half_up(clamp(sums[i] / total_weight))
            for i, dim in enumerate(MOOD_DIMENSIONS)
        })
        stretched = self.contrast_stretch(averaged)

        self.logger.debug(
            f"Computed mood from {len(traces)}/{item_count} interactions "
            f"(baseline={baseline:.3f}, total_weight={total_weight:.3f})"
        )
        return MoodComputation(
            mood=stretched,
            pre_stretch=averaged,
            baseline_weight=baseline,
            total_weight=total_weight,
            item_count=item_count,
            contributing=len(traces),
            traces=traces,
        )

    def compute_mood(self,
                     interactions: Iterable[Interaction],
                     catalog: Mapping[Tuple[int, str], CatalogVector],
                     now: datetime) -> MoodVector:
        """Convenience wrapper returning only the final mood vector."""
        return self.compute(interactions, catalog, now).mood
