"""
Recommendation engine for MoodShift.
"""
import time
from datetime import timedelta
from typing import List, Optional

import numpy as np

from ..config.settings import RecommendationConfig
from ..data.schemas import CatalogVector, MoodVector, RecommendationCacheEntry, ScoredItem
from ..mood.service import MoodService
from ..mood.vibe import VibeOverlay
from ..persistence.catalog import CatalogStore
from ..persistence.stores import ExclusionSource, RecommendationCacheStore
from ..shift.engine import ShiftRuleEngine
from ..utils.logging import StructuredLogger
from ..utils.timeutils import Clock, utc_now
from .schemas import MODE_SHIFT, RecommendationRequest, RecommendationResponse
from .similarity import SimilarityCalculator


class RecommendationEngine:
    """Ranks catalog items against a user's effective or shifted mood, with a TTL cache."""

    def __init__(self,
                 mood_service: MoodService,
                 vibes: VibeOverlay,
                 shift_engine: ShiftRuleEngine,
                 catalog: CatalogStore,
                 exclusions: ExclusionSource,
                 cache: RecommendationCacheStore,
                 config: Optional[RecommendationConfig] = None,
                 similarity_calculator: Optional[SimilarityCalculator] = None,
                 clock: Clock = utc_now,
                 logger: Optional[StructuredLogger] = None):
        """Initialize the recommendation engine.

        Args:
            mood_service: Source of the historical mood
            vibes: Vibe overlay producing the effective mood
            shift_engine: Resolves shift-mode targets
            catalog: Candidate items with mood vectors
            exclusions: Blacklisted and watched ids per user
            cache: Ranked list cache keyed by (user, mode)
            config: Recommendation settings
            similarity_calculator: Calculator for similarity scores (optional)
            clock: Time source
            logger: Structured logger (optional)
        """
        self.mood_service = mood_service
        self.vibes = vibes
        self.shift_engine = shift_engine
        self.catalog = catalog
        self.exclusions = exclusions
        self.cache = cache
        self.config = config or RecommendationConfig()
        self.similarity_calculator = similarity_calculator or SimilarityCalculator()
        self.clock = clock
        self.logger = logger or StructuredLogger(__name__)

    def get_recommendations(self, user_id: str, mode: str = 'match',
                            limit: Optional[int] = None,
                            include_watched: bool = False,
                            force_refresh: bool = False) -> RecommendationResponse:
        """Recommendations for a user in match or shift mode.

        Raises:
            ValueError: If mode or limit is invalid
        """
        request = RecommendationRequest(
            user_id=user_id,
            mode=mode,
            limit=limit if limit is not None else self.config.default_limit,
            include_watched=include_watched,
            force_refresh=force_refresh,
            max_limit=self.config.max_limit,
        )
        return self.recommend(request)

    def recommend(self, request: RecommendationRequest) -> RecommendationResponse:
        """Serve from cache when possible, otherwise rank and refill the cache.

        Args:
            request: Validated RecommendationRequest

        Returns:
            RecommendationResponse with at most ``request.limit`` items
        """
        start_time = time.perf_counter()

        if not request.force_refresh:
            entry = self.cache.get(request.user_id, request.mode)
            if entry is not None and entry.is_fresh(self.clock()) and entry.can_serve(request.limit):
                self.logger.debug(
                    "Serving cached recommendations",
                    user_id=request.user_id,
                    mode=request.mode,
                    cached_items=len(entry.items),
                )
                return self._response(request, entry, from_cache=True, start_time=start_time)

        with self.logger.operation_context(
            "RecommendationEngine", "recommend", user_id=request.user_id, mode=request.mode
        ) as log:
            target = self.resolve_target(request.user_id, request.mode)
            candidates = self.candidates(request.user_id, request.include_watched)
            ranked = self.rank_by_similarity(target, candidates)

            depth = max(request.limit, self.config.cache_depth)
            now = self.clock()
            entry = RecommendationCacheEntry(
                user_id=request.user_id,
                mode=request.mode,
                items=ranked[:depth],
                generated_at=now,
                expires_at=now + timedelta(hours=self.config.cache_ttl_hours),
                pool_exhausted=len(ranked) <= depth,
                target_mood=target,
            )
            self.cache.put(entry)
            log.info(
                "Recommendations ranked",
                user_id=request.user_id,
                mode=request.mode,
                total_candidates=len(candidates),
                cached_items=len(entry.items),
            )
            log.metric("recommendation_candidates", len(candidates), tags={"mode": request.mode})
            if not candidates:
                log.warning("No candidates available", user_id=request.user_id)
        return self._response(request, entry, from_cache=False, start_time=start_time)

    def resolve_target(self, user_id: str, mode: str) -> MoodVector:
        """Effective mood for match mode; its shift target for shift mode."""
        historical = self.mood_service.compute_or_get_mood(user_id)
        effective = self.vibes.effective_mood(user_id, historical).mood
        if mode == MODE_SHIFT:
            return self.shift_engine.resolve_shift_target(effective)
        return effective

    def candidates(self, user_id: str, include_watched: bool = False) -> List[CatalogVector]:
        """Catalog items with vectors, minus blacklisted and (unless included) watched ids."""
        excluded = set(self.exclusions.blacklisted_ids(user_id))
        if not include_watched:
            excluded |= self.exclusions.watched_ids(user_id)
        pool = self.catalog.candidates(self.config.candidate_media_kind)
        filtered = [item for item in pool if item.media_id not in excluded]
        self.logger.debug(
            "Applied exclusions",
            user_id=user_id,
            pool=len(pool),
            remaining=len(filtered),
        )
        return filtered

    def rank_by_similarity(self, target: MoodVector, candidates: List[CatalogVector]) -> List[ScoredItem]:
        """Rank candidates by cosine similarity to the target.

        Args:
            target: Target mood vector
            candidates: Catalog items to score

        Returns:
            ScoredItems sorted by similarity descending, ties by (media_kind, media_id)
        """
        if not candidates:
            return []
        candidate_arrays = np.array([item.mood_vector.to_array() for item in candidates])
        similarities = self.similarity_calculator.compute_batch_similarity(target.to_array(), candidate_arrays)
        scored = [
            ScoredItem(
                media_id=item.media_id,
                media_kind=item.media_kind,
                mood_vector=item.mood_vector,
                similarity=float(similarity),
                title=item.title,
            )
            for item, similarity in zip(candidates, similarities)
        ]
        scored.sort(key=lambda s: (-s.similarity, s.media_kind, s.media_id))
        return scored

    def _response(self, request: RecommendationRequest, entry: RecommendationCacheEntry,
                  from_cache: bool, start_time: float) -> RecommendationResponse:
        return RecommendationResponse(
            user_id=request.user_id,
            mode=request.mode,
            items=list(entry.items[:request.limit]),
            target_mood=entry.target_mood,
            generated_at=entry.generated_at,
            expires_at=entry.expires_at,
            from_cache=from_cache,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )
