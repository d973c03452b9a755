"""
Service wiring for MoodShift.

Builds every store and engine from an AppConfig so the API and the CLI run
the same object graph.
"""
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .config.presets import DEFAULT_SHIFT_RULES
from .config.settings import AppConfig, ConfigManager
from .compatibility.engine import CompatibilityEngine
from .data.interactions import normalize_media_kind, parse_timestamp
from .data.schemas import Interaction
from .mood.background import BackgroundRecomputer
from .mood.service import MoodService
from .mood.vibe import VibeOverlay
from .persistence.catalog import CatalogStore
from .persistence.stores import (
    ExclusionSource,
    InteractionSource,
    MoodStateStore,
    RecommendationCacheStore,
    RuleStore,
    SnapshotStore,
)
from .recommendation.engine import RecommendationEngine
from .recommendation.feedback import FeedbackService
from .shift.engine import ShiftRuleEngine
from .utils.logging import StructuredLogger
from .utils.timeutils import Clock, utc_now


@dataclass
class MoodShiftServices:
    """Every collaborator of a running MoodShift instance."""
    config: AppConfig
    logger: StructuredLogger
    clock: Clock
    catalog: CatalogStore
    interactions: InteractionSource
    exclusions: ExclusionSource
    rules: RuleStore
    states: MoodStateStore
    snapshots: SnapshotStore
    cache: RecommendationCacheStore
    mood: MoodService
    vibes: VibeOverlay
    shift: ShiftRuleEngine
    recommendations: RecommendationEngine
    feedback: FeedbackService
    compatibility: CompatibilityEngine
    recomputer: BackgroundRecomputer

    @classmethod
    def build(cls, config: Optional[AppConfig] = None, clock: Clock = utc_now,
              logger: Optional[StructuredLogger] = None) -> "MoodShiftServices":
        """
        Wire up stores and engines.

        Args:
            config: Application configuration (built-in defaults when omitted)
            clock: Time source shared by every time-dependent component
            logger: Structured logger (created from the logging section when omitted)

        Returns:
            MoodShiftServices with the default shift rules seeded when enabled
        """
        config = config or ConfigManager().from_defaults()
        logger = logger or StructuredLogger("moodshift", level=config.logging.level, fmt=config.logging.format)

        catalog = CatalogStore(config.data.catalog_path)
        interactions = InteractionSource()
        exclusions = ExclusionSource(interactions)
        rules = RuleStore()
        states = MoodStateStore()
        snapshots = SnapshotStore()
        cache = RecommendationCacheStore()

        mood = MoodService(interactions, catalog, states, snapshots,
                           config=config.mood, clock=clock, logger=logger)
        vibes = VibeOverlay(states, config=config.vibe, clock=clock, logger=logger)
        shift = ShiftRuleEngine(rules, config=config.shift)
        recommendations = RecommendationEngine(
            mood, vibes, shift, catalog, exclusions, cache,
            config=config.recommendation, clock=clock, logger=logger,
        )
        feedback = FeedbackService(mood, catalog, exclusions, cache,
                                   config=config.recommendation, logger=logger)
        compatibility = CompatibilityEngine(mood, config=config.compatibility)
        recomputer = BackgroundRecomputer(mood, max_workers=config.service.background_workers, logger=logger)

        if config.shift.seed_defaults:
            rules.seed(DEFAULT_SHIFT_RULES)

        return cls(
            config=config, logger=logger, clock=clock,
            catalog=catalog, interactions=interactions, exclusions=exclusions,
            rules=rules, states=states, snapshots=snapshots, cache=cache,
            mood=mood, vibes=vibes, shift=shift, recommendations=recommendations,
            feedback=feedback, compatibility=compatibility, recomputer=recomputer,
        )

    def load_seed_data(self) -> None:
        """Load catalog, interaction history and extra rules from the configured files that exist."""
        data = self.config.data
        if os.path.exists(data.catalog_path):
            result = self.catalog.load()
            if result.has_errors():
                self.logger.warning("Catalog loaded with rejected records", rejected=len(result.errors))
        else:
            self.logger.warning("Catalog file not found, starting empty", path=data.catalog_path)

        if os.path.exists(data.interactions_path):
            self.interactions.load_file(data.interactions_path)
        else:
            self.logger.warning("Interactions file not found, starting empty", path=data.interactions_path)

        if data.rules_path:
            stored, rejected = self.rules.load_file(data.rules_path)
            self.logger.info("Custom shift rules loaded", stored=stored, rejected=rejected)

    def record_interaction(self, user_id: str, media_id: int, media_kind: str,
                           rating: Optional[int] = None,
                           occurred_at: Optional[datetime] = None,
                           title: str = 'Unknown') -> bool:
        """
        Log an activity and, when it carries a rating, schedule a detached mood recompute.

        Returns:
            True when a recompute was scheduled
        """
        interaction = Interaction(
            media_id=media_id,
            media_kind=normalize_media_kind(media_kind),
            occurred_at=parse_timestamp(occurred_at) if occurred_at is not None else self.clock(),
            rating=rating,
            title=title,
        )
        self.interactions.record_activity(user_id, interaction)
        if rating is None:
            return False
        self.recomputer.submit(user_id)
        return True

    def shutdown(self) -> None:
        self.recomputer.shutdown()
