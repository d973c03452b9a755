"""
Vibe overlay for MoodShift.

A vibe is a temporary, user-chosen mood template blended over the historical
mood until it expires.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Mapping, Optional

from ..config.presets import VIBE_TEMPLATES
from ..config.settings import VibeConfig
from ..data.schemas import MoodVector, UserMoodState, VibeOverride, clamp
from ..errors import UnknownVibeTemplate
from ..persistence.stores import MoodStateStore
from ..utils.logging import StructuredLogger
from ..utils.timeutils import Clock, utc_now


@dataclass
class EffectiveMood:
    """Mood actually used for ranking, with the vibe that shaped it."""
    mood: MoodVector
    has_active_vibe: bool = False
    vibe_template: Optional[str] = None
    vibe_expires_at: Optional[datetime] = None


class VibeOverlay:
    """Sets, clears and applies temporary vibe overrides."""

    def __init__(self,
                 states: MoodStateStore,
                 config: Optional[VibeConfig] = None,
                 templates: Mapping[str, MoodVector] = VIBE_TEMPLATES,
                 clock: Clock = utc_now,
                 logger: Optional[StructuredLogger] = None):
        self.states = states
        self.config = config or VibeConfig()
        self.templates = templates
        self.clock = clock
        self.logger = logger or StructuredLogger(__name__)

    def set_vibe(self, user_id: str, template: str,
                 strength: Optional[float] = None,
                 duration_hours: Optional[float] = None) -> VibeOverride:
        """
        Attach a vibe to the user, replacing any previous one.

        Args:
            user_id: User identifier
            template: Template name, matched case-insensitively
            strength: Blend factor, clamped to [0, 1] (config default when omitted)
            duration_hours: Lifetime of the override (config default when omitted)

        Returns:
            The stored VibeOverride

        Raises:
            UnknownVibeTemplate: If no template has that name
        """
        name = template.strip().lower()
        vector = self.templates.get(name)
        if vector is None:
            raise UnknownVibeTemplate(template, self.templates)

        strength = self.config.default_strength if strength is None else strength
        duration_hours = self.config.default_duration_hours if duration_hours is None else duration_hours

        override = VibeOverride(
            template_name=name,
            vector=vector,
            strength=clamp(float(strength), 0.0, 1.0),
            expires_at=self.clock() + timedelta(hours=duration_hours),
        )
        state = self.states.get_or_create(user_id)
        state.temporary_vibe = override
        self.states.save(state)
        self.logger.info(
            "Vibe set",
            user_id=user_id,
            template=name,
            strength=override.strength,
            expires_at=override.expires_at.isoformat(),
        )
        return override

    def clear_vibe(self, user_id: str) -> None:
        """Remove the user's vibe; a no-op when there is none."""
        state = self.states.get(user_id)
        if state is None or state.temporary_vibe is None:
            return
        state.temporary_vibe = None
        self.states.save(state)
        self.logger.info("Vibe cleared", user_id=user_id)

    def active_vibe(self, user_id: str) -> Optional[VibeOverride]:
        state = self.states.get(user_id)
        return self._active(state)

    def _active(self, state: Optional[UserMoodState]) -> Optional[VibeOverride]:
        if state is None or state.temporary_vibe is None:
            return None
        if not state.temporary_vibe.is_active(self.clock()):
            return None
        return state.temporary_vibe

    def effective_mood(self, user_id: str, historical: Optional[MoodVector] = None) -> EffectiveMood:
        """
        Historical mood with the active vibe blended in.

        Args:
            user_id: User identifier
            historical: Mood to blend over (stored mood when omitted)

        Returns:
            EffectiveMood; the historical mood unchanged when no vibe is active
        """
        state = self.states.get(user_id)
        if historical is None:
            historical = state.current_mood if state is not None else MoodVector.neutral()

        vibe = self._active(state)
        if vibe is None:
            return EffectiveMood(mood=historical)
        return EffectiveMood(
            mood=historical.blend(vibe.vector, vibe.strength),
            has_active_vibe=True,
            vibe_template=vibe.template_name,
            vibe_expires_at=vibe.expires_at,
        )
