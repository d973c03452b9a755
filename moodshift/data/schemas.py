"""
Data schemas for the MoodShift system.

This module contains dataclasses that define the structure of data
used throughout the system, from rated interactions to cached rankings.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Any, Optional, List, Tuple
import numpy as np


MOOD_DIMENSIONS: Tuple[str, ...] = (
    'adrenaline',
    'melancholy',
    'joy',
    'tension',
    'intellect',
    'romance',
    'wonder',
    'nostalgia',
    'darkness',
    'inspiration',
)

NEUTRAL_VALUE = 50
MIN_VALUE = 0
MAX_VALUE = 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going up."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = MIN_VALUE, high: float = MAX_VALUE) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class MoodVector:
    """Ten-dimensional taste profile, every dimension an integer in [0, 100]"""
    adrenaline: int = NEUTRAL_VALUE
    melancholy: int = NEUTRAL_VALUE
    joy: int = NEUTRAL_VALUE
    tension: int = NEUTRAL_VALUE
    intellect: int = NEUTRAL_VALUE
    romance: int = NEUTRAL_VALUE
    wonder: int = NEUTRAL_VALUE
    nostalgia: int = NEUTRAL_VALUE
    darkness: int = NEUTRAL_VALUE
    inspiration: int = NEUTRAL_VALUE

    @classmethod
    def neutral(cls) -> 'MoodVector':
        """Neutral vector, 50 on every dimension"""
        return cls()

    def to_array(self) -> np.ndarray:
        """Convert mood vector to numpy array"""
        return np.array([getattr(self, dim) for dim in MOOD_DIMENSIONS], dtype=float)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> 'MoodVector':
        """Create mood vector from numpy array, rounding and clamping each value"""
        if len(arr) != len(MOOD_DIMENSIONS):
            raise ValueError(f"Expected array of length {len(MOOD_DIMENSIONS)}, got {len(arr)}")
        return cls(**{
            dim: round_half_up(clamp(float(value)))
            for dim, value in zip(MOOD_DIMENSIONS, arr)
        })

    def to_dict(self) -> Dict[str, int]:
        return {dim: getattr(self, dim) for dim in MOOD_DIMENSIONS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MoodVector':
        """Create mood vector from a mapping; missing dimensions stay neutral.

        Raises:
            ValueError: If a key is not a mood dimension
        """
        unknown = set(data) - set(MOOD_DIMENSIONS)
        if unknown:
            raise ValueError(f"Unknown mood dimensions: {sorted(unknown)}")
        return cls(**{
            dim: round_half_up(clamp(float(data.get(dim, NEUTRAL_VALUE))))
            for dim in MOOD_DIMENSIONS
        })

    def clamped(self) -> 'MoodVector':
        return MoodVector.from_array(self.to_array())

    def blend(self, other: 'MoodVector', strength: float) -> 'MoodVector':
        """Blend towards another vector: self * (1 - strength) + other * strength.

        Args:
            other: Vector to blend towards
            strength: Blend factor, clamped to [0, 1]

        Returns:
            New MoodVector with rounded values
        """
        strength = clamp(strength, 0.0, 1.0)
        mixed = self.to_array() * (1.0 - strength) + other.to_array() * strength
        return MoodVector.from_array(mixed)

    def cosine_similarity(self, other: 'MoodVector') -> float:
        """Cosine similarity in [0, 1]; 0.0 when either vector is all zeros"""
        a = self.to_array()
        b = other.to_array()
        norm_a = np.linalg.norm(a)
        norm_b = np.linalg.norm(b)
        if norm_a == 0 or norm_b == 0:
            return 0.0
        return float(np.dot(a, b) / (norm_a * norm_b))


@dataclass
class Interaction:
    """A single rated media encounter"""
    media_id: int
    media_kind: str
    occurred_at: datetime
    rating: Optional[int] = None
    title: str = 'Unknown'


@dataclass
class CatalogVector:
    """Precomputed mood vector for a catalog item"""
    media_id: int
    media_kind: str
    mood_vector: MoodVector
    title: str = ''

    @property
    def key(self) -> Tuple[int, str]:
        return (self.media_id, self.media_kind)


@dataclass
class VibeOverride:
    """Temporary user-chosen mood blended over the historical vector"""
    template_name: str
    vector: MoodVector
    strength: float
    expires_at: datetime

    def is_active(self, now: datetime) -> bool:
        return now <= self.expires_at


@dataclass
class UserMoodState:
    """Current mood of a user plus any temporary vibe"""
    user_id: str
    current_mood: MoodVector = field(default_factory=MoodVector.neutral)
    last_updated: Optional[datetime] = None
    temporary_vibe: Optional[VibeOverride] = None


@dataclass
class MoodSnapshot:
    """Daily mood record for timeline consumers"""
    user_id: str
    mood: MoodVector
    day: date
    trigger_label: Optional[str] = None


@dataclass
class DimensionCondition:
    """Inclusive bounds on one mood dimension; either side may be open"""
    min: Optional[float] = None
    max: Optional[float] = None

    def matches(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


@dataclass
class ShiftRule:
    """Data-driven rule mapping a mood region to a shifted target"""
    name: str
    priority: int
    conditions: Dict[str, DimensionCondition]
    target_effects: Dict[str, int]
    is_active: bool = True
    description: str = ''
    sequence: int = 0

    def matches(self, mood: MoodVector) -> bool:
        """True when every conditioned dimension is inside its bounds"""
        return all(
            condition.matches(getattr(mood, dim))
            for dim, condition in self.conditions.items()
        )

    def target_vector(self) -> MoodVector:
        """Target effects laid over a neutral baseline"""
        return MoodVector.from_dict(self.target_effects)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ShiftRule':
        """Create a rule from its stored representation.

        Raises:
            KeyError: If name or priority is missing
        """
        conditions = {
            dim: DimensionCondition(min=bounds.get('min'), max=bounds.get('max'))
            for dim, bounds in (data.get('conditions') or {}).items()
        }
        return cls(
            name=data['name'],
            priority=int(data['priority']),
            conditions=conditions,
            target_effects=dict(data.get('target_effects') or {}),
            is_active=bool(data.get('is_active', True)),
            description=data.get('description', ''),
        )


@dataclass
class ScoredItem:
    """Catalog item ranked against a target mood"""
    media_id: int
    media_kind: str
    mood_vector: MoodVector
    similarity: float
    title: str = ''


@dataclass
class RecommendationCacheEntry:
    """Ranked list cached per (user, mode)"""
    user_id: str
    mode: str
    items: List[ScoredItem]
    generated_at: datetime
    expires_at: datetime
    pool_exhausted: bool = False
    target_mood: Optional[MoodVector] = None

    def is_fresh(self, now: datetime) -> bool:
        return now < self.expires_at

    def can_serve(self, limit: int) -> bool:
        return self.pool_exhausted or len(self.items) >= limit


@dataclass
class ValidationResult:
    """Result of data validation operations"""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    metadata: Optional[Dict[str, Any]] = None

    def add_error(self, error: str) -> None:
        """Add an error to the validation result"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning to the validation result"""
        self.warnings.append(warning)

    def has_errors(self) -> bool:
        """Check if validation has any errors"""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if validation has any warnings"""
        return len(self.warnings) > 0
