"""
Compatibility engine for MoodShift.

Compares two users' stored moods. Nothing here recomputes or persists.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config.settings import CompatibilityConfig
from ..data.schemas import MOOD_DIMENSIONS, MoodVector, round_half_up
from ..mood.service import MoodService
from ..recommendation.similarity import SimilarityCalculator


VERDICTS = (
    (90, "Cinematic Soulmates"),
    (70, "Great Taste"),
    (50, "Compatible"),
    (30, "Different Perspectives"),
)
FALLBACK_VERDICT = "Polar Opposites"


@dataclass
class DimensionComparison:
    dimension: str
    value_a: int
    value_b: int
    difference: int


@dataclass
class CompatibilityResult:
    """Similarity of two moods with a per-dimension breakdown."""
    similarity: int
    dimensions: List[DimensionComparison]
    shared_strengths: List[str]
    unique_strengths: Dict[str, List[str]] = field(default_factory=dict)
    verdict: str = FALLBACK_VERDICT


def verdict_for(similarity: int) -> str:
    for threshold, label in VERDICTS:
        if similarity >= threshold:
            return label
    return FALLBACK_VERDICT


class CompatibilityEngine:
    """Symmetric mood comparison between two users."""

    def __init__(self, mood_service: MoodService,
                 config: Optional[CompatibilityConfig] = None,
                 similarity_calculator: Optional[SimilarityCalculator] = None):
        self.mood_service = mood_service
        self.config = config or CompatibilityConfig()
        self.similarity_calculator = similarity_calculator or SimilarityCalculator()

    def compare(self, mood_a: MoodVector, mood_b: MoodVector) -> CompatibilityResult:
        """Compare two mood vectors.

        Args:
            mood_a: First user's mood
            mood_b: Second user's mood

        Returns:
            CompatibilityResult; swapping the arguments swaps only the
            unique-strength sides
        """
        cosine = self.similarity_calculator.cosine_similarity(mood_a.to_array(), mood_b.to_array())
        similarity = round_half_up(cosine * 100)
        threshold = self.config.strength_threshold

        dimensions = []
        shared, only_a, only_b = [], [], []
        for dim in MOOD_DIMENSIONS:
            a = getattr(mood_a, dim)
            b = getattr(mood_b, dim)
            dimensions.append(DimensionComparison(dimension=dim, value_a=a, value_b=b, difference=abs(a - b)))
            if a >= threshold and b >= threshold:
                shared.append(dim)
            elif a >= threshold:
                only_a.append(dim)
            elif b >= threshold:
                only_b.append(dim)

        return CompatibilityResult(
            similarity=similarity,
            dimensions=dimensions,
            shared_strengths=shared,
            unique_strengths={'a': only_a, 'b': only_b},
            verdict=verdict_for(similarity),
        )

    def get_compatibility(self, user_a: str, user_b: str) -> CompatibilityResult:
        """Compare the stored moods of two users; a user with no mood counts as neutral."""
        return self.compare(
            self.mood_service.get_stored_mood(user_a),
            self.mood_service.get_stored_mood(user_b),
        )
