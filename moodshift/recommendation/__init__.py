"""
Recommendation module for MoodShift.

This module provides mood-based media recommendation functionality,
including similarity calculation, exclusion filtering, ranking, caching
and feedback.
"""

from .engine import RecommendationEngine
from .feedback import FeedbackService
from .similarity import SimilarityCalculator
from .schemas import RecommendationRequest, RecommendationResponse, FeedbackResult

__all__ = [
    'RecommendationEngine',
    'FeedbackService',
    'SimilarityCalculator',
    'RecommendationRequest',
    'RecommendationResponse',
    'FeedbackResult'
]
