"""
Pydantic schemas for MoodShift REST API.
"""
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..data.schemas import MoodVector


class MoodVectorModel(BaseModel):
    """Ten mood dimensions, each an integer 0-100."""
    adrenaline: int = Field(default=50, ge=0, le=100)
    melancholy: int = Field(default=50, ge=0, le=100)
    joy: int = Field(default=50, ge=0, le=100)
    tension: int = Field(default=50, ge=0, le=100)
    intellect: int = Field(default=50, ge=0, le=100)
    romance: int = Field(default=50, ge=0, le=100)
    wonder: int = Field(default=50, ge=0, le=100)
    nostalgia: int = Field(default=50, ge=0, le=100)
    darkness: int = Field(default=50, ge=0, le=100)
    inspiration: int = Field(default=50, ge=0, le=100)

    @classmethod
    def from_vector(cls, vector: MoodVector) -> "MoodVectorModel":
        return cls(**vector.to_dict())


class MoodResponse(BaseModel):
    """Historical mood with the effective mood after any active vibe."""
    user_id: str
    mood: MoodVectorModel = Field(description="Mood computed from rated history")
    effective_mood: MoodVectorModel = Field(description="Mood used for ranking")
    last_updated: Optional[datetime] = None
    has_active_vibe: bool = False
    vibe_template: Optional[str] = None
    vibe_expires_at: Optional[datetime] = None


class MoodUpdateRequest(BaseModel):
    trigger_label: Optional[str] = Field(default=None, max_length=200)


class TimelineEntry(BaseModel):
    day: str = Field(description="Calendar day, YYYY-MM-DD")
    mood: MoodVectorModel
    trigger_label: str = ""


class TimelineResponse(BaseModel):
    user_id: str
    days: int
    entries: List[TimelineEntry]


class VibeRequest(BaseModel):
    """Request body for setting a vibe."""
    template: str = Field(min_length=1, description="Vibe template name, case-insensitive")
    strength: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Blend strength (defaults to configured strength)"
    )
    duration_hours: Optional[float] = Field(
        default=None,
        gt=0.0,
        le=168.0,
        description="How long the vibe lasts (defaults to configured duration)"
    )


class VibeResponse(BaseModel):
    template: str
    strength: float
    expires_at: datetime
    effective_mood: MoodVectorModel


class InteractionRequest(BaseModel):
    """A logged activity; rated ones trigger a background mood recompute."""
    media_id: int = Field(ge=1)
    media_kind: Literal["movie", "tv"] = "movie"
    rating: Optional[int] = Field(default=None, ge=1, le=10)
    title: str = "Unknown"
    occurred_at: Optional[datetime] = None


class InteractionResponse(BaseModel):
    status: str = "accepted"
    recompute_scheduled: bool


class RecommendationItem(BaseModel):
    media_id: int
    media_kind: str
    title: str
    similarity: float = Field(description="Cosine similarity to the target mood")
    match_percent: int = Field(ge=0, le=100)
    mood_vector: MoodVectorModel


class RecommendationsResponse(BaseModel):
    """Response body for the recommendations endpoint."""
    mode: Literal["match", "shift"]
    items: List[RecommendationItem]
    target_mood: Optional[MoodVectorModel] = None
    generated_at: datetime
    expires_at: datetime
    from_cache: bool
    processing_time_ms: float = Field(ge=0.0)


class FeedbackRequest(BaseModel):
    media_id: int = Field(ge=1)
    media_kind: Literal["movie", "tv"] = "movie"
    action: Literal["like", "dislike"]


class FeedbackResponse(BaseModel):
    action: str
    mood: MoodVectorModel
    blacklisted: bool
    invalidated_entries: int


class DimensionComparisonModel(BaseModel):
    dimension: str
    value_a: int
    value_b: int
    difference: int


class CompatibilityResponse(BaseModel):
    user_a: str
    user_b: str
    similarity: int = Field(ge=0, le=100)
    verdict: str
    dimensions: List[DimensionComparisonModel]
    shared_strengths: List[str]
    unique_strengths: Dict[str, List[str]]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(description="API status")
    version: str = Field(description="API version")
    catalog_items: int = Field(description="Catalog items with mood vectors")
    active_rules: int = Field(description="Active shift rules")


class ErrorResponse(BaseModel):
    """Error response format."""
    error: str = Field(description="Error message")
    detail: Optional[str] = Field(default=None, description="Detailed error information")
