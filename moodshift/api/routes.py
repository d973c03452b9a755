"""
FastAPI routes for MoodShift REST API.
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from .schemas import (
    CompatibilityResponse,
    DimensionComparisonModel,
    ErrorResponse,
    FeedbackRequest,
    FeedbackResponse,
    HealthResponse,
    InteractionRequest,
    InteractionResponse,
    MoodResponse,
    MoodUpdateRequest,
    MoodVectorModel,
    RecommendationItem,
    RecommendationsResponse,
    TimelineEntry,
    TimelineResponse,
    VibeRequest,
    VibeResponse,
)
from .dependencies import get_current_user_id, get_services
from ..data.schemas import round_half_up
from ..errors import CatalogItemNotFound, UnknownVibeTemplate
from ..services import MoodShiftServices


router = APIRouter()


def _mood_response(services: MoodShiftServices, user_id: str) -> MoodResponse:
    state = services.states.get(user_id)
    effective = services.vibes.effective_mood(user_id)
    return MoodResponse(
        user_id=user_id,
        mood=MoodVectorModel.from_vector(state.current_mood),
        effective_mood=MoodVectorModel.from_vector(effective.mood),
        last_updated=state.last_updated,
        has_active_vibe=effective.has_active_vibe,
        vibe_template=effective.vibe_template,
        vibe_expires_at=effective.vibe_expires_at,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check endpoint"
)
async def health_check(services: MoodShiftServices = Depends(get_services)):
    """
    Check the health status of the API.

    Reports how many catalog vectors and active shift rules are loaded.
    """
    return HealthResponse(
        status="healthy",
        version=services.config.service.version,
        catalog_items=len(services.catalog),
        active_rules=len(services.rules.active_rules())
    )


@router.get(
    "/mood",
    response_model=MoodResponse,
    tags=["Mood"],
    summary="Current mood of the calling user"
)
async def get_mood(
    refresh: bool = Query(default=False, description="Recompute even if today's mood is stored"),
    user_id: str = Depends(get_current_user_id),
    services: MoodShiftServices = Depends(get_services)
):
    """
    Return the stored mood, recomputing it first when it predates today's
    local midnight or when `refresh` is set.
    """
    services.mood.compute_or_get_mood(user_id, force_refresh=refresh)
    return _mood_response(services, user_id)


@router.post(
    "/mood/update",
    response_model=MoodResponse,
    tags=["Mood"],
    summary="Recompute the calling user's mood now"
)
async def update_mood(
    request: Optional[MoodUpdateRequest] = None,
    user_id: str = Depends(get_current_user_id),
    services: MoodShiftServices = Depends(get_services)
):
    trigger_label = request.trigger_label if request else None
    services.mood.update_user_mood(user_id, trigger_label=trigger_label)
    return _mood_response(services, user_id)


@router.get(
    "/mood/timeline",
    response_model=TimelineResponse,
    tags=["Mood"],
    summary="Daily mood averages"
)
async def get_timeline(
    days: int = Query(default=30, ge=1, le=365),
    user_id: str = Depends(get_current_user_id),
    services: MoodShiftServices = Depends(get_services)
):
    points = services.mood.get_mood_timeline(user_id, days)
    return TimelineResponse(
        user_id=user_id,
        days=days,
        entries=[
            TimelineEntry(
                day=point.day,
                mood=MoodVectorModel.from_vector(point.mood),
                trigger_label=point.trigger_label
            )
            for point in points
        ]
    )


@router.post(
    "/vibe",
    response_model=VibeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Unknown vibe template"}
    },
    tags=["Vibe"],
    summary="Set a temporary vibe"
)
async def set_vibe(
    request: VibeRequest,
    user_id: str = Depends(get_current_user_id),
    services: MoodShiftServices = Depends(get_services)
):
    """
    Blend a vibe template over the historical mood until it expires.

    Available templates: energetic, sad, romantic, thrilling, thoughtful,
    cozy, dark, inspiring, nostalgic, adventurous.
    """
    try:
        override = services.vibes.set_vibe(
            user_id,
            request.template,
            strength=request.strength,
            duration_hours=request.duration_hours
        )
    except UnknownVibeTemplate as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    effective = services.vibes.effective_mood(user_id)
    return VibeResponse(
        template=override.template_name,
        strength=override.strength,
        expires_at=override.expires_at,
        effective_mood=MoodVectorModel.from_vector(effective.mood)
    )


@router.delete(
    "/vibe",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Vibe"],
    summary="Clear the active vibe"
)
async def clear_vibe(
    user_id: str = Depends(get_current_user_id),
    services: MoodShiftServices = Depends(get_services)
):
    services.vibes.clear_vibe(user_id)


@router.post(
    "/interactions",
    response_model=InteractionResponse,
    status_code=status.HTTP_202_ACCEPTED,
    tags=["Mood"],
    summary="Log a watched or rated title"
)
async def record_interaction(
    request: InteractionRequest,
    user_id: str = Depends(get_current_user_id),
    services: MoodShiftServices = Depends(get_services)
):
    """
    Record an activity. A rated activity schedules a mood recompute in the
    background; the response does not wait for it.
    """
    scheduled = services.record_interaction(
        user_id,
        request.media_id,
        request.media_kind,
        rating=request.rating,
        occurred_at=request.occurred_at,
        title=request.title
    )
    return InteractionResponse(recompute_scheduled=scheduled)


@router.get(
    "/recommendations",
    response_model=RecommendationsResponse,
    tags=["Recommendations"],
    summary="Titles ranked against the current or shifted mood"
)
async def get_recommendations(
    mode: Literal["match", "shift"] = Query(default="match"),
    limit: Optional[int] = Query(default=None, ge=1),
    include_watched: bool = Query(default=False),
    force_refresh: bool = Query(default=False),
    user_id: str = Depends(get_current_user_id),
    services: MoodShiftServices = Depends(get_services)
):
    """
    **Modes:**
    - **match**: titles closest to the effective mood (history plus vibe)
    - **shift**: titles closest to the target of the first matching shift rule

    Results are cached per user and mode until the TTL elapses or feedback
    is given; `force_refresh` bypasses the cache.
    """
    try:
        response = services.recommendations.get_recommendations(
            user_id,
            mode=mode,
            limit=limit,
            include_watched=include_watched,
            force_refresh=force_refresh
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return RecommendationsResponse(
        mode=response.mode,
        items=[
            RecommendationItem(
                media_id=item.media_id,
                media_kind=item.media_kind,
                title=item.title,
                similarity=item.similarity,
                match_percent=max(0, min(100, round_half_up(item.similarity * 100))),
                mood_vector=MoodVectorModel.from_vector(item.mood_vector)
            )
            for item in response.items
        ],
        target_mood=MoodVectorModel.from_vector(response.target_mood) if response.target_mood else None,
        generated_at=response.generated_at,
        expires_at=response.expires_at,
        from_cache=response.from_cache,
        processing_time_ms=response.processing_time_ms
    )


@router.post(
    "/recommendations/feedback",
    response_model=FeedbackResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Item has no mood vector"}
    },
    tags=["Recommendations"],
    summary="Like or dislike a recommended title"
)
async def recommendation_feedback(
    request: FeedbackRequest,
    user_id: str = Depends(get_current_user_id),
    services: MoodShiftServices = Depends(get_services)
):
    """
    A like nudges the mood toward the title. A dislike hides the title and
    nudges the mood away from it. Both clear cached recommendations.
    """
    try:
        result = services.feedback.process_feedback(
            user_id, request.media_id, request.media_kind, request.action
        )
    except CatalogItemNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return FeedbackResponse(
        action=result.action,
        mood=MoodVectorModel.from_vector(result.mood),
        blacklisted=result.blacklisted,
        invalidated_entries=result.invalidated_entries
    )


@router.get(
    "/compatibility/{other_user_id}",
    response_model=CompatibilityResponse,
    tags=["Compatibility"],
    summary="Compare moods with another user"
)
async def get_compatibility(
    other_user_id: str,
    user_id: str = Depends(get_current_user_id),
    services: MoodShiftServices = Depends(get_services)
):
    """Compare stored moods; nothing is recomputed or saved."""
    result = services.compatibility.get_compatibility(user_id, other_user_id)
    return CompatibilityResponse(
        user_a=user_id,
        user_b=other_user_id,
        similarity=result.similarity,
        verdict=result.verdict,
        dimensions=[
            DimensionComparisonModel(
                dimension=d.dimension,
                value_a=d.value_a,
                value_b=d.value_b,
                difference=d.difference
            )
            for d in result.dimensions
        ],
        shared_strengths=result.shared_strengths,
        unique_strengths=result.unique_strengths
    )
