"""
Interaction history assembly for MoodShift.

A user's rating history arrives as two streams (logged activities and the
default watch list). They are merged here into one record per media id.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .schemas import Interaction


def normalize_media_kind(raw: Optional[str]) -> str:
    """Collapse the activity type vocabulary ('tv_episode', 'tv', 'movie_watched', ...) to tv or movie."""
    return 'tv' if raw and 'tv' in raw else 'movie'


def parse_timestamp(value: Any) -> datetime:
    """Accept datetimes or ISO-8601 strings; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def interaction_from_record(record: Mapping[str, Any]) -> Interaction:
    """Build an Interaction from a raw activity or watch-list record.

    Raises:
        KeyError: If media_id or every timestamp field is missing
    """
    timestamp = (
        record.get('occurred_at')
        or record.get('created_at')
        or record.get('watched_at')
        or record.get('added_at')
    )
    if timestamp is None:
        raise KeyError(f"Record for media {record.get('media_id')} has no timestamp")
    rating = record.get('rating')
    return Interaction(
        media_id=int(record['media_id']),
        media_kind=normalize_media_kind(record.get('media_kind')),
        occurred_at=parse_timestamp(timestamp),
        rating=int(rating) if rating is not None else None,
        title=record.get('title') or 'Unknown',
    )


def _is_rated(interaction: Interaction) -> bool:
    return interaction.rating is not None and interaction.rating >= 1


def merge_interactions(activities: Iterable[Interaction],
                       watched_items: Iterable[Interaction]) -> List[Interaction]:
    """Merge both streams into one record per media id, newest timestamp winning.

    Unrated entries are dropped before merging. The result is ordered most
    recent first, which is the order the mood pipeline consumes it in.
    """
    merged: Dict[int, Interaction] = {}
    for stream in (activities, watched_items):
        for interaction in stream:
            if not _is_rated(interaction):
                continue
            existing = merged.get(interaction.media_id)
            if existing is None or interaction.occurred_at > existing.occurred_at:
                merged[interaction.media_id] = interaction
    return sorted(merged.values(), key=lambda i: i.occurred_at, reverse=True)
