from datetime import datetime, timedelta, timezone

import pytest

from moodshift.data.interactions import (
    interaction_from_record,
    merge_interactions,
    normalize_media_kind,
    parse_timestamp,
)
from moodshift.data.schemas import Interaction

from tests.conftest import NOW


def make(media_id, rating, days_ago, kind='movie'):
    return Interaction(media_id=media_id, media_kind=kind, occurred_at=NOW - timedelta(days=days_ago), rating=rating)


def test_newest_record_wins_across_streams():
    activities = [make(1, 9, days_ago=10)]
    watched = [make(1, 3, days_ago=2)]
    merged = merge_interactions(activities, watched)
    assert len(merged) == 1
    assert merged[0].rating == 3


def test_unrated_entries_are_dropped():
    merged = merge_interactions([make(1, None, 0), make(2, 0, 0)], [make(3, 7, 1)])
    assert [i.media_id for i in merged] == [3]


def test_unrated_newer_entry_does_not_shadow_rated_one():
    merged = merge_interactions([make(1, 8, days_ago=5)], [make(1, None, days_ago=1)])
    assert merged[0].rating == 8


def test_merged_history_is_newest_first():
    merged = merge_interactions([make(1, 7, 30), make(2, 8, 1)], [make(3, 9, 10)])
    assert [i.media_id for i in merged] == [2, 3, 1]


@pytest.mark.parametrize('raw,expected', [
    ('tv', 'tv'),
    ('tv_episode', 'tv'),
    ('movie', 'movie'),
    (None, 'movie'),
    ('documentary', 'movie'),
])
def test_normalize_media_kind(raw, expected):
    assert normalize_media_kind(raw) == expected


def test_parse_timestamp_accepts_zulu_and_naive():
    assert parse_timestamp('2025-06-15T12:00:00Z') == NOW
    assert parse_timestamp(datetime(2025, 6, 15, 12, 0)) == NOW
    assert parse_timestamp('2025-06-15T15:00:00+03:00') == NOW


def test_interaction_from_record_uses_fallback_timestamp():
    interaction = interaction_from_record({
        'media_id': '42',
        'media_kind': 'tv_episode',
        'watched_at': '2025-06-15T12:00:00Z',
        'rating': '8',
    })
    assert interaction.media_id == 42
    assert interaction.media_kind == 'tv'
    assert interaction.rating == 8
    assert interaction.occurred_at == NOW.astimezone(timezone.utc)
    assert interaction.title == 'Unknown'


def test_interaction_from_record_requires_timestamp():
    with pytest.raises(KeyError):
        interaction_from_record({'media_id': 1, 'rating': 5})
