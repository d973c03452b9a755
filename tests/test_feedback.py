import pytest

from moodshift.data.schemas import MoodVector
from moodshift.errors import CatalogItemNotFound
from moodshift.recommendation.feedback import FEEDBACK_TRIGGER_LABEL



def test_like_blends_mood_toward_item(services):
    result = services.feedback.process_feedback('alice', 2, 'movie', 'like')
    # neutral * 0.7 + item * 0.3
    assert result.mood.adrenaline == 38
    assert result.mood.joy == 61
    assert result.mood.melancholy == 50
    assert not result.blacklisted
    assert services.mood.get_stored_mood('alice') == result.mood


def test_dislike_blacklists_and_pushes_away(services):
    result = services.feedback.process_feedback('alice', 1, 'movie', 'dislike')
    # 50 - (value - 50) * 0.15
    assert result.mood.adrenaline == 43
    assert result.mood.joy == 53
    assert result.blacklisted
    assert 1 in services.exclusions.blacklisted_ids('alice')
    response = services.recommendations.get_recommendations('alice', include_watched=True)
    assert 1 not in [item.media_id for item in response.items]


def test_feedback_invalidates_every_cached_mode(services):
    services.recommendations.get_recommendations('alice', mode='match')
    services.recommendations.get_recommendations('alice', mode='shift')
    services.recommendations.get_recommendations('bob', mode='match')

    result = services.feedback.process_feedback('alice', 4, 'movie', 'like')
    assert result.invalidated_entries == 2
    assert services.cache.get('alice', 'match') is None
    assert services.cache.get('bob', 'match') is not None
    assert not services.recommendations.get_recommendations('alice').from_cache


def test_feedback_records_labelled_snapshot(services):
    services.feedback.process_feedback('alice', 5, 'movie', 'like')
    timeline = services.mood.get_mood_timeline('alice')
    assert timeline[-1].trigger_label == FEEDBACK_TRIGGER_LABEL


def test_unknown_item_raises(services):
    with pytest.raises(CatalogItemNotFound):
        services.feedback.process_feedback('alice', 999, 'movie', 'like')
    with pytest.raises(CatalogItemNotFound):
        services.feedback.process_feedback('alice', 1, 'tv', 'like')


def test_unknown_action_rejected(services):
    with pytest.raises(ValueError):
        services.feedback.process_feedback('alice', 1, 'movie', 'meh')
    assert services.mood.get_stored_mood('alice') == MoodVector.neutral()
