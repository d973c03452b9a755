from datetime import timedelta

import numpy as np
import pytest

from moodshift.config.presets import VIBE_TEMPLATES
from moodshift.data.schemas import CatalogVector
from moodshift.recommendation.similarity import SimilarityCalculator

from tests.conftest import NOW, uniform, vector


def ids(response):
    return [item.media_id for item in response.items]


def test_match_mode_ranks_by_similarity(services, rate):
    rate('alice', 1, 10)
    response = services.recommendations.get_recommendations('alice', include_watched=True)
    similarities = [item.similarity for item in response.items]
    assert similarities == sorted(similarities, reverse=True)
    assert ids(response)[0] == 1
    assert not response.from_cache
    assert response.generated_at == NOW
    assert response.expires_at == NOW + timedelta(hours=168)


def test_watched_items_excluded_unless_requested(services, rate):
    rate('alice', 1, 10)
    assert 1 not in ids(services.recommendations.get_recommendations('alice'))
    assert 1 in ids(services.recommendations.get_recommendations('alice', include_watched=True, force_refresh=True))


def test_blacklist_always_excluded(services):
    services.exclusions.blacklist('alice', 2)
    response = services.recommendations.get_recommendations('alice', include_watched=True)
    assert 2 not in ids(response)


def test_cached_lists_are_identical_within_ttl(services):
    first = services.recommendations.get_recommendations('alice', limit=3)
    services.catalog.add(CatalogVector(media_id=50, media_kind='movie', mood_vector=first.target_mood))
    second = services.recommendations.get_recommendations('alice', limit=3)
    assert second.from_cache
    assert ids(second) == ids(first)
    assert second.generated_at == first.generated_at

    refreshed = services.recommendations.get_recommendations('alice', limit=3, force_refresh=True)
    assert not refreshed.from_cache
    assert ids(refreshed)[0] == 50


def test_cache_expires_after_ttl(services, clock):
    services.recommendations.get_recommendations('alice')
    clock.advance(hours=167)
    assert services.recommendations.get_recommendations('alice').from_cache
    clock.advance(hours=1)
    assert not services.recommendations.get_recommendations('alice').from_cache


def test_cache_is_per_mode(services):
    services.recommendations.get_recommendations('alice', mode='match')
    assert not services.recommendations.get_recommendations('alice', mode='shift').from_cache


def test_larger_limit_than_cached_depth_recomputes(services):
    services.recommendations.config.cache_depth = 2
    services.recommendations.get_recommendations('alice', limit=2)
    assert services.recommendations.get_recommendations('alice', limit=1).from_cache
    response = services.recommendations.get_recommendations('alice', limit=3)
    assert not response.from_cache
    assert len(response.items) == 3


def test_whole_pool_cached_serves_any_limit(services):
    services.recommendations.get_recommendations('alice', limit=2)
    response = services.recommendations.get_recommendations('alice', limit=20)
    assert response.from_cache
    assert len(response.items) == len(services.catalog)


def test_shift_mode_uses_rule_target(services):
    # A neutral mood trips the adrenaline rule (min 50), which aims for calm, joyful content.
    response = services.recommendations.get_recommendations('alice', mode='shift')
    assert response.target_mood == vector(adrenaline=10, tension=10, joy=85, nostalgia=70)
    assert ids(response)[0] == 2


def test_vibe_shapes_match_target(services):
    services.vibes.set_vibe('alice', 'thrilling', strength=1.0)
    response = services.recommendations.get_recommendations('alice')
    assert response.target_mood == VIBE_TEMPLATES['thrilling']
    assert ids(response)[0] == 1


def test_ties_broken_by_kind_then_id(services):
    twin = vector(wonder=100, intellect=100, romance=0)
    services.catalog.add_many([
        CatalogVector(media_id=30, media_kind='tv', mood_vector=twin),
        CatalogVector(media_id=31, media_kind='movie', mood_vector=twin),
        CatalogVector(media_id=29, media_kind='tv', mood_vector=twin),
    ])
    ranked = services.recommendations.rank_by_similarity(twin, services.catalog.candidates())
    assert [(s.media_kind, s.media_id) for s in ranked[:3]] == [('movie', 31), ('tv', 29), ('tv', 30)]


def test_candidate_media_kind_filter(services):
    services.catalog.add(CatalogVector(media_id=70, media_kind='tv', mood_vector=uniform(60)))
    services.recommendations.config.candidate_media_kind = 'tv'
    assert ids(services.recommendations.get_recommendations('alice')) == [70]


def test_zero_vector_item_scores_zero(services):
    services.catalog.add(CatalogVector(media_id=80, media_kind='movie', mood_vector=uniform(0)))
    response = services.recommendations.get_recommendations('alice', limit=50)
    assert response.items[-1].media_id == 80
    assert response.items[-1].similarity == 0.0


def test_empty_catalog_returns_empty_list(services):
    services.exclusions.blacklist('alice', 1)
    for media_id in range(2, 7):
        services.exclusions.blacklist('alice', media_id)
    assert services.recommendations.get_recommendations('alice').items == []


@pytest.mark.parametrize('kwargs', [{'mode': 'chaos'}, {'limit': 0}, {'limit': 51}])
def test_invalid_requests(services, kwargs):
    with pytest.raises(ValueError):
        services.recommendations.get_recommendations('alice', **kwargs)


def test_batch_similarity_zero_guards():
    calc = SimilarityCalculator()
    scores = calc.compute_batch_similarity(np.ones(3), np.array([[0, 0, 0], [2, 2, 2], [1, 0, 0]], dtype=float))
    assert scores[0] == 0.0
    assert scores[1] == pytest.approx(1.0)
    assert calc.compute_batch_similarity(np.zeros(3), np.ones((2, 3))).tolist() == [0.0, 0.0]
    assert calc.cosine_similarity(np.zeros(3), np.zeros(3)) == 0.0


def test_batch_similarity_shape_errors():
    with pytest.raises(ValueError):
        SimilarityCalculator().compute_batch_similarity(np.ones(3), np.ones((2, 4)))
