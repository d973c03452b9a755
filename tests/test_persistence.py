import json
import threading
from datetime import date

import pytest

from moodshift.data.schemas import CatalogVector, MoodVector, RecommendationCacheEntry
from moodshift.persistence.catalog import CatalogStore
from moodshift.persistence.stores import InteractionSource, RecommendationCacheStore, SnapshotStore

from tests.conftest import NOW, vector


def record(media_id, kind='movie', **mood):
    full = MoodVector.from_dict(mood).to_dict()
    return {'media_id': media_id, 'media_kind': kind, 'title': f"Title {media_id}", 'mood_vector': full}


def test_catalog_load_records_skips_bad_and_vectorless():
    store = CatalogStore()
    result = store.load_records([
        record(1, joy=80),
        {'media_id': 2, 'media_kind': 'movie', 'mood_vector': None},
        {'media_id': 3, 'media_kind': 'radio', 'mood_vector': MoodVector().to_dict()},
        {'media_id': 4, 'media_kind': 'tv', 'mood_vector': {'joy': 120}},
    ])
    assert len(store) == 1
    assert result.metadata == {'loaded': 1, 'skipped': 3}
    assert result.has_errors()
    assert result.has_warnings()


def test_catalog_bulk_lookup_misses_are_absent():
    store = CatalogStore()
    store.load_records([record(1, joy=80), record(1, kind='tv', joy=10)])
    found = store.get_vectors([(1, 'movie'), (1, 'tv'), (9, 'movie')])
    assert set(found) == {(1, 'movie'), (1, 'tv')}
    assert found[(1, 'tv')].mood_vector == vector(joy=10)


def test_catalog_save_and_reload(tmp_path):
    path = tmp_path / "catalog" / "catalog.json"
    store = CatalogStore(str(path))
    store.load_records([record(1, joy=80), record(2, kind='tv', darkness=90)])
    store.save_atomic()

    assert [f.name for f in path.parent.iterdir()] == ['catalog.json']
    reloaded = CatalogStore(str(path))
    reloaded.load()
    assert reloaded.get_vector(2, 'tv').mood_vector == vector(darkness=90)


def test_catalog_load_requires_list(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({'media_id': 1}))
    with pytest.raises(ValueError):
        CatalogStore(str(path)).load()
    with pytest.raises(FileNotFoundError):
        CatalogStore(str(tmp_path / "missing.json")).load()


def test_interaction_file_merges_streams(tmp_path):
    path = tmp_path / "interactions.json"
    path.write_text(json.dumps({
        'alice': {
            'activities': [
                {'media_id': 1, 'media_kind': 'movie', 'rating': 9, 'created_at': '2025-06-10T10:00:00Z'},
                {'media_id': 2, 'media_kind': 'tv_episode', 'created_at': '2025-06-11T10:00:00Z'},
            ],
            'watched': [
                {'media_id': 1, 'media_kind': 'movie', 'rating': 4, 'watched_at': '2025-06-12T10:00:00Z'},
            ],
        }
    }))
    source = InteractionSource()
    assert source.load_file(str(path)) == 3
    history = source.get_interactions('alice')
    assert [(i.media_id, i.rating) for i in history] == [(1, 4)]
    assert source.seen_media_ids('alice') == {1, 2}


def test_snapshot_upsert_overwrites_mood():
    store = SnapshotStore()
    store.upsert('alice', date(2025, 6, 15), vector(joy=10), 'first')
    store.upsert('alice', date(2025, 6, 15), vector(joy=90))
    [snapshot] = store.list_since('alice', date(2025, 6, 1))
    assert snapshot.mood == vector(joy=90)
    assert snapshot.trigger_label == 'first'


def test_cache_invalidate_single_mode():
    cache = RecommendationCacheStore()
    for mode in ('match', 'shift'):
        cache.put(RecommendationCacheEntry('alice', mode, [], NOW, NOW))
    assert cache.invalidate('alice', 'shift') == 1
    assert cache.get('alice', 'match') is not None
    assert cache.invalidate('alice') == 1
    assert cache.invalidate('alice') == 0


def test_interaction_file_rejects_non_object_user_entry(tmp_path):
    path = tmp_path / "interactions.json"
    path.write_text(json.dumps({'alice': [{'media_id': 1, 'rating': 9}]}))
    with pytest.raises(ValueError, match="alice"):
        InteractionSource().load_file(str(path))


def test_catalog_reads_while_writing():
    store = CatalogStore()
    keys = [(i, 'movie') for i in range(500)]

    def writer():
        store.add_many(
            CatalogVector(media_id=media_id, media_kind=kind, mood_vector=vector(joy=media_id % 100))
            for media_id, kind in keys
        )

    thread = threading.Thread(target=writer)
    thread.start()
    while thread.is_alive():
        found = store.get_vectors(keys)
        assert len(found) in (0, len(keys))
    thread.join()
    assert len(store) == 500
    assert store.get_vector(499, 'movie').mood_vector == vector(joy=99)
