from datetime import date, datetime, timezone

from moodshift.data.schemas import MoodVector, UserMoodState

from tests.conftest import NOW, vector


def test_no_history_gives_neutral_and_persists(services):
    mood = services.mood.compute_or_get_mood('alice')
    assert mood == MoodVector.neutral()
    state = services.states.get('alice')
    assert state.last_updated == NOW
    assert len(services.snapshots.list_since('alice', date(2025, 1, 1))) == 1


def test_fresh_mood_is_served_without_recompute(services, rate):
    rate('alice', 2, 10)
    first = services.mood.compute_or_get_mood('alice')
    rate('alice', 3, 10)
    assert services.mood.compute_or_get_mood('alice') == first
    assert services.mood.compute_or_get_mood('alice', force_refresh=True) != first


def test_staleness_follows_local_midnight(services):
    just_before = datetime(2025, 6, 14, 20, 59, tzinfo=timezone.utc)
    just_after = datetime(2025, 6, 14, 21, 0, tzinfo=timezone.utc)
    assert services.mood.is_stale(UserMoodState('u', last_updated=just_before))
    assert not services.mood.is_stale(UserMoodState('u', last_updated=just_after))
    assert services.mood.is_stale(UserMoodState('u'))
    assert services.mood.is_stale(None)


def test_mood_recomputes_after_day_rollover(services, rate, clock):
    services.mood.compute_or_get_mood('alice')
    rate('alice', 6, 10)
    clock.advance(hours=10)
    assert services.mood.compute_or_get_mood('alice') != MoodVector.neutral()


def test_stored_mood_never_recomputes(services, rate):
    rate('alice', 1, 10)
    assert services.mood.get_stored_mood('alice') == MoodVector.neutral()
    assert services.states.get('alice') is None


def test_snapshot_is_one_per_local_day(services, clock):
    services.mood.update_user_mood('alice', trigger_label='Morning')
    clock.advance(hours=2)
    services.mood.update_user_mood('alice')
    snapshots = services.snapshots.list_since('alice', date(2025, 1, 1))
    assert len(snapshots) == 1
    assert snapshots[0].day == date(2025, 6, 15)
    assert snapshots[0].trigger_label == 'Morning'


def test_snapshot_day_uses_local_calendar(services, clock):
    clock.now = datetime(2025, 6, 15, 22, 30, tzinfo=timezone.utc)
    services.mood.update_user_mood('alice')
    snapshot = services.snapshots.list_since('alice', date(2025, 1, 1))[0]
    assert snapshot.day == date(2025, 6, 16)


def test_set_user_mood_keeps_vibe(services):
    services.vibes.set_vibe('alice', 'cozy')
    services.mood.set_user_mood('alice', vector(joy=80), trigger_label='Feedback Adjustment')
    state = services.states.get('alice')
    assert state.current_mood == vector(joy=80)
    assert state.temporary_vibe is not None


def test_timeline_is_ascending_and_windowed(services):
    snapshots = services.snapshots
    snapshots.upsert('alice', date(2025, 6, 14), vector(joy=70), 'Feedback Adjustment')
    snapshots.upsert('alice', date(2025, 6, 1), vector(joy=30))
    snapshots.upsert('alice', date(2025, 4, 1), vector(joy=10))
    snapshots.upsert('bob', date(2025, 6, 10), vector(joy=90))

    timeline = services.mood.get_mood_timeline('alice', days=30)
    assert [point.day for point in timeline] == ['2025-06-01', '2025-06-14']
    assert timeline[0].trigger_label == ''
    assert timeline[1].trigger_label == 'Feedback Adjustment'
    assert timeline[1].mood == vector(joy=70)


def test_recompute_quietly_swallows_failures(services, monkeypatch):
    def boom(user_id):
        raise RuntimeError("interaction source unavailable")

    monkeypatch.setattr(services.interactions, 'get_interactions', boom)
    assert services.mood.recompute_quietly('alice') is None
    assert services.states.get('alice') is None


def test_background_recompute_after_rating(services):
    assert services.record_interaction('alice', 6, 'movie', rating=10)
    assert services.recomputer.wait_idle(timeout=5)
    assert services.mood.get_stored_mood('alice') != MoodVector.neutral()


def test_unrated_interaction_schedules_nothing(services):
    assert not services.record_interaction('alice', 6, 'movie')
    assert services.states.get('alice') is None


def test_naive_interaction_time_is_taken_as_utc(services):
    services.record_interaction('alice', 3, 'movie', rating=10, occurred_at=datetime(2025, 6, 14, 10, 0))
    assert services.recomputer.wait_idle(timeout=5)
    [interaction] = services.interactions.get_interactions('alice')
    assert interaction.occurred_at == datetime(2025, 6, 14, 10, 0, tzinfo=timezone.utc)
    assert services.mood.compute_or_get_mood('alice').melancholy > 50
