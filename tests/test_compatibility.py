import pytest

from moodshift.compatibility.engine import verdict_for
from moodshift.data.schemas import MoodVector

from tests.conftest import uniform, vector


@pytest.fixture()
def engine(services):
    return services.compatibility


def test_identical_moods_are_soulmates(engine):
    result = engine.compare(vector(joy=80), vector(joy=80))
    assert result.similarity == 100
    assert result.verdict == "Cinematic Soulmates"
    assert all(d.difference == 0 for d in result.dimensions)


def test_comparison_is_symmetric(engine):
    a = vector(adrenaline=90, joy=20, romance=70)
    b = vector(adrenaline=30, melancholy=80, romance=75)
    ab = engine.compare(a, b)
    ba = engine.compare(b, a)
    assert ab.similarity == ba.similarity
    assert ab.shared_strengths == ba.shared_strengths == ['romance']
    assert ab.unique_strengths == {'a': ['adrenaline'], 'b': ['melancholy']}
    assert ba.unique_strengths == {'a': ['melancholy'], 'b': ['adrenaline']}
    assert [d.difference for d in ab.dimensions] == [d.difference for d in ba.dimensions]


def test_strength_threshold_is_inclusive(engine):
    result = engine.compare(vector(joy=65), vector(joy=64))
    assert result.unique_strengths['a'] == ['joy']
    assert result.shared_strengths == []


def test_zero_vector_scores_zero(engine):
    result = engine.compare(uniform(0), MoodVector.neutral())
    assert result.similarity == 0
    assert result.verdict == "Polar Opposites"


@pytest.mark.parametrize('similarity,verdict', [
    (100, "Cinematic Soulmates"),
    (90, "Cinematic Soulmates"),
    (89, "Great Taste"),
    (70, "Great Taste"),
    (50, "Compatible"),
    (30, "Different Perspectives"),
    (29, "Polar Opposites"),
])
def test_verdicts(similarity, verdict):
    assert verdict_for(similarity) == verdict


def test_uses_stored_moods_without_recompute(services, rate):
    rate('alice', 1, 10)
    services.mood.set_user_mood('bob', vector(darkness=90))
    result = services.compatibility.get_compatibility('alice', 'bob')
    assert [d.value_a for d in result.dimensions] == [50] * 10
    assert services.states.get('alice') is None
