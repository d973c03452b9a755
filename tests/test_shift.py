import pytest

from moodshift.config.presets import DEFAULT_SHIFT_RULES
from moodshift.config.settings import ShiftConfig
from moodshift.data.schemas import MoodVector
from moodshift.persistence.stores import RuleStore
from moodshift.shift.engine import ShiftRuleEngine

from tests.conftest import vector


def rule(name, priority, conditions, target, active=True):
    return {
        'name': name,
        'priority': priority,
        'conditions': conditions,
        'target_effects': target,
        'is_active': active,
    }


LOW = rule('low', 1, {'joy': {'min': 60}}, {'joy': 20})
HIGH = rule('high', 5, {'joy': {'min': 60}}, {'joy': 90})


@pytest.mark.parametrize('order', [[LOW, HIGH], [HIGH, LOW]])
def test_higher_priority_wins_regardless_of_insertion(order):
    store = RuleStore()
    store.seed(order)
    engine = ShiftRuleEngine(store)
    assert engine.match_rule(vector(joy=70)).name == 'high'
    assert engine.resolve_shift_target(vector(joy=70)) == vector(joy=90)


def test_equal_priority_keeps_insertion_order():
    store = RuleStore()
    store.seed([rule('first', 3, {'joy': {'min': 60}}, {'joy': 1}),
                rule('second', 3, {'joy': {'min': 60}}, {'joy': 2})])
    # Re-upserting keeps the original position.
    store.upsert(rule('first', 3, {'joy': {'min': 60}}, {'joy': 5}))
    assert ShiftRuleEngine(store).resolve_shift_target(vector(joy=70)) == vector(joy=5)


def test_inactive_rules_are_skipped():
    store = RuleStore()
    store.seed([rule('off', 9, {}, {'joy': 1}, active=False), LOW])
    assert ShiftRuleEngine(store).match_rule(vector(joy=70)).name == 'low'

    store.set_active('low', False)
    assert ShiftRuleEngine(store).match_rule(vector(joy=70)) is None


def test_no_match_policies():
    store = RuleStore()
    store.seed([LOW])
    mood = vector(joy=10, darkness=90)
    assert ShiftRuleEngine(store).resolve_shift_target(mood) == MoodVector.neutral()
    unshifted = ShiftRuleEngine(store, ShiftConfig(no_match_policy='unshifted'))
    assert unshifted.resolve_shift_target(mood) == mood


def test_default_rules_calm_high_adrenaline(services):
    target = services.shift.resolve_shift_target(vector(adrenaline=90, tension=20))
    assert target == vector(adrenaline=10, tension=10, joy=85, nostalgia=70)


def test_default_rules_lift_melancholy(services):
    mood = vector(adrenaline=20, tension=20, melancholy=85)
    assert services.shift.match_rule(mood).name == 'Melancholy Lifter'


def test_default_rule_set_is_seeded(services):
    names = [r.name for r in services.rules.all_rules()]
    assert len(names) == len(DEFAULT_SHIFT_RULES)
    assert names[0] == 'High Adrenaline Antidote'
    assert names[-1] == 'Intellectual Breather'


def test_invalid_rules_rejected_on_upsert():
    store = RuleStore()
    result = store.upsert(rule('bad', 1, {'happiness': {'min': 10}}, {'joy': 150}))
    assert result.has_errors()
    assert len(result.errors) == 2
    assert store.all_rules() == []


def test_seed_counts_stored_and_rejected():
    store = RuleStore()
    stored, rejected = store.seed([LOW, rule('inverted', 2, {'joy': {'min': 80, 'max': 20}}, {})])
    assert (stored, rejected) == (1, 1)


def test_set_active_unknown_rule():
    with pytest.raises(KeyError):
        RuleStore().set_active('missing', True)
