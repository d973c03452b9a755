"""
Fixed preset tables for MoodShift.

Vibe templates and the default shift rule set are read-only data built once
at import time.
"""
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from ..data.schemas import MoodVector


VIBE_TEMPLATES: Mapping[str, MoodVector] = MappingProxyType({
    'energetic': MoodVector(adrenaline=90, melancholy=10, joy=80, tension=60, intellect=40,
                            romance=30, wonder=70, nostalgia=20, darkness=20, inspiration=85),
    'sad': MoodVector(adrenaline=10, melancholy=95, joy=10, tension=30, intellect=50,
                      romance=40, wonder=20, nostalgia=70, darkness=60, inspiration=20),
    'romantic': MoodVector(adrenaline=20, melancholy=40, joy=70, tension=20, intellect=40,
                           romance=95, wonder=60, nostalgia=50, darkness=10, inspiration=60),
    'thrilling': MoodVector(adrenaline=85, melancholy=20, joy=40, tension=95, intellect=50,
                            romance=20, wonder=50, nostalgia=20, darkness=70, inspiration=40),
    'thoughtful': MoodVector(adrenaline=15, melancholy=50, joy=40, tension=30, intellect=95,
                             romance=30, wonder=60, nostalgia=40, darkness=40, inspiration=70),
    'cozy': MoodVector(adrenaline=10, melancholy=20, joy=85, tension=5, intellect=30,
                       romance=50, wonder=40, nostalgia=80, darkness=5, inspiration=60),
    'dark': MoodVector(adrenaline=50, melancholy=60, joy=10, tension=70, intellect=60,
                       romance=20, wonder=30, nostalgia=30, darkness=95, inspiration=20),
    'inspiring': MoodVector(adrenaline=60, melancholy=20, joy=75, tension=40, intellect=50,
                            romance=30, wonder=70, nostalgia=40, darkness=10, inspiration=95),
    'nostalgic': MoodVector(adrenaline=30, melancholy=50, joy=60, tension=20, intellect=40,
                            romance=50, wonder=40, nostalgia=95, darkness=20, inspiration=50),
    'adventurous': MoodVector(adrenaline=85, melancholy=10, joy=70, tension=50, intellect=40,
                              romance=30, wonder=90, nostalgia=30, darkness=30, inspiration=80),
})


def _frozen_rule(rule: Dict[str, Any]) -> Mapping[str, Any]:
    frozen = dict(rule)
    frozen['conditions'] = MappingProxyType({
        dim: MappingProxyType(dict(bounds)) for dim, bounds in rule['conditions'].items()
    })
    frozen['target_effects'] = MappingProxyType(dict(rule['target_effects']))
    return MappingProxyType(frozen)


# Calming and uplifting rules outrank the diversifying ones.
DEFAULT_SHIFT_RULES: Tuple[Mapping[str, Any], ...] = tuple(_frozen_rule(rule) for rule in [
    {
        'name': 'High Adrenaline Antidote',
        'description': 'Calms users with high adrenaline by recommending peaceful, joyful content',
        'priority': 10,
        'conditions': {'adrenaline': {'min': 50}},
        'target_effects': {'adrenaline': 10, 'tension': 10, 'joy': 85, 'nostalgia': 70},
        'is_active': True,
    },
    {
        'name': 'High Tension Antidote',
        'description': 'Relaxes users with high tension by recommending calm, nostalgic content',
        'priority': 10,
        'conditions': {'tension': {'min': 50}},
        'target_effects': {'adrenaline': 10, 'tension': 10, 'joy': 85, 'nostalgia': 70},
        'is_active': True,
    },
    {
        'name': 'Melancholy Lifter',
        'description': 'Uplifts users with high melancholy by recommending joyful, inspiring content',
        'priority': 9,
        'conditions': {'melancholy': {'min': 50}},
        'target_effects': {'melancholy': 10, 'darkness': 10, 'joy': 90, 'inspiration': 85, 'wonder': 80},
        'is_active': True,
    },
    {
        'name': 'Darkness Lifter',
        'description': 'Brightens users with high darkness by recommending uplifting content',
        'priority': 9,
        'conditions': {'darkness': {'min': 50}},
        'target_effects': {'melancholy': 10, 'darkness': 10, 'joy': 90, 'inspiration': 85, 'wonder': 80},
        'is_active': True,
    },
    {
        'name': 'Grounding High Joy',
        'description': 'Adds depth to users with high joy but low intellect',
        'priority': 8,
        'conditions': {'joy': {'min': 80}, 'intellect': {'max': 40}},
        'target_effects': {'joy': 40, 'intellect': 85, 'tension': 60},
        'is_active': True,
    },
    {
        'name': 'Romance Balancer',
        'description': 'Diversifies users heavily focused on romance',
        'priority': 7,
        'conditions': {'romance': {'min': 70}},
        'target_effects': {'romance': 40, 'adrenaline': 60, 'wonder': 70, 'inspiration': 65},
        'is_active': True,
    },
    {
        'name': 'Intellectual Breather',
        'description': 'Offers lighter fare to users who consume heavy intellectual content',
        'priority': 6,
        'conditions': {'intellect': {'min': 75}, 'joy': {'max': 30}},
        'target_effects': {'intellect': 40, 'joy': 80, 'wonder': 70, 'adrenaline': 50},
        'is_active': True,
    },
])
