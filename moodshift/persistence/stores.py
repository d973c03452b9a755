"""
In-memory stores for MoodShift.

Each store stands in for one external collaborator or persisted collection:
interaction history, exclusions, shift rules, per-user mood state, daily
snapshots and cached recommendation lists.
"""
import json
import os
import threading
from collections import defaultdict
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple
import logging

from ..data.interactions import interaction_from_record, merge_interactions
from ..data.schemas import (
    Interaction,
    MoodSnapshot,
    MoodVector,
    RecommendationCacheEntry,
    ShiftRule,
    UserMoodState,
    ValidationResult,
)
from ..data.validator import DataValidator


class InteractionSource:
    """Rating history per user, kept as the two raw streams it arrives in."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._activities: Dict[str, List[Interaction]] = defaultdict(list)
        self._watched: Dict[str, List[Interaction]] = defaultdict(list)
        self._lock = threading.Lock()

    def record_activity(self, user_id: str, interaction: Interaction) -> None:
        with self._lock:
            self._activities[user_id].append(interaction)

    def add_watched(self, user_id: str, interaction: Interaction) -> None:
        with self._lock:
            self._watched[user_id].append(interaction)

    def get_interactions(self, user_id: str) -> List[Interaction]:
        """Merged, deduplicated, rated history, most recent first."""
        with self._lock:
            activities = list(self._activities.get(user_id, []))
            watched = list(self._watched.get(user_id, []))
        return merge_interactions(activities, watched)

    def seen_media_ids(self, user_id: str) -> Set[int]:
        """Every media id the user has logged or watched, rated or not."""
        with self._lock:
            return {
                i.media_id
                for stream in (self._activities.get(user_id, []), self._watched.get(user_id, []))
                for i in stream
            }

    def load_file(self, path: str) -> int:
        """
        Load seed history from a JSON object of
        ``{user_id: {"activities": [...], "watched": [...]}}``.

        Returns:
            Number of records loaded

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the top level is not a JSON object
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Interactions file not found: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("Interactions file must contain a JSON object keyed by user id")

        loaded = 0
        for user_id, streams in data.items():
            if not isinstance(streams, dict):
                raise ValueError(f"Interactions for user {user_id!r} must be a JSON object")
            for record in streams.get('activities', []):
                self.record_activity(user_id, interaction_from_record(record))
                loaded += 1
            for record in streams.get('watched', []):
                self.add_watched(user_id, interaction_from_record(record))
                loaded += 1
        self.logger.info(f"Loaded {loaded} interaction records for {len(data)} users")
        return loaded


class ExclusionSource:
    """Blacklisted and already-watched media ids per user."""

    def __init__(self, interactions: InteractionSource):
        self.interactions = interactions
        self._blacklist: Dict[str, Set[int]] = defaultdict(set)
        self._lock = threading.Lock()

    def blacklist(self, user_id: str, media_id: int) -> None:
        with self._lock:
            self._blacklist[user_id].add(media_id)

    def blacklisted_ids(self, user_id: str) -> Set[int]:
        with self._lock:
            return set(self._blacklist.get(user_id, set()))

    def watched_ids(self, user_id: str) -> Set[int]:
        return self.interactions.seen_media_ids(user_id)


class RuleStore:
    """
    Shift rules keyed by unique name.

    Each rule receives an insertion sequence on first write; upserting an
    existing name keeps its sequence so tie-breaking stays stable.
    """

    def __init__(self, validator: Optional[DataValidator] = None):
        self.validator = validator or DataValidator()
        self.logger = logging.getLogger(__name__)
        self._rules: Dict[str, ShiftRule] = {}
        self._next_sequence = 0
        self._lock = threading.Lock()

    def upsert(self, record: Mapping[str, Any]) -> ValidationResult:
        """
        Validate and insert or replace a rule by name.

        Args:
            record: Rule mapping (name, priority, conditions, target_effects, ...)

        Returns:
            ValidationResult; the rule is stored only when it has no errors
        """
        result = self.validator.validate_shift_rule(record)
        if result.has_errors():
            self.logger.error(f"Rejected shift rule {record.get('name')!r}: {result.errors}")
            return result
        for warning in result.warnings:
            self.logger.warning(warning)

        rule = ShiftRule.from_dict(record)
        with self._lock:
            existing = self._rules.get(rule.name)
            if existing is not None:
                rule.sequence = existing.sequence
            else:
                rule.sequence = self._next_sequence
                self._next_sequence += 1
            self._rules[rule.name] = rule
        return result

    def seed(self, records: Iterable[Mapping[str, Any]]) -> Tuple[int, int]:
        """Upsert every record. Returns (stored, rejected) counts."""
        stored = rejected = 0
        for record in records:
            if self.upsert(record).has_errors():
                rejected += 1
            else:
                stored += 1
        self.logger.info(f"Shift rule seeding complete: {stored} stored, {rejected} rejected")
        return stored, rejected

    def load_file(self, path: str) -> Tuple[int, int]:
        """Seed rules from a JSON list file."""
        if not os.path.exists(path):
            raise FileNotFoundError(f"Rules file not found: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError("Rules file must contain a JSON list")
        return self.seed(data)

    def set_active(self, name: str, active: bool) -> None:
        with self._lock:
            if name not in self._rules:
                raise KeyError(f"Unknown shift rule: {name}")
            self._rules[name].is_active = active

    def all_rules(self) -> List[ShiftRule]:
        with self._lock:
            return sorted(self._rules.values(), key=lambda r: (-r.priority, r.sequence))

    def active_rules(self) -> List[ShiftRule]:
        return [rule for rule in self.all_rules() if rule.is_active]


class MoodStateStore:
    """One UserMoodState per user."""

    def __init__(self):
        self._states: Dict[str, UserMoodState] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[UserMoodState]:
        with self._lock:
            return self._states.get(user_id)

    def get_or_create(self, user_id: str) -> UserMoodState:
        with self._lock:
            state = self._states.get(user_id)
            if state is None:
                state = UserMoodState(user_id=user_id)
                self._states[user_id] = state
            return state

    def save(self, state: UserMoodState) -> None:
        with self._lock:
            self._states[state.user_id] = state


class SnapshotStore:
    """Daily mood snapshots, one per (user, day)."""

    def __init__(self):
        self._snapshots: Dict[Tuple[str, date], MoodSnapshot] = {}
        self._lock = threading.Lock()

    def upsert(self, user_id: str, day: date, mood: MoodVector,
               trigger_label: Optional[str] = None) -> MoodSnapshot:
        """Create today's snapshot or overwrite its mood; an existing label survives a None."""
        with self._lock:
            snapshot = self._snapshots.get((user_id, day))
            if snapshot is None:
                snapshot = MoodSnapshot(user_id=user_id, mood=mood, day=day, trigger_label=trigger_label)
                self._snapshots[(user_id, day)] = snapshot
            else:
                snapshot.mood = mood
                if trigger_label:
                    snapshot.trigger_label = trigger_label
            return snapshot

    def list_since(self, user_id: str, start_day: date) -> List[MoodSnapshot]:
        with self._lock:
            snapshots = [
                s for (uid, day), s in self._snapshots.items()
                if uid == user_id and day >= start_day
            ]
        return sorted(snapshots, key=lambda s: s.day)


class RecommendationCacheStore:
    """Cached ranked lists keyed by (user_id, mode), replaced wholesale."""

    def __init__(self):
        self._entries: Dict[Tuple[str, str], RecommendationCacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str, mode: str) -> Optional[RecommendationCacheEntry]:
        with self._lock:
            return self._entries.get((user_id, mode))

    def put(self, entry: RecommendationCacheEntry) -> None:
        with self._lock:
            self._entries[(entry.user_id, entry.mode)] = entry

    def invalidate(self, user_id: str, mode: Optional[str] = None) -> int:
        """Drop one mode's entry, or every entry of the user when mode is None."""
        with self._lock:
            keys = [k for k in self._entries if k[0] == user_id and (mode is None or k[1] == mode)]
            for key in keys:
                del self._entries[key]
        return len(keys)
