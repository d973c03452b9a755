"""
Shift rule engine for MoodShift.

Maps a current mood to the target mood used by shift-mode recommendations.
"""
from typing import Optional
import logging

from ..config.settings import ShiftConfig
from ..data.schemas import MoodVector, ShiftRule
from ..persistence.stores import RuleStore


class ShiftRuleEngine:
    """Resolves shift targets from the active rule set."""

    def __init__(self, rule_store: RuleStore, config: Optional[ShiftConfig] = None):
        """Initialize the shift engine.

        Args:
            rule_store: Source of shift rules
            config: Shift settings, including the no-match policy
        """
        self.rule_store = rule_store
        self.config = config or ShiftConfig()
        self.logger = logging.getLogger(__name__)

    def match_rule(self, mood: MoodVector) -> Optional[ShiftRule]:
        """First active rule matching the mood, by descending priority then insertion order."""
        for rule in self.rule_store.active_rules():
            if rule.matches(mood):
                return rule
        return None

    def resolve_shift_target(self, mood: MoodVector) -> MoodVector:
        """Target mood for shift mode.

        Args:
            mood: Current (effective) mood

        Returns:
            The winning rule's target effects over a neutral baseline, or the
            no-match fallback when no rule applies
        """
        rule = self.match_rule(mood)
        if rule is not None:
            self.logger.debug(f"Shift rule '{rule.name}' matched (priority {rule.priority})")
            return rule.target_vector()

        self.logger.debug(f"No shift rule matched, applying '{self.config.no_match_policy}' policy")
        if self.config.no_match_policy == 'unshifted':
            return mood
        return MoodVector.neutral()
