"""
Data validation module for the MoodShift system.
"""
from typing import Any, Dict, Iterable, List, Mapping
from .schemas import ValidationResult, MOOD_DIMENSIONS, MIN_VALUE, MAX_VALUE


class DataValidator:
    """Validates shift rule records and catalog mood vectors before they are loaded."""

    REQUIRED_RULE_FIELDS = {'name', 'priority', 'conditions', 'target_effects'}
    REQUIRED_CATALOG_FIELDS = {'media_id', 'media_kind'}
    MEDIA_KINDS = {'movie', 'tv'}

    def _check_mood_value(self, result: ValidationResult, label: str, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            result.add_error(f"{label} must be numeric, got {type(value).__name__}")
        elif not (MIN_VALUE <= value <= MAX_VALUE):
            result.add_error(f"{label} outside range [{MIN_VALUE}, {MAX_VALUE}]: {value}")

    def _check_dimension(self, result: ValidationResult, label: str, dim: str) -> bool:
        if dim not in MOOD_DIMENSIONS:
            result.add_error(f"{label} references unknown dimension '{dim}'")
            return False
        return True

    def validate_shift_rule(self, rule: Mapping[str, Any]) -> ValidationResult:
        """Validate a single shift rule record.

        Args:
            rule: Rule mapping as stored (name, priority, conditions, target_effects, ...)

        Returns:
            ValidationResult with rule validation results
        """
        result = ValidationResult(is_valid=True, errors=[], warnings=[])
        missing = self.REQUIRED_RULE_FIELDS - set(rule)
        if missing:
            result.add_error(f"Rule missing required fields: {sorted(missing)}")
            return result

        name = rule['name']
        if not isinstance(name, str) or not name.strip():
            result.add_error("Rule name must be a non-empty string")
            name = '<unnamed>'
        if isinstance(rule['priority'], bool) or not isinstance(rule['priority'], int):
            result.add_error(f"Rule '{name}' priority must be an integer")

        conditions = rule['conditions'] or {}
        if not conditions:
            result.add_warning(f"Rule '{name}' has no conditions and matches every mood")
        for dim, bounds in conditions.items():
            label = f"Rule '{name}' condition {dim}"
            if not self._check_dimension(result, label, dim):
                continue
            if not bounds or ('min' not in bounds and 'max' not in bounds):
                result.add_error(f"{label} needs at least one of min/max")
                continue
            for side in ('min', 'max'):
                if bounds.get(side) is not None:
                    self._check_mood_value(result, f"{label}.{side}", bounds[side])
            low, high = bounds.get('min'), bounds.get('max')
            if (isinstance(low, (int, float)) and isinstance(high, (int, float))
                    and low > high):
                result.add_error(f"{label} has min greater than max")

        effects = rule['target_effects'] or {}
        if not effects:
            result.add_warning(f"Rule '{name}' has no target effects and shifts to neutral")
        for dim, value in effects.items():
            label = f"Rule '{name}' target {dim}"
            if self._check_dimension(result, label, dim):
                self._check_mood_value(result, label, value)

        return result

    def validate_shift_rules(self, rules: Iterable[Mapping[str, Any]]) -> ValidationResult:
        """Validate a rule set, including name uniqueness."""
        result = ValidationResult(is_valid=True, errors=[], warnings=[])
        seen: Dict[str, int] = {}
        count = 0
        for rule in rules:
            count += 1
            single = self.validate_shift_rule(rule)
            for error in single.errors:
                result.add_error(error)
            for warning in single.warnings:
                result.add_warning(warning)
            name = rule.get('name')
            if name in seen:
                result.add_error(f"Duplicate rule name '{name}'")
            seen[name] = seen.get(name, 0) + 1
        result.metadata = {'total_rules': count, 'unique_names': len(seen)}
        return result

    def validate_catalog_record(self, record: Mapping[str, Any]) -> ValidationResult:
        """Validate one catalog record; a missing mood vector is only a warning.

        Args:
            record: Mapping with media_id, media_kind and an optional mood_vector

        Returns:
            ValidationResult with record validation results
        """
        result = ValidationResult(is_valid=True, errors=[], warnings=[])
        missing = self.REQUIRED_CATALOG_FIELDS - set(record)
        if missing:
            result.add_error(f"Catalog record missing required fields: {sorted(missing)}")
            return result

        media_id = record['media_id']
        if isinstance(media_id, bool) or not isinstance(media_id, int):
            result.add_error(f"media_id must be an integer, got {media_id!r}")
        if record['media_kind'] not in self.MEDIA_KINDS:
            result.add_error(f"media_kind must be one of {sorted(self.MEDIA_KINDS)}")

        vector = record.get('mood_vector')
        if vector is None:
            result.add_warning(f"Catalog item {media_id} has no mood vector")
            return result
        missing_dims: List[str] = [d for d in MOOD_DIMENSIONS if d not in vector]
        if missing_dims:
            result.add_error(f"Catalog item {media_id} mood vector missing {missing_dims}")
        for dim, value in vector.items():
            label = f"Catalog item {media_id} {dim}"
            if self._check_dimension(result, label, dim):
                self._check_mood_value(result, label, value)
        return result
