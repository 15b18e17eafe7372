from __future__ import annotations

from typing import Optional

from ..core.enums import AbilityGroup, ReferenceType
from .model import AbilityGradeOption, ReferenceValue
from .repository import ReferenceDataLookup


class ReferenceDataService:
    """Caches reference data for the life of the process; values are treated as read-only."""

    def __init__(self, lookup: ReferenceDataLookup):
        self._lookup = lookup
        self._values: dict[tuple[ReferenceType, str], Optional[ReferenceValue]] = {}
        self._lists: dict[ReferenceType, tuple[ReferenceValue, ...]] = {}

    def get(self, reference_type: ReferenceType, key: Optional[str]) -> Optional[ReferenceValue]:
        if not key:
            return None
        cache_key = (reference_type, key)
        if cache_key not in self._values:
            self._values[cache_key] = self._lookup.get(reference_type, key)
        return self._values[cache_key]

    def value_id(self, reference_type: ReferenceType, key: Optional[str]) -> Optional[int]:
        value = self.get(reference_type, key)
        return value.value_id if value else None

    def list_values(self, reference_type: ReferenceType) -> tuple[ReferenceValue, ...]:
        if reference_type not in self._lists:
            values = sorted(self._lookup.list_values(reference_type), key=lambda v: (v.order, v.value))
            self._lists[reference_type] = tuple(values)
        return self._lists[reference_type]

    def ability_grade_options(self) -> list[AbilityGradeOption]:
        """Ability levels first, then grades; grade values are grade offsets."""
        options = [
            AbilityGradeOption(value=v.key, label=v.value, group=AbilityGroup.ABILITY)
            for v in self.list_values(ReferenceType.ABILITY_LEVEL)
        ]
        options.extend(
            AbilityGradeOption(value=v.key, label=v.value, group=AbilityGroup.GRADE)
            for v in self.list_values(ReferenceType.GRADE)
        )
        return options
