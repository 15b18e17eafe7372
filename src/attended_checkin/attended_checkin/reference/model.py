from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AbilityGroup, ReferenceType


@dataclass(frozen=True)
class ReferenceValue:
    """One value of an enumeration such as connection status or person suffix."""

    value_id: int
    reference_type: ReferenceType
    key: str
    value: str
    order: int = 0


@dataclass(frozen=True)
class AbilityGradeOption:
    """Entry of the combined ability/grade picker."""

    value: str
    label: str
    group: AbilityGroup
