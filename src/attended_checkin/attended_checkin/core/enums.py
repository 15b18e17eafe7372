from __future__ import annotations

from enum import Enum


class Gender(str, Enum):
    """Gender as captured at the kiosk; UNKNOWN never passes admission validation."""

    UNKNOWN = "UNKNOWN"
    MALE = "MALE"
    FEMALE = "FEMALE"


class FamilyRole(str, Enum):
    """Role of a member inside a household group."""

    ADULT = "ADULT"
    CHILD = "CHILD"


class PersonKind(str, Enum):
    """Which roster partition a person belongs to."""

    MEMBER = "MEMBER"
    VISITOR = "VISITOR"


class Severity(str, Enum):
    WARNING = "WARNING"
    INFORMATION = "INFORMATION"


class AbilityGroup(str, Enum):
    """Option group of the combined ability/grade picker."""

    ABILITY = "Ability"
    GRADE = "Grade"


class ReferenceType(str, Enum):
    """Enumerations resolved through the reference data lookup."""

    CONNECTION_STATUS = "CONNECTION_STATUS"
    RECORD_STATUS = "RECORD_STATUS"
    RECORD_TYPE = "RECORD_TYPE"
    SUFFIX = "SUFFIX"
    ABILITY_LEVEL = "ABILITY_LEVEL"
    GRADE = "GRADE"
