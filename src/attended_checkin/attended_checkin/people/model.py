from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import age_on, today_local
from ..common.validators import is_blank
from ..core.constants import ADULT_AGE
from ..core.enums import AbilityGroup, FamilyRole, Gender


@dataclass
class Person:
    """Domain entity: a person record as known to the person/group store.

    Ability level, special-needs flag and allergy text are typed fields rather than
    free-form attributes.
    """

    person_id: int
    first_name: str
    last_name: str
    nick_name: Optional[str] = None
    suffix_value_id: Optional[int] = None
    birth_date: Optional[date] = None
    gender: Gender = Gender.UNKNOWN
    grade_offset: Optional[int] = None
    ability_level: Optional[str] = None
    is_special_needs: bool = False
    allergy: Optional[str] = None
    connection_status_value_id: Optional[int] = None
    record_status_value_id: Optional[int] = None
    record_type_value_id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.nick_name or self.first_name} {self.last_name}".strip()

    @property
    def full_name_reversed(self) -> str:
        return f"{self.last_name}, {self.nick_name or self.first_name}"

    def age(self, today: Optional[date] = None) -> Optional[int]:
        return age_on(self.birth_date, today or today_local())


@dataclass(frozen=True)
class HouseholdGroup:
    """Family-type group a person belongs to in the store."""

    group_id: int
    name: str
    campus_id: Optional[int] = None


@dataclass(frozen=True)
class GroupMember:
    group_id: int
    person_id: int
    role: FamilyRole


def family_role_for(person: Person, today: date) -> FamilyRole:
    """Adult at 18 and over; anyone younger or without a birth date is a child."""
    age = person.age(today)
    if age is not None and age >= ADULT_AGE:
        return FamilyRole.ADULT
    return FamilyRole.CHILD


@dataclass
class PendingPerson:
    """One row of the new-person form, not yet a real person."""

    first_name: str = ""
    last_name: str = ""
    suffix_value_id: Optional[int] = None
    birth_date: Optional[date] = None
    gender: Gender = Gender.UNKNOWN
    ability: str = ""
    ability_group: Optional[AbilityGroup] = None
    is_special_needs: bool = False

    def is_valid(self) -> bool:
        return not (
            is_blank(self.first_name)
            or is_blank(self.last_name)
            or self.birth_date is None
            or self.gender == Gender.UNKNOWN
        )

    def is_empty(self) -> bool:
        return (
            is_blank(self.first_name)
            and is_blank(self.last_name)
            and self.birth_date is None
            and self.gender == Gender.UNKNOWN
        )

    @property
    def has_ability(self) -> bool:
        return not is_blank(self.ability) and self.ability_group == AbilityGroup.ABILITY

    @property
    def has_grade(self) -> bool:
        return not is_blank(self.ability) and self.ability_group == AbilityGroup.GRADE
