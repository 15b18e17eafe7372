from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from typing import Iterator, Optional, Sequence

from src.attended_checkin.attended_checkin.checkin.model import (
    CheckInFamily,
    CheckInGroup,
    CheckInGroupType,
    CheckInLocation,
    CheckInPerson,
    CheckInSchedule,
)
from src.attended_checkin.attended_checkin.core.enums import Gender, ReferenceType
from src.attended_checkin.attended_checkin.core.exceptions import StoreError
from src.attended_checkin.attended_checkin.people.model import GroupMember, HouseholdGroup, Person
from src.attended_checkin.attended_checkin.reference.model import ReferenceValue


class InMemoryPeople:
    """Person store fake; ``unit_of_work`` restores a snapshot when the block raises."""

    def __init__(self, people: Sequence[Person] = ()):
        self.people: dict[int, Person] = {p.person_id: p for p in people}
        self.groups: dict[int, HouseholdGroup] = {}
        self.memberships: dict[int, GroupMember] = {}
        self.relationships: set[tuple[int, int]] = set()
        self._next_group_id = 100
        self.fail_on: Optional[str] = None

    def _maybe_fail(self, op: str) -> None:
        if self.fail_on == op:
            raise StoreError(f"{op} failed")

    @contextmanager
    def unit_of_work(self) -> Iterator[None]:
        snapshot = copy.deepcopy((self.people, self.groups, self.memberships, self.relationships))
        try:
            yield
        except Exception:
            self.people, self.groups, self.memberships, self.relationships = snapshot
            raise

    def get_person(self, person_id: int) -> Optional[Person]:
        return self.people.get(int(person_id))

    def create_person(self, person: Person) -> Person:
        self._maybe_fail("create_person")
        created = replace(person, person_id=max(self.people, default=0) + 1)
        self.people[created.person_id] = created
        return created

    def update_person(self, person: Person) -> bool:
        self._maybe_fail("update_person")
        if person.person_id not in self.people:
            return False
        self.people[person.person_id] = person
        return True

    def create_household_group(self, *, name: str, campus_id: Optional[int] = None) -> HouseholdGroup:
        self._maybe_fail("create_household_group")
        group = HouseholdGroup(group_id=self._next_group_id, name=name, campus_id=campus_id)
        self._next_group_id += 1
        self.groups[group.group_id] = group
        return group

    def add_group_members(self, group: HouseholdGroup, members: Sequence[GroupMember]) -> None:
        self._maybe_fail("add_group_members")
        for m in members:
            self.memberships[m.person_id] = m

    def get_household_membership(self, person_id: int) -> Optional[GroupMember]:
        return self.memberships.get(int(person_id))

    def move_household_member(self, *, person_id: int, group_id: int) -> bool:
        current = self.memberships.get(int(person_id))
        if current is None:
            return False
        self.memberships[int(person_id)] = replace(current, group_id=int(group_id))
        return True

    def create_checkin_relationship(self, *, adult_id: int, visitor_id: int) -> None:
        self._maybe_fail("create_checkin_relationship")
        self.relationships.add((int(adult_id), int(visitor_id)))

    def members_of(self, group_id: int) -> list[GroupMember]:
        return [m for m in self.memberships.values() if m.group_id == group_id]


class InMemoryNotes:
    def __init__(self):
        self.notes: dict[int, str] = {}

    def get_checkin_note(self, person_id: int) -> Optional[str]:
        return self.notes.get(int(person_id))

    def save_checkin_note(self, person_id: int, text: str) -> None:
        self.notes[int(person_id)] = text


class InMemoryReference:
    def __init__(self, values: Sequence[ReferenceValue] = ()):
        self.values = list(values)
        self.lookups = 0

    def get(self, reference_type: ReferenceType, key: str) -> Optional[ReferenceValue]:
        self.lookups += 1
        return next((v for v in self.values if v.reference_type == reference_type and v.key == key), None)

    def list_values(self, reference_type: ReferenceType) -> Sequence[ReferenceValue]:
        return [v for v in self.values if v.reference_type == reference_type]


def default_reference_values() -> list[ReferenceValue]:
    return [
        ReferenceValue(1, ReferenceType.RECORD_STATUS, "Active", "Active"),
        ReferenceValue(2, ReferenceType.RECORD_TYPE, "Person", "Person"),
        ReferenceValue(3, ReferenceType.CONNECTION_STATUS, "visitor", "Visitor"),
        ReferenceValue(10, ReferenceType.ABILITY_LEVEL, "crawler", "Crawler", order=2),
        ReferenceValue(11, ReferenceType.ABILITY_LEVEL, "infant", "Infant", order=1),
        ReferenceValue(20, ReferenceType.GRADE, "3", "3rd Grade"),
    ]


# ---- builders ----

def make_person(
    person_id: int,
    first_name: str,
    last_name: str = "Smith",
    *,
    birth_date: Optional[date] = None,
    gender: Gender = Gender.MALE,
) -> Person:
    return Person(
        person_id=person_id,
        first_name=first_name,
        last_name=last_name,
        birth_date=birth_date or date(1990, 1, 1),
        gender=gender,
    )


def option_tree(last: Optional[datetime] = None) -> list[CheckInGroupType]:
    """Two group types; location 31 under group 21 under group type 11 was attended at ``last``."""
    return [
        CheckInGroupType(
            group_type_id=11,
            name="Children",
            groups=[
                CheckInGroup(
                    group_id=21,
                    name="Preschool",
                    locations=[
                        CheckInLocation(location_id=30, name="Room A", schedules=[CheckInSchedule(40, "9am")]),
                        CheckInLocation(
                            location_id=31,
                            name="Room B",
                            last_check_in=last,
                            schedules=[CheckInSchedule(41, "9am"), CheckInSchedule(42, "11am")],
                        ),
                    ],
                    last_check_in=last,
                ),
            ],
            last_check_in=last,
        ),
        CheckInGroupType(group_type_id=12, name="Adults", groups=[CheckInGroup(group_id=22, name="Class")]),
    ]


def checkin_person(
    person_id: int,
    first_name: str,
    last_name: str = "Smith",
    *,
    family_member: bool = True,
    selected: bool = False,
    first_time: bool = False,
    excluded: bool = False,
    last_check_in: Optional[datetime] = None,
    birth_date: Optional[date] = None,
    tree: Optional[list[CheckInGroupType]] = None,
) -> CheckInPerson:
    return CheckInPerson(
        person=make_person(person_id, first_name, last_name, birth_date=birth_date),
        family_member=family_member,
        selected=selected,
        first_time=first_time,
        excluded_by_filter=excluded,
        last_check_in=last_check_in,
        group_types=tree if tree is not None else [],
    )


def family(
    group_id: int,
    caption: str,
    people: Sequence[CheckInPerson] = (),
    *,
    campus_id: Optional[int] = None,
    selected: bool = False,
) -> CheckInFamily:
    fam = CheckInFamily(
        group=HouseholdGroup(group_id=group_id, name=caption, campus_id=campus_id),
        caption=caption,
        selected=selected,
        people=list(people),
    )
    fam.refresh_sub_caption()
    return fam
