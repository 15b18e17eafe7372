from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..checkin.model import CheckInFamily, CheckInPerson, CheckInState
from ..core.constants import ADULT_AGE, FAMILY_NAME_SUFFIX, RECORD_STATUS_ACTIVE, RECORD_TYPE_PERSON
from ..core.enums import FamilyRole, PersonKind, ReferenceType
from ..core.exceptions import AdmissionValidationError, NoFamilySelectedError, StoreError
from ..people.model import GroupMember, HouseholdGroup, PendingPerson, Person, family_role_for
from ..people.repository import PersonStore
from ..reference.service import ReferenceDataService

_logger = logging.getLogger(__name__)

NO_FAMILY_FOR_ADD = "No family selected.  Please use the Add Family button."


def household_name(people: Sequence[Person]) -> str:
    """``"<LastName> Family"`` after the oldest person; earliest in the list wins ties."""
    dated = [p for p in people if p.birth_date is not None]
    source = min(dated, key=lambda p: p.birth_date) if dated else people[0]
    return f"{source.last_name}{FAMILY_NAME_SUFFIX}"


def _parse_grade(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except (TypeError, ValueError):
        return None


class AdmissionService:
    """Use case: bring new or existing people into the active family's roster.

    Store writes for one call happen inside a single unit of work and the in-session
    tree is only touched once they succeed, so a failure leaves nothing behind.
    """

    def __init__(
        self,
        people: PersonStore,
        reference: ReferenceDataService,
        *,
        default_connection_status: Optional[str] = None,
    ):
        self._people = people
        self._reference = reference
        self._default_connection_status = default_connection_status

    def _require_family(self, state: CheckInState) -> CheckInFamily:
        family = state.find_selected_family()
        if family is None:
            raise NoFamilySelectedError(NO_FAMILY_FOR_ADD)
        return family

    def create_people(self, rows: Sequence[PendingPerson]) -> list[Person]:
        """Create a person for every valid row; invalid rows are dropped silently."""
        valid = [r for r in rows if r.is_valid()]
        if not valid:
            return []

        connection_status_id = self._reference.value_id(
            ReferenceType.CONNECTION_STATUS, self._default_connection_status
        )
        active_status_id = self._reference.value_id(ReferenceType.RECORD_STATUS, RECORD_STATUS_ACTIVE)
        person_type_id = self._reference.value_id(ReferenceType.RECORD_TYPE, RECORD_TYPE_PERSON)

        created: list[Person] = []
        for row in valid:
            person = Person(
                person_id=0,
                first_name=row.first_name.strip(),
                last_name=row.last_name.strip(),
                suffix_value_id=row.suffix_value_id,
                birth_date=row.birth_date,
                gender=row.gender,
                grade_offset=_parse_grade(row.ability) if row.has_grade else None,
                ability_level=row.ability if row.has_ability else None,
                is_special_needs=row.is_special_needs,
                connection_status_value_id=connection_status_id,
                record_status_value_id=active_status_id,
                record_type_value_id=person_type_id,
            )
            created.append(self._people.create_person(person))
        return created

    def add_group_members(
        self,
        group: Optional[HouseholdGroup],
        people: Sequence[Person],
        *,
        today: date,
        campus_id: Optional[int] = None,
    ) -> HouseholdGroup:
        """Add people to group, creating a new household group when group is None."""
        if group is None:
            group = self._people.create_household_group(name=household_name(people), campus_id=campus_id)

        members = [
            GroupMember(group_id=group.group_id, person_id=p.person_id, role=family_role_for(p, today))
            for p in people
        ]
        self._people.add_group_members(group, members)
        return group

    def add_visitor_relationships(self, family: CheckInFamily, visitor_id: int, *, today: date) -> int:
        """Link every adult family member to the visitor; returns the number of links made."""
        count = 0
        for member in family.people:
            if not member.family_member or member.person_id == visitor_id:
                continue
            age = member.person.age(today)
            if age is not None and age >= ADULT_AGE:
                self._people.create_checkin_relationship(adult_id=member.person_id, visitor_id=visitor_id)
                count += 1
        return count

    def add_existing_person(
        self,
        state: CheckInState,
        person_id: int,
        kind: PersonKind,
        *,
        today: date,
    ) -> Optional[CheckInPerson]:
        """Add a stored person to the selected family; None when they are already on the roster."""
        family = self._require_family(state)
        if family.contains(person_id):
            _logger.debug("person %s already in family %s", person_id, family.family_id)
            return None

        with self._people.unit_of_work():
            person = self._people.get_person(person_id)
            if person is None:
                raise StoreError(f"person {person_id} not found")

            if kind == PersonKind.MEMBER:
                if not self._people.move_household_member(person_id=person.person_id, group_id=family.family_id):
                    self.add_group_members(family.group, [person], today=today)
            else:
                self.add_visitor_relationships(family, person.person_id, today=today)

        checkin_person = CheckInPerson(person=person, family_member=kind == PersonKind.MEMBER, selected=True)
        family.people.append(checkin_person)
        family.refresh_sub_caption()
        _logger.info("added existing person %s to family %s as %s", person_id, family.family_id, kind.value)
        return checkin_person

    def add_new_person(
        self,
        state: CheckInState,
        row: PendingPerson,
        kind: PersonKind,
        *,
        today: date,
    ) -> CheckInPerson:
        family = self._require_family(state)
        if not row.is_valid():
            raise AdmissionValidationError()

        with self._people.unit_of_work():
            new_people = self.create_people([row])
            person = new_people[0]
            if kind == PersonKind.MEMBER:
                self.add_group_members(family.group, new_people, today=today)
            else:
                self.add_visitor_relationships(family, person.person_id, today=today)
                # A child visitor gets a household of their own so the child role is recorded.
                if family_role_for(person, today) == FamilyRole.CHILD:
                    self.add_group_members(None, new_people, today=today, campus_id=family.campus_id)

        checkin_person = CheckInPerson(
            person=person,
            family_member=kind == PersonKind.MEMBER,
            selected=True,
            first_time=True,
        )
        family.people.append(checkin_person)
        family.refresh_sub_caption()
        _logger.info("created person %s in family %s as %s", person.person_id, family.family_id, kind.value)
        return checkin_person

    def create_family(
        self,
        state: CheckInState,
        rows: Sequence[PendingPerson],
        *,
        today: date,
        campus_id: Optional[int] = None,
    ) -> CheckInFamily:
        """Create a household from the valid rows and make it the session's only family."""
        if not any(r.is_valid() for r in rows):
            raise AdmissionValidationError()

        with self._people.unit_of_work():
            new_people = self.create_people(rows)
            group = self.add_group_members(None, new_people, today=today, campus_id=campus_id)

        family = CheckInFamily(
            group=group,
            caption=group.name,
            selected=True,
            people=[
                CheckInPerson(person=p, family_member=True, selected=True, first_time=True) for p in new_people
            ],
        )
        family.refresh_sub_caption()
        state.replace_families([family])
        _logger.info("created family %s (%s) with %d people", group.group_id, group.name, len(new_people))
        return family
