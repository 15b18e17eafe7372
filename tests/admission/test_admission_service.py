from __future__ import annotations

from datetime import date

import pytest

from src.attended_checkin.attended_checkin.admission.service import AdmissionService, household_name
from src.attended_checkin.attended_checkin.checkin.model import CheckInState
from src.attended_checkin.attended_checkin.core.enums import AbilityGroup, FamilyRole, Gender, PersonKind
from src.attended_checkin.attended_checkin.core.exceptions import (
    AdmissionValidationError,
    NoFamilySelectedError,
    StoreError,
)
from src.attended_checkin.attended_checkin.people.model import GroupMember, PendingPerson
from src.attended_checkin.attended_checkin.reference.service import ReferenceDataService

from tests.fakes import InMemoryPeople, InMemoryReference, checkin_person, default_reference_values, family, make_person

TODAY = date(2026, 2, 1)


def _row(first, last, born, gender=Gender.FEMALE, **kwargs) -> PendingPerson:
    return PendingPerson(first_name=first, last_name=last, birth_date=born, gender=gender, **kwargs)


def _service(people: InMemoryPeople) -> AdmissionService:
    reference = ReferenceDataService(InMemoryReference(default_reference_values()))
    return AdmissionService(people, reference, default_connection_status="visitor")


def _state_with_family(people: InMemoryPeople):
    """Smith family: two adults (1, 2) and a child (3), already stored as household members."""
    members = [
        checkin_person(1, "Alice", birth_date=date(1980, 4, 1)),
        checkin_person(2, "Bob", birth_date=date(1982, 6, 1)),
        checkin_person(3, "Cara", birth_date=date(2016, 1, 1)),
    ]
    for m in members:
        people.people[m.person_id] = m.person
        people.memberships[m.person_id] = GroupMember(group_id=1, person_id=m.person_id, role=FamilyRole.ADULT)
    return CheckInState(families=[family(1, "Smith Family", members, selected=True)])


def test_new_family_is_named_after_oldest_person_with_roles_by_age():
    people = InMemoryPeople()
    state = CheckInState()
    rows = [
        _row("Cara", "Smith", date(2016, 1, 1)),
        _row("Alice", "Smith", date(1975, 4, 1)),
        _row("Bob", "Jones", date(1980, 6, 1), Gender.MALE),
        _row("Dan", "Smith", date(2000, 1, 1), Gender.UNKNOWN),
        PendingPerson(),
    ]

    created = _service(people).create_family(state, rows, today=TODAY, campus_id=2)

    assert created.caption == "Smith Family"
    assert state.families == [created]
    assert created.selected
    assert [p.person.first_name for p in created.people] == ["Cara", "Alice", "Bob"]
    assert all(p.first_time and p.selected and p.family_member for p in created.people)
    roles = {people.people[m.person_id].first_name: m.role for m in people.members_of(created.family_id)}
    assert roles == {"Cara": FamilyRole.CHILD, "Alice": FamilyRole.ADULT, "Bob": FamilyRole.ADULT}
    assert people.groups[created.family_id].campus_id == 2


def test_unknown_gender_row_is_never_created():
    people = InMemoryPeople()

    created = _service(people).create_people([_row("Dan", "Smith", date(2000, 1, 1), Gender.UNKNOWN)])

    assert created == []
    assert people.people == {}


def test_created_people_carry_reference_defaults_and_ability():
    people = InMemoryPeople()
    rows = [
        _row("Cara", "Smith", date(2016, 1, 1), ability="3", ability_group=AbilityGroup.GRADE),
        _row("Dee", "Smith", date(2025, 1, 1), ability="infant", ability_group=AbilityGroup.ABILITY),
    ]

    cara, dee = _service(people).create_people(rows)

    assert cara.grade_offset == 3 and cara.ability_level is None
    assert dee.ability_level == "infant" and dee.grade_offset is None
    assert (cara.record_status_value_id, cara.record_type_value_id, cara.connection_status_value_id) == (1, 2, 3)


def test_family_with_no_valid_rows_is_a_validation_failure():
    people = InMemoryPeople()
    state = CheckInState()

    with pytest.raises(AdmissionValidationError):
        _service(people).create_family(state, [PendingPerson()], today=TODAY)
    assert state.families == []
    assert people.groups == {}


def test_household_name_ties_go_to_first_in_list():
    a = make_person(1, "A", "First", birth_date=date(1980, 1, 1))
    b = make_person(2, "B", "Second", birth_date=date(1980, 1, 1))

    assert household_name([a, b]) == "First Family"


def test_adding_existing_person_twice_is_a_no_op():
    people = InMemoryPeople()
    state = _state_with_family(people)
    before = len(state.find_selected_family().people)

    assert _service(people).add_existing_person(state, 2, PersonKind.VISITOR, today=TODAY) is None

    assert len(state.find_selected_family().people) == before
    assert people.relationships == set()


def test_existing_member_is_moved_into_family_household():
    people = _with_outsider(InMemoryPeople())
    state = _state_with_family(people)
    people.memberships[9] = GroupMember(group_id=77, person_id=9, role=FamilyRole.ADULT)

    added = _service(people).add_existing_person(state, 9, PersonKind.MEMBER, today=TODAY)

    assert added.selected and added.family_member and not added.first_time
    assert people.memberships[9].group_id == 1
    fam = state.find_selected_family()
    assert fam.sub_caption == "Alice,Bob,Cara,Zed"


def test_existing_member_without_household_joins_family_group():
    people = _with_outsider(InMemoryPeople())
    state = _state_with_family(people)

    _service(people).add_existing_person(state, 9, PersonKind.MEMBER, today=TODAY)

    assert people.memberships[9].group_id == 1


def test_existing_visitor_is_linked_to_every_adult():
    people = _with_outsider(InMemoryPeople())
    state = _state_with_family(people)

    added = _service(people).add_existing_person(state, 9, PersonKind.VISITOR, today=TODAY)

    assert not added.family_member
    assert people.relationships == {(1, 9), (2, 9)}
    assert 9 not in people.memberships


def test_new_child_visitor_gets_own_household():
    people = InMemoryPeople()
    state = _state_with_family(people)

    visitor = _service(people).add_new_person(
        state, _row("Vik", "Jones", date(2018, 1, 1), Gender.MALE), PersonKind.VISITOR, today=TODAY
    )

    assert visitor.first_time and visitor.selected and not visitor.family_member
    assert people.relationships == {(1, visitor.person_id), (2, visitor.person_id)}
    membership = people.memberships[visitor.person_id]
    assert membership.role == FamilyRole.CHILD
    assert people.groups[membership.group_id].name == "Jones Family"


def test_new_adult_visitor_gets_relationships_only():
    people = InMemoryPeople()
    state = _state_with_family(people)

    visitor = _service(people).add_new_person(
        state, _row("Val", "Jones", date(1990, 1, 1)), PersonKind.VISITOR, today=TODAY
    )

    assert visitor.person_id not in people.memberships
    assert len(people.relationships) == 2


def test_new_member_joins_selected_family():
    people = InMemoryPeople()
    state = _state_with_family(people)

    member = _service(people).add_new_person(
        state, _row("Dot", "Smith", date(2024, 1, 1)), PersonKind.MEMBER, today=TODAY
    )

    assert people.memberships[member.person_id].group_id == 1
    assert people.memberships[member.person_id].role == FamilyRole.CHILD
    assert state.find_selected_person(member.person_id) is member


def test_add_requires_selected_family():
    people = InMemoryPeople()
    state = _state_with_family(people)
    state.clear_family_selection()

    with pytest.raises(NoFamilySelectedError) as exc:
        _service(people).add_new_person(state, _row("Dot", "Smith", date(2024, 1, 1)), PersonKind.MEMBER, today=TODAY)
    assert exc.value.message == "No family selected.  Please use the Add Family button."


def test_invalid_new_person_is_rejected_and_nothing_is_written():
    people = InMemoryPeople()
    state = _state_with_family(people)

    with pytest.raises(AdmissionValidationError):
        _service(people).add_new_person(
            state, _row("Dot", "Smith", None), PersonKind.MEMBER, today=TODAY
        )
    assert len(people.people) == 3


def test_store_failure_leaves_nothing_behind():
    people = InMemoryPeople()
    state = _state_with_family(people)
    people.fail_on = "create_checkin_relationship"

    with pytest.raises(StoreError):
        _service(people).add_new_person(
            state, _row("Vik", "Jones", date(2018, 1, 1), Gender.MALE), PersonKind.VISITOR, today=TODAY
        )

    assert len(people.people) == 3
    assert people.relationships == set()
    assert people.groups == {}
    assert len(state.find_selected_family().people) == 3


def _with_outsider(people: InMemoryPeople) -> InMemoryPeople:
    people.people[9] = make_person(9, "Zed", "Young", birth_date=date(1995, 1, 1))
    return people
