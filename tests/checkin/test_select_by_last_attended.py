from __future__ import annotations

import copy
from datetime import datetime

from src.attended_checkin.attended_checkin.checkin.actions.select_by_last_attended import (
    SelectByLastAttended,
    select_family_by_last_attended,
    select_person_by_last_attended,
)
from src.attended_checkin.attended_checkin.session.memory_session_repository import InMemorySessionStateProvider

from tests.fakes import checkin_person, family, option_tree

T = datetime(2026, 1, 25, 9, 0, 0)


def _flags(person):
    return [(n.node_id, n.selected, n.pre_selected) for level in person.iter_levels() for n in level]


def test_location_match_selects_branch_and_stops_at_schedule():
    person = checkin_person(1, "Ann", selected=True, last_check_in=T, tree=option_tree(T))

    select_person_by_last_attended(person)

    group_type = person.group_types[0]
    group = group_type.groups[0]
    room_a, room_b = group.locations
    assert group_type.selected and group_type.pre_selected
    assert group.selected and group.pre_selected
    assert room_b.selected and room_b.pre_selected
    assert not room_a.selected
    assert not any(s.selected for s in room_b.schedules)
    assert not person.group_types[1].selected


def test_matching_schedule_is_selected_too():
    tree = option_tree(T)
    tree[0].groups[0].locations[1].schedules[1].last_check_in = T
    person = checkin_person(1, "Ann", selected=True, last_check_in=T, tree=tree)

    select_person_by_last_attended(person)

    schedules = person.group_types[0].groups[0].locations[1].schedules
    assert [s.selected for s in schedules] == [False, True]
    assert schedules[1].pre_selected


def test_first_sibling_wins_a_timestamp_tie():
    tree = option_tree(T)
    tree[0].groups[0].locations[0].last_check_in = T
    person = checkin_person(1, "Ann", selected=True, last_check_in=T, tree=tree)

    select_person_by_last_attended(person)

    room_a, room_b = person.group_types[0].groups[0].locations
    assert room_a.selected and room_a.pre_selected
    assert not room_b.selected and not room_b.pre_selected


def test_already_selected_node_takes_precedence_over_timestamp():
    tree = option_tree(T)
    tree[0].groups[0].locations[0].selected = True
    person = checkin_person(1, "Ann", selected=True, last_check_in=T, tree=tree)

    select_person_by_last_attended(person)

    room_a, room_b = person.group_types[0].groups[0].locations
    assert room_a.selected and room_a.pre_selected
    assert not room_b.selected


def test_no_match_at_top_level_is_silent():
    person = checkin_person(1, "Ann", selected=True, last_check_in=T, tree=option_tree(datetime(2025, 1, 1)))

    select_person_by_last_attended(person)

    assert not any(sel or pre for _, sel, pre in _flags(person))


def test_first_time_person_is_never_touched():
    person = checkin_person(1, "Ann", selected=True, first_time=True, last_check_in=T, tree=option_tree(T))

    select_person_by_last_attended(person)

    assert not any(sel or pre for _, sel, pre in _flags(person))


def test_person_without_last_check_in_is_skipped():
    person = checkin_person(1, "Ann", selected=True, last_check_in=None, tree=option_tree(None))

    select_person_by_last_attended(person)

    assert not any(sel or pre for _, sel, pre in _flags(person))


def test_running_twice_gives_identical_tree():
    fam = family(
        1,
        "Smith Family",
        [
            checkin_person(1, "Ann", selected=True, last_check_in=T, tree=option_tree(T)),
            checkin_person(2, "Ben", selected=True, first_time=True, tree=option_tree(T)),
        ],
        selected=True,
    )

    select_family_by_last_attended(fam)
    once = copy.deepcopy(fam)
    select_family_by_last_attended(fam)

    assert fam == once


def test_unselected_people_are_skipped():
    ann = checkin_person(1, "Ann", selected=False, last_check_in=T, tree=option_tree(T))
    fam = family(1, "Smith Family", [ann], selected=True)

    select_family_by_last_attended(fam)

    assert not ann.group_types[0].selected


def test_action_reports_failure_only_without_session_state(make_session):
    sessions = InMemorySessionStateProvider()
    action = SelectByLastAttended()

    assert action.execute(sessions, "missing") is False

    session = make_session([family(1, "Smith Family", [checkin_person(1, "Ann", selected=True, last_check_in=T, tree=option_tree(T))], selected=True)])
    sessions.save(session)

    assert action.execute(sessions, session.session_id) is True
    assert session.state.families[0].people[0].group_types[0].pre_selected


def test_action_succeeds_when_nothing_matches(make_session):
    sessions = InMemorySessionStateProvider()
    sessions.save(make_session([]))

    assert SelectByLastAttended().execute(sessions, "s1") is True
