from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from ..checkin.model import CheckInPerson, CheckInState
from ..common.validators import is_blank
from ..core.enums import AbilityGroup
from ..core.exceptions import AdmissionValidationError, NoFamilySelectedError, NoPersonSelectedError, StoreError
from .model import Person
from .repository import NoteStore, PersonStore

_logger = logging.getLogger(__name__)

SINGLE_PERSON_REQUIRED = "Please select a single person to edit."
EDIT_FIELDS_REQUIRED = "Validation: First name, last name and DOB are required."


@dataclass(frozen=True)
class PersonInfo:
    """Editable details of one roster person, as loaded into the edit form."""

    person_id: int
    first_name: str
    last_name: str
    nick_name: Optional[str]
    suffix_value_id: Optional[int]
    birth_date: Optional[date]
    ability_grade: Optional[str]
    ability_group: Optional[AbilityGroup]
    is_special_needs: bool
    allergy: Optional[str]
    note: Optional[str]


@dataclass
class PersonInfoForm:
    first_name: str = ""
    last_name: str = ""
    birth_date: Optional[date] = None
    nick_name: str = ""
    suffix_value_id: Optional[int] = None
    ability_grade: str = ""
    ability_group: Optional[AbilityGroup] = None
    is_special_needs: bool = False
    allergy: Optional[str] = None
    note: Optional[str] = None


class PersonInfoService:
    """Use case: view and edit the details of a single selected roster person."""

    def __init__(self, people: PersonStore, notes: NoteStore):
        self._people = people
        self._notes = notes

    def select_single(self, state: CheckInState, person_ids: Sequence[int]) -> CheckInPerson:
        family = state.find_selected_family()
        if family is None:
            raise NoFamilySelectedError()
        if len(person_ids) != 1:
            raise NoPersonSelectedError(SINGLE_PERSON_REQUIRED)

        person = family.find_person(person_ids[0])
        if person is None:
            raise NoPersonSelectedError(SINGLE_PERSON_REQUIRED)
        return person

    def load_info(self, state: CheckInState, person_ids: Sequence[int]) -> PersonInfo:
        person = self.select_single(state, person_ids).person

        if person.grade_offset is not None:
            ability_grade, ability_group = str(person.grade_offset), AbilityGroup.GRADE
        elif not is_blank(person.ability_level):
            ability_grade, ability_group = person.ability_level, AbilityGroup.ABILITY
        else:
            ability_grade, ability_group = None, None

        return PersonInfo(
            person_id=person.person_id,
            first_name=person.first_name,
            last_name=person.last_name,
            nick_name=person.nick_name,
            suffix_value_id=person.suffix_value_id,
            birth_date=person.birth_date,
            ability_grade=ability_grade,
            ability_group=ability_group,
            is_special_needs=person.is_special_needs,
            allergy=person.allergy,
            note=self._notes.get_checkin_note(person.person_id),
        )

    def save_info(self, state: CheckInState, person_ids: Sequence[int], form: PersonInfoForm) -> Person:
        checkin_person = self.select_single(state, person_ids)
        if is_blank(form.first_name) or is_blank(form.last_name) or form.birth_date is None:
            raise AdmissionValidationError(EDIT_FIELDS_REQUIRED)

        stored = self._people.get_person(checkin_person.person_id)
        if stored is None:
            raise StoreError(f"person {checkin_person.person_id} not found")

        first_name = form.first_name.strip()
        updated = replace(
            stored,
            first_name=first_name,
            last_name=form.last_name.strip(),
            nick_name=form.nick_name.strip() if not is_blank(form.nick_name) else first_name,
            suffix_value_id=form.suffix_value_id,
            birth_date=form.birth_date,
        )

        if form.ability_group == AbilityGroup.ABILITY:
            updated = replace(updated, ability_level=form.ability_grade or None, grade_offset=None)
        elif form.ability_group == AbilityGroup.GRADE:
            try:
                grade_offset = int(form.ability_grade)
            except (TypeError, ValueError):
                grade_offset = None
            updated = replace(updated, grade_offset=grade_offset, ability_level=None)

        if form.is_special_needs:
            updated = replace(updated, is_special_needs=True)
        if form.allergy is not None:
            updated = replace(updated, allergy=form.allergy.strip() or None)

        # A failing note write rolls back the person update.
        with self._people.unit_of_work():
            self._people.update_person(updated)
            if form.note is not None:
                self._notes.save_checkin_note(updated.person_id, form.note)

        checkin_person.person = updated
        _logger.info("updated info for person %s", updated.person_id)
        return updated
