from __future__ import annotations

from typing import ContextManager, Optional, Protocol, Sequence

from .model import GroupMember, HouseholdGroup, Person


class PersonStore(Protocol):
    """Person, household group and relationship storage.

    Every write made inside one ``unit_of_work()`` block is committed together or not at all.
    """

    def unit_of_work(self) -> ContextManager[None]:
        raise NotImplementedError

    def get_person(self, person_id: int) -> Optional[Person]:
        raise NotImplementedError

    def create_person(self, person: Person) -> Person:
        """Insert person (its person_id is ignored) and return it with the assigned id."""
        raise NotImplementedError

    def update_person(self, person: Person) -> bool:
        raise NotImplementedError

    def create_household_group(self, *, name: str, campus_id: Optional[int] = None) -> HouseholdGroup:
        raise NotImplementedError

    def add_group_members(self, group: HouseholdGroup, members: Sequence[GroupMember]) -> None:
        raise NotImplementedError

    def get_household_membership(self, person_id: int) -> Optional[GroupMember]:
        raise NotImplementedError

    def move_household_member(self, *, person_id: int, group_id: int) -> bool:
        raise NotImplementedError

    def create_checkin_relationship(self, *, adult_id: int, visitor_id: int) -> None:
        raise NotImplementedError


class NoteStore(Protocol):
    """Free-text check-in note kept per person."""

    def get_checkin_note(self, person_id: int) -> Optional[str]:
        raise NotImplementedError

    def save_checkin_note(self, person_id: int, text: str) -> None:
        raise NotImplementedError
