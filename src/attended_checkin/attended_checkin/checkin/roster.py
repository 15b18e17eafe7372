from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..common.id_lists import format_id_list, parse_id_list
from ..core.enums import PersonKind
from ..session.model import EMPTY_SELECTION, KioskSession, SelectionCache
from .model import CheckInFamily, CheckInPerson


@dataclass(frozen=True)
class RosterView:
    """Member and visitor lists of the selected family as they should be displayed."""

    family: Optional[CheckInFamily]
    members: tuple[CheckInPerson, ...] = ()
    visitors: tuple[CheckInPerson, ...] = ()
    selection: SelectionCache = EMPTY_SELECTION

    @property
    def has_family(self) -> bool:
        return self.family is not None

    @property
    def is_empty(self) -> bool:
        return not self.members and not self.visitors

    def people(self, kind: PersonKind) -> tuple[CheckInPerson, ...]:
        return self.members if kind == PersonKind.MEMBER else self.visitors


def display_key(person: CheckInPerson) -> str:
    return person.person.full_name_reversed.casefold()


def partition(family: CheckInFamily) -> tuple[list[CheckInPerson], list[CheckInPerson]]:
    """Split a family's eligible people into members and visitors, each in display order."""
    eligible = [p for p in family.people if not p.excluded_by_filter]
    members = sorted((p for p in eligible if p.family_member), key=display_key)
    visitors = sorted((p for p in eligible if not p.family_member), key=display_key)
    return members, visitors


def order_families(families: Sequence[CheckInFamily], campus_id: Optional[int]) -> list[CheckInFamily]:
    """Families at the kiosk's campus first, then by caption."""
    if len(families) <= 1:
        return list(families)
    return sorted(families, key=lambda f: (f.campus_id != campus_id, f.caption))


class RosterReconciler:
    """Keeps the flat selected-id lists and pagers in step with the tree's selected flags.

    The id lists on the session are only ever written here, always regenerated from the
    tree, so they cannot drift from the people's ``selected`` flags.
    """

    def reconcile(self, session: KioskSession, *, replace_content: bool = False) -> RosterView:
        family = session.state.find_selected_family()
        if family is None:
            session.member_pager.hide()
            session.visitor_pager.hide()
            session.selection = EMPTY_SELECTION
            return RosterView(family=None)

        members, visitors = partition(family)
        session.selection = SelectionCache(
            member_ids=format_id_list(p.person_id for p in members if p.selected),
            visitor_ids=format_id_list(p.person_id for p in visitors if p.selected),
        )
        session.member_pager.rebind(len(members), replace_content=replace_content)
        session.visitor_pager.rebind(len(visitors), replace_content=replace_content)

        return RosterView(
            family=family,
            members=tuple(members),
            visitors=tuple(visitors),
            selection=session.selection,
        )

    def apply_selection(self, session: KioskSession, kind: PersonKind, incoming: str | None) -> RosterView:
        """Set each person of one partition selected iff their id is in the incoming list."""
        family = session.state.find_selected_family()
        if family is not None:
            ids = set(parse_id_list(incoming))
            members, visitors = partition(family)
            for person in members if kind == PersonKind.MEMBER else visitors:
                person.selected = person.person_id in ids
        return self.reconcile(session)

    def apply_confirmed(self, session: KioskSession, person_ids: Iterable[int]) -> RosterView:
        """Set every person of the selected family selected iff listed."""
        family = session.state.find_selected_family()
        if family is not None:
            ids = set(int(i) for i in person_ids)
            for person in family.people:
                person.selected = person.person_id in ids
        return self.reconcile(session)

    def change_page(
        self,
        session: KioskSession,
        kind: PersonKind,
        *,
        start_index: int,
        page_size: int | None = None,
        incoming: str | None = None,
    ) -> RosterView:
        session.pager_for(kind).set_page_properties(start_index, page_size)
        return self.apply_selection(session, kind, incoming)
