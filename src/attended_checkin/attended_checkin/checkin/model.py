from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional, Sequence

from ..people.model import HouseholdGroup, Person


class OptionNode:
    """Shared behaviour of the GroupType -> Group -> Location -> Schedule nodes.

    ``pre_selected`` is only ever set by history matching; ``selected`` is the flag the
    rest of the check-in reads.
    """

    selected: bool
    pre_selected: bool
    last_check_in: Optional[datetime]

    @property
    def node_id(self) -> int:
        raise NotImplementedError

    @property
    def children(self) -> Sequence["OptionNode"]:
        return ()

    def matches(self, last_check_in: Optional[datetime]) -> bool:
        return self.selected or (last_check_in is not None and self.last_check_in == last_check_in)

    def pre_select(self) -> None:
        self.selected = True
        self.pre_selected = True

    def find_child(self, node_id: int) -> Optional["OptionNode"]:
        return next((c for c in self.children if c.node_id == node_id), None)


@dataclass
class CheckInSchedule(OptionNode):
    schedule_id: int
    name: str = ""
    selected: bool = False
    pre_selected: bool = False
    last_check_in: Optional[datetime] = None

    @property
    def node_id(self) -> int:
        return self.schedule_id


@dataclass
class CheckInLocation(OptionNode):
    location_id: int
    name: str = ""
    selected: bool = False
    pre_selected: bool = False
    last_check_in: Optional[datetime] = None
    schedules: list[CheckInSchedule] = field(default_factory=list)

    @property
    def node_id(self) -> int:
        return self.location_id

    @property
    def children(self) -> Sequence[OptionNode]:
        return self.schedules


@dataclass
class CheckInGroup(OptionNode):
    group_id: int
    name: str = ""
    selected: bool = False
    pre_selected: bool = False
    last_check_in: Optional[datetime] = None
    locations: list[CheckInLocation] = field(default_factory=list)

    @property
    def node_id(self) -> int:
        return self.group_id

    @property
    def children(self) -> Sequence[OptionNode]:
        return self.locations


@dataclass
class CheckInGroupType(OptionNode):
    group_type_id: int
    name: str = ""
    selected: bool = False
    pre_selected: bool = False
    last_check_in: Optional[datetime] = None
    groups: list[CheckInGroup] = field(default_factory=list)

    @property
    def node_id(self) -> int:
        return self.group_type_id

    @property
    def children(self) -> Sequence[OptionNode]:
        return self.groups


@dataclass
class CheckInPerson:
    """Roster entry: a person plus their tree of eligible check-in options."""

    person: Person
    family_member: bool = True
    selected: bool = False
    first_time: bool = False
    excluded_by_filter: bool = False
    last_check_in: Optional[datetime] = None
    group_types: list[CheckInGroupType] = field(default_factory=list)

    @property
    def person_id(self) -> int:
        return self.person.person_id

    def iter_levels(self) -> Iterator[Sequence[OptionNode]]:
        """Yield every sibling list in the tree, top level first."""
        pending: list[Sequence[OptionNode]] = [self.group_types]
        while pending:
            siblings = pending.pop(0)
            yield siblings
            for node in siblings:
                if node.children:
                    pending.append(node.children)

    def select_path(self, *node_ids: int) -> bool:
        """Select one node per level along node_ids, clearing its siblings.

        Returns False (and changes nothing) when the path does not exist.
        """
        path: list[tuple[Sequence[OptionNode], OptionNode]] = []
        siblings: Sequence[OptionNode] = self.group_types
        for node_id in node_ids:
            node = next((n for n in siblings if n.node_id == node_id), None)
            if node is None:
                return False
            path.append((siblings, node))
            siblings = node.children

        for siblings, node in path:
            for sibling in siblings:
                sibling.selected = sibling is node
        return True

    def clear_options(self) -> None:
        for siblings in self.iter_levels():
            for node in siblings:
                node.selected = False
                node.pre_selected = False


@dataclass
class CheckInFamily:
    group: HouseholdGroup
    caption: str = ""
    sub_caption: str = ""
    selected: bool = False
    people: list[CheckInPerson] = field(default_factory=list)

    @property
    def family_id(self) -> int:
        return self.group.group_id

    @property
    def campus_id(self) -> Optional[int]:
        return self.group.campus_id

    def find_person(self, person_id: int) -> Optional[CheckInPerson]:
        return next((p for p in self.people if p.person_id == int(person_id)), None)

    def contains(self, person_id: int) -> bool:
        return self.find_person(person_id) is not None

    def refresh_sub_caption(self) -> None:
        self.sub_caption = ",".join(p.person.first_name for p in self.people)


@dataclass
class CheckInState:
    """All families loaded for one kiosk session."""

    families: list[CheckInFamily] = field(default_factory=list)

    def find_selected_family(self) -> Optional[CheckInFamily]:
        return next((f for f in self.families if f.selected), None)

    def find_family(self, family_id: int) -> Optional[CheckInFamily]:
        return next((f for f in self.families if f.family_id == int(family_id)), None)

    def find_selected_person(self, person_id: int) -> Optional[CheckInPerson]:
        family = self.find_selected_family()
        if family is None:
            return None
        return family.find_person(person_id)

    def select_family(self, family: CheckInFamily) -> None:
        for f in self.families:
            f.selected = f is family

    def clear_family_selection(self) -> None:
        for f in self.families:
            f.selected = False

    def replace_families(self, families: Sequence[CheckInFamily]) -> None:
        self.families = list(families)


def selection_violations(person: CheckInPerson) -> list[str]:
    """Describe every sibling list of a person's tree holding more than one selected node."""
    problems: list[str] = []
    for siblings in person.iter_levels():
        chosen = [n.node_id for n in siblings if n.selected]
        if len(chosen) > 1:
            kind = type(siblings[0]).__name__
            problems.append(f"person {person.person_id}: {kind} siblings {chosen} all selected")
    return problems


def has_single_selection_per_level(person: CheckInPerson) -> bool:
    return not selection_violations(person)
