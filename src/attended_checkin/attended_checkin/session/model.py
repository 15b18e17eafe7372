from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..checkin.model import CheckInState
from ..checkin.pager import PageWindow
from ..core.constants import (
    DEFAULT_FAMILY_PAGE_SIZE,
    DEFAULT_PERSON_PAGE_SIZE,
    DEFAULT_VISITOR_PAGE_SIZE,
)
from ..core.enums import PersonKind
from ..people.pending import PendingFamilyBuffer


@dataclass(frozen=True)
class KioskLocation:
    location_id: int
    name: str = ""
    campus_id: Optional[int] = None


@dataclass(frozen=True)
class Kiosk:
    """The device running the session and the locations it serves."""

    kiosk_id: int
    name: str = ""
    locations: tuple[KioskLocation, ...] = ()

    def first_campus_id(self) -> Optional[int]:
        return next((loc.campus_id for loc in self.locations if loc.campus_id is not None), None)


@dataclass(frozen=True)
class SelectionCache:
    """Comma-terminated selected id lists, rebuilt from the tree by the roster reconciler."""

    member_ids: str = ""
    visitor_ids: str = ""


EMPTY_SELECTION = SelectionCache()


@dataclass
class KioskSession:
    """Everything one operator session works on, passed explicitly to every operation."""

    session_id: str
    kiosk: Kiosk
    state: CheckInState = field(default_factory=CheckInState)
    family_pager: PageWindow = field(default_factory=lambda: PageWindow(DEFAULT_FAMILY_PAGE_SIZE))
    member_pager: PageWindow = field(default_factory=lambda: PageWindow(DEFAULT_PERSON_PAGE_SIZE))
    visitor_pager: PageWindow = field(default_factory=lambda: PageWindow(DEFAULT_VISITOR_PAGE_SIZE))
    selection: SelectionCache = EMPTY_SELECTION
    new_person_kind: PersonKind = PersonKind.MEMBER
    pending_family: Optional[PendingFamilyBuffer] = None
    _campus_id: Optional[int] = field(default=None, repr=False)
    _campus_resolved: bool = field(default=False, repr=False)

    @property
    def campus_id(self) -> Optional[int]:
        if not self._campus_resolved:
            self._campus_id = self.kiosk.first_campus_id()
            self._campus_resolved = True
        return self._campus_id

    @property
    def selected_member_ids(self) -> str:
        return self.selection.member_ids

    @property
    def selected_visitor_ids(self) -> str:
        return self.selection.visitor_ids

    def pager_for(self, kind: PersonKind) -> PageWindow:
        return self.member_pager if kind == PersonKind.MEMBER else self.visitor_pager
