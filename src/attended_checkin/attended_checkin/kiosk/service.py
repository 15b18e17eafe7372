from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Sequence, TypeVar

from ..admission.service import NO_FAMILY_FOR_ADD, AdmissionService
from ..checkin.actions.base import CheckInAction
from ..checkin.actions.select_by_last_attended import SelectByLastAttended
from ..checkin.model import CheckInFamily, CheckInState
from ..checkin.pager import PageWindow
from ..checkin.roster import RosterReconciler, RosterView, order_families
from ..common.datetime_utils import today_local
from ..common.id_lists import parse_id_list
from ..core.constants import PERSON_SEARCH_ACTIVITY
from ..core.enums import PersonKind
from ..core.exceptions import (
    ActivityFailedError,
    CheckInWarning,
    NoEligiblePeopleError,
    NoFamilySelectedError,
    NoPersonSelectedError,
    SessionUnavailableError,
)
from ..people.model import PendingPerson
from ..people.pending import PendingFamilyBuffer
from ..people.service import PersonInfo, PersonInfoForm, PersonInfoService
from ..session.model import Kiosk, KioskSession
from ..session.repository import SessionStateProvider
from .activities import ActivityRunner
from .display import KioskDisplay
from .settings import KioskSettings

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class FamilySelectService:
    """Use cases of the attended family select screen.

    Every public operation loads the kiosk session, runs, saves the session and reports
    operator-actionable problems through ``display.show_warning``. Collaborator failures
    are not caught here.
    """

    def __init__(
        self,
        sessions: SessionStateProvider,
        admission: AdmissionService,
        person_info: PersonInfoService,
        activities: ActivityRunner,
        settings: KioskSettings,
        *,
        reconciler: Optional[RosterReconciler] = None,
        auto_select: Optional[CheckInAction] = None,
        clock: Callable[[], date] = today_local,
    ):
        self._sessions = sessions
        self._admission = admission
        self._person_info = person_info
        self._activities = activities
        self._settings = settings
        self._reconciler = reconciler or RosterReconciler()
        self._auto_select = auto_select or SelectByLastAttended()
        self._clock = clock

    # -------- plumbing --------
    def _load(self, session_id: str) -> KioskSession:
        session = self._sessions.load(session_id)
        if session is None:
            raise SessionUnavailableError(f"no check-in state for session {session_id}")
        return session

    def _guarded(
        self,
        session_id: str,
        display: KioskDisplay,
        operation: Callable[[KioskSession], T],
    ) -> tuple[bool, Optional[T]]:
        session = self._load(session_id)
        try:
            result = operation(session)
        except CheckInWarning as e:
            _logger.info("session %s: %s", session_id, e.message)
            display.show_warning(e.message, e.severity)
            return False, None
        finally:
            self._sessions.save(session)
        return True, result

    def _show_results(self, display: KioskDisplay, has_results: bool) -> None:
        display.show_results(
            has_results=has_results,
            title="Search Results" if has_results else "No Results",
            message="" if has_results else self._settings.not_found_text,
            show_add_buttons=self._settings.enable_add_buttons,
        )

    def _show_roster(self, session: KioskSession, view: RosterView, display: KioskDisplay) -> None:
        display.show_members(view.members, session.member_pager, view.selection.member_ids)
        display.show_visitors(view.visitors, session.visitor_pager, view.selection.visitor_ids)

    def _display_families(self, session: KioskSession, display: KioskDisplay) -> None:
        families = order_families(session.state.families, session.campus_id)
        if families and session.state.find_selected_family() is None:
            session.state.select_family(families[0])

        session.family_pager.rebind(len(families), replace_content=True)
        display.show_families(families, session.family_pager)

    def _process_family(self, session: KioskSession, display: KioskDisplay, *, replace_content: bool) -> RosterView:
        errors = self._activities.process_activity(PERSON_SEARCH_ACTIVITY, session)
        if errors:
            raise ActivityFailedError("\n".join(errors))

        family = session.state.find_selected_family()
        if family is not None:
            for person in family.people:
                if person.family_member and not person.excluded_by_filter:
                    person.selected = True

        view = self._reconciler.reconcile(session, replace_content=replace_content)
        self._show_roster(session, view, display)
        return view

    @staticmethod
    def _require_family(state: CheckInState, message: Optional[str] = None) -> CheckInFamily:
        family = state.find_selected_family()
        if family is None:
            raise NoFamilySelectedError(message)
        return family

    # -------- session --------
    def open_session(self, session_id: str, kiosk: Kiosk, families: Sequence[CheckInFamily]) -> KioskSession:
        """Start a kiosk session over the families the host search produced."""
        session = KioskSession(
            session_id=session_id,
            kiosk=kiosk,
            state=CheckInState(families=list(families)),
            family_pager=PageWindow(self._settings.family_page_size),
            member_pager=PageWindow(self._settings.person_page_size),
            visitor_pager=PageWindow(self._settings.visitor_page_size),
        )
        self._sessions.save(session)
        return session

    def close_session(self, session_id: str) -> None:
        self._sessions.discard(session_id)

    def start(self, session_id: str, display: KioskDisplay) -> bool:
        """First display of the screen: families, then the selected family's people."""

        def run(session: KioskSession) -> bool:
            has_results = bool(session.state.families)
            self._show_results(display, has_results)
            if not has_results:
                self._reconciler.reconcile(session)
                return False
            self._display_families(session, display)
            self._process_family(session, display, replace_content=True)
            return True

        ok, has_results = self._guarded(session_id, display, run)
        return ok and bool(has_results)

    # -------- families --------
    def pick_family(self, session_id: str, family_id: int, display: KioskDisplay) -> bool:
        """Select an unselected family, or deselect the selected one."""

        def run(session: KioskSession) -> None:
            state = session.state
            family = state.find_family(family_id)
            if family is None:
                raise NoFamilySelectedError()

            if family.selected:
                family.selected = False
                self._show_roster(session, self._reconciler.reconcile(session), display)
                return

            previous = state.find_selected_family()
            state.select_family(family)
            try:
                self._process_family(session, display, replace_content=True)
            except ActivityFailedError:
                if previous is None:
                    state.clear_family_selection()
                else:
                    state.select_family(previous)
                raise

        ok, _ = self._guarded(session_id, display, run)
        return ok

    def remove_family(self, session_id: str, family_id: int, display: KioskDisplay) -> bool:
        def run(session: KioskSession) -> None:
            state = session.state
            family = state.find_family(family_id)
            if family is None:
                return
            state.replace_families([f for f in state.families if f is not family])
            self._show_results(display, bool(state.families))
            session.family_pager.rebind(len(state.families), replace_content=False)
            display.show_families(order_families(state.families, session.campus_id), session.family_pager)
            self._show_roster(session, self._reconciler.reconcile(session, replace_content=family.selected), display)

        ok, _ = self._guarded(session_id, display, run)
        return ok

    def change_family_page(self, session_id: str, start_index: int, page_size: int | None, display: KioskDisplay) -> bool:
        def run(session: KioskSession) -> None:
            session.family_pager.set_page_properties(start_index, page_size)
            families = order_families(session.state.families, session.campus_id)
            session.family_pager.rebind(len(families), replace_content=False)
            display.show_families(families, session.family_pager)

        ok, _ = self._guarded(session_id, display, run)
        return ok

    # -------- people --------
    def change_page(
        self,
        session_id: str,
        kind: PersonKind,
        *,
        start_index: int,
        page_size: int | None = None,
        selected_ids: str | None = None,
        display: KioskDisplay,
    ) -> bool:
        """Move a person pager, applying the list's incoming selection first."""

        def run(session: KioskSession) -> None:
            incoming = selected_ids
            if incoming is None:
                incoming = session.selected_member_ids if kind == PersonKind.MEMBER else session.selected_visitor_ids
            view = self._reconciler.change_page(
                session, kind, start_index=start_index, page_size=page_size, incoming=incoming
            )
            self._show_roster(session, view, display)

        ok, _ = self._guarded(session_id, display, run)
        return ok

    def toggle_people(self, session_id: str, kind: PersonKind, selected_ids: str, display: KioskDisplay) -> bool:
        def run(session: KioskSession) -> None:
            self._show_roster(session, self._reconciler.apply_selection(session, kind, selected_ids), display)

        ok, _ = self._guarded(session_id, display, run)
        return ok

    def confirm(self, session_id: str, member_ids: str, visitor_ids: str, display: KioskDisplay) -> bool:
        """Lock in who is checking in, then pre-select their options from history."""

        def run(session: KioskSession) -> None:
            ids = parse_id_list(member_ids) + parse_id_list(visitor_ids)
            family = self._require_family(session.state)
            if not any(not p.excluded_by_filter for p in family.people):
                raise NoEligiblePeopleError()
            if not ids:
                raise NoPersonSelectedError()

            self._reconciler.apply_confirmed(session, ids)
            self._sessions.save(session)
            if not self._auto_select.execute(self._sessions, session.session_id):
                raise SessionUnavailableError(f"no check-in state for session {session.session_id}")
            refreshed = self._sessions.load(session.session_id)
            if refreshed is not None and refreshed is not session:
                session.state = refreshed.state

        ok, _ = self._guarded(session_id, display, run)
        return ok

    # -------- admission --------
    def begin_add_person(self, session_id: str, kind: PersonKind, display: KioskDisplay) -> bool:
        def run(session: KioskSession) -> None:
            self._require_family(session.state, NO_FAMILY_FOR_ADD)
            session.new_person_kind = kind

        ok, _ = self._guarded(session_id, display, run)
        return ok

    def add_new_person(self, session_id: str, row: PendingPerson, display: KioskDisplay) -> bool:
        def run(session: KioskSession) -> None:
            self._admission.add_new_person(session.state, row, session.new_person_kind, today=self._clock())
            self._process_family(session, display, replace_content=False)

        ok, _ = self._guarded(session_id, display, run)
        return ok

    def add_existing_person(self, session_id: str, person_id: int, display: KioskDisplay) -> bool:
        def run(session: KioskSession) -> None:
            added = self._admission.add_existing_person(
                session.state, person_id, session.new_person_kind, today=self._clock()
            )
            if added is not None:
                self._process_family(session, display, replace_content=False)

        ok, _ = self._guarded(session_id, display, run)
        return ok

    def begin_new_family(self, session_id: str, display: KioskDisplay) -> list[PendingPerson]:
        def run(session: KioskSession) -> list[PendingPerson]:
            session.pending_family = PendingFamilyBuffer(self._settings.new_family_page_size)
            return session.pending_family.page_rows(0)

        _, rows = self._guarded(session_id, display, run)
        return rows or []

    def change_new_family_page(
        self,
        session_id: str,
        rows: Sequence[PendingPerson],
        start_index: int,
        display: KioskDisplay,
    ) -> list[PendingPerson]:
        def run(session: KioskSession) -> list[PendingPerson]:
            if session.pending_family is None:
                session.pending_family = PendingFamilyBuffer(self._settings.new_family_page_size)
            return session.pending_family.change_page(rows, start_index=start_index)

        _, page = self._guarded(session_id, display, run)
        return page or []

    def cancel_new_family(self, session_id: str) -> None:
        session = self._load(session_id)
        session.pending_family = None
        self._sessions.save(session)

    def save_new_family(self, session_id: str, rows: Sequence[PendingPerson], display: KioskDisplay) -> bool:
        def run(session: KioskSession) -> None:
            buffer = session.pending_family or PendingFamilyBuffer(self._settings.new_family_page_size)
            buffer.store_page(rows)
            self._admission.create_family(
                session.state, buffer.rows, today=self._clock(), campus_id=session.campus_id
            )
            session.pending_family = None
            self._show_results(display, True)
            self._display_families(session, display)
            self._process_family(session, display, replace_content=True)

        ok, _ = self._guarded(session_id, display, run)
        return ok

    # -------- edit info --------
    def load_person_info(
        self, session_id: str, member_ids: str, visitor_ids: str, display: KioskDisplay
    ) -> Optional[PersonInfo]:
        ids = parse_id_list(member_ids) + parse_id_list(visitor_ids)
        _, info = self._guarded(session_id, display, lambda session: self._person_info.load_info(session.state, ids))
        return info

    def save_person_info(
        self, session_id: str, member_ids: str, visitor_ids: str, form: PersonInfoForm, display: KioskDisplay
    ) -> bool:
        ids = parse_id_list(member_ids) + parse_id_list(visitor_ids)
        ok, _ = self._guarded(session_id, display, lambda session: self._person_info.save_info(session.state, ids, form))
        return ok
