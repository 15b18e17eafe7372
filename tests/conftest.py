from __future__ import annotations

from datetime import date, datetime

import pytest

from src.attended_checkin.attended_checkin.checkin.pager import PageWindow
from src.attended_checkin.attended_checkin.session.model import Kiosk, KioskLocation, KioskSession

from .fakes import InMemoryNotes, InMemoryPeople, InMemoryReference, default_reference_values


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 9, 0, 0)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def people_store() -> InMemoryPeople:
    return InMemoryPeople()


@pytest.fixture
def notes_store() -> InMemoryNotes:
    return InMemoryNotes()


@pytest.fixture
def reference_lookup() -> InMemoryReference:
    return InMemoryReference(default_reference_values())


@pytest.fixture
def kiosk() -> Kiosk:
    return Kiosk(kiosk_id=1, name="Lobby", locations=(KioskLocation(5, "Lobby"), KioskLocation(6, "Hall", campus_id=2)))


@pytest.fixture
def make_session(kiosk):
    def _make(families=(), *, person_page_size: int = 8, visitor_page_size: int = 4) -> KioskSession:
        session = KioskSession(
            session_id="s1",
            kiosk=kiosk,
            member_pager=PageWindow(person_page_size),
            visitor_pager=PageWindow(visitor_page_size),
        )
        session.state.replace_families(list(families))
        return session

    return _make
