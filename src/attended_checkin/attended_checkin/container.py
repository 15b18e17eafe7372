from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional, Sequence

from .admission.service import AdmissionService
from .checkin.actions.base import CheckInAction
from .checkin.actions.select_by_last_attended import SelectByLastAttended
from .checkin.roster import RosterReconciler
from .database.connection import DBConfig, DatabaseConnection
from .kiosk.activities import ActionActivityRunner, ActivityRunner
from .kiosk.service import FamilySelectService
from .kiosk.settings import KioskSettings
from .people.mysql_note_repository import MySQLNoteRepository
from .people.mysql_person_repository import MySQLPersonRepository
from .people.repository import NoteStore, PersonStore
from .people.service import PersonInfoService
from .reference.mysql_reference_repository import MySQLReferenceRepository
from .reference.repository import ReferenceDataLookup
from .reference.service import ReferenceDataService
from .session.memory_session_repository import InMemorySessionStateProvider
from .session.repository import SessionStateProvider


@dataclass(frozen=True)
class Container:
    settings: KioskSettings

    sessions: SessionStateProvider
    people_repo: PersonStore
    notes_repo: NoteStore
    reference_repo: ReferenceDataLookup

    reference_service: ReferenceDataService
    admission_service: AdmissionService
    person_info_service: PersonInfoService
    family_select_service: FamilySelectService


def wire_container(
    *,
    settings: KioskSettings,
    people_repo: PersonStore,
    notes_repo: NoteStore,
    reference_repo: ReferenceDataLookup,
    sessions: Optional[SessionStateProvider] = None,
    activities: Optional[ActivityRunner] = None,
    workflow: Optional[Mapping[str, Sequence[CheckInAction]]] = None,
) -> Container:
    """Assemble services over the given collaborators."""
    if sessions is None:
        sessions = InMemorySessionStateProvider(idle_timeout=timedelta(minutes=settings.session_idle_minutes))
    activities = activities or ActionActivityRunner(sessions, workflow)

    reference_service = ReferenceDataService(reference_repo)
    admission_service = AdmissionService(
        people_repo,
        reference_service,
        default_connection_status=settings.default_connection_status,
    )
    person_info_service = PersonInfoService(people_repo, notes_repo)
    family_select_service = FamilySelectService(
        sessions,
        admission_service,
        person_info_service,
        activities,
        settings,
        reconciler=RosterReconciler(),
        auto_select=SelectByLastAttended(),
    )

    return Container(
        settings=settings,
        sessions=sessions,
        people_repo=people_repo,
        notes_repo=notes_repo,
        reference_repo=reference_repo,
        reference_service=reference_service,
        admission_service=admission_service,
        person_info_service=person_info_service,
        family_select_service=family_select_service,
    )


def build_container(*, db_config: dict, settings: Optional[KioskSettings] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        settings=settings or KioskSettings(),
        people_repo=MySQLPersonRepository(conn),
        notes_repo=MySQLNoteRepository(conn),
        reference_repo=MySQLReferenceRepository(conn),
    )
