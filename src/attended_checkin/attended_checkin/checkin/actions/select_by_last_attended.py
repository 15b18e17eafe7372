from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ...session.repository import SessionStateProvider
from ..model import CheckInFamily, CheckInPerson, OptionNode
from .base import CheckInAction

_logger = logging.getLogger(__name__)


def _first_match(nodes: Sequence[OptionNode], last_check_in: datetime) -> Optional[OptionNode]:
    # First in existing order wins; siblings sharing the timestamp are not ranked further.
    return next((n for n in nodes if n.matches(last_check_in)), None)


def select_person_by_last_attended(person: CheckInPerson) -> None:
    """Mark the branch of person's option tree matching their last check-in.

    Each level takes the first node that is already selected or was attended at the
    person's last check-in time. The walk stops at the first level without a match.
    """
    if person.first_time or person.last_check_in is None:
        return

    nodes: Sequence[OptionNode] = person.group_types
    while nodes:
        match = _first_match(nodes, person.last_check_in)
        if match is None:
            return
        match.pre_select()
        nodes = match.children


def select_family_by_last_attended(family: Optional[CheckInFamily]) -> None:
    if family is None:
        return
    for person in family.people:
        if person.selected and not person.first_time:
            select_person_by_last_attended(person)


class SelectByLastAttended(CheckInAction):
    """Selects the group type, group, location and schedule each person last checked into."""

    name = "Select By Last Attended"

    def execute(self, sessions: SessionStateProvider, session_id: str) -> bool:
        session = sessions.load(session_id)
        if session is None:
            _logger.warning("no check-in state for session %s", session_id)
            return False

        select_family_by_last_attended(session.state.find_selected_family())
        sessions.save(session)
        return True
