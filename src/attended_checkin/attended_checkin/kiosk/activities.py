from __future__ import annotations

from typing import Mapping, Protocol, Sequence

from ..checkin.actions.base import CheckInAction
from ..session.model import KioskSession
from ..session.repository import SessionStateProvider


class ActivityRunner(Protocol):
    """Runs a named activity of the host check-in workflow; returns its error messages."""

    def process_activity(self, name: str, session: KioskSession) -> list[str]:
        raise NotImplementedError


class ActionActivityRunner(ActivityRunner):
    """Runs the check-in actions registered for each activity name, in order.

    An activity with no registered actions succeeds without doing anything.
    """

    def __init__(self, sessions: SessionStateProvider, activities: Mapping[str, Sequence[CheckInAction]] | None = None):
        self._sessions = sessions
        self._activities = {name: tuple(actions) for name, actions in (activities or {}).items()}

    def process_activity(self, name: str, session: KioskSession) -> list[str]:
        errors: list[str] = []
        self._sessions.save(session)
        for action in self._activities.get(name, ()):
            if not action.execute(self._sessions, session.session_id):
                errors.append(f"{action.name or type(action).__name__} could not run")
        return errors
