from __future__ import annotations

from abc import ABC, abstractmethod

from ...session.repository import SessionStateProvider


class CheckInAction(ABC):
    """One step the host check-in workflow runs against a kiosk session's state."""

    name: str = ""

    @abstractmethod
    def execute(self, sessions: SessionStateProvider, session_id: str) -> bool:
        """Return False only when the session state could not be obtained."""
        raise NotImplementedError
