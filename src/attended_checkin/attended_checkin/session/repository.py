from __future__ import annotations

from typing import Optional, Protocol

from .model import KioskSession


class SessionStateProvider(Protocol):
    """Supplies and keeps the check-in state of active kiosk sessions."""

    def load(self, session_id: str) -> Optional[KioskSession]:
        raise NotImplementedError

    def save(self, session: KioskSession) -> None:
        raise NotImplementedError

    def discard(self, session_id: str) -> None:
        raise NotImplementedError
