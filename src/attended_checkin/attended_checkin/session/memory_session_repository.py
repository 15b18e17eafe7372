from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from .model import KioskSession
from .repository import SessionStateProvider

_logger = logging.getLogger(__name__)


class InMemorySessionStateProvider(SessionStateProvider):
    """Process-local session store; one kiosk session is never shared across workers.

    Sessions not loaded or saved within ``idle_timeout`` are dropped on the next access,
    so abandoned kiosk browsers do not keep their family trees alive.
    """

    def __init__(
        self,
        idle_timeout: Optional[timedelta] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._sessions: dict[str, KioskSession] = {}
        self._touched: dict[str, datetime] = {}
        self._idle_timeout = idle_timeout
        self._clock = clock
        self._lock = threading.Lock()

    def _sweep(self, now: datetime) -> None:
        if self._idle_timeout is None:
            return
        expired = [sid for sid, at in self._touched.items() if now - at > self._idle_timeout]
        for sid in expired:
            self._sessions.pop(sid, None)
            self._touched.pop(sid, None)
        if expired:
            _logger.info("expired %d idle kiosk session(s)", len(expired))

    def load(self, session_id: str) -> Optional[KioskSession]:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            session = self._sessions.get(session_id)
            if session is not None:
                self._touched[session_id] = now
            return session

    def save(self, session: KioskSession) -> None:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._sessions[session.session_id] = session
            self._touched[session.session_id] = now

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
            self._touched.pop(session_id, None)
