from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.constants import (
    DEFAULT_FAMILY_PAGE_SIZE,
    DEFAULT_NEW_FAMILY_PAGE_SIZE,
    DEFAULT_NOT_FOUND_TEXT,
    DEFAULT_PERSON_PAGE_SIZE,
    DEFAULT_SESSION_IDLE_MINUTES,
    DEFAULT_VISITOR_PAGE_SIZE,
)

_POSITIVE = ("family_page_size", "person_page_size", "visitor_page_size", "new_family_page_size", "session_idle_minutes")


@dataclass(frozen=True)
class KioskSettings:
    """Block-level options of the family select screen."""

    enable_add_buttons: bool = True
    not_found_text: str = DEFAULT_NOT_FOUND_TEXT
    default_connection_status: Optional[str] = None
    family_page_size: int = DEFAULT_FAMILY_PAGE_SIZE
    person_page_size: int = DEFAULT_PERSON_PAGE_SIZE
    visitor_page_size: int = DEFAULT_VISITOR_PAGE_SIZE
    new_family_page_size: int = DEFAULT_NEW_FAMILY_PAGE_SIZE
    session_idle_minutes: int = DEFAULT_SESSION_IDLE_MINUTES

    def __post_init__(self):
        for name in _POSITIVE:
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    @classmethod
    def from_module(cls, settings: Any) -> "KioskSettings":
        return cls(
            enable_add_buttons=bool(getattr(settings, "ENABLE_ADD_BUTTONS", True)),
            not_found_text=str(getattr(settings, "NOT_FOUND_TEXT", DEFAULT_NOT_FOUND_TEXT)),
            default_connection_status=getattr(settings, "DEFAULT_CONNECTION_STATUS", None),
            family_page_size=int(getattr(settings, "FAMILY_PAGE_SIZE", DEFAULT_FAMILY_PAGE_SIZE)),
            person_page_size=int(getattr(settings, "PERSON_PAGE_SIZE", DEFAULT_PERSON_PAGE_SIZE)),
            visitor_page_size=int(getattr(settings, "VISITOR_PAGE_SIZE", DEFAULT_VISITOR_PAGE_SIZE)),
            new_family_page_size=int(getattr(settings, "NEW_FAMILY_PAGE_SIZE", DEFAULT_NEW_FAMILY_PAGE_SIZE)),
            session_idle_minutes=int(getattr(settings, "SESSION_IDLE_MINUTES", DEFAULT_SESSION_IDLE_MINUTES)),
        )
