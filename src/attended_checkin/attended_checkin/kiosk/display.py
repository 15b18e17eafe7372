from __future__ import annotations

from typing import Any, Protocol, Sequence

from ..checkin.model import CheckInFamily, CheckInPerson
from ..checkin.pager import PageWindow
from ..core.enums import Severity
from . import serializers


class KioskDisplay(Protocol):
    """What the family select screen can be told to show after each operation."""

    def show_results(self, *, has_results: bool, title: str, message: str, show_add_buttons: bool) -> None:
        raise NotImplementedError

    def show_families(self, families: Sequence[CheckInFamily], pager: PageWindow) -> None:
        raise NotImplementedError

    def show_members(self, members: Sequence[CheckInPerson], pager: PageWindow, selected_ids: str) -> None:
        raise NotImplementedError

    def show_visitors(self, visitors: Sequence[CheckInPerson], pager: PageWindow, selected_ids: str) -> None:
        raise NotImplementedError

    def show_warning(self, message: str, severity: Severity) -> None:
        raise NotImplementedError


class RecordingDisplay(KioskDisplay):
    """Collects display calls into a JSON-ready payload for the HTTP layer."""

    def __init__(self):
        self.payload: dict[str, Any] = {}
        self.warnings: list[dict[str, str]] = []

    def show_results(self, *, has_results: bool, title: str, message: str, show_add_buttons: bool) -> None:
        self.payload["results"] = {
            "has_results": has_results,
            "title": title,
            "message": message,
            "show_add_buttons": show_add_buttons,
        }

    def show_families(self, families: Sequence[CheckInFamily], pager: PageWindow) -> None:
        self.payload["families"] = {
            "items": [serializers.family_to_dict(f) for f in pager.page_of(families)],
            "total": len(families),
            "pager": serializers.pager_to_dict(pager),
        }

    def _people(self, people: Sequence[CheckInPerson], pager: PageWindow, selected_ids: str) -> dict[str, Any]:
        return {
            "items": [serializers.checkin_person_to_dict(p) for p in pager.page_of(people)],
            "total": len(people),
            "selected_ids": selected_ids,
            "pager": serializers.pager_to_dict(pager),
        }

    def show_members(self, members: Sequence[CheckInPerson], pager: PageWindow, selected_ids: str) -> None:
        self.payload["members"] = self._people(members, pager, selected_ids)

    def show_visitors(self, visitors: Sequence[CheckInPerson], pager: PageWindow, selected_ids: str) -> None:
        self.payload["visitors"] = self._people(visitors, pager, selected_ids)

    def show_warning(self, message: str, severity: Severity) -> None:
        self.warnings.append({"message": message, "severity": severity.value})

    def to_dict(self) -> dict[str, Any]:
        return {**self.payload, "warnings": list(self.warnings)}
