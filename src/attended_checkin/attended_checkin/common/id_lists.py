"""Comma-terminated person id lists exchanged with the kiosk UI, e.g. ``"12,47,"``."""

from __future__ import annotations

from typing import Iterable


def parse_id_list(value: str | None) -> list[int]:
    """Parse a delimited id list; blanks and stray separators are ignored."""
    if not value:
        return []
    return [int(part) for part in value.replace(";", ",").replace("|", ",").split(",") if part.strip()]


def format_id_list(ids: Iterable[int]) -> str:
    """Format ids in the established format: each id followed by a comma, empty when no ids."""
    return "".join(f"{int(i)}," for i in ids)
