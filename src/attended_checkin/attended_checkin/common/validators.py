from __future__ import annotations


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()
