from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ReferenceType
from .model import ReferenceValue


class ReferenceDataLookup(Protocol):
    """Read-only enumerations keyed by a stable identifier."""

    def get(self, reference_type: ReferenceType, key: str) -> Optional[ReferenceValue]:
        raise NotImplementedError

    def list_values(self, reference_type: ReferenceType) -> Sequence[ReferenceValue]:
        raise NotImplementedError
