from __future__ import annotations

from typing import Optional, Sequence

from .model import PendingPerson


class PendingFamilyBuffer:
    """Rows an operator fills in page by page while creating a brand-new family.

    The buffer starts two pages long and grows by one page whenever the operator
    pages up to its end, so there is always a blank page ahead.
    """

    def __init__(self, page_size: int):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._page_size = int(page_size)
        self._rows: list[PendingPerson] = [PendingPerson() for _ in range(self._page_size * 2)]
        self._current_page: Optional[int] = None

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> int:
        return self._current_page or 0

    @property
    def rows(self) -> tuple[PendingPerson, ...]:
        return tuple(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def page_rows(self, page_index: Optional[int] = None) -> list[PendingPerson]:
        index = self.current_page if page_index is None else int(page_index)
        start = index * self._page_size
        return list(self._rows[start : start + self._page_size])

    def store_page(self, rows: Sequence[PendingPerson]) -> None:
        """Write the rows of the page currently shown back into the buffer."""
        offset = self.current_page * self._page_size
        for i, row in enumerate(rows[: self._page_size]):
            self._rows[offset + i] = row

    def change_page(self, rows: Sequence[PendingPerson], *, start_index: int) -> list[PendingPerson]:
        """Keep the rows of the page being left, then move to the page at start_index."""
        if start_index < 0:
            raise ValueError("start_index must not be negative")

        self.store_page(rows)
        while start_index + self._page_size >= len(self._rows):
            self._rows.extend(PendingPerson() for _ in range(self._page_size))

        self._current_page = start_index // self._page_size
        return self.page_rows()

    def valid_rows(self) -> list[PendingPerson]:
        return [row for row in self._rows if row.is_valid()]
