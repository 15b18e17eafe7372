from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")


@dataclass
class PageWindow:
    """Start index / page size of a paged list, plus whether its pager is shown."""

    page_size: int
    start_index: int = 0
    visible: bool = False

    def set_page_properties(self, start_index: int, page_size: int | None = None) -> None:
        if page_size is not None and int(page_size) > 0:
            self.page_size = int(page_size)
        self.start_index = max(0, int(start_index))

    def reset(self) -> None:
        self.start_index = 0
        self.visible = True

    def hide(self) -> None:
        self.start_index = 0
        self.visible = False

    def rebind(self, total: int, *, replace_content: bool) -> None:
        """Show the pager for a re-bound list of ``total`` items.

        Replaced content starts over at window 0; otherwise the current window is kept,
        pulled back to the last page if the list shrank below it.
        """
        if total <= 0:
            self.hide()
            return
        if replace_content:
            self.reset()
            return

        self.visible = True
        if self.start_index >= total:
            last_page = (total - 1) // self.page_size
            self.start_index = last_page * self.page_size

    @property
    def page_index(self) -> int:
        return self.start_index // self.page_size

    def page_of(self, items: Sequence[T]) -> list[T]:
        return list(items[self.start_index : self.start_index + self.page_size])
