from typing import Generic, TypeVar

from pydantic import BaseModel

from notekeep.config import Settings
from notekeep.document.layout import RowLayout
from notekeep.errors import InvalidIndex
from notekeep.store.slots import SlotStore

R = TypeVar("R", bound=BaseModel)


class RecordListView(Generic[R]):
    """Paged list of the used slots of a store, as shown by list screens."""

    def __init__(
        self,
        store: SlotStore[R],
        row_height: int = 96,
        page_height: int = 584,
        footer_height: int = 88,
    ):
        self._store = store
        self._row_height = row_height
        self._page_height = page_height
        self._footer_height = footer_height
        self._records: list[tuple[int, R]] = []
        self._layout = RowLayout(0, 1)
        self._current_page = 0
        self.refresh()

    @classmethod
    def from_settings(cls, store: SlotStore[R], settings: Settings) -> "RecordListView[R]":
        return cls(
            store,
            row_height=settings.list_row_height,
            page_height=settings.list_page_height,
            footer_height=settings.footer_height,
        )

    def refresh(self) -> None:
        self._records = self._store.enumerate()
        self._layout = RowLayout.compute(
            len(self._records), self._row_height, self._page_height, self._footer_height
        )
        self._current_page = min(self._current_page, self._layout.page_count() - 1)

    @property
    def records(self) -> list[tuple[int, R]]:
        return list(self._records)

    @property
    def page_count(self) -> int:
        return self._layout.page_count()

    @property
    def current_page(self) -> int:
        return self._current_page

    def go_to_page(self, page: int) -> None:
        self._layout.rows_in(page)
        self._current_page = page

    def visible_records(self) -> list[tuple[int, R]]:
        return [self._records[row] for row in self._layout.rows_in(self._current_page)]

    def select(self, position: int) -> int:
        """Return the slot index of the record at ``position`` on the active page."""
        rows = self._layout.rows_in(self._current_page)
        if not 0 <= position < len(rows):
            raise InvalidIndex(f"no record at position {position} on this page")
        return self._records[rows[position]][0]

    def show_slot(self, slot_index: int) -> None:
        """Move to the page holding the record stored in ``slot_index``."""
        for row, (index, _) in enumerate(self._records):
            if index == slot_index:
                self._current_page = self._layout.page_of(row)
                return
        raise InvalidIndex(f"slot {slot_index} is not listed")

    def can_add(self) -> bool:
        return not self._store.is_full
