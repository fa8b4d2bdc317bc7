"""Editing session of one opened note: pagination, active page and edits."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from notekeep.config import Settings
from notekeep.document.document import Document
from notekeep.document.layout import LayoutConfig, PageLayout, choose_font
from notekeep.document.models import Font
from notekeep.errors import NotekeepError, TooLong
from notekeep.ports import TextMeasurer
from notekeep.session import Session
from notekeep.store.service import NotesService

logger = structlog.get_logger(__name__)


class NoteDisplay:
    """Shows one note page by page and applies paragraph edits to it.

    Every edit is flattened and saved through the service, then the layout is
    recomputed and the active page follows the edited paragraph.
    """

    def __init__(
        self,
        service: NotesService,
        measure: TextMeasurer,
        settings: Settings | None = None,
    ):
        self._service = service
        self._measure = measure
        self._settings = settings or Settings()
        self._config = LayoutConfig.from_settings(self._settings)
        self._document: Document | None = None
        self._note_index: int | None = None
        self._layout: PageLayout | None = None
        self._font = Font.LARGE_MEDIUM
        self._current_page = 0
        self._focused_paragraph = 0

    def open(self, session: Session, note_index: int) -> None:
        note = self._service.get_note(note_index)
        self._document = Document.from_settings(note.title, note.content, self._settings)
        self._note_index = note_index
        self._focused_paragraph = 0
        session.current_note = note_index
        self._relayout()
        logger.debug(
            "note_opened",
            index=note_index,
            paragraphs=len(self._document),
            pages=self.page_count,
        )

    @property
    def document(self) -> Document:
        if self._document is None:
            raise RuntimeError("no note is open")
        return self._document

    @property
    def layout(self) -> PageLayout:
        if self._layout is None:
            raise RuntimeError("no note is open")
        return self._layout

    @property
    def note_index(self) -> int | None:
        return self._note_index

    @property
    def font(self) -> Font:
        return self._font

    @property
    def page_count(self) -> int:
        return self.layout.page_count()

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def is_last_page(self) -> bool:
        return self._current_page >= self.page_count - 1

    def go_to_page(self, page: int) -> None:
        self._focused_paragraph = self.layout.first_paragraph_of(page)
        self._current_page = page

    def visible_paragraphs(self) -> list[tuple[int, str]]:
        """Return (paragraph index, text) pairs of the active page."""
        if len(self.document) == 0:
            return []
        return [
            (i, self.document.body.paragraph_text(i))
            for i in self.layout.paragraphs_in(self._current_page)
        ]

    def can_add_paragraph(self) -> bool:
        return self.is_last_page and len(self.document) < self._settings.max_paragraphs

    def add_paragraph(self, text: str) -> int:
        if len(self.document) >= self._settings.max_paragraphs:
            raise TooLong(f"a note holds at most {self._settings.max_paragraphs} paragraphs")
        with self._saving():
            index = self.document.body.insert_at_end(text)
            self._focused_paragraph = index
        return index

    def edit_paragraph(self, index: int, text: str) -> None:
        """Replace a paragraph; an empty text removes it."""
        if not text:
            self.delete_paragraph(index)
            return
        with self._saving():
            self.document.body.update(index, text)
            self._focused_paragraph = index

    def delete_paragraph(self, index: int) -> None:
        with self._saving():
            self.document.body.delete(index)
            self._focused_paragraph = index

    def rename(self, title: str) -> None:
        with self._saving():
            self.document.title = title

    @contextmanager
    def _saving(self) -> Iterator[None]:
        """Persist the edit made in the block, or undo it if saving fails."""
        document = self.document
        title, content = document.title, document.content
        focused = self._focused_paragraph
        yield
        try:
            self._service.modify_note(self._note_index, document.title, document.content)
        except NotekeepError:
            document.title = title
            document.body.load(content)
            self._focused_paragraph = focused
            logger.warning("note_save_failed", index=self._note_index)
            raise
        self._relayout()

    def _relayout(self) -> None:
        document = self.document
        self._font = choose_font(document.content, self._settings.small_font_threshold)
        self._layout = PageLayout.compute(
            document.paragraphs, self._measure, self._font, self._config
        )
        if len(document) == 0:
            self._focused_paragraph = 0
            self._current_page = 0
            return
        self._focused_paragraph = min(self._focused_paragraph, len(document) - 1)
        self._current_page = self._layout.page_of(self._focused_paragraph)
