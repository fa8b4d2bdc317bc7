"""Page layout: partitions paragraphs (or list rows) into fixed-height pages."""

from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from notekeep.config import Settings
from notekeep.document.models import Font, Page
from notekeep.errors import InvalidIndex
from notekeep.ports import TextMeasurer

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    page_height: int = 496
    footer_height: int = 88
    top_margin: int = 12
    paragraph_margin: int = 28
    width: int = 416

    @classmethod
    def from_settings(cls, settings: Settings) -> "LayoutConfig":
        return cls(
            page_height=settings.page_height,
            footer_height=settings.footer_height,
            top_margin=settings.top_margin,
            paragraph_margin=settings.paragraph_margin,
            width=settings.available_width,
        )


def choose_font(content: str, threshold: int = 50) -> Font:
    size = len(content.encode("utf-8"))
    return Font.SMALL_REGULAR if size > threshold else Font.LARGE_MEDIUM


def fit_paragraphs(
    paragraphs: Sequence[str],
    start: int,
    budget: int,
    measure: TextMeasurer,
    font: Font,
    config: LayoutConfig,
) -> tuple[int, bool]:
    """Count how many paragraphs from ``start`` fit in a page of ``budget`` pixels.

    A paragraph fits while the accumulated height, upper margin and
    inter-paragraph margins included, stays strictly below the budget.

    Returns:
        Tuple of (count, overflow). When not even the first paragraph fits,
        the count is forced to 1 and overflow is True.
    """
    count = 0
    height = config.top_margin
    while start + count < len(paragraphs):
        if count > 0:
            height += config.paragraph_margin
        height += measure(paragraphs[start + count], font, config.width)
        if height >= budget:
            break
        count += 1
    if count == 0 and start < len(paragraphs):
        return 1, True
    return count, False


def paginate(
    paragraphs: Sequence[str],
    measure: TextMeasurer,
    font: Font,
    config: LayoutConfig,
) -> list[Page]:
    """Greedily pack paragraphs into pages.

    A page other than the first that would end the document is packed again
    with the footer height taken off its budget, leaving room for the footer
    shown on the last page of a multi-page document.
    """
    pages: list[Page] = []
    first = 0
    while first < len(paragraphs):
        count, overflow = fit_paragraphs(
            paragraphs, first, config.page_height, measure, font, config
        )
        if pages and first + count == len(paragraphs):
            count, overflow = fit_paragraphs(
                paragraphs,
                first,
                config.page_height - config.footer_height,
                measure,
                font,
                config,
            )
        pages.append(Page(index=len(pages), first=first, count=count, overflow=overflow))
        first += count
    return pages


class PageLayout:
    """Page partition of one document, with the page/paragraph queries."""

    def __init__(self, pages: list[Page], paragraph_count: int):
        self._pages = pages
        self._paragraph_count = paragraph_count
        self._firsts = [page.first for page in pages]

    @classmethod
    def compute(
        cls,
        paragraphs: Sequence[str],
        measure: TextMeasurer,
        font: Font = Font.LARGE_MEDIUM,
        config: LayoutConfig | None = None,
    ) -> "PageLayout":
        pages = paginate(paragraphs, measure, font, config or LayoutConfig())
        for page in pages:
            if page.overflow:
                logger.info("page_overflow", page=page.index, paragraph=page.first)
        return cls(pages, len(paragraphs))

    @property
    def pages(self) -> list[Page]:
        return list(self._pages)

    @property
    def has_overflow(self) -> bool:
        return any(page.overflow for page in self._pages)

    def page_count(self) -> int:
        return len(self._pages)

    def page(self, page: int) -> Page:
        if not 0 <= page < len(self._pages):
            raise InvalidIndex(f"page {page} out of range (count={len(self._pages)})")
        return self._pages[page]

    def first_paragraph_of(self, page: int) -> int:
        return self.page(page).first

    def paragraphs_in(self, page: int) -> range:
        return self.page(page).items

    def page_of(self, paragraph: int) -> int:
        if not 0 <= paragraph < self._paragraph_count:
            raise InvalidIndex(
                f"paragraph {paragraph} out of range (count={self._paragraph_count})"
            )
        return bisect_right(self._firsts, paragraph) - 1


class RowLayout:
    """Page partition of a list of fixed-height rows (notes or contacts lists).

    When the rows need more than one page, every page loses the footer
    height to the navigation bar. An empty list still has one page.
    """

    def __init__(self, row_count: int, rows_per_page: int):
        self._row_count = row_count
        self._rows_per_page = rows_per_page

    @classmethod
    def compute(
        cls, row_count: int, row_height: int, page_height: int, footer_height: int
    ) -> "RowLayout":
        per_page = cls._rows_fitting(row_height, page_height)
        if row_count > per_page:
            per_page = cls._rows_fitting(row_height, page_height - footer_height)
        return cls(row_count, per_page)

    @staticmethod
    def _rows_fitting(row_height: int, budget: int) -> int:
        return max((budget - 1) // row_height, 1)

    @property
    def rows_per_page(self) -> int:
        return self._rows_per_page

    def page_count(self) -> int:
        if self._row_count == 0:
            return 1
        return -(-self._row_count // self._rows_per_page)

    def rows_in(self, page: int) -> range:
        if not 0 <= page < self.page_count():
            raise InvalidIndex(f"page {page} out of range (count={self.page_count()})")
        first = page * self._rows_per_page
        return range(first, min(first + self._rows_per_page, self._row_count))

    def page_of(self, row: int) -> int:
        if not 0 <= row < self._row_count:
            raise InvalidIndex(f"row {row} out of range (count={self._row_count})")
        return row // self._rows_per_page


@dataclass(frozen=True)
class FontMetrics:
    glyph_width: int
    line_height: int


DEFAULT_METRICS = {
    Font.SMALL_REGULAR: FontMetrics(glyph_width=8, line_height=24),
    Font.LARGE_MEDIUM: FontMetrics(glyph_width=13, line_height=36),
}


class FixedPitchMeasurer:
    """Measures text as word-wrapped lines of fixed-width glyphs."""

    def __init__(self, metrics: dict[Font, FontMetrics] | None = None):
        self._metrics = metrics or DEFAULT_METRICS

    def __call__(self, text: str, font: Font, width: int) -> int:
        metrics = self._metrics[font]
        per_line = max(width // metrics.glyph_width, 1)
        return self.count_lines(text, per_line) * metrics.line_height

    @staticmethod
    def count_lines(text: str, per_line: int) -> int:
        lines = 1
        used = 0
        for word in text.split(" "):
            length = len(word)
            needed = length if used == 0 else used + 1 + length
            if needed <= per_line:
                used = needed
                continue
            if used > 0:
                lines += 1
            # words longer than a line are broken across lines
            while length > per_line:
                lines += 1
                length -= per_line
            used = length
        return lines
