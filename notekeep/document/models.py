from dataclasses import dataclass
from enum import Enum


class Font(str, Enum):
    SMALL_REGULAR = "small_regular"
    LARGE_MEDIUM = "large_medium"


@dataclass(frozen=True)
class Paragraph:
    """A slice of the content arena; the byte at ``end`` is its terminator."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class Page:
    index: int
    first: int  # index of the first paragraph (or row) on the page
    count: int
    overflow: bool = False  # a single item taller than the whole budget

    @property
    def items(self) -> range:
        return range(self.first, self.first + self.count)
