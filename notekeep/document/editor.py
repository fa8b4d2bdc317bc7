"""In-place editing of one paragraph inside a fixed-capacity content arena."""

import dataclasses

import structlog

from notekeep.document.models import Paragraph
from notekeep.document.splitter import TERMINATOR, encode_delimiter, join, split
from notekeep.errors import InvalidIndex, TooLong

logger = structlog.get_logger(__name__)


class ParagraphEditor:
    """Owns the content arena of one document and the paragraph slices into it.

    The arena is allocated once at its declared capacity and never grows.
    Every paragraph is followed by a terminator byte, so the bytes in use are
    ``sum(lengths) + count`` (one byte for an empty document).
    """

    def __init__(self, capacity: int, delimiter: str = "\n"):
        if capacity < 1:
            raise ValueError("capacity must leave room for the terminator")
        self._capacity = capacity
        self._delimiter = encode_delimiter(delimiter)
        self._arena = bytearray(capacity)
        self._paragraphs: list[Paragraph] = []

    @classmethod
    def from_text(
        cls, text: str, capacity: int, delimiter: str = "\n"
    ) -> "ParagraphEditor":
        editor = cls(capacity, delimiter)
        editor.load(text)
        return editor

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def paragraphs(self) -> list[Paragraph]:
        return list(self._paragraphs)

    @property
    def used_bytes(self) -> int:
        if not self._paragraphs:
            return 1
        return self._paragraphs[-1].end + 1

    @property
    def free_bytes(self) -> int:
        return self._capacity - self.used_bytes

    def __len__(self) -> int:
        return len(self._paragraphs)

    def load(self, text: str) -> None:
        """Replace the whole content with ``text`` (flat form) and split it."""
        data = text.encode("utf-8")
        if TERMINATOR in data:
            raise ValueError("text must not contain NUL bytes")
        if len(data) + 1 > self._capacity:
            raise TooLong(
                f"content needs {len(data) + 1} bytes, capacity is {self._capacity}"
            )
        self._arena[:] = bytes(self._capacity)
        self._arena[: len(data)] = data
        self._paragraphs = split(self._arena, len(data), self._delimiter)

    def flatten(self) -> bytes:
        return join(self._arena, self._paragraphs, self._delimiter)

    def text(self) -> str:
        return self.flatten().decode("utf-8")

    def paragraph_text(self, index: int) -> str:
        paragraph = self._get(index)
        return self._arena[paragraph.start : paragraph.end].decode("utf-8")

    def paragraph_texts(self) -> list[str]:
        return [
            self._arena[p.start : p.end].decode("utf-8") for p in self._paragraphs
        ]

    def update(self, index: int, new_text: str) -> None:
        """Replace paragraph ``index`` with ``new_text``, keeping all others intact.

        When the length changes, the block holding every later paragraph is
        moved by the length difference first, then the new text is written
        into the resized slot and the later start offsets are shifted.

        Raises:
            InvalidIndex: If there is no paragraph at ``index``.
            TooLong: If the new text does not fit; nothing is written then.
        """
        current = self._get(index)
        data = self._encode_paragraph(new_text)
        delta = len(data) - current.length

        if delta == 0:
            self._arena[current.start : current.end] = data
            return

        used = self.used_bytes
        if used + delta > self._capacity:
            raise TooLong(
                f"paragraph {index} needs {delta} more bytes, {self.free_bytes} free"
            )

        if index < len(self._paragraphs) - 1:
            tail_start = current.end + 1
            self._arena[tail_start + delta : used + delta] = self._arena[
                tail_start:used
            ]
        if delta < 0:
            self._arena[used + delta : used] = bytes(-delta)

        self._arena[current.start : current.start + len(data)] = data
        self._arena[current.start + len(data)] = TERMINATOR

        self._paragraphs[index] = Paragraph(current.start, len(data))
        for i in range(index + 1, len(self._paragraphs)):
            shifted = self._paragraphs[i].start + delta
            self._paragraphs[i] = dataclasses.replace(self._paragraphs[i], start=shifted)
        logger.debug("paragraph_updated", index=index, delta=delta)

    def insert_at_end(self, text: str) -> int:
        """Append a paragraph after the last one and return its index."""
        data = self._encode_paragraph(text)
        start = self._paragraphs[-1].end + 1 if self._paragraphs else 0
        if start + len(data) + 1 > self._capacity:
            raise TooLong(
                f"new paragraph needs {len(data) + 1} bytes, {self.free_bytes} free"
            )
        self._arena[start : start + len(data)] = data
        self._arena[start + len(data)] = TERMINATOR
        self._paragraphs.append(Paragraph(start, len(data)))
        return len(self._paragraphs) - 1

    def delete(self, index: int) -> None:
        """Remove paragraph ``index`` and its terminator, closing the gap."""
        target = self._get(index)
        used = self.used_bytes
        gap = target.length + 1

        if index == len(self._paragraphs) - 1:
            # the previous paragraph's terminator becomes the final one
            self._arena[target.start : used] = bytes(used - target.start)
        else:
            tail_start = target.start + gap
            self._arena[target.start : used - gap] = self._arena[tail_start:used]
            self._arena[used - gap : used] = bytes(gap)
            for i in range(index + 1, len(self._paragraphs)):
                shifted = self._paragraphs[i].start - gap
                self._paragraphs[i] = dataclasses.replace(
                    self._paragraphs[i], start=shifted
                )

        del self._paragraphs[index]
        logger.debug("paragraph_deleted", index=index, remaining=len(self._paragraphs))

    def _get(self, index: int) -> Paragraph:
        if not 0 <= index < len(self._paragraphs):
            raise InvalidIndex(
                f"paragraph {index} out of range (count={len(self._paragraphs)})"
            )
        return self._paragraphs[index]

    def _encode_paragraph(self, text: str) -> bytes:
        data = text.encode("utf-8")
        if TERMINATOR in data or self._delimiter in data:
            raise ValueError("paragraph text must not contain the delimiter or NUL")
        if len(data) + 1 > self._capacity:
            raise TooLong(
                f"paragraph needs {len(data) + 1} bytes, capacity is {self._capacity}"
            )
        return data
