"""Conversion between the flat stored text and the paragraph representation.

The flat form separates paragraphs with a one-byte delimiter. The paragraph
form keeps the same bytes in the same arena, with every delimiter replaced by
a NUL terminator, and describes each paragraph as a ``(start, length)`` slice.
"""

from notekeep.document.models import Paragraph

TERMINATOR = 0


def encode_delimiter(delimiter: str) -> int:
    encoded = delimiter.encode("utf-8")
    if len(encoded) != 1 or encoded[0] == TERMINATOR:
        raise ValueError(f"delimiter must be a single non-NUL byte: {delimiter!r}")
    return encoded[0]


def split(arena: bytearray, length: int, delimiter: int) -> list[Paragraph]:
    """Split the first ``length`` bytes of the arena into paragraphs, in place.

    Every delimiter byte is overwritten with the terminator and a terminator
    is written right after the last paragraph.

    Args:
        arena: The content buffer, holding the flat text at its start.
        length: Number of bytes of flat text in the arena.
        delimiter: The delimiter byte.

    Returns:
        The paragraph slices in document order. Empty text yields no paragraph.
    """
    arena[length] = TERMINATOR
    if length == 0:
        return []

    paragraphs = []
    start = 0
    while True:
        pos = arena.find(delimiter, start, length)
        if pos < 0:
            break
        arena[pos] = TERMINATOR
        paragraphs.append(Paragraph(start, pos - start))
        start = pos + 1
    paragraphs.append(Paragraph(start, length - start))
    return paragraphs


def join(arena: bytearray, paragraphs: list[Paragraph], delimiter: int) -> bytes:
    """Return the flat text, with the delimiter written between paragraphs.

    The arena itself stays in paragraph form.
    """
    if not paragraphs:
        return b""
    flat = bytearray(arena[: paragraphs[-1].end])
    for paragraph in paragraphs[1:]:
        flat[paragraph.start - 1] = delimiter
    return bytes(flat)

