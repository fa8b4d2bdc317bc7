"""Tests for ParagraphEditor."""

import pytest

from notekeep.document.editor import ParagraphEditor
from notekeep.document.models import Paragraph
from notekeep.errors import InvalidIndex, TooLong


def reopen(editor: ParagraphEditor) -> ParagraphEditor:
    """Split the flattened text again, as the next open of the note would."""
    return ParagraphEditor.from_text(editor.text(), editor.capacity)


class TestLoad:
    def test_loads_paragraphs(self):
        """from_text should split the content into paragraphs."""
        editor = ParagraphEditor.from_text("Hello\nWorld", 64)
        assert editor.paragraph_texts() == ["Hello", "World"]
        assert len(editor) == 2

    def test_used_bytes_counts_terminators(self):
        """Used bytes are the text bytes plus one terminator per paragraph."""
        editor = ParagraphEditor.from_text("Hello\nWorld", 64)
        assert editor.used_bytes == 12
        assert editor.free_bytes == 52

    def test_content_filling_capacity_exactly(self):
        """Content plus its terminator may use the whole capacity."""
        editor = ParagraphEditor.from_text("Hello\nWorld", 12)
        assert editor.text() == "Hello\nWorld"

    def test_content_over_capacity_raises(self):
        """Content that cannot fit with its terminator is TooLong."""
        with pytest.raises(TooLong):
            ParagraphEditor.from_text("Hello\nWorld!", 12)

    def test_nul_in_content_rejected(self):
        """Content must not contain the terminator byte."""
        with pytest.raises(ValueError):
            ParagraphEditor.from_text("a\0b", 16)

    def test_empty_content(self):
        """An empty document uses a single terminator byte."""
        editor = ParagraphEditor.from_text("", 16)
        assert len(editor) == 0
        assert editor.used_bytes == 1
        assert editor.text() == ""

    def test_load_replaces_previous_content(self):
        """load discards the previous paragraphs."""
        editor = ParagraphEditor.from_text("a\nb\nc", 16)
        editor.load("x")
        assert editor.paragraph_texts() == ["x"]


class TestUpdate:
    def test_update_example(self):
        """update(1, "Mars") on Hello/World gives "Hello\\nMars"."""
        editor = ParagraphEditor.from_text("Hello\nWorld", 64)
        editor.update(1, "Mars")
        assert editor.paragraph_texts() == ["Hello", "Mars"]
        assert editor.text() == "Hello\nMars"

    def test_same_length_overwrites_in_place(self):
        """An update of equal length leaves every offset unchanged."""
        editor = ParagraphEditor.from_text("aa\nbb\ncc", 64)
        before = editor.paragraphs
        editor.update(1, "BB")
        assert editor.paragraphs == before
        assert editor.text() == "aa\nBB\ncc"

    def test_growing_middle_paragraph_shifts_later_ones(self):
        """Later paragraphs move right by the growth."""
        editor = ParagraphEditor.from_text("A\nB\nC", 64)
        editor.update(1, "Bee")
        assert editor.paragraphs == [Paragraph(0, 1), Paragraph(2, 3), Paragraph(6, 1)]
        assert editor.text() == "A\nBee\nC"

    def test_shrinking_middle_paragraph_shifts_later_ones(self):
        """Later paragraphs move left by the shrink."""
        editor = ParagraphEditor.from_text("A\nBeee\nC\nD", 64)
        editor.update(1, "B")
        assert editor.paragraphs == [
            Paragraph(0, 1),
            Paragraph(2, 1),
            Paragraph(4, 1),
            Paragraph(6, 1),
        ]
        assert editor.text() == "A\nB\nC\nD"
        assert editor.used_bytes == 8

    def test_update_last_paragraph(self):
        """The last paragraph can grow and shrink without a block move."""
        editor = ParagraphEditor.from_text("A\nB", 64)
        editor.update(1, "Bravo")
        assert editor.text() == "A\nBravo"
        editor.update(1, "b")
        assert editor.text() == "A\nb"

    def test_update_to_empty_keeps_paragraph(self):
        """An empty text leaves an empty paragraph at the editor level."""
        editor = ParagraphEditor.from_text("A\nB\nC", 64)
        editor.update(1, "")
        assert editor.paragraph_texts() == ["A", "", "C"]
        assert editor.text() == "A\n\nC"

    @pytest.mark.parametrize("index", [0, 1, 2, 3])
    def test_other_paragraphs_byte_identical(self, index: int):
        """After update(i, t) a re-split document differs only at index i."""
        original = ["first", "second one", "", "fourth"]
        editor = ParagraphEditor.from_text("\n".join(original), 128)
        editor.update(index, "replacement text")
        expected = list(original)
        expected[index] = "replacement text"
        assert reopen(editor).paragraph_texts() == expected

    def test_growth_over_capacity_is_atomic(self):
        """A growth that does not fit raises TooLong and changes nothing."""
        editor = ParagraphEditor.from_text("Hello\nWorld", 12)
        before = editor.paragraphs
        with pytest.raises(TooLong):
            editor.update(0, "Hello!")
        assert editor.paragraphs == before
        assert editor.text() == "Hello\nWorld"

    def test_out_of_range_index(self):
        """Updating a missing paragraph raises InvalidIndex."""
        editor = ParagraphEditor.from_text("A\nB", 16)
        with pytest.raises(InvalidIndex):
            editor.update(2, "x")

    def test_delimiter_in_text_rejected(self):
        """A paragraph cannot contain the delimiter."""
        editor = ParagraphEditor.from_text("A\nB", 16)
        with pytest.raises(ValueError):
            editor.update(0, "x\ny")
        assert editor.text() == "A\nB"

    def test_multibyte_lengths_are_bytes(self):
        """Capacity is counted in UTF-8 bytes."""
        editor = ParagraphEditor.from_text("a", 4)
        with pytest.raises(TooLong):
            editor.update(0, "éé")
        editor.update(0, "é")
        assert editor.text() == "é"


class TestInsertAtEnd:
    def test_appends_after_last_paragraph(self):
        """insert_at_end adds a paragraph after the last terminator."""
        editor = ParagraphEditor.from_text("A\nB", 16)
        index = editor.insert_at_end("C")
        assert index == 2
        assert editor.paragraphs[2] == Paragraph(4, 1)
        assert editor.text() == "A\nB\nC"

    def test_insert_into_empty_document(self):
        """The first paragraph starts at offset 0."""
        editor = ParagraphEditor.from_text("", 16)
        assert editor.insert_at_end("first") == 0
        assert editor.text() == "first"

    def test_insert_empty_paragraph(self):
        """An empty paragraph only costs its terminator."""
        editor = ParagraphEditor.from_text("abcd", 6)
        editor.insert_at_end("")
        assert editor.text() == "abcd\n"

    def test_insert_over_capacity_raises(self):
        """A paragraph that does not fit raises TooLong and is not added."""
        editor = ParagraphEditor.from_text("abcd", 6)
        with pytest.raises(TooLong):
            editor.insert_at_end("x")
        assert len(editor) == 1
        assert editor.text() == "abcd"


class TestDelete:
    def test_delete_first_example(self):
        """delete(0) on A/B/C leaves B/C."""
        editor = ParagraphEditor.from_text("A\nB\nC", 16)
        editor.delete(0)
        assert editor.paragraph_texts() == ["B", "C"]
        assert len(editor) == 2
        assert editor.text() == "B\nC"

    def test_delete_middle_closes_gap(self):
        """The gap and its terminator are removed."""
        editor = ParagraphEditor.from_text("one\ntwo\nthree", 32)
        editor.delete(1)
        assert editor.paragraphs == [Paragraph(0, 3), Paragraph(4, 5)]
        assert editor.used_bytes == 10

    def test_delete_last_of_several(self):
        """Deleting the last paragraph truncates after the previous one."""
        editor = ParagraphEditor.from_text("A\nB\nC", 16)
        editor.delete(2)
        assert editor.paragraph_texts() == ["A", "B"]
        assert editor.text() == "A\nB"
        assert editor.used_bytes == 4

    def test_delete_sole_paragraph(self):
        """Deleting the only paragraph leaves an empty document."""
        editor = ParagraphEditor.from_text("only", 16)
        editor.delete(0)
        assert len(editor) == 0
        assert editor.text() == ""
        assert editor.used_bytes == 1

    def test_freed_space_is_reusable(self):
        """After a delete the freed bytes can hold a new paragraph."""
        editor = ParagraphEditor.from_text("abc\nde", 7)
        editor.delete(0)
        editor.insert_at_end("fg")
        assert editor.text() == "de\nfg"

    def test_delete_preserves_order(self):
        """Remaining paragraphs keep their relative order."""
        editor = ParagraphEditor.from_text("a\nb\nc\nd\ne", 32)
        editor.delete(2)
        assert editor.paragraph_texts() == ["a", "b", "d", "e"]
        assert reopen(editor).paragraph_texts() == ["a", "b", "d", "e"]

    def test_delete_out_of_range(self):
        """Deleting a missing paragraph raises InvalidIndex."""
        editor = ParagraphEditor.from_text("A", 16)
        with pytest.raises(InvalidIndex):
            editor.delete(-1)
        with pytest.raises(InvalidIndex):
            editor.delete(1)
