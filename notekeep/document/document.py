from notekeep.config import Settings
from notekeep.document.editor import ParagraphEditor
from notekeep.errors import TooLong


class Document:
    """A note opened for editing: its title and its paragraph-split body."""

    def __init__(
        self,
        title: str,
        content: str,
        title_capacity: int = 128,
        content_capacity: int = 512,
        delimiter: str = "\n",
    ):
        self._title_capacity = title_capacity
        self._title = ""
        self.title = title
        self.body = ParagraphEditor.from_text(content, content_capacity, delimiter)

    @classmethod
    def from_settings(cls, title: str, content: str, settings: Settings) -> "Document":
        return cls(
            title,
            content,
            title_capacity=settings.title_capacity,
            content_capacity=settings.content_capacity,
            delimiter=settings.delimiter,
        )

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        size = len(value.encode("utf-8")) + 1
        if size > self._title_capacity:
            raise TooLong(f"title needs {size} bytes, capacity is {self._title_capacity}")
        self._title = value

    @property
    def content(self) -> str:
        return self.body.text()

    @property
    def paragraphs(self) -> list[str]:
        return self.body.paragraph_texts()

    def __len__(self) -> int:
        return len(self.body)
