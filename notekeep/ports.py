from typing import Any, Protocol

from notekeep.document.models import Font


class TextMeasurer(Protocol):
    def __call__(self, text: str, font: Font, width: int) -> int: ...


class PersistentMemory(Protocol):
    def read(self, key: str, default: Any = None) -> Any: ...

    def write(self, key: str, value: Any) -> None: ...

    def keys(self) -> list[str]: ...
