"""Persistent memory backends.

Each ``write`` is atomic: it either lands fully or the previous value is kept.
Multi-field updates are ordered sequences of such writes, decided by callers.
"""

import copy
import os
import tempfile
from pathlib import Path
from typing import Any

import structlog
import yaml

from notekeep.errors import StorageError
from notekeep.ports import PersistentMemory
from notekeep.store.models import LockSettings

logger = structlog.get_logger(__name__)

NVRAM_VERSION = 1
NVRAM_FIRST_SUPPORTED_VERSION = 1

VERSION_KEY = "version"
SETTINGS_KEY = "settings"


class MemoryNvram:
    """Process-local memory, lost when the process exits."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(data) if data else {}

    def read(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self._data.get(key, default))

    def write(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def keys(self) -> list[str]:
        return sorted(self._data)


class YamlNvram:
    """Memory persisted to a YAML file, rewritten through an atomic rename."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            content = self._path.read_text()
            data = yaml.safe_load(content) if content.strip() else None
        except (OSError, yaml.YAMLError) as exc:
            raise StorageError(f"cannot read {self._path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageError(f"{self._path} does not hold a mapping")
        return data

    def read(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self._data.get(key, default))

    def write(self, key: str, value: Any) -> None:
        data = dict(self._data)
        data[key] = copy.deepcopy(value)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w") as tmp:
                    tmp.write(yaml.safe_dump(data, default_flow_style=False))
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"cannot write {key!r} to {self._path}: {exc}") from exc
        self._data = data

    def keys(self) -> list[str]:
        return sorted(self._data)


def ensure_initialized(memory: PersistentMemory, kinds: list[str]) -> bool:
    """Format the memory when it is blank or older than the supported layout.

    The version is written last, so an interrupted format is redone on the
    next start.

    Returns:
        True if the memory was formatted.
    """
    version = memory.read(VERSION_KEY)
    if isinstance(version, int) and version >= NVRAM_FIRST_SUPPORTED_VERSION:
        return False

    logger.info("nvram_format", previous_version=version, kinds=kinds)
    memory.write(SETTINGS_KEY, LockSettings().model_dump())
    for kind in kinds:
        memory.write(mask_key(kind), 0)
    memory.write(VERSION_KEY, NVRAM_VERSION)
    return True


def mask_key(kind: str) -> str:
    return f"{kind}.mask"


def slot_key(kind: str, index: int) -> str:
    return f"{kind}.{index}"
