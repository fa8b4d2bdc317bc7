"""Shared fixtures for notekeep unit tests."""

from pathlib import Path

import pytest
from fakes import FakeMeasurer

from notekeep.config import Settings
from notekeep.session import Session
from notekeep.store.nvram import MemoryNvram
from notekeep.store.service import NotesService


@pytest.fixture
def settings() -> Settings:
    """Small layout numbers: a 200px page, 50px footer, 10px top margin, 20px gaps."""
    return Settings(
        page_height=200,
        footer_height=50,
        top_margin=10,
        paragraph_margin=20,
        available_width=100,
        max_notes=3,
        max_contacts=2,
    )


@pytest.fixture
def memory() -> MemoryNvram:
    return MemoryNvram()


@pytest.fixture
def service(settings: Settings, memory: MemoryNvram) -> NotesService:
    return NotesService.from_settings(settings, memory)


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def measurer() -> FakeMeasurer:
    return FakeMeasurer()


@pytest.fixture
def nvram_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "nvram.yaml"
