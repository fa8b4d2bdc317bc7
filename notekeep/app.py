import logging

import structlog

from notekeep.app_state import AppState
from notekeep.config import Settings
from notekeep.document.display import NoteDisplay
from notekeep.document.layout import FixedPitchMeasurer
from notekeep.ports import PersistentMemory, TextMeasurer
from notekeep.session import Session
from notekeep.store.nvram import MemoryNvram, YamlNvram
from notekeep.store.service import NotesService

logger = structlog.get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    measure: TextMeasurer | None = None,
    memory: PersistentMemory | None = None,
) -> AppState:
    """Build the object graph of the notes application.

    Without an explicit memory, ``settings.nvram_path`` selects a YAML file;
    when it is unset everything stays in process memory.
    """
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    if memory is None:
        memory = YamlNvram(settings.nvram_path) if settings.nvram_path else MemoryNvram()

    service = NotesService.from_settings(settings, memory)
    display = NoteDisplay(service, measure or FixedPitchMeasurer(), settings)
    logger.info(
        "app_started",
        notes=service.notes.used_count,
        contacts=service.contacts.used_count,
        locked=service.is_locked(),
    )
    return AppState(
        settings=settings,
        memory=memory,
        notes_service=service,
        display=display,
        session=Session(),
    )
