from typing import NamedTuple

from notekeep.config import Settings
from notekeep.document.display import NoteDisplay
from notekeep.ports import PersistentMemory
from notekeep.session import Session
from notekeep.store.service import NotesService


class AppState(NamedTuple):
    settings: Settings
    memory: PersistentMemory
    notes_service: NotesService
    display: NoteDisplay
    session: Session
