"""NotesService application layer: notes, contacts, passcode lock and sharing."""

import structlog

from notekeep.config import Settings
from notekeep.errors import NotFound
from notekeep.ports import PersistentMemory
from notekeep.session import Session
from notekeep.store.models import MAX_PASSCODE_DIGITS, Contact, LockSettings, Note
from notekeep.store.nvram import SETTINGS_KEY, ensure_initialized
from notekeep.store.slots import SlotStore

logger = structlog.get_logger(__name__)

NOTES_KIND = "notes"
CONTACTS_KIND = "contacts"


class NotesService:
    def __init__(
        self,
        notes: SlotStore[Note],
        contacts: SlotStore[Contact],
        memory: PersistentMemory,
        min_passcode_length: int = 4,
        max_passcode_length: int = MAX_PASSCODE_DIGITS,
    ):
        if not 0 < min_passcode_length <= max_passcode_length <= MAX_PASSCODE_DIGITS:
            raise ValueError(
                f"passcode lengths must satisfy 0 < min <= max <= {MAX_PASSCODE_DIGITS}"
            )
        self._notes = notes
        self._contacts = contacts
        self._memory = memory
        self._min_passcode_length = min_passcode_length
        self._max_passcode_length = max_passcode_length

    @classmethod
    def from_settings(cls, settings: Settings, memory: PersistentMemory) -> "NotesService":
        ensure_initialized(memory, [NOTES_KIND, CONTACTS_KIND])
        notes = SlotStore(
            NOTES_KIND,
            Note,
            settings.max_notes,
            memory,
            {"title": settings.title_capacity, "content": settings.content_capacity},
        )
        contacts = SlotStore(
            CONTACTS_KIND,
            Contact,
            settings.max_contacts,
            memory,
            {
                "name": settings.contact_name_capacity,
                "address": settings.contact_address_capacity,
            },
        )
        return cls(
            notes,
            contacts,
            memory,
            settings.min_passcode_length,
            settings.max_passcode_length,
        )

    @property
    def notes(self) -> SlotStore[Note]:
        return self._notes

    @property
    def contacts(self) -> SlotStore[Contact]:
        return self._contacts

    # Notes

    def list_notes(self) -> list[tuple[int, Note]]:
        return self._notes.enumerate()

    def get_note(self, index: int) -> Note:
        return self._notes.get(index)

    def can_add_note(self) -> bool:
        return not self._notes.is_full

    def add_note(self, title: str, content: str = "") -> int:
        index = self._notes.allocate(Note(title=title, content=content))
        logger.info("note_added", index=index)
        return index

    def modify_note(self, index: int, title: str, content: str) -> None:
        self._notes.update(index, Note(title=title, content=content))

    def delete_note(self, index: int) -> None:
        self._notes.free(index)
        logger.info("note_deleted", index=index)

    # Contacts

    def list_contacts(self) -> list[tuple[int, Contact]]:
        return self._contacts.enumerate()

    def get_contact(self, index: int) -> Contact:
        return self._contacts.get(index)

    def can_add_contact(self) -> bool:
        return not self._contacts.is_full

    def add_contact(self, name: str, address: str) -> int:
        index = self._contacts.allocate(Contact(name=name, address=address))
        logger.info("contact_added", index=index)
        return index

    def modify_contact(self, index: int, name: str, address: str) -> None:
        self._contacts.update(index, Contact(name=name, address=address))

    def delete_contact(self, index: int) -> None:
        self._contacts.free(index)
        logger.info("contact_deleted", index=index)

    def start_new_contact(self, session: Session, name: str) -> None:
        """Remember the name of a contact whose address the host will send."""
        self._contacts.validate(Contact(name=name))
        session.new_contact_name = name

    def add_address(self, session: Session, address: str) -> int:
        """Complete the contact started with start_new_contact.

        Raises:
            NotFound: If no contact is waiting for an address.
            StoreFull: If every contact slot is used.
            TooLong: If the address exceeds its capacity.
        """
        if session.new_contact_name is None:
            raise NotFound("no contact is waiting for an address")
        index = self.add_contact(session.new_contact_name, address)
        session.new_contact_name = None
        return index

    # Lock settings

    def lock_settings(self) -> LockSettings:
        return LockSettings.model_validate(self._memory.read(SETTINGS_KEY) or {})

    def is_locked(self) -> bool:
        return self.lock_settings().locked

    def requires_passcode(self, session: Session) -> bool:
        return self.is_locked() and not session.unlocked

    def check_passcode(self, session: Session, digits: list[int]) -> bool:
        session.unlocked = self.lock_settings().matches(digits)
        if not session.unlocked:
            logger.warning("passcode_rejected", length=len(digits))
        return session.unlocked

    def set_lock_and_passcode(
        self, session: Session, lock: bool, digits: list[int] | None = None
    ) -> None:
        """Turn the passcode lock on (with new digits) or off.

        Turning the lock off keeps the stored digits.

        Raises:
            ValueError: If locking with a passcode of invalid length or digits.
        """
        current = self.lock_settings()
        if not lock:
            unlocked = current.model_copy(update={"locked": False})
            self._memory.write(SETTINGS_KEY, unlocked.model_dump())
            logger.info("lock_disabled")
            return

        digits = list(digits or [])
        if not self._min_passcode_length <= len(digits) <= self._max_passcode_length:
            raise ValueError(
                f"passcode must have {self._min_passcode_length} to "
                f"{self._max_passcode_length} digits"
            )
        padded = digits + [0] * (MAX_PASSCODE_DIGITS - len(digits))
        settings = LockSettings(
            locked=True, passcode_length=len(digits), passcode_digits=padded
        )
        self._memory.write(SETTINGS_KEY, settings.model_dump())
        session.unlocked = True
        logger.info("lock_enabled", length=len(digits))

    # Sharing

    def share_note(self, session: Session, note_index: int, contact_index: int) -> None:
        self._notes.get(note_index)
        self._contacts.get(contact_index)
        session.current_note = note_index
        session.sharing_with = contact_index

    def get_shared_note(self, session: Session) -> Note:
        """Return the note the host asked to send.

        Raises:
            NotFound: If no note is being shared.
        """
        if session.current_note is None:
            raise NotFound("nothing to share")
        note = self._notes.get(session.current_note)
        logger.info(
            "note_shared", index=session.current_note, contact=session.sharing_with
        )
        return note

    def receive_shared_note(self, session: Session, title: str, content: str) -> None:
        note = Note(title=title, content=content)
        self._notes.validate(note)
        session.received_note = note

    def accept_shared_note(self, session: Session) -> int:
        if session.received_note is None:
            raise NotFound("no shared note to accept")
        note = session.received_note
        index = self.add_note(note.title, note.content)
        session.received_note = None
        return index

    def reject_shared_note(self, session: Session) -> None:
        session.received_note = None
