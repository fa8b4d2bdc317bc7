from dataclasses import dataclass

from notekeep.store.models import Note


@dataclass
class Session:
    """State of one user session, from app start until it is locked again."""

    unlocked: bool = False
    current_note: int | None = None  # slot index of the opened note
    sharing_with: int | None = None  # contact slot index
    new_contact_name: str | None = None  # waiting for the host to send an address
    received_note: Note | None = None  # shared note waiting for accept/reject

    def lock(self) -> None:
        self.unlocked = False
        self.current_note = None
        self.sharing_with = None
        self.new_contact_name = None
        self.received_note = None
