"""Error conditions raised by the document model and the slot store.

All of them are local and recoverable: a failing operation leaves the
document, the store and the persistent memory exactly as they were.
"""


class NotekeepError(Exception):
    pass


class NotFound(NotekeepError):
    """An unused slot was addressed, or there is nothing to share."""


class StoreFull(NotekeepError):
    """No clear bit is left in the occupancy mask."""


class TooLong(NotekeepError):
    """Text does not fit its declared capacity, or the paragraph limit is reached."""


class InvalidIndex(NotekeepError, IndexError):
    """A page, paragraph or slot reference is out of range."""


class StorageError(NotekeepError):
    """The persistent memory failed to read or write."""
