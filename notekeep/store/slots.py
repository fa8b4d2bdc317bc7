"""Fixed-capacity record array whose occupancy is tracked by a bitmask."""

from typing import Generic, TypeVar

import structlog
from pydantic import BaseModel

from notekeep.config import MAX_SLOTS_PER_KIND
from notekeep.errors import InvalidIndex, NotFound, StoreFull, TooLong
from notekeep.ports import PersistentMemory
from notekeep.store.nvram import mask_key, slot_key

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=BaseModel)


def first_clear_bit(mask: int) -> int:
    return (~mask & (mask + 1)).bit_length() - 1


class SlotStore(Generic[R]):
    """Slots ``0..capacity-1`` of one record kind.

    Bit ``i`` of the mask is authoritative: slot ``i`` holds a live record iff
    the bit is set. A cleared slot keeps its stale payload until reused.
    """

    def __init__(
        self,
        kind: str,
        record_type: type[R],
        capacity: int,
        memory: PersistentMemory,
        field_capacities: dict[str, int] | None = None,
    ):
        if not 0 < capacity <= MAX_SLOTS_PER_KIND:
            raise ValueError(f"capacity must be between 1 and {MAX_SLOTS_PER_KIND}")
        self._kind = kind
        self._record_type = record_type
        self._capacity = capacity
        self._memory = memory
        self._field_capacities = field_capacities or {}

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def mask(self) -> int:
        # bits beyond capacity are never live
        return self._memory.read(mask_key(self._kind), 0) & ((1 << self._capacity) - 1)

    @property
    def used_count(self) -> int:
        return bin(self.mask).count("1")

    @property
    def is_full(self) -> bool:
        return self.used_count == self._capacity

    def is_used(self, index: int) -> bool:
        self._check_index(index)
        return bool(self.mask >> index & 1)

    def allocate(self, record: R) -> int:
        """Store ``record`` in the lowest free slot and return its index.

        The payload is written before the occupancy bit, so an interruption
        between the two writes leaves the slot reported as unused.

        Raises:
            TooLong: If a field exceeds its capacity.
            StoreFull: If every slot is used.
        """
        self.validate(record)
        mask = self.mask
        index = first_clear_bit(mask)
        if index >= self._capacity:
            raise StoreFull(f"all {self._capacity} {self._kind} slots are used")

        self._memory.write(slot_key(self._kind, index), record.model_dump())
        self._memory.write(mask_key(self._kind), mask | 1 << index)
        logger.info("slot_allocated", kind=self._kind, index=index)
        return index

    def free(self, index: int) -> None:
        mask = self._require_used(index)
        self._memory.write(mask_key(self._kind), mask & ~(1 << index))
        logger.info("slot_freed", kind=self._kind, index=index)

    def get(self, index: int) -> R:
        self._require_used(index)
        payload = self._memory.read(slot_key(self._kind, index))
        return self._record_type.model_validate(payload)

    def update(self, index: int, record: R) -> None:
        self._require_used(index)
        self.validate(record)
        self._memory.write(slot_key(self._kind, index), record.model_dump())
        logger.info("slot_updated", kind=self._kind, index=index)

    def enumerate(self) -> list[tuple[int, R]]:
        mask = self.mask
        return [
            (i, self._record_type.model_validate(self._memory.read(slot_key(self._kind, i))))
            for i in range(self._capacity)
            if mask >> i & 1
        ]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._capacity:
            raise InvalidIndex(
                f"{self._kind} slot {index} out of range (capacity={self._capacity})"
            )

    def _require_used(self, index: int) -> int:
        self._check_index(index)
        mask = self.mask
        if not mask >> index & 1:
            raise NotFound(f"{self._kind} slot {index} is not used")
        return mask

    def validate(self, record: R) -> None:
        for field, capacity in self._field_capacities.items():
            size = len(getattr(record, field).encode("utf-8")) + 1
            if size > capacity:
                raise TooLong(
                    f"{self._kind} {field} needs {size} bytes, capacity is {capacity}"
                )
