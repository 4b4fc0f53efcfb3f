"""Fixed-capacity slot buffer exchanged with BinTree conversions.

A SequenceBuffer is an indexable run of slots, each holding a NodeData or
None. BinTree.to_sorted_sequence() moves payloads out of a tree into the
slots, and BinTree.from_sorted_sequence() moves them back, so the payload
objects themselves travel between the two without being copied.

Example:
    ```python
    buf = SequenceBuffer(capacity=10)
    tree.to_sorted_sequence(buf)    # tree is now empty
    print(buf.values())             # ['and', 'e', 'm', ...]
    tree.from_sorted_sequence(buf)  # buf is now empty, tree balanced
    ```
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, List

from .config import get_settings
from .exceptions import BufferCapacityError, SequenceLayoutError
from .node_data import NodeData

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class SequenceBuffer:
    """An externally owned array of payload slots.

    Attributes:
        capacity: Maximum number of slots, or None for no limit.
    """

    def __init__(self, capacity: int | None = _UNSET) -> None:
        """Initialize an empty buffer.

        Args:
            capacity: Slot limit. Defaults to the configured buffer_capacity;
                None removes the limit.
        """
        if capacity is _UNSET:
            capacity = get_settings().buffer_capacity
        if capacity is not None and capacity < 0:
            raise BufferCapacityError(
                "Buffer capacity cannot be negative", context={"capacity": capacity}
            )
        self.capacity = capacity
        self._slots: List[NodeData | None] = []

    @classmethod
    def from_values(
        cls, values: Iterable[Any], capacity: int | None = _UNSET
    ) -> SequenceBuffer:
        """Create a buffer holding a NodeData for each value, in order."""
        buf = cls(capacity)
        for value in values:
            buf.append(value if isinstance(value, NodeData) else NodeData(value))
        return buf

    def __len__(self) -> int:
        """Number of slots in use, up to and including the last occupied one."""
        return len(self._slots)

    def __iter__(self) -> Iterator[NodeData]:
        """Iterate over the occupied slots in index order."""
        return (nd for nd in self._slots if nd is not None)

    def __repr__(self) -> str:
        return f"SequenceBuffer({self.values()!r}, capacity={self.capacity})"

    def count(self) -> int:
        """Number of occupied slots."""
        return sum(1 for nd in self._slots if nd is not None)

    def free(self) -> int | None:
        """Slots still available after the last occupied one, or None if unbounded."""
        if self.capacity is None:
            return None
        return self.capacity - len(self._slots)

    def _check_index(self, idx: int) -> None:
        if idx < 0 or (self.capacity is not None and idx >= self.capacity):
            raise BufferCapacityError(
                f"Slot {idx} is outside the buffer",
                context={"index": idx, "capacity": self.capacity},
            )

    def __getitem__(self, idx: int) -> NodeData | None:
        self._check_index(idx)
        return self._slots[idx] if idx < len(self._slots) else None

    def __setitem__(self, idx: int, nd: NodeData | None) -> None:
        self._check_index(idx)
        if idx >= len(self._slots):
            if nd is None:
                return
            self._slots.extend([None] * (idx + 1 - len(self._slots)))
        self._slots[idx] = nd
        self._trim()

    def _trim(self) -> None:
        while self._slots and self._slots[-1] is None:
            self._slots.pop()

    def append(self, nd: NodeData) -> int:
        """Store a payload in the slot after the last occupied one.

        Returns:
            The index written.

        Raises:
            BufferCapacityError: If the buffer is full.
        """
        idx = len(self._slots)
        self._check_index(idx)
        self._slots.append(nd)
        return idx

    def take(self, idx: int) -> NodeData | None:
        """Remove and return the payload at idx, leaving the slot empty."""
        nd = self[idx]
        if nd is not None:
            self._slots[idx] = None
            self._trim()
        return nd

    def occupied_run(self) -> int:
        """Length of the contiguous run of payloads at the front.

        Raises:
            SequenceLayoutError: If an empty slot precedes an occupied one.
        """
        for idx, nd in enumerate(self._slots):
            if nd is None:
                raise SequenceLayoutError(
                    "Buffer payloads must be contiguous from slot 0",
                    context={"gap": idx, "length": len(self._slots)},
                )
        return len(self._slots)

    def clear(self) -> int:
        """Release every payload held by the buffer.

        Returns:
            The number of payloads released.
        """
        released = self.count()
        self._slots.clear()
        if released:
            logger.debug("Released %d payloads from buffer", released)
        return released

    def values(self) -> List[Any]:
        """Wrapped values of the occupied slots, in index order."""
        return [nd.value for nd in self]
