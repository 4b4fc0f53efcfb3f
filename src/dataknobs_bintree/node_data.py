"""Comparable payload stored in each tree node."""

from __future__ import annotations

from typing import Any, TextIO


class NodeData:
    """A payload wrapping a single comparable value.

    The tree only relies on the comparison operators, so any totally ordered
    value works; the demo driver uses strings. Equality is value equality.

    Example:
        ```python
        a = NodeData("and")
        b = NodeData("not")
        assert a < b
        assert a == NodeData("and")
        ```
    """

    __slots__ = ("_data",)

    def __init__(self, data: Any = "") -> None:
        """Initialize a payload.

        Args:
            data: The wrapped value, or another NodeData to copy. Defaults to
                the empty string.
        """
        if isinstance(data, NodeData):
            data = data._data
        self._data = data

    @property
    def value(self) -> Any:
        """The wrapped value."""
        return self._data

    def copy(self) -> NodeData:
        """Return an independent payload holding the same value."""
        return NodeData(self._data)

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> NodeData:
        return self.copy()

    def assign(self, other: NodeData) -> NodeData:
        """Overwrite this payload's value with other's, in place.

        Returns:
            This payload, to allow chaining.
        """
        if self is not other:
            self._data = other._data
        return self

    def set_data(self, infile: TextIO) -> bool:
        """Read one line of input into this payload.

        The trailing line terminator is dropped.

        Args:
            infile: Line-oriented text source

        Returns:
            True if a line was read, False at end of input (value unchanged).
        """
        line = infile.readline()
        if line == "":
            return False
        self._data = line.rstrip("\r\n")
        return True

    # Hashing would break once a payload is reassigned in place
    __hash__ = None  # type: ignore[assignment]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeData):
            return NotImplemented
        return self._data == other._data

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, NodeData):
            return NotImplemented
        return self._data != other._data

    def __lt__(self, other: NodeData) -> bool:
        if not isinstance(other, NodeData):
            return NotImplemented
        return self._data < other._data

    def __gt__(self, other: NodeData) -> bool:
        if not isinstance(other, NodeData):
            return NotImplemented
        return self._data > other._data

    def __le__(self, other: NodeData) -> bool:
        if not isinstance(other, NodeData):
            return NotImplemented
        return self._data <= other._data

    def __ge__(self, other: NodeData) -> bool:
        if not isinstance(other, NodeData):
            return NotImplemented
        return self._data >= other._data

    def __str__(self) -> str:
        return str(self._data)

    def __repr__(self) -> str:
        return f"NodeData({self._data!r})"
