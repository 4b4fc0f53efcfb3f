"""Exception hierarchy for the bintree package.

This module defines exception types for the bintree package, built on the
common exception framework from dataknobs_common. Every error carries the
optional ``context`` dictionary provided by DataknobsError.

Only genuine faults are raised. Ordinary outcomes such as a rejected duplicate
insert or a lookup miss are reported through return values instead.

Example:
    ```python
    from dataknobs_bintree import BinTree, SequenceBuffer
    from dataknobs_bintree.exceptions import BufferCapacityError

    try:
        tree.to_sorted_sequence(SequenceBuffer(capacity=2))
    except BufferCapacityError as e:
        print(e, e.context)
    ```
"""

from dataknobs_common import (
    ConfigurationError as BaseConfigurationError,
    DataknobsError,
    NotFoundError,
)


class BinTreeError(DataknobsError):
    """Base exception for all bintree errors."""

    pass


class BufferCapacityError(BinTreeError):
    """Raised when a sequence buffer cannot hold the requested payloads.

    Example:
        ```python
        raise BufferCapacityError(
            "Buffer too small for tree",
            context={"capacity": 100, "required": 120}
        )
        ```
    """

    pass


class SequenceLayoutError(BinTreeError):
    """Raised when a sequence buffer does not hold a contiguous run of payloads."""

    pass


class TreeFormatError(BinTreeError):
    """Raised when a parenthesized tree string cannot be parsed."""

    pass


class ConfigurationError(BinTreeError, BaseConfigurationError):
    """Raised when bintree settings are invalid."""

    pass


class ConfigNotFoundError(ConfigurationError, NotFoundError):
    """Raised when a settings file is not found."""

    pass


__all__ = [
    "BinTreeError",
    "BufferCapacityError",
    "SequenceLayoutError",
    "TreeFormatError",
    "ConfigurationError",
    "ConfigNotFoundError",
]
