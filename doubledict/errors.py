"""
Error kinds for the double dictionary.

Every failure is immediate and synchronous. Nothing is retried and nothing
is recovered internally; a failing call leaves both maps untouched.

Error kinds:
    KeyNotFoundError   — a primary/secondary key is absent from its map
    PairNotFoundError  — a pair to remove is not present on both sides
    DuplicatePairError — a many-to-many pair is already fully present
    DesyncError        — the two maps disagree about a pair (always a defect)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class Side(Enum):
    """Which of the two internal maps an error concerns."""
    PRIMARY = "primary"
    SECONDARY = "secondary"


class DoubleDictError(Exception):
    """Base class for every error raised by doubledict."""
    pass


class KeyNotFoundError(DoubleDictError, KeyError):
    """Raised when a lookup or removal references an absent key."""

    def __init__(self, side: Side, key: Any):
        self.side = side
        self.key = key
        super().__init__(f"{side.value} key not found: {key!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the whole message
        return Exception.__str__(self)


class PairNotFoundError(DoubleDictError, KeyError):
    """Raised when removing a pair that is not present on both sides."""

    def __init__(self, primary: Any, secondary: Any):
        self.primary = primary
        self.secondary = secondary
        super().__init__(
            f"pair not found: ({primary!r}, {secondary!r})"
        )

    def __str__(self) -> str:
        return Exception.__str__(self)


class DuplicatePairError(DoubleDictError, ValueError):
    """Raised when a many-to-many pair is added a second time."""

    def __init__(self, primary: Any, secondary: Any):
        self.primary = primary
        self.secondary = secondary
        super().__init__(
            f"pair already present: ({primary!r}, {secondary!r})"
        )


class DesyncError(DoubleDictError, RuntimeError):
    """
    Raised when the two internal maps disagree.

    This signals an earlier bug in keeping the maps in lockstep. It is a
    defect indicator, not an input-validation error, and must never be
    caught and ignored.
    """

    def __init__(
        self,
        detail: str,
        primary: Optional[Any] = None,
        secondary: Optional[Any] = None,
    ):
        self.detail = detail
        self.primary = primary
        self.secondary = secondary
        super().__init__(f"double dictionary out of sync: {detail}")


# Name used by the container contract for the desync failure
InternalConsistencyError = DesyncError
