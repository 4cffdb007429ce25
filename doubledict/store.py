"""
Pair Store — the two synchronized maps behind every double dictionary.

SYSTEM INVARIANT:
    For any primary p and secondary s, s appears in p's secondary list
    if and only if p appears in s's primary list. A violation is a
    DesyncError, never a recoverable condition.

Lifecycle:
    An entry is created by the first link that references its key and is
    pruned as soon as its list becomes empty. Registered keys (many-to-many)
    are the only entries allowed to hold an empty list.

Only this module touches the maps. Everything it hands out is a copy.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import Generic, Optional, TypeVar

from .errors import (
    DesyncError,
    KeyNotFoundError,
    PairNotFoundError,
    Side,
)


logger = logging.getLogger(__name__)

P = TypeVar("P", bound=Hashable)
S = TypeVar("S", bound=Hashable)


class PairStore(Generic[P, S]):
    """
    Owns primary→secondaries and secondary→primaries in lockstep.

    Every mutating method checks its preconditions before touching either
    map, so a failing call leaves both sides unchanged.
    """

    def __init__(self) -> None:
        self._primary_to_secondaries: dict[P, list[S]] = {}
        self._secondary_to_primaries: dict[S, list[P]] = {}

    # =========================================================================
    # MEMBERSHIP
    # =========================================================================

    def has_primary_entry(self, primary: P) -> bool:
        """True if the primary has an entry, even an empty registered one."""
        return primary in self._primary_to_secondaries

    def has_secondary_entry(self, secondary: S) -> bool:
        """True if the secondary has an entry, even an empty registered one."""
        return secondary in self._secondary_to_primaries

    def contains_primary(self, primary: P) -> bool:
        return bool(self._primary_to_secondaries.get(primary))

    def contains_secondary(self, secondary: S) -> bool:
        return bool(self._secondary_to_primaries.get(secondary))

    def contains_pair(self, primary: P, secondary: S) -> bool:
        """
        Check whether the pair is linked on both sides.

        An absent key simply means "not contained". A pair present on
        exactly one side is a desync.

        Raises:
            DesyncError: If only one of the two maps records the pair
        """
        forward = secondary in self._primary_to_secondaries.get(primary, ())
        backward = primary in self._secondary_to_primaries.get(secondary, ())

        if forward and backward:
            return True

        if forward or backward:
            side = Side.PRIMARY if forward else Side.SECONDARY
            raise self._desync(
                f"pair ({primary!r}, {secondary!r}) is only recorded "
                f"on the {side.value} side",
                primary,
                secondary,
            )

        return False

    # =========================================================================
    # MUTATION
    # =========================================================================

    def register_primary(self, primary: P) -> None:
        """Create an empty entry for primary if it has none."""
        if primary not in self._primary_to_secondaries:
            self._primary_to_secondaries[primary] = []
            logger.debug("Registered primary %r", primary)

    def register_secondary(self, secondary: S) -> None:
        """Create an empty entry for secondary if it has none."""
        if secondary not in self._secondary_to_primaries:
            self._secondary_to_primaries[secondary] = []
            logger.debug("Registered secondary %r", secondary)

    def link(self, primary: P, secondary: S) -> None:
        """
        Append the pair on both sides, creating entries as needed.

        Raises:
            DesyncError: If either side already records the pair
        """
        if self.contains_pair(primary, secondary):
            raise self._desync(
                f"pair ({primary!r}, {secondary!r}) is already linked",
                primary,
                secondary,
            )

        self._primary_to_secondaries.setdefault(primary, []).append(secondary)
        self._secondary_to_primaries.setdefault(secondary, []).append(primary)
        logger.debug("Linked %r <-> %r", primary, secondary)

    def unlink(
        self,
        primary: P,
        secondary: S,
        keep_primary: bool = False,
        keep_secondary: bool = False,
    ) -> None:
        """
        Remove the pair from both sides and prune emptied entries.

        keep_primary / keep_secondary leave that key's entry in place even
        when emptied, so a key about to be re-linked keeps its position.
        The caller must link it again before returning.

        Raises:
            PairNotFoundError: If the pair is not linked
            DesyncError: If only one side records the pair
        """
        if not self.contains_pair(primary, secondary):
            raise PairNotFoundError(primary, secondary)

        self._primary_to_secondaries[primary].remove(secondary)
        self._secondary_to_primaries[secondary].remove(primary)
        logger.debug("Unlinked %r <-> %r", primary, secondary)

        if not keep_primary:
            self.prune_primary(primary)
        if not keep_secondary:
            self.prune_secondary(secondary)

    def prune_primary(self, primary: P) -> None:
        """Delete the primary's entry if its list is empty."""
        if primary in self._primary_to_secondaries and not self._primary_to_secondaries[primary]:
            del self._primary_to_secondaries[primary]
            logger.debug("Pruned primary %r", primary)

    def prune_secondary(self, secondary: S) -> None:
        """Delete the secondary's entry if its list is empty."""
        if secondary in self._secondary_to_primaries and not self._secondary_to_primaries[secondary]:
            del self._secondary_to_primaries[secondary]
            logger.debug("Pruned secondary %r", secondary)

    def clear(self) -> None:
        self._primary_to_secondaries.clear()
        self._secondary_to_primaries.clear()

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    def secondaries_of(self, primary: P) -> list[S]:
        """
        Copy of the primary's secondary list.

        Raises:
            KeyNotFoundError: If the primary has no entry
        """
        if primary not in self._primary_to_secondaries:
            raise KeyNotFoundError(Side.PRIMARY, primary)
        return list(self._primary_to_secondaries[primary])

    def primaries_of(self, secondary: S) -> list[P]:
        """
        Copy of the secondary's primary list.

        Raises:
            KeyNotFoundError: If the secondary has no entry
        """
        if secondary not in self._secondary_to_primaries:
            raise KeyNotFoundError(Side.SECONDARY, secondary)
        return list(self._secondary_to_primaries[secondary])

    def primary_keys(self) -> list[P]:
        """Linked primaries in insertion order."""
        return [key for key, values in self._primary_to_secondaries.items() if values]

    def secondary_keys(self) -> list[S]:
        """Linked secondaries in insertion order."""
        return [key for key, values in self._secondary_to_primaries.items() if values]

    def pairs(self) -> list[tuple[P, S]]:
        return [
            (primary, secondary)
            for primary, secondaries in self._primary_to_secondaries.items()
            for secondary in secondaries
        ]

    def as_dict(self) -> dict[P, list[S]]:
        """Deep copy of the primary side."""
        return {
            primary: list(secondaries)
            for primary, secondaries in self._primary_to_secondaries.items()
        }

    def __len__(self) -> int:
        return sum(len(values) for values in self._primary_to_secondaries.values())

    # =========================================================================
    # VERIFICATION
    # =========================================================================

    def verify(
        self,
        max_secondaries: Optional[int] = None,
        max_primaries: Optional[int] = None,
        allow_empty: bool = False,
    ) -> None:
        """
        Scan both maps and fail on the first broken invariant.

        Checks symmetry, duplicate pairs, empty entries (unless
        allow_empty) and the per-key list length limits.

        Raises:
            DesyncError: On the first violation found
        """
        self._verify_side(
            self._primary_to_secondaries,
            self._secondary_to_primaries,
            Side.PRIMARY,
            max_secondaries,
            allow_empty,
        )
        self._verify_side(
            self._secondary_to_primaries,
            self._primary_to_secondaries,
            Side.SECONDARY,
            max_primaries,
            allow_empty,
        )

    def _verify_side(
        self,
        forward: dict,
        backward: dict,
        side: Side,
        limit: Optional[int],
        allow_empty: bool,
    ) -> None:
        for key, partners in forward.items():
            if not partners and not allow_empty:
                raise self._desync(f"{side.value} {key!r} maps to an empty list")

            if limit is not None and len(partners) > limit:
                raise self._desync(
                    f"{side.value} {key!r} has {len(partners)} partners, "
                    f"limit is {limit}"
                )

            if len(set(partners)) != len(partners):
                raise self._desync(f"{side.value} {key!r} lists a partner twice")

            for partner in partners:
                if key not in backward.get(partner, ()):
                    if side is Side.PRIMARY:
                        primary, secondary = key, partner
                    else:
                        primary, secondary = partner, key
                    raise self._desync(
                        f"pair ({primary!r}, {secondary!r}) is only recorded "
                        f"on the {side.value} side",
                        primary,
                        secondary,
                    )

    @staticmethod
    def _desync(
        detail: str,
        primary: Optional[P] = None,
        secondary: Optional[S] = None,
    ) -> DesyncError:
        logger.error("Double dictionary out of sync: %s", detail)
        return DesyncError(detail, primary, secondary)
