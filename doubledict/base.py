"""
The shared double dictionary contract.

A DoubleDict composes a PairStore (both maps, kept in lockstep) with the
insertion policy of one cardinality variant. Removal, replacement,
existence checks and key enumeration behave the same for every variant.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Generic, Union

from .errors import KeyNotFoundError, Side
from .policies import Cardinality, InsertionPolicy, get_policy
from .store import P, PairStore, S


logger = logging.getLogger(__name__)


class DoubleDict(Generic[P, S]):
    """
    A dictionary where both sides are accessible as keys.

    Use one of the variants (OneToOneDict, OneToManyDict, ManyToManyDict)
    or create_double_dict() rather than building this directly.
    """

    # Set by variants that expose register_primary / register_secondary
    supports_registration = False

    def __init__(self, cardinality: Union[Cardinality, str]):
        policy = get_policy(cardinality)
        if policy.allows_registration and not self.supports_registration:
            raise ValueError(
                f"{policy.cardinality.value} needs key registration, "
                f"use ManyToManyDict or create_double_dict()"
            )
        self._policy: InsertionPolicy = policy
        self._store: PairStore[P, S] = PairStore()

    @property
    def cardinality(self) -> Cardinality:
        return self._policy.cardinality

    # =========================================================================
    # MUTATION
    # =========================================================================

    def add_pair(self, primary: P, secondary: S) -> None:
        """Add a pair following this variant's insertion rules."""
        self._policy.insert(self._store, primary, secondary)

    def remove_pair(self, primary: P, secondary: S) -> None:
        """
        Remove a pair from both sides.

        Keys left without partners are deleted from their map.

        Raises:
            PairNotFoundError: If the pair is not present
            DesyncError: If the pair is present on only one side
        """
        self._store.unlink(primary, secondary)

    def remove_primary(self, primary: P) -> list[S]:
        """
        Remove the primary key and every pair involving it.

        Returns:
            The secondaries that were unlinked, in their stored order

        Raises:
            KeyNotFoundError: If the primary is absent or has no partners
        """
        if not self.contains_primary(primary):
            raise KeyNotFoundError(Side.PRIMARY, primary)

        # secondaries_of() returns a copy, so unlinking cannot disturb the loop
        secondaries = self._store.secondaries_of(primary)
        for secondary in secondaries:
            self.remove_pair(primary, secondary)

        logger.debug("Removed primary %r (%d pairs)", primary, len(secondaries))
        return secondaries

    def remove_secondary(self, secondary: S) -> list[P]:
        """
        Remove the secondary key and every pair involving it.

        Returns:
            The primaries that were unlinked, in their stored order

        Raises:
            KeyNotFoundError: If the secondary is absent or has no partners
        """
        if not self.contains_secondary(secondary):
            raise KeyNotFoundError(Side.SECONDARY, secondary)

        primaries = self._store.primaries_of(secondary)
        for primary in primaries:
            self.remove_pair(primary, secondary)

        logger.debug("Removed secondary %r (%d pairs)", secondary, len(primaries))
        return primaries

    def set_pair(self, primary: P, secondary: S) -> None:
        """Replace the pair if present, otherwise add it."""
        if self.contains_pair(primary, secondary):
            self.remove_pair(primary, secondary)
        self.add_pair(primary, secondary)

    def clear(self) -> None:
        """Drop every pair and every registered key."""
        self._store.clear()

    # =========================================================================
    # QUERIES
    # =========================================================================

    def contains_pair(self, primary: P, secondary: S) -> bool:
        """
        Check whether the pair exists on both sides.

        Returns False when either key is unknown.

        Raises:
            DesyncError: If the pair exists on exactly one side
        """
        return self._store.contains_pair(primary, secondary)

    def contains_primary(self, primary: P) -> bool:
        return self._store.contains_primary(primary)

    def contains_secondary(self, secondary: S) -> bool:
        return self._store.contains_secondary(secondary)

    def get_primary_keys(self) -> list[P]:
        """Fresh list of the primary keys in insertion order."""
        return self._store.primary_keys()

    def get_secondary_keys(self) -> list[S]:
        """Fresh list of the secondary keys in insertion order."""
        return self._store.secondary_keys()

    def pairs(self) -> list[tuple[P, S]]:
        """Fresh list of (primary, secondary) tuples."""
        return self._store.pairs()

    def verify(self) -> None:
        """
        Check both maps against the symmetry and cardinality invariants.

        Raises:
            DesyncError: On the first violation found
        """
        self._store.verify(
            max_secondaries=self._policy.max_secondaries,
            max_primaries=self._policy.max_primaries,
            allow_empty=self._policy.allows_registration,
        )

    # =========================================================================
    # SHARED ACCESSORS
    # =========================================================================

    def _single_partner(self, side: Side, key: Union[P, S]) -> Union[P, S]:
        if side is Side.PRIMARY:
            partners = self._store.secondaries_of(key)
        else:
            partners = self._store.primaries_of(key)
        if not partners:
            raise KeyNotFoundError(side, key)
        return partners[0]

    # =========================================================================
    # CONTAINER PROTOCOL
    # =========================================================================

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return self.contains_pair(*pair)

    def __iter__(self) -> Iterator[tuple[P, S]]:
        return iter(self.pairs())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._store.as_dict()!r})"
