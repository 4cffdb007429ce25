"""
Cardinality variants and their insertion policies.

The shared container logic lives in the PairStore and DoubleDict. A
variant only decides how a new pair goes in:

    ONE_TO_ONE   — overwrite both sides, unlinking the displaced partners
    ONE_TO_MANY  — append to the primary, move the secondary off its old owner
    MANY_TO_MANY — pure addition between pre-registered keys
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from .errors import DuplicatePairError, KeyNotFoundError, Side
from .store import PairStore


logger = logging.getLogger(__name__)


class Cardinality(Enum):
    """The closed set of double dictionary variants."""
    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_MANY = "many_to_many"


# =============================================================================
# INSERTION RULES
# =============================================================================

def insert_one_to_one(store: PairStore, primary: Any, secondary: Any) -> None:
    """
    Link primary and secondary exclusively to each other.

    A previous partner of either key is unlinked first, so no reverse
    link is left behind pointing at a key that moved on. The overwritten
    keys keep their place in key order.
    """
    if store.contains_pair(primary, secondary):
        return

    if store.has_primary_entry(primary):
        for old_secondary in store.secondaries_of(primary):
            logger.debug(
                "Displacing %r from primary %r", old_secondary, primary
            )
            store.unlink(primary, old_secondary, keep_primary=True)

    if store.has_secondary_entry(secondary):
        for old_primary in store.primaries_of(secondary):
            logger.debug(
                "Displacing %r from secondary %r", old_primary, secondary
            )
            store.unlink(old_primary, secondary, keep_secondary=True)

    store.link(primary, secondary)


def insert_one_to_many(store: PairStore, primary: Any, secondary: Any) -> None:
    """
    Append secondary to primary's list.

    A secondary belongs to one primary only; reassigning it removes it
    from its former owner's list without moving it in key order.
    """
    if store.contains_pair(primary, secondary):
        return

    if store.has_secondary_entry(secondary):
        for old_primary in store.primaries_of(secondary):
            logger.debug(
                "Moving secondary %r from %r to %r",
                secondary, old_primary, primary,
            )
            store.unlink(old_primary, secondary, keep_secondary=True)

    store.link(primary, secondary)


def insert_many_to_many(store: PairStore, primary: Any, secondary: Any) -> None:
    """
    Add a link between two keys that both already have entries.

    Raises:
        KeyNotFoundError: If either key was never registered or linked
        DuplicatePairError: If the pair is already present on both sides
        DesyncError: If the pair is present on exactly one side
    """
    if not store.has_primary_entry(primary):
        raise KeyNotFoundError(Side.PRIMARY, primary)
    if not store.has_secondary_entry(secondary):
        raise KeyNotFoundError(Side.SECONDARY, secondary)

    if store.contains_pair(primary, secondary):
        raise DuplicatePairError(primary, secondary)

    store.link(primary, secondary)


# =============================================================================
# POLICY TABLE
# =============================================================================

@dataclass(frozen=True)
class InsertionPolicy:
    """
    How one cardinality variant inserts pairs and what shape it keeps.

    The limits are checked by DoubleDict.verify(); None means unbounded.
    """
    cardinality: Cardinality
    insert: Callable[[PairStore, Any, Any], None]
    max_secondaries: Optional[int]
    max_primaries: Optional[int]
    allows_registration: bool = False


POLICIES = {
    Cardinality.ONE_TO_ONE: InsertionPolicy(
        cardinality=Cardinality.ONE_TO_ONE,
        insert=insert_one_to_one,
        max_secondaries=1,
        max_primaries=1,
    ),
    Cardinality.ONE_TO_MANY: InsertionPolicy(
        cardinality=Cardinality.ONE_TO_MANY,
        insert=insert_one_to_many,
        max_secondaries=None,
        max_primaries=1,
    ),
    Cardinality.MANY_TO_MANY: InsertionPolicy(
        cardinality=Cardinality.MANY_TO_MANY,
        insert=insert_many_to_many,
        max_secondaries=None,
        max_primaries=None,
        allows_registration=True,
    ),
}


def as_cardinality(value: Union[Cardinality, str]) -> Cardinality:
    """
    Coerce a tag or its string value ("one_to_many") to a Cardinality.

    Raises:
        ValueError: If the value names no known variant
    """
    if isinstance(value, Cardinality):
        return value
    try:
        return Cardinality(value)
    except ValueError:
        valid = ", ".join(c.value for c in Cardinality)
        raise ValueError(
            f"Unknown cardinality {value!r}, expected one of: {valid}"
        ) from None


def get_policy(cardinality: Union[Cardinality, str]) -> InsertionPolicy:
    return POLICIES[as_cardinality(cardinality)]
