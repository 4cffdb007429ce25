"""
Concrete double dictionary variants.

    OneToOneDict   — each primary has exactly one secondary and vice versa
    OneToManyDict  — a primary has many secondaries, a secondary one primary
    ManyToManyDict — arbitrary links between pre-registered keys

Each variant fixes its cardinality and adds the accessors that make sense
for it. All list accessors return independent copies.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Union

from .base import DoubleDict
from .errors import KeyNotFoundError, Side
from .policies import Cardinality, as_cardinality
from .store import P, S


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

# Whether ManyToManyDict.add_pair registers unknown keys on demand
DEFAULT_AUTO_REGISTER = False


# =============================================================================
# PROTOCOLS
# =============================================================================

class ManySecondaries(Protocol):
    """A double dictionary whose primaries may hold several secondaries."""

    def get_secondary_list(self, primary: Any) -> list: ...


class ManyPrimaries(Protocol):
    """A double dictionary whose secondaries may hold several primaries."""

    def get_primary_list(self, secondary: Any) -> list: ...


# =============================================================================
# VARIANTS
# =============================================================================

class OneToOneDict(DoubleDict[P, S]):
    """
    One-to-one double dictionary.

    Adding (p, s) overwrites any earlier partner of p and of s; the
    displaced partners are unlinked on both sides.
    """

    def __init__(self) -> None:
        super().__init__(Cardinality.ONE_TO_ONE)

    def get_primary(self, secondary: S) -> P:
        """
        Raises:
            KeyNotFoundError: If the secondary is absent
        """
        return self._single_partner(Side.SECONDARY, secondary)

    def get_secondary(self, primary: P) -> S:
        """
        Raises:
            KeyNotFoundError: If the primary is absent
        """
        return self._single_partner(Side.PRIMARY, primary)


class OneToManyDict(DoubleDict[P, S]):
    """
    One-to-many double dictionary.

    A primary keeps an ordered list of secondaries. Adding a secondary
    that already belongs elsewhere moves it to the new primary.
    """

    def __init__(self) -> None:
        super().__init__(Cardinality.ONE_TO_MANY)

    def get_primary(self, secondary: S) -> P:
        """
        Raises:
            KeyNotFoundError: If the secondary is absent
        """
        return self._single_partner(Side.SECONDARY, secondary)

    def get_secondary_list(self, primary: P) -> list[S]:
        """
        Copy of the primary's secondaries in insertion order.

        Raises:
            KeyNotFoundError: If the primary is absent
        """
        return self._store.secondaries_of(primary)


class ManyToManyDict(DoubleDict[P, S]):
    """
    Many-to-many double dictionary.

    Both keys of a pair must have an entry before they can be linked:
    register them with register_primary() / register_secondary(), or
    construct with auto_register=True. Adding a pair twice raises
    DuplicatePairError.
    """

    supports_registration = True

    def __init__(self, auto_register: Optional[bool] = None) -> None:
        super().__init__(Cardinality.MANY_TO_MANY)
        if auto_register is None:
            auto_register = DEFAULT_AUTO_REGISTER
        self.auto_register = auto_register

    def register_primary(self, primary: P) -> None:
        self._store.register_primary(primary)

    def register_secondary(self, secondary: S) -> None:
        self._store.register_secondary(secondary)

    def unregister_primary(self, primary: P) -> None:
        """
        Drop the entry of a registered primary that has no partners.

        Raises:
            KeyNotFoundError: If the primary was never registered
            ValueError: If the primary is still linked; use remove_primary()
        """
        if not self._store.has_primary_entry(primary):
            raise KeyNotFoundError(Side.PRIMARY, primary)
        if self.contains_primary(primary):
            raise ValueError(
                f"primary {primary!r} still has partners, use remove_primary()"
            )
        self._store.prune_primary(primary)

    def unregister_secondary(self, secondary: S) -> None:
        """
        Drop the entry of a registered secondary that has no partners.

        Raises:
            KeyNotFoundError: If the secondary was never registered
            ValueError: If the secondary is still linked; use remove_secondary()
        """
        if not self._store.has_secondary_entry(secondary):
            raise KeyNotFoundError(Side.SECONDARY, secondary)
        if self.contains_secondary(secondary):
            raise ValueError(
                f"secondary {secondary!r} still has partners, use remove_secondary()"
            )
        self._store.prune_secondary(secondary)

    def add_pair(self, primary: P, secondary: S) -> None:
        """
        Link two registered keys.

        Raises:
            KeyNotFoundError: If a key is unregistered and auto_register is off
            DuplicatePairError: If the pair already exists
            DesyncError: If the pair exists on exactly one side
        """
        if self.auto_register:
            self.register_primary(primary)
            self.register_secondary(secondary)
        super().add_pair(primary, secondary)

    def set_pair(self, primary: P, secondary: S) -> None:
        """Replace the pair if present, otherwise add it."""
        if self.contains_pair(primary, secondary):
            self.remove_pair(primary, secondary)
            # removal may have pruned the entries add_pair requires
            self.register_primary(primary)
            self.register_secondary(secondary)
        self.add_pair(primary, secondary)

    def get_primary_list(self, secondary: S) -> list[P]:
        """
        Copy of the secondary's primaries in insertion order.

        Raises:
            KeyNotFoundError: If the secondary is absent
        """
        return self._store.primaries_of(secondary)

    def get_secondary_list(self, primary: P) -> list[S]:
        """
        Copy of the primary's secondaries in insertion order.

        Raises:
            KeyNotFoundError: If the primary is absent
        """
        return self._store.secondaries_of(primary)


# =============================================================================
# FACTORY
# =============================================================================

VARIANTS = {
    Cardinality.ONE_TO_ONE: OneToOneDict,
    Cardinality.ONE_TO_MANY: OneToManyDict,
    Cardinality.MANY_TO_MANY: ManyToManyDict,
}


def create_double_dict(
    cardinality: Union[Cardinality, str],
    **options: Any,
) -> DoubleDict:
    """
    Build the variant for a cardinality tag.

    Options are passed to the variant's constructor (only ManyToManyDict
    takes any: auto_register).

    Raises:
        ValueError: If the cardinality is unknown
    """
    return VARIANTS[as_cardinality(cardinality)](**options)
