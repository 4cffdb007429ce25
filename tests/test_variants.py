"""
Tests for the cardinality variants.

These tests verify:
1. One-to-one round trips and displaced-link cleanup
2. One-to-many ownership and reassignment
3. Many-to-many registration and duplicate rejection
4. The first-name / last-name acceptance scenario
"""

import pytest

from doubledict import (
    Cardinality,
    DuplicatePairError,
    KeyNotFoundError,
    ManyPrimaries,
    ManySecondaries,
    ManyToManyDict,
    OneToManyDict,
    OneToOneDict,
    Side,
)
from doubledict import variants


# =============================================================================
# ONE-TO-ONE
# =============================================================================

class TestOneToOne:
    """Test the one-to-one variant."""

    def test_round_trip(self):
        """Each key resolves to its partner."""
        ddict = OneToOneDict()
        ddict.add_pair("p", "s")

        assert ddict.get_secondary("p") == "s"
        assert ddict.get_primary("s") == "p"
        assert ddict.cardinality is Cardinality.ONE_TO_ONE

    def test_missing_keys(self):
        """Lookups of unknown keys raise KeyNotFoundError."""
        ddict = OneToOneDict()

        with pytest.raises(KeyNotFoundError) as exc_info:
            ddict.get_secondary("nobody")
        assert exc_info.value.side is Side.PRIMARY

        with pytest.raises(KeyNotFoundError) as exc_info:
            ddict.get_primary("nothing")
        assert exc_info.value.side is Side.SECONDARY

    def test_overwrite_primary_unlinks_old_secondary(self):
        """Re-pointing a primary drops its old secondary entirely."""
        ddict = OneToOneDict()
        ddict.add_pair("p", "old")
        ddict.add_pair("p", "new")

        assert ddict.get_secondary("p") == "new"
        assert not ddict.contains_secondary("old")
        assert ddict.get_secondary_keys() == ["new"]
        ddict.verify()

    def test_overwrite_secondary_unlinks_old_primary(self):
        """Re-pointing a secondary drops its old primary entirely."""
        ddict = OneToOneDict()
        ddict.add_pair("old", "s")
        ddict.add_pair("new", "s")

        assert ddict.get_primary("s") == "new"
        assert not ddict.contains_primary("old")
        ddict.verify()

    def test_overwrite_both_sides(self):
        """Linking two already-linked keys unlinks both former partners."""
        ddict = OneToOneDict()
        ddict.add_pair("a", 1)
        ddict.add_pair("b", 2)
        ddict.add_pair("a", 2)

        assert ddict.pairs() == [("a", 2)]
        assert not ddict.contains_primary("b")
        assert not ddict.contains_secondary(1)
        ddict.verify()

    def test_overwritten_primary_keeps_its_position(self):
        """Re-pointing a primary does not move it in key order."""
        ddict = OneToOneDict()
        ddict.add_pair("a", 1)
        ddict.add_pair("b", 2)
        ddict.add_pair("a", 3)

        assert ddict.get_primary_keys() == ["a", "b"]
        assert ddict.get_secondary_keys() == [2, 3]
        ddict.verify()

    def test_overwritten_secondary_keeps_its_position(self):
        """Re-pointing a secondary does not move it in key order."""
        ddict = OneToOneDict()
        ddict.add_pair("a", 1)
        ddict.add_pair("b", 2)
        ddict.add_pair("c", 1)

        assert ddict.get_secondary_keys() == [1, 2]
        assert ddict.get_primary_keys() == ["b", "c"]
        ddict.verify()

    def test_re_adding_pair_is_noop(self):
        """Adding an existing pair changes nothing."""
        ddict = OneToOneDict()
        ddict.add_pair("p", "s")
        ddict.add_pair("p", "s")

        assert len(ddict) == 1


# =============================================================================
# ONE-TO-MANY
# =============================================================================

class TestOneToMany:
    """Test the one-to-many variant."""

    def test_secondaries_accumulate(self):
        """A primary lists its secondaries in insertion order."""
        ddict = OneToManyDict()
        ddict.add_pair("p", "s1")
        ddict.add_pair("p", "s2")

        assert ddict.get_secondary_list("p") == ["s1", "s2"]
        assert ddict.get_primary("s1") == "p"
        assert ddict.get_primary("s2") == "p"

    def test_reassign_secondary(self):
        """Moving a secondary removes it from its former primary."""
        ddict = OneToManyDict()
        ddict.add_pair("p", "s1")
        ddict.add_pair("p", "s2")
        ddict.add_pair("p2", "s1")

        assert ddict.get_primary("s1") == "p2"
        assert ddict.get_secondary_list("p") == ["s2"]
        assert ddict.get_secondary_list("p2") == ["s1"]
        ddict.verify()

    def test_reassigned_secondary_keeps_its_position(self):
        """Moving a secondary does not move it in key order."""
        ddict = OneToManyDict()
        ddict.add_pair("p", "s1")
        ddict.add_pair("p", "s2")
        ddict.add_pair("q", "s1")

        assert ddict.get_secondary_keys() == ["s1", "s2"]
        assert ddict.get_primary_keys() == ["p", "q"]
        ddict.verify()

    def test_reassign_last_secondary_prunes_primary(self):
        """A primary that loses its only secondary is pruned."""
        ddict = OneToManyDict()
        ddict.add_pair("p", "s")
        ddict.add_pair("p2", "s")

        assert not ddict.contains_primary("p")
        assert ddict.get_primary_keys() == ["p2"]

    def test_no_duplicate_secondaries(self):
        """Adding the same pair twice keeps one entry."""
        ddict = OneToManyDict()
        ddict.add_pair("p", "s")
        ddict.add_pair("p", "s")

        assert ddict.get_secondary_list("p") == ["s"]

    def test_remove_primary_removes_all_pairs(self):
        """Bulk removal leaves no trace of the primary or its secondaries."""
        ddict = OneToManyDict()
        for secondary in ("s1", "s2", "s3"):
            ddict.add_pair("p", secondary)

        assert ddict.remove_primary("p") == ["s1", "s2", "s3"]
        assert not ddict.contains_primary("p")
        for secondary in ("s1", "s2", "s3"):
            assert not ddict.contains_secondary(secondary)
        assert len(ddict) == 0

    def test_secondary_list_is_a_copy(self):
        """Mutating the returned list leaves the dictionary intact."""
        ddict = OneToManyDict()
        ddict.add_pair("p", "s")

        ddict.get_secondary_list("p").append("x")

        assert ddict.get_secondary_list("p") == ["s"]

    def test_missing_keys(self):
        """Lookups of unknown keys raise KeyNotFoundError."""
        ddict = OneToManyDict()

        with pytest.raises(KeyNotFoundError):
            ddict.get_secondary_list("nobody")
        with pytest.raises(KeyNotFoundError):
            ddict.get_primary("nothing")

    def test_satisfies_many_secondaries(self):
        """One-to-many exposes the many-secondaries accessor."""
        ddict: ManySecondaries = OneToManyDict()
        ddict.add_pair("p", "s")

        assert ddict.get_secondary_list("p") == ["s"]


# =============================================================================
# MANY-TO-MANY
# =============================================================================

@pytest.fixture
def registered():
    ddict = ManyToManyDict()
    for primary in ("p", "q"):
        ddict.register_primary(primary)
    for secondary in ("s", "t"):
        ddict.register_secondary(secondary)
    return ddict


class TestManyToMany:
    """Test the many-to-many variant."""

    def test_unregistered_primary(self):
        """Strict mode requires the primary to be registered."""
        ddict = ManyToManyDict()
        ddict.register_secondary("s")

        with pytest.raises(KeyNotFoundError) as exc_info:
            ddict.add_pair("p", "s")

        assert exc_info.value.side is Side.PRIMARY
        assert exc_info.value.key == "p"

    def test_unregistered_secondary(self):
        """Strict mode requires the secondary to be registered."""
        ddict = ManyToManyDict()
        ddict.register_primary("p")

        with pytest.raises(KeyNotFoundError) as exc_info:
            ddict.add_pair("p", "s")

        assert exc_info.value.side is Side.SECONDARY

    def test_duplicate_pair_rejected(self, registered):
        """Adding the same pair twice fails the second time."""
        registered.add_pair("p", "s")

        with pytest.raises(DuplicatePairError) as exc_info:
            registered.add_pair("p", "s")

        assert exc_info.value.primary == "p"
        assert registered.get_secondary_list("p") == ["s"]

    def test_links_both_ways(self, registered):
        """Keys on both sides may hold several partners."""
        registered.add_pair("p", "s")
        registered.add_pair("p", "t")
        registered.add_pair("q", "s")

        assert registered.get_secondary_list("p") == ["s", "t"]
        assert registered.get_primary_list("s") == ["p", "q"]
        assert registered.get_primary_list("t") == ["p"]
        registered.verify()

    def test_registered_keys_are_not_contained(self, registered):
        """Registered but unlinked keys are not reported as present."""
        assert not registered.contains_primary("p")
        assert not registered.contains_secondary("s")
        assert registered.get_primary_keys() == []
        assert registered.get_secondary_list("p") == []
        registered.verify()

    def test_removal_prunes_registration(self, registered):
        """Removing a key's last pair drops its registration too."""
        registered.add_pair("p", "s")
        registered.remove_pair("p", "s")

        assert not registered.contains_primary("p")
        assert not registered.contains_secondary("s")
        with pytest.raises(KeyNotFoundError):
            registered.add_pair("p", "s")

    def test_remove_registered_but_unlinked_key(self, registered):
        """A registered key without partners is absent for bulk removal."""
        with pytest.raises(KeyNotFoundError) as exc_info:
            registered.remove_primary("q")
        assert exc_info.value.side is Side.PRIMARY

        with pytest.raises(KeyNotFoundError) as exc_info:
            registered.remove_secondary("t")
        assert exc_info.value.side is Side.SECONDARY

        assert registered.get_secondary_list("q") == []

    def test_unregister_unlinked_keys(self, registered):
        """unregister_* drops the entry of an unlinked key."""
        registered.unregister_primary("q")
        registered.unregister_secondary("t")

        with pytest.raises(KeyNotFoundError):
            registered.get_secondary_list("q")
        with pytest.raises(KeyNotFoundError):
            registered.add_pair("p", "t")

    def test_unregister_linked_key(self, registered):
        """Linked keys must be removed, not unregistered."""
        registered.add_pair("p", "s")

        with pytest.raises(ValueError, match="remove_primary"):
            registered.unregister_primary("p")
        with pytest.raises(ValueError, match="remove_secondary"):
            registered.unregister_secondary("s")

        assert registered.contains_pair("p", "s")

    def test_unregister_unknown_key(self):
        """Unregistering a key that has no entry raises KeyNotFoundError."""
        ddict = ManyToManyDict()

        with pytest.raises(KeyNotFoundError):
            ddict.unregister_primary("nobody")
        with pytest.raises(KeyNotFoundError):
            ddict.unregister_secondary("nothing")

    def test_remove_primary_keeps_shared_secondaries(self, registered):
        """Secondaries still linked elsewhere survive bulk removal."""
        registered.add_pair("p", "s")
        registered.add_pair("p", "t")
        registered.add_pair("q", "s")

        registered.remove_primary("p")

        assert registered.get_primary_list("s") == ["q"]
        assert not registered.contains_secondary("t")
        registered.verify()

    def test_set_pair_replaces_existing(self, registered):
        """set_pair on an existing pair works without re-registering."""
        registered.add_pair("p", "s")
        registered.set_pair("p", "s")

        assert registered.pairs() == [("p", "s")]
        registered.verify()

    def test_auto_register(self):
        """auto_register links unknown keys on demand."""
        ddict = ManyToManyDict(auto_register=True)
        ddict.add_pair("p", "s")

        assert ddict.contains_pair("p", "s")
        with pytest.raises(DuplicatePairError):
            ddict.add_pair("p", "s")

    def test_auto_register_default(self, monkeypatch):
        """The module default applies when auto_register is not given."""
        monkeypatch.setattr(variants, "DEFAULT_AUTO_REGISTER", True)

        assert ManyToManyDict().auto_register is True
        assert ManyToManyDict(auto_register=False).auto_register is False

    def test_primary_list_is_a_copy(self, registered):
        """Mutating the returned list leaves the dictionary intact."""
        registered.add_pair("p", "s")

        registered.get_primary_list("s").clear()

        assert registered.get_primary_list("s") == ["p"]

    def test_missing_keys(self):
        """Lookups of unknown keys raise KeyNotFoundError."""
        ddict = ManyToManyDict()

        with pytest.raises(KeyNotFoundError):
            ddict.get_primary_list("nothing")
        with pytest.raises(KeyNotFoundError):
            ddict.get_secondary_list("nobody")

    def test_satisfies_both_protocols(self, registered):
        """Many-to-many exposes both list accessors."""
        registered.add_pair("p", "s")
        by_primary: ManySecondaries = registered
        by_secondary: ManyPrimaries = registered

        assert by_primary.get_secondary_list("p") == ["s"]
        assert by_secondary.get_primary_list("s") == ["p"]


# =============================================================================
# ACCEPTANCE SCENARIO
# =============================================================================

class TestFirstNameLastName:
    """Round-trip first names and surnames through a one-to-one dictionary."""

    PEOPLE = [("Jim", "Doe"), ("Sally", "Wang"), ("John", "Smith")]

    def test_both_directions_print_the_same(self, capsys):
        """Iterating by primary or by secondary prints identical lines."""
        names = OneToOneDict()
        for first, last in self.PEOPLE:
            names.add_pair(first, last)

        first_names = names.get_primary_keys()
        last_names = names.get_secondary_keys()
        assert first_names == ["Jim", "Sally", "John"]

        for first in first_names:
            print(first + " " + names.get_secondary(first))
        by_primary = capsys.readouterr().out

        for last in last_names:
            print(names.get_primary(last) + " " + last)
        by_secondary = capsys.readouterr().out

        assert by_primary == "Jim Doe\nSally Wang\nJohn Smith\n"
        assert by_secondary == by_primary
