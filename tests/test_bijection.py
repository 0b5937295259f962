"""
Tests for the bijection solver and its result types.
"""

import polars as pl
import pytest

from rdf_isomorphic.isomorphism.bijection import (
    FORCED_MARKER,
    IsomorphismResult,
    IsomorphismStatus,
    bijection_holds,
    get_bijection_inner,
    has_value,
    hash_values,
)
from rdf_isomorphic.isomorphism.context import SearchContext, SearchStats
from rdf_isomorphic.isomorphism.hashing import sha1_hex
from rdf_isomorphic.terms import BlankNode, Literal, NamedNode, triple


P = NamedNode("http://example.org/p")


def blanks(*labels):
    return [BlankNode(label) for label in labels]


class TestMappingHelpers:
    """Tests for hash_values and has_value."""

    def test_hash_values(self):
        """Test listing the values of a mapping."""
        assert hash_values({"a": "1", "b": "2"}) == ["1", "2"]
        assert hash_values({}) == []

    def test_has_value(self):
        """Test membership checks against mapping values, not keys."""
        mapping = {"a": "1", "b": "2"}
        assert has_value(mapping, "2")
        assert not has_value(mapping, "a")
        assert not has_value({}, "1")


class TestGetBijectionInner:
    """Tests for the recursive solver on prepared inputs."""

    def test_empty_inputs(self):
        """Empty graphs map onto each other with an empty bijection."""
        assert get_bijection_inner([], [], [], []) == {}

    def test_distinguishable_nodes(self):
        """Test pairing nodes that refinement separates on its own."""
        a, b, c, d = blanks("a", "b", "c", "d")
        quads_a = [triple(a, P, Literal("x")), triple(b, P, Literal("y"))]
        quads_b = [triple(d, P, Literal("x")), triple(c, P, Literal("y"))]
        assert get_bijection_inner(quads_a, quads_b, [a, b], [d, c]) == {
            "_:a": "_:d",
            "_:b": "_:c",
        }

    def test_inconsistent_seeds(self):
        """Seeds on nodes with different neighbourhoods should fail."""
        a, b, c, d = blanks("a", "b", "c", "d")
        quads_a = [triple(a, P, Literal("x")), triple(b, P, Literal("y"))]
        quads_b = [triple(c, P, Literal("x")), triple(d, P, Literal("y"))]
        assert get_bijection_inner(
            quads_a, quads_b, [a, b], [c, d], {"_:a": "S"}, {"_:d": "S"}
        ) is None

    def test_consistent_seeds(self):
        """Test that matching seeds steer the result and are left untouched."""
        a, b, c, d = blanks("a", "b", "c", "d")
        quads_a = [triple(a, P, b), triple(b, P, a)]
        quads_b = [triple(c, P, d), triple(d, P, c)]
        seeds_a = {"_:b": "S"}
        seeds_b = {"_:c": "S"}
        result = get_bijection_inner(quads_a, quads_b, [a, b], [c, d], seeds_a, seeds_b)
        assert result == {"_:a": "_:d", "_:b": "_:c"}
        assert seeds_a == {"_:b": "S"}
        assert seeds_b == {"_:c": "S"}

    def test_node_count_mismatch(self):
        """Test rejection when the blank node counts differ."""
        a, b, c = blanks("a", "b", "c")
        quads_a = [triple(a, P, b)]
        quads_b = [triple(c, P, c)]
        assert get_bijection_inner(quads_a, quads_b, [a, b], [c]) is None

    def test_symmetric_pair_needs_forcing(self):
        """Test that a symmetric two-cycle is solved by branching."""
        a, b, c, d = blanks("a", "b", "c", "d")
        quads_a = [triple(a, P, b), triple(b, P, a)]
        quads_b = [triple(c, P, d), triple(d, P, c)]
        context = SearchContext()
        result = get_bijection_inner(quads_a, quads_b, [a, b], [c, d], context=context)
        assert result is not None
        assert bijection_holds(result, quads_a, quads_b)
        assert context.stats.calls >= 1

    def test_forced_hash_is_shared(self):
        """Test the forced hash input format."""
        # Forcing _:a onto either node of B must produce the same hash on both sides
        assert sha1_hex(FORCED_MARKER + "_:a") == sha1_hex("@forced|_:a")


class TestBijectionHolds:
    """Tests for exact verification of a candidate mapping."""

    def test_valid_mapping(self):
        """Test accepting a mapping that renames A onto B."""
        a, b, c, d = blanks("a", "b", "c", "d")
        quads_a = [triple(a, P, b)]
        quads_b = [triple(c, P, d)]
        assert bijection_holds({"_:a": "_:c", "_:b": "_:d"}, quads_a, quads_b)

    def test_swapped_mapping(self):
        """Test rejecting a mapping that reverses an edge."""
        a, b, c, d = blanks("a", "b", "c", "d")
        quads_a = [triple(a, P, b)]
        quads_b = [triple(c, P, d)]
        assert not bijection_holds({"_:a": "_:d", "_:b": "_:c"}, quads_a, quads_b)

    def test_incomplete_mapping(self):
        """A mapping missing a node should not verify."""
        a, b, c, d = blanks("a", "b", "c", "d")
        assert not bijection_holds({"_:a": "_:c"}, [triple(a, P, b)], [triple(c, P, d)])

    def test_nested_terms_are_renamed(self):
        """Test renaming inside quoted triples."""
        a, b = blanks("a", "b")
        quads_a = [triple(triple(a, P, Literal("x")), P, a)]
        quads_b = [triple(triple(b, P, Literal("x")), P, b)]
        assert bijection_holds({"_:a": "_:b"}, quads_a, quads_b)


class TestIsomorphismResult:
    """Tests for the result object."""

    def test_isomorphic_result(self):
        """Test dict form of an isomorphic result."""
        result = IsomorphismResult(IsomorphismStatus.ISOMORPHIC, {"_:a": "_:b"})
        assert result.is_isomorphic
        data = result.to_dict()
        assert data["status"] == "isomorphic"
        assert data["isomorphic"] is True
        assert data["bijection"] == {"_:a": "_:b"}
        assert data["stats"]["state"] == "PENDING"

    def test_not_isomorphic_result(self):
        """Test dict form of a negative result."""
        result = IsomorphismResult(IsomorphismStatus.NOT_ISOMORPHIC)
        assert not result.is_isomorphic
        assert result.to_dict()["isomorphic"] is False

    def test_undetermined_result(self):
        """Undetermined results report no answer but keep stats."""
        result = IsomorphismResult(IsomorphismStatus.UNDETERMINED, stats=SearchStats(calls=5))
        data = result.to_dict()
        assert data["status"] == "undetermined"
        assert data["isomorphic"] is None
        assert data["stats"]["calls"] == 5

    def test_to_frame(self):
        """Test converting the bijection to a polars DataFrame."""
        result = IsomorphismResult(
            IsomorphismStatus.ISOMORPHIC, {"_:a": "_:x", "_:b": "_:y"}
        )
        frame = result.to_frame()
        assert frame.columns == ["blank_a", "blank_b"]
        assert frame.height == 2
        assert frame.filter(pl.col("blank_a") == "_:b")["blank_b"].to_list() == ["_:y"]

    def test_to_frame_without_bijection(self):
        """Test empty frame schema when there is no bijection."""
        frame = IsomorphismResult(IsomorphismStatus.NOT_ISOMORPHIC).to_frame()
        assert frame.height == 0
        assert frame.schema["blank_a"] == pl.Utf8

    @pytest.mark.parametrize("status", list(IsomorphismStatus))
    def test_status_values_are_strings(self, status):
        """Test status enum values."""
        assert isinstance(status.value, str)
