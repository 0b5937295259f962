"""
Tests for the term and quad data model.
"""

import pytest

from rdf_isomorphic.terms import (
    RDF_LANG_STRING,
    XSD_STRING,
    BlankNode,
    DefaultGraph,
    Literal,
    NamedNode,
    Quad,
    Variable,
    contains_blank_node,
    every_terms,
    get_blank_nodes,
    get_terms,
    get_terms_nested,
    map_terms_nested,
    quad_to_string_quad,
    some_terms,
    term_to_string,
    triple,
    uniq_terms,
)


EX = "http://example.org/"


class TestTermEquality:
    """Structural equality of terms."""

    def test_same_variant_same_value(self):
        """Test equality of equal terms."""
        assert NamedNode(EX + "a") == NamedNode(EX + "a")
        assert BlankNode("b") == BlankNode("b")
        assert DefaultGraph() == DefaultGraph()

    def test_different_variants_differ(self):
        """Terms of different kinds never compare equal."""
        assert NamedNode("x") != BlankNode("x")
        assert Variable("x") != NamedNode("x")

    def test_plain_literal_defaults_to_xsd_string(self):
        """Test default literal datatype."""
        literal = Literal("hello")
        assert literal.datatype == NamedNode(XSD_STRING)
        assert literal == Literal("hello", datatype=NamedNode(XSD_STRING))

    def test_language_literal_uses_lang_string(self):
        """Test language-tagged literal datatype."""
        literal = Literal("hello", language="en", datatype=NamedNode(XSD_STRING))
        assert literal.datatype == NamedNode(RDF_LANG_STRING)

    def test_nested_quads_compare_recursively(self):
        """Test structural equality of quoted triples."""
        inner_a = triple(BlankNode("a"), NamedNode(EX + "p"), Literal("x"))
        inner_b = triple(BlankNode("a"), NamedNode(EX + "p"), Literal("x"))
        assert triple(inner_a, NamedNode(EX + "q"), NamedNode(EX + "o")) == \
            triple(inner_b, NamedNode(EX + "q"), NamedNode(EX + "o"))

    def test_terms_are_hashable(self):
        """Test terms as set members."""
        terms = {BlankNode("a"), BlankNode("a"), Literal("a"), triple(BlankNode("a"), NamedNode("p"), Literal("a"))}
        assert len(terms) == 3

    def test_term_type_names(self):
        """Test term_type tags."""
        assert NamedNode("a").term_type == "NamedNode"
        assert Quad(NamedNode("s"), NamedNode("p"), NamedNode("o")).term_type == "Quad"


class TestTermToString:
    """Canonical string form."""

    def test_named_node_is_bare_iri(self):
        """Test named nodes are written without angle brackets."""
        assert term_to_string(NamedNode(EX + "a")) == EX + "a"

    def test_blank_node(self):
        """Test blank node string form."""
        assert term_to_string(BlankNode("b0")) == "_:b0"

    def test_literals(self):
        """Test plain, tagged and typed literal forms."""
        assert term_to_string(Literal("abc")) == '"abc"'
        assert term_to_string(Literal("abc", language="en-GB")) == '"abc"@en-GB'
        assert term_to_string(
            Literal("5", datatype=NamedNode("http://www.w3.org/2001/XMLSchema#integer"))
        ) == '"5"^^http://www.w3.org/2001/XMLSchema#integer'

    def test_literal_escapes(self):
        """Test escaping quotes, newlines and backslashes in literals."""
        assert term_to_string(Literal('say "hi"\n\\')) == '"say \\"hi\\"\\n\\\\"'

    def test_variable_and_default_graph(self):
        """Test variable and default graph forms."""
        assert term_to_string(Variable("x")) == "?x"
        assert term_to_string(DefaultGraph()) == ""

    def test_quoted_quad(self):
        """Test quoted triple form."""
        quoted = triple(BlankNode("a"), NamedNode("p"), NamedNode("o"))
        assert term_to_string(quoted) == "<<_:a p o>>"

    def test_quoted_quad_with_graph(self):
        """Test quoted quad with a graph label."""
        quoted = Quad(BlankNode("a"), NamedNode("p"), NamedNode("o"), NamedNode("g"))
        assert term_to_string(quoted) == "<<_:a p o g>>"

    def test_unknown_term_kind(self):
        """Test rejection of non-term values."""
        with pytest.raises(TypeError, match="Unknown term kind"):
            term_to_string("not a term")

    def test_quad_to_string_quad(self):
        """Test converting a quad to a dict of strings."""
        quad = Quad(BlankNode("a"), NamedNode("p"), Literal("o"), NamedNode("g"))
        assert quad_to_string_quad(quad) == {
            "subject": "_:a",
            "predicate": "p",
            "object": '"o"',
            "graph": "g",
        }


class TestTraversal:
    """Term traversal helpers."""

    @pytest.fixture
    def nested(self):
        inner = triple(BlankNode("a"), NamedNode("p"), BlankNode("b"))
        return Quad(inner, NamedNode("q"), BlankNode("c"), NamedNode("g"))

    def test_get_terms(self, nested):
        """Test positional terms."""
        assert get_terms(nested) == [nested.subject, NamedNode("q"), BlankNode("c"), NamedNode("g")]

    def test_get_terms_nested(self, nested):
        """Test leaf terms are yielded depth first."""
        assert get_terms_nested(nested) == [
            BlankNode("a"), NamedNode("p"), BlankNode("b"), DefaultGraph(),
            NamedNode("q"), BlankNode("c"), NamedNode("g"),
        ]

    def test_get_blank_nodes(self, nested):
        """Test filtering blank nodes."""
        assert get_blank_nodes(get_terms_nested(nested)) == [
            BlankNode("a"), BlankNode("b"), BlankNode("c"),
        ]

    def test_uniq_terms_keeps_first_appearance(self):
        """Test deduplication keeps first-appearance order."""
        terms = [BlankNode("b"), BlankNode("a"), BlankNode("b"), NamedNode("x"), BlankNode("a")]
        assert uniq_terms(terms) == [BlankNode("b"), BlankNode("a"), NamedNode("x")]

    def test_some_and_every_terms(self, nested):
        """Test predicates over positional terms."""
        assert some_terms(nested, lambda t: isinstance(t, NamedNode))
        assert not every_terms(nested, lambda t: isinstance(t, NamedNode))

    def test_contains_blank_node(self, nested):
        """Test blank node detection, including inside quoted triples."""
        assert contains_blank_node(BlankNode("x"))
        assert contains_blank_node(nested.subject)
        assert not contains_blank_node(triple(NamedNode("s"), NamedNode("p"), Literal("o")))
        assert not contains_blank_node(NamedNode("s"))

    def test_map_terms_nested(self, nested):
        """Test mapping rebuilds nested quads."""
        renamed = map_terms_nested(
            nested,
            lambda t: BlankNode("x" + t.value) if isinstance(t, BlankNode) else t,
        )
        assert renamed.subject == triple(BlankNode("xa"), NamedNode("p"), BlankNode("xb"))
        assert renamed.object == BlankNode("xc")
        assert renamed.graph == NamedNode("g")
