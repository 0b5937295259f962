"""
RDF term and quad data model.

Terms are immutable, structurally-compared values. A quad is itself a term,
which lets quoted (RDF-star) statements appear nested inside other quads.

The canonical string form produced by ``term_to_string`` is what the
isomorphism engine uses as a term's identity; ``string_to_term`` in
``rdf_isomorphic.formats.nquads`` is its inverse.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Iterable, Iterator, Optional, Union


XSD_STRING = "http://www.w3.org/2001/XMLSchema#string"
RDF_LANG_STRING = "http://www.w3.org/1999/02/22-rdf-syntax-ns#langString"


# =============================================================================
# Term Types
# =============================================================================

@dataclass(frozen=True)
class NamedNode:
    """An IRI."""
    value: str

    term_type: ClassVar[str] = "NamedNode"

    def __str__(self) -> str:
        return term_to_string(self)


@dataclass(frozen=True)
class BlankNode:
    """
    A blank node (anonymous resource).

    The label only identifies the node within the graph it came from.
    """
    value: str

    term_type: ClassVar[str] = "BlankNode"

    def __str__(self) -> str:
        return term_to_string(self)


@dataclass(frozen=True)
class Literal:
    """
    An RDF Literal value.

    Plain literals carry ``xsd:string``; language-tagged literals always
    carry ``rdf:langString`` regardless of the datatype passed in.
    """
    value: str
    language: str = ""
    datatype: Optional[NamedNode] = None

    term_type: ClassVar[str] = "Literal"

    def __post_init__(self):
        if self.language:
            object.__setattr__(self, "datatype", NamedNode(RDF_LANG_STRING))
        elif self.datatype is None:
            object.__setattr__(self, "datatype", NamedNode(XSD_STRING))

    def __str__(self) -> str:
        return term_to_string(self)


@dataclass(frozen=True)
class Variable:
    """A query variable (e.g. ?name)."""
    value: str

    term_type: ClassVar[str] = "Variable"

    def __str__(self) -> str:
        return term_to_string(self)


@dataclass(frozen=True)
class DefaultGraph:
    """The default graph label of a quad."""

    term_type: ClassVar[str] = "DefaultGraph"

    def __str__(self) -> str:
        return term_to_string(self)


@dataclass(frozen=True)
class Quad:
    """
    A (subject, predicate, object, graph) statement.

    Quads are terms too: a quad in subject or object position is a quoted
    statement (RDF-star).
    """
    subject: "Term"
    predicate: "Term"
    object: "Term"
    graph: "Term" = field(default_factory=DefaultGraph)

    term_type: ClassVar[str] = "Quad"

    def __str__(self) -> str:
        return term_to_string(self)


# Closed set of term variants
Term = Union[NamedNode, BlankNode, Literal, Variable, DefaultGraph, Quad]


def triple(subject: Term, predicate: Term, object: Term) -> Quad:
    """Create a quad in the default graph."""
    return Quad(subject, predicate, object, DefaultGraph())


# =============================================================================
# Canonical String Form
# =============================================================================

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r"}

# Characters that would end a bare IRI, label or variable name
_VALUE_ESCAPE_RE = re.compile(r'[\s<>"\\]')


def escape_literal(value: str) -> str:
    """Escape a literal's lexical form for use between double quotes."""
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def escape_value(value: str) -> str:
    """
    Escape an IRI, blank node label or variable name for the canonical form.

    Whitespace, angle brackets, double quotes and backslashes become
    ``\\uXXXX`` escapes; every other character is kept as is, so ordinary
    IRIs and labels are unchanged.
    """
    return _VALUE_ESCAPE_RE.sub(lambda m: f"\\u{ord(m.group()):04X}", value)


def term_to_string(term: Term) -> str:
    """
    Convert a term to its canonical string form.

    Examples:
        NamedNode("http://ex.org/a")  -> http://ex.org/a
        BlankNode("b0")               -> _:b0
        BlankNode("a b")              -> _:a\\u0020b
        Literal("x", language="en")   -> "x"@en
        DefaultGraph()                -> (empty string)
        Quad(s, p, o)                 -> <<s p o>>
    """
    if isinstance(term, NamedNode):
        return escape_value(term.value)
    if isinstance(term, BlankNode):
        return f"_:{escape_value(term.value)}"
    if isinstance(term, Literal):
        base = f'"{escape_literal(term.value)}"'
        if term.language:
            return f"{base}@{term.language}"
        if term.datatype is not None and term.datatype.value != XSD_STRING:
            return f"{base}^^{escape_value(term.datatype.value)}"
        return base
    if isinstance(term, Variable):
        return f"?{escape_value(term.value)}"
    if isinstance(term, DefaultGraph):
        return ""
    if isinstance(term, Quad):
        parts = [
            term_to_string(term.subject),
            term_to_string(term.predicate),
            term_to_string(term.object),
        ]
        if not isinstance(term.graph, DefaultGraph):
            parts.append(term_to_string(term.graph))
        return f"<<{' '.join(parts)}>>"
    raise TypeError(f"Unknown term kind: {type(term).__name__}")


def quad_to_string_quad(quad: Quad) -> dict[str, str]:
    """Convert a quad to a dict of canonical term strings."""
    return {
        "subject": term_to_string(quad.subject),
        "predicate": term_to_string(quad.predicate),
        "object": term_to_string(quad.object),
        "graph": term_to_string(quad.graph),
    }


# =============================================================================
# Traversal
# =============================================================================

def get_terms(quad: Quad) -> list[Term]:
    """Return the four positional terms of a quad."""
    return [quad.subject, quad.predicate, quad.object, quad.graph]


def iter_terms_nested(quad: Quad) -> Iterator[Term]:
    """Yield the leaf terms of a quad, descending into quoted quads."""
    for term in get_terms(quad):
        if isinstance(term, Quad):
            yield from iter_terms_nested(term)
        else:
            yield term


def get_terms_nested(quad: Quad) -> list[Term]:
    """Return the leaf terms of a quad, descending into quoted quads."""
    return list(iter_terms_nested(quad))


def get_blank_nodes(terms: Iterable[Term]) -> list[BlankNode]:
    """Filter blank nodes out of a sequence of terms."""
    return [term for term in terms if isinstance(term, BlankNode)]


def uniq_terms(terms: Iterable[Term]) -> list[Term]:
    """Remove duplicate terms, keeping first-appearance order."""
    seen: set = set()
    unique = []
    for term in terms:
        if term not in seen:
            seen.add(term)
            unique.append(term)
    return unique


def some_terms(quad: Quad, predicate: Callable[[Term], bool]) -> bool:
    """Check whether any positional term of the quad satisfies the predicate."""
    return any(predicate(term) for term in get_terms(quad))


def every_terms(quad: Quad, predicate: Callable[[Term], bool]) -> bool:
    """Check whether all positional terms of the quad satisfy the predicate."""
    return all(predicate(term) for term in get_terms(quad))


def map_terms_nested(quad: Quad, mapper: Callable[[Term], Term]) -> Quad:
    """Rebuild a quad with every leaf term passed through ``mapper``."""
    def _map(term: Term) -> Term:
        if isinstance(term, Quad):
            return map_terms_nested(term, mapper)
        return mapper(term)

    return Quad(
        _map(quad.subject),
        _map(quad.predicate),
        _map(quad.object),
        _map(quad.graph),
    )


def contains_blank_node(term: Term) -> bool:
    """Check whether a term is, or nests, a blank node."""
    if isinstance(term, BlankNode):
        return True
    if isinstance(term, Quad):
        return any(isinstance(t, BlankNode) for t in iter_terms_nested(term))
    return False
