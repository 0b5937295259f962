"""
rdf-isomorphic: RDF graph isomorphism for quads and RDF-star quoted triples.

Decides whether two graphs are equal up to a renaming of their blank nodes,
and produces the blank node mapping that witnesses it.
"""

__version__ = "0.2.0"

from rdf_isomorphic.terms import (
    BlankNode,
    DefaultGraph,
    Literal,
    NamedNode,
    Quad,
    Term,
    Variable,
    term_to_string,
    triple,
)
from rdf_isomorphic.formats import parse_nquads, serialize_nquads, string_to_term
from rdf_isomorphic.config import ConfigValidationError, IsomorphismConfig
from rdf_isomorphic.isomorphism.context import SearchBudget, SearchStats
from rdf_isomorphic.isomorphism.bijection import (
    Bijection,
    IsomorphismResult,
    IsomorphismStatus,
    IsomorphismUndeterminedError,
    compare,
    get_bijection,
    isomorphic,
)

__all__ = [
    # Terms
    "BlankNode",
    "DefaultGraph",
    "Literal",
    "NamedNode",
    "Quad",
    "Term",
    "Variable",
    "term_to_string",
    "triple",
    # Formats
    "parse_nquads",
    "serialize_nquads",
    "string_to_term",
    # Configuration
    "ConfigValidationError",
    "IsomorphismConfig",
    "SearchBudget",
    "SearchStats",
    # Isomorphism
    "Bijection",
    "IsomorphismResult",
    "IsomorphismStatus",
    "IsomorphismUndeterminedError",
    "compare",
    "get_bijection",
    "isomorphic",
]
