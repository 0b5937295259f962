"""
RDF Format Parsers and Serializers.

Supports:
- N-Quads (.nq) with named graphs and RDF-star quoted triples
- The canonical term string form used for graph indexing
"""

from rdf_isomorphic.formats.nquads import (
    NQuadsParser,
    NQuadsSerializer,
    NQuadsSyntaxError,
    parse_nquads,
    serialize_nquads,
    string_quad_to_quad,
    string_to_term,
    unescape_literal,
)

__all__ = [
    "NQuadsParser",
    "NQuadsSerializer",
    "NQuadsSyntaxError",
    "parse_nquads",
    "serialize_nquads",
    "string_quad_to_quad",
    "string_to_term",
    "unescape_literal",
]
