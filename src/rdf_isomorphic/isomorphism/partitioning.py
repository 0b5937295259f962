"""
Graph partitioning for isomorphism checks.

Splits a graph into quads without blank nodes (compared verbatim) and quads
with blank nodes (fed to refinement), and provides the set semantics a
graph needs: quads are indexed by their canonical string columns in a
polars DataFrame, so structurally identical quads collapse to one row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import polars as pl

from rdf_isomorphic.formats.nquads import string_quad_to_quad
from rdf_isomorphic.terms import (
    BlankNode,
    Quad,
    contains_blank_node,
    every_terms,
    get_blank_nodes,
    iter_terms_nested,
    quad_to_string_quad,
    some_terms,
    uniq_terms,
)


QUAD_COLUMNS = ("subject", "predicate", "object", "graph")
QUAD_SCHEMA = {column: pl.Utf8 for column in QUAD_COLUMNS}


@dataclass
class GraphPartition:
    """A deduplicated graph split around its blank nodes."""

    grounded_index: pl.DataFrame
    blank_quads: list[Quad] = field(default_factory=list)
    blank_nodes: list[BlankNode] = field(default_factory=list)

    @property
    def grounded_count(self) -> int:
        return self.grounded_index.height


def get_quads_with_blank_nodes(graph: Iterable[Quad]) -> list[Quad]:
    """Get all quads where some term is, or nests, a blank node."""
    return [quad for quad in graph if some_terms(quad, contains_blank_node)]


def get_quads_without_blank_nodes(graph: Iterable[Quad]) -> list[Quad]:
    """Get all quads where no term is, or nests, a blank node."""
    return [
        quad for quad in graph
        if every_terms(quad, lambda term: not contains_blank_node(term))
    ]


def index_graph(graph: Iterable[Quad]) -> pl.DataFrame:
    """
    Create a set index of the given graph.

    Each row holds the canonical strings of one quad; duplicate rows are
    dropped, keeping first-appearance order.
    """
    rows = [quad_to_string_quad(quad) for quad in graph]
    frame = pl.DataFrame(
        {column: [row[column] for row in rows] for column in QUAD_COLUMNS},
        schema=QUAD_SCHEMA,
    )
    return frame.unique(maintain_order=True)


def deindex_graph(index: pl.DataFrame) -> list[Quad]:
    """Create a graph from a set index. Every quad is a freshly parsed instance."""
    return [string_quad_to_quad(row) for row in index.iter_rows(named=True)]


def uniq_graph(graph: Iterable[Quad]) -> list[Quad]:
    """Remove duplicate quads by round-tripping through the string index."""
    return deindex_graph(index_graph(graph))


dedupe = uniq_graph


def indexes_equal(index_a: pl.DataFrame, index_b: pl.DataFrame) -> bool:
    """Check whether two set indexes hold exactly the same quads."""
    if index_a.height != index_b.height:
        return False
    missing = index_a.join(index_b, on=list(QUAD_COLUMNS), how="anti")
    return missing.height == 0


def get_graph_blank_nodes(graph: Iterable[Quad]) -> list[BlankNode]:
    """
    Find all blank nodes in the given graph, including inside quoted quads.

    Returns:
        Unique blank nodes in order of first appearance
    """
    return uniq_terms(
        node
        for quad in graph
        for node in get_blank_nodes(iter_terms_nested(quad))
    )


blank_nodes_of = get_graph_blank_nodes


def partition_graph(graph: Sequence[Quad]) -> GraphPartition:
    """Deduplicate a graph and split it around its blank nodes."""
    return GraphPartition(
        grounded_index=index_graph(get_quads_without_blank_nodes(graph)),
        blank_quads=uniq_graph(get_quads_with_blank_nodes(graph)),
        blank_nodes=get_graph_blank_nodes(graph),
    )
