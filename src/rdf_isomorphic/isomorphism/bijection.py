"""
RDF graph isomorphism.

Two graphs are isomorphic when their blank nodes can be renamed so that the
graphs become equal. The check runs in three stages:

1. Quads without blank nodes must match exactly (fast reject).
2. Blank nodes on both sides are hashed by iterative refinement; hash values
   pair nodes of graph A with nodes of graph B.
3. When hashes leave nodes indistinguishable, one node of A is speculatively
   paired with each equally-hashed node of B in turn, and the search recurses
   with that pair forced to a shared hash.

Example:
    from rdf_isomorphic import isomorphic, parse_nquads

    a = parse_nquads('_:x <http://ex.org/p> "v" .')
    b = parse_nquads('_:y <http://ex.org/p> "v" .')
    isomorphic(a, b)  # True
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

import polars as pl

from rdf_isomorphic.config import ConfigValidator, IsomorphismConfig
from rdf_isomorphic.formats.nquads import string_to_term
from rdf_isomorphic.isomorphism.context import (
    BudgetExhaustedError,
    SearchContext,
    SearchStats,
)
from rdf_isomorphic.isomorphism.hashing import HashFunction, sha1_hex
from rdf_isomorphic.isomorphism.partitioning import (
    index_graph,
    indexes_equal,
    partition_graph,
)
from rdf_isomorphic.isomorphism.refinement import hash_terms
from rdf_isomorphic.isomorphism.signatures import TermHash
from rdf_isomorphic.terms import BlankNode, Quad, Term, map_terms_nested, term_to_string

logger = logging.getLogger(__name__)

# Blank node string in graph A -> blank node string in graph B
Bijection = dict[str, str]

FORCED_MARKER = "@forced|"


class IsomorphismStatus(Enum):
    """Outcome of an isomorphism query."""
    ISOMORPHIC = "isomorphic"
    NOT_ISOMORPHIC = "not_isomorphic"
    UNDETERMINED = "undetermined"


class IsomorphismUndeterminedError(Exception):
    """Raised by the boolean and mapping entry points when the search budget runs out."""
    pass


@dataclass
class IsomorphismResult:
    """Result of comparing two graphs."""
    status: IsomorphismStatus
    bijection: Optional[Bijection] = None
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def is_isomorphic(self) -> bool:
        return self.status is IsomorphismStatus.ISOMORPHIC

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "isomorphic": None if self.status is IsomorphismStatus.UNDETERMINED else self.is_isomorphic,
            "bijection": self.bijection,
            "stats": self.stats.to_dict(),
        }

    def to_frame(self) -> pl.DataFrame:
        """The bijection as a two-column DataFrame (empty when there is none)."""
        pairs = self.bijection or {}
        return pl.DataFrame(
            {"blank_a": list(pairs.keys()), "blank_b": list(pairs.values())},
            schema={"blank_a": pl.Utf8, "blank_b": pl.Utf8},
        )


# =============================================================================
# Entry points
# =============================================================================

def isomorphic(
    graph_a: Iterable[Quad],
    graph_b: Iterable[Quad],
    config: Optional[IsomorphismConfig] = None,
) -> bool:
    """
    Determine if the two given graphs are isomorphic.

    Args:
        graph_a: Quads of the first graph, order is not important.
        graph_b: Quads of the second graph, order is not important.
        config: Optional settings; defaults to an unlimited search.

    Raises:
        IsomorphismUndeterminedError: If a configured budget ran out.
    """
    return get_bijection(graph_a, graph_b, config) is not None


def get_bijection(
    graph_a: Iterable[Quad],
    graph_b: Iterable[Quad],
    config: Optional[IsomorphismConfig] = None,
) -> Optional[Bijection]:
    """
    Calculate a mapping from graph A's blank nodes to graph B's blank nodes.

    Returns:
        The bijection keyed by blank node strings, or None if the graphs
        are not isomorphic. Graphs without blank nodes map to ``{}``.

    Raises:
        IsomorphismUndeterminedError: If a configured budget ran out.
    """
    result = compare(graph_a, graph_b, config)
    if result.status is IsomorphismStatus.UNDETERMINED:
        raise IsomorphismUndeterminedError(result.stats.exhausted_reason)
    return result.bijection


def compare(
    graph_a: Iterable[Quad],
    graph_b: Iterable[Quad],
    config: Optional[IsomorphismConfig] = None,
) -> IsomorphismResult:
    """
    Compare two graphs and report a three-way outcome with statistics.

    Never raises for budget exhaustion; that is reported as UNDETERMINED.
    """
    config = config or IsomorphismConfig()
    ConfigValidator.validate_or_raise(config)
    hash_fn = config.hash_function()

    context = SearchContext(budget=config.to_budget())
    context.start()

    partition_a = partition_graph(list(graph_a))
    partition_b = partition_graph(list(graph_b))

    # Quads without blank nodes must be equal as sets
    if not indexes_equal(partition_a.grounded_index, partition_b.grounded_index):
        logger.debug(
            f"Fast reject: {partition_a.grounded_count} vs {partition_b.grounded_count} "
            f"quads without blank nodes differ"
        )
        context.finish()
        return IsomorphismResult(IsomorphismStatus.NOT_ISOMORPHIC, None, context.stats)

    try:
        bijection = get_bijection_inner(
            partition_a.blank_quads,
            partition_b.blank_quads,
            partition_a.blank_nodes,
            partition_b.blank_nodes,
            hash_fn=hash_fn,
            verify=config.verify_bijection,
            context=context,
        )
    except BudgetExhaustedError as e:
        logger.warning(f"Isomorphism undetermined after {context.stats.calls} calls: {e.reason}")
        context.finish(e)
        return IsomorphismResult(IsomorphismStatus.UNDETERMINED, None, context.stats)

    context.finish()
    status = (
        IsomorphismStatus.ISOMORPHIC if bijection is not None
        else IsomorphismStatus.NOT_ISOMORPHIC
    )
    return IsomorphismResult(status, bijection, context.stats)


# =============================================================================
# Search
# =============================================================================

def get_bijection_inner(
    blank_quads_a: Sequence[Quad],
    blank_quads_b: Sequence[Quad],
    blank_nodes_a: Sequence[BlankNode],
    blank_nodes_b: Sequence[BlankNode],
    grounded_hashes_a: Optional[TermHash] = None,
    grounded_hashes_b: Optional[TermHash] = None,
    hash_fn: HashFunction = sha1_hex,
    verify: bool = True,
    context: Optional[SearchContext] = None,
    depth: int = 0,
) -> Optional[Bijection]:
    """
    Search for a bijection between the blank nodes of two deduplicated graphs.

    Args:
        blank_quads_a: Quads of graph A that contain blank nodes.
        blank_quads_b: Quads of graph B that contain blank nodes.
        blank_nodes_a: All blank nodes of graph A.
        blank_nodes_b: All blank nodes of graph B.
        grounded_hashes_a: Seed hashes for graph A; never modified.
        grounded_hashes_b: Seed hashes for graph B; never modified.
        hash_fn: Hash primitive, shared by both sides.
        verify: Accept a pairing only if it maps A's quads onto B's exactly.
        context: Budget and statistics for the whole search.
        depth: Number of forced pairs on the current path.

    Returns:
        A bijection, or None if none exists under the given seeds.

    Raises:
        BudgetExhaustedError: If the context's budget runs out.
    """
    if context is None:
        context = SearchContext()
    context.enter(depth)

    hashes_a, all_hashes_a = hash_terms(
        blank_quads_a, blank_nodes_a, grounded_hashes_a or {}, hash_fn, context
    )
    hashes_b, all_hashes_b = hash_terms(
        blank_quads_b, blank_nodes_b, grounded_hashes_b or {}, hash_fn, context
    )

    # Grounded nodes of one graph must all have a counterpart in the other
    if len(hashes_a) != len(hashes_b) or Counter(hashes_a.values()) != Counter(hashes_b.values()):
        return None
    if Counter(all_hashes_a.values()) != Counter(all_hashes_b.values()):
        return None

    bijection = _pair_by_hash(blank_nodes_a, all_hashes_a, all_hashes_b)
    keys_a = sorted(term_to_string(node) for node in blank_nodes_a)
    keys_b = sorted(term_to_string(node) for node in blank_nodes_b)
    complete = sorted(bijection) == keys_a and sorted(bijection.values()) == keys_b

    if complete and (not verify or bijection_holds(bijection, blank_quads_a, blank_quads_b)):
        return bijection

    # Nodes that hashing could not tell apart; try each candidate for one of them
    counts = Counter(all_hashes_a.values())
    ambiguous = [
        node for node in blank_nodes_a
        if counts[all_hashes_a[term_to_string(node)]] > 1
    ]
    if not ambiguous:
        return None
    ungrounded = [node for node in ambiguous if term_to_string(node) not in hashes_a]
    node_a = (ungrounded or ambiguous)[0]
    key_a = term_to_string(node_a)
    forced_hash = hash_fn(FORCED_MARKER + key_a)

    for node_b in blank_nodes_b:
        key_b = term_to_string(node_b)
        if all_hashes_b[key_b] != all_hashes_a[key_a]:
            continue
        logger.debug(f"Depth {depth}: speculatively pairing {key_a} with {key_b}")
        context.stats.forced_pairs += 1
        result = get_bijection_inner(
            blank_quads_a,
            blank_quads_b,
            blank_nodes_a,
            blank_nodes_b,
            {**hashes_a, key_a: forced_hash},
            {**hashes_b, key_b: forced_hash},
            hash_fn=hash_fn,
            verify=verify,
            context=context,
            depth=depth + 1,
        )
        if result is not None:
            return result

    return None


def _pair_by_hash(
    blank_nodes_a: Sequence[BlankNode],
    hashes_a: TermHash,
    hashes_b: TermHash,
) -> Bijection:
    """Greedily pair each A node with the first unused B node of equal hash."""
    candidates: dict[str, list[str]] = defaultdict(list)
    for key_b, value in hashes_b.items():
        candidates[value].append(key_b)

    bijection: Bijection = {}
    for node in blank_nodes_a:
        key_a = term_to_string(node)
        matches = candidates.get(hashes_a.get(key_a))
        if matches:
            bijection[key_a] = matches.pop(0)
    return bijection


def bijection_holds(
    bijection: Bijection,
    blank_quads_a: Sequence[Quad],
    blank_quads_b: Sequence[Quad],
) -> bool:
    """Check that renaming A's blank nodes through the bijection yields B's quads."""
    def rename(term: Term) -> Term:
        if isinstance(term, BlankNode):
            return string_to_term(bijection[term_to_string(term)])
        return term

    try:
        renamed = [map_terms_nested(quad, rename) for quad in blank_quads_a]
    except KeyError:
        return False
    return indexes_equal(index_graph(renamed), index_graph(blank_quads_b))


# =============================================================================
# Mapping helpers
# =============================================================================

def hash_values(mapping: dict) -> list:
    """
    Get all values from the given mapping.

    Compatibility helper for callers of the public API; the solver compares
    hash multisets with Counter instead.
    """
    return list(mapping.values())


def has_value(mapping: dict, value: Any) -> bool:
    """
    Check if the given mapping contains the given value.

    Compatibility helper for callers of the public API; the solver does not
    call it.
    """
    return any(existing == value for existing in mapping.values())
