"""
Iterative blank node hashing (color refinement).

Each pass hashes every not-yet-grounded blank node from the signatures of
the quads it occurs in. A node becomes grounded once every other term in
those quads is grounded; grounded hashes then sharpen the signatures of
their neighbours in the next pass. Nodes whose hash is unique are grounded
early. The loop stops at the first pass that grounds nothing new.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Optional, Sequence

from rdf_isomorphic.isomorphism.hashing import HashFunction, sha1_hex
from rdf_isomorphic.isomorphism.signatures import TermHash, quad_to_signature
from rdf_isomorphic.terms import (
    BlankNode,
    Quad,
    Term,
    get_terms_nested,
    iter_terms_nested,
    term_to_string,
)

if TYPE_CHECKING:
    from rdf_isomorphic.isomorphism.context import SearchContext

logger = logging.getLogger(__name__)


def is_term_grounded(term: Term, hashes: TermHash) -> bool:
    """
    Check if a term is grounded.

    A term is grounded if it is not a blank node and nests no ungrounded
    blank node, or if it is included in the given hash of grounded nodes.
    """
    if isinstance(term, BlankNode):
        return term_to_string(term) in hashes
    if isinstance(term, Quad):
        return (
            all(is_term_grounded(sub_term, hashes) for sub_term in iter_terms_nested(term))
            or term_to_string(term) in hashes
        )
    return True


def hash_term(
    term: Term,
    quads: Sequence[Quad],
    hashes: TermHash,
    hash_fn: HashFunction = sha1_hex,
) -> tuple[bool, str]:
    """
    Generate a hash for the given term based on the quads it appears in.

    The hash covers the sorted signatures of every quad containing the term,
    so it depends only on the multiset of those quads and not on their order.

    Args:
        term: The term to get the hash around.
        quads: The quads to include in the hashing.
        hashes: Grounded term hashes.
        hash_fn: Hash primitive.

    Returns:
        Tuple of (grounded in all contributing quads, hash)
    """
    signatures = []
    grounded = True
    for quad in quads:
        terms = get_terms_nested(quad)
        if term in terms:
            signatures.append(quad_to_signature(quad, hashes, term))
            if grounded and any(
                quad_term != term and not is_term_grounded(quad_term, hashes)
                for quad_term in terms
            ):
                grounded = False
    signatures.sort()
    return grounded, hash_fn("".join(signatures))


def hash_terms(
    quads: Sequence[Quad],
    terms: Sequence[Term],
    grounded_hashes: TermHash,
    hash_fn: HashFunction = sha1_hex,
    context: Optional["SearchContext"] = None,
) -> tuple[TermHash, TermHash]:
    """
    Create term hashes for the given quads and blank node terms.

    Args:
        quads: Quads containing the terms.
        terms: Blank node terms to hash.
        grounded_hashes: Hashes of already grounded terms; never modified.
        hash_fn: Hash primitive.
        context: Optional search context for budget checks and statistics.

    Returns:
        Tuple of (grounded hashes, hashes of every term including ungrounded ones)
    """
    hashes: TermHash = dict(grounded_hashes)
    keys = [term_to_string(term) for term in terms]
    all_hashes: TermHash = {key: hashes[key] for key in keys if key in hashes}
    passes = 0

    while True:
        passes += 1
        if context is not None:
            context.check()
        initial_grounded_count = len(hashes)

        # Every term in a pass sees the same snapshot
        snapshot = dict(hashes)
        for term, key in zip(terms, keys):
            if key not in snapshot:
                grounded, value = hash_term(term, quads, snapshot, hash_fn)
                if grounded:
                    hashes[key] = value
                all_hashes[key] = value

        # A hash held by exactly one term identifies it as well as grounding would
        counts = Counter(all_hashes.values())
        for key, value in all_hashes.items():
            if key not in hashes and counts[value] == 1:
                hashes[key] = value

        if len(hashes) == initial_grounded_count:
            break

    if context is not None:
        context.stats.refinement_passes += passes
    logger.debug(
        f"Refined {len(terms)} blank nodes in {passes} passes, "
        f"{sum(1 for key in keys if key in hashes)} grounded"
    )
    return hashes, all_hashes
