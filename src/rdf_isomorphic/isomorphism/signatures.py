"""
Term signatures.

A signature describes one quad as seen from a distinguished target term:
the target itself shows up as ``@self``, blank nodes show up as their
current hash (or ``@blank`` while still unhashed), quoted quads recurse in
angle brackets, and every other term contributes its canonical string.
"""

from rdf_isomorphic.terms import (
    BlankNode,
    DefaultGraph,
    Literal,
    NamedNode,
    Quad,
    Term,
    Variable,
    get_terms,
    term_to_string,
)


TermHash = dict[str, str]

SELF_MARKER = "@self"
BLANK_MARKER = "@blank"
SIGNATURE_SEPARATOR = "|"


def term_to_signature(term: Term, hashes: TermHash, target: Term) -> str:
    """
    Convert the given term to a signature relative to ``target``.

    Args:
        term: A term of the quad being described.
        hashes: Grounded term hashes keyed by canonical term string.
        target: The term the signature is taken around.
    """
    if term == target:
        return SELF_MARKER
    if isinstance(term, BlankNode):
        return hashes.get(term_to_string(term), BLANK_MARKER)
    if isinstance(term, Quad):
        return f"<{quad_to_signature(term, hashes, target)}>"
    if isinstance(term, (NamedNode, Literal, Variable, DefaultGraph)):
        return term_to_string(term)
    raise TypeError(f"Unknown term kind: {type(term).__name__}")


def quad_to_signature(quad: Quad, hashes: TermHash, target: Term) -> str:
    """Concatenate the signatures of a quad's four terms, each followed by a separator."""
    return "".join(
        term_to_signature(term, hashes, target) + SIGNATURE_SEPARATOR
        for term in get_terms(quad)
    )
