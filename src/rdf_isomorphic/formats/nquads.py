"""
N-Quads-star and canonical term string parsing using pyparsing.

Two grammars live here:

- The canonical term grammar reads back what ``term_to_string`` writes
  (bare IRIs, ``_:label``, ``"lex"@lang``, ``"lex"^^datatype``, ``?var``,
  ``<<s p o [g]>>``). Graph deduplication round-trips quads through it.
- The N-Quads grammar reads documents: one statement per line,
  ``subject predicate object [graph] .`` with RDF-star quoted triples
  (``<< s p o >>``) allowed in subject and object position.

Reference: https://www.w3.org/TR/n-quads/
"""

from __future__ import annotations

import re
from io import StringIO
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

import pyparsing as pp
from pyparsing import Forward, Optional as Opt, Regex, Suppress

from rdf_isomorphic.terms import (
    BlankNode,
    DefaultGraph,
    Literal,
    NamedNode,
    Quad,
    Term,
    Variable,
    XSD_STRING,
    escape_literal,
)


class NQuadsSyntaxError(ValueError):
    """Raised when an N-Quads document cannot be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"Error parsing line {line_number}: {message}"
        super().__init__(message)


# =============================================================================
# Literal escapes
# =============================================================================

_UNESCAPES = {"t": "\t", "b": "\b", "n": "\n", "r": "\r", "f": "\f", '"': '"', "'": "'", "\\": "\\"}
_ESCAPE_RE = re.compile(r"\\(u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}|.)")


def unescape_literal(value: str) -> str:
    """Resolve ECHAR and UCHAR escapes in a literal's lexical form."""
    def _replace(match: re.Match) -> str:
        code = match.group(1)
        if code[0] in "uU" and len(code) > 1:
            return chr(int(code[1:], 16))
        if code in _UNESCAPES:
            return _UNESCAPES[code]
        raise ValueError(f"Invalid escape sequence: \\{code}")

    return _ESCAPE_RE.sub(_replace, value)


_LANG_PATTERN = r"[a-zA-Z]+(?:-[a-zA-Z0-9]+)*"
_LEX_PATTERN = r'(?:[^"\\]|\\.)*'


def _make_literal(tokens) -> Literal:
    lex = unescape_literal(tokens.get("lex") or "")
    lang = tokens.get("lang")
    datatype = tokens.get("dt")
    if lang:
        return Literal(lex, language=lang)
    if datatype:
        return Literal(lex, datatype=NamedNode(unescape_literal(datatype)))
    return Literal(lex)


def _make_quad(tokens) -> Quad:
    graph = tokens[3] if len(tokens) > 3 else DefaultGraph()
    return Quad(tokens[0], tokens[1], tokens[2], graph)


# =============================================================================
# Canonical term grammar
# =============================================================================

_term_grammar: Optional[pp.ParserElement] = None


def _build_term_grammar() -> pp.ParserElement:
    """Build the pyparsing grammar for canonical term strings."""
    pp.ParserElement.enable_packrat()

    # Special characters inside bare values arrive as \uXXXX escapes
    bare = r'(?:[^\s<>"\\]|\\u[0-9A-Fa-f]{4})+'

    literal = Regex(
        rf'"(?P<lex>{_LEX_PATTERN})"(?:@(?P<lang>{_LANG_PATTERN})|\^\^(?P<dt>{bare}))?'
    ).set_parse_action(_make_literal)

    blank_node = Regex(rf"_:(?P<label>{bare})").set_parse_action(
        lambda t: BlankNode(unescape_literal(t["label"]))
    )
    variable = Regex(rf"\?(?P<name>{bare})").set_parse_action(
        lambda t: Variable(unescape_literal(t["name"]))
    )
    iri = Regex(bare).set_parse_action(lambda t: NamedNode(unescape_literal(t[0])))

    # Forward declaration for recursive quoted quads
    quoted = Forward()
    term = quoted | literal | blank_node | variable | iri
    quoted <<= (
        Suppress("<<") + term + term + term + Opt(term) + Suppress(">>")
    ).set_parse_action(_make_quad)

    return term


def string_to_term(value: str) -> Term:
    """
    Parse a canonical term string back into a term.

    The empty string is the default graph.

    Raises:
        ValueError: If the string is not a valid canonical term.
    """
    global _term_grammar
    if value == "":
        return DefaultGraph()
    if _term_grammar is None:
        _term_grammar = _build_term_grammar()
    try:
        return _term_grammar.parse_string(value, parse_all=True)[0]
    except pp.ParseException as e:
        raise ValueError(f"Invalid term string {value!r}: {e}") from e


def string_quad_to_quad(string_quad: dict[str, str]) -> Quad:
    """Convert a dict of canonical term strings back into a quad."""
    return Quad(
        string_to_term(string_quad["subject"]),
        string_to_term(string_quad["predicate"]),
        string_to_term(string_quad["object"]),
        string_to_term(string_quad.get("graph", "")),
    )


# =============================================================================
# N-Quads-star document grammar
# =============================================================================

class NQuadsParser:
    """
    Parser for N-Quads with RDF-star quoted triples.

    Format:
        <subject> <predicate> <object> .
        <subject> <predicate> <object> <graph> .
        << <s> <p> <o> >> <predicate> "literal"@en .
    """

    def __init__(self):
        self.line_number = 0
        self._statement = self._build_grammar()

    def _build_grammar(self) -> pp.ParserElement:
        """Build the pyparsing grammar for one N-Quads statement."""
        pp.ParserElement.enable_packrat()

        iri_chars = r'[^<>"{}|^`\\\s]*'

        iri = Regex(rf"<(?P<iri>{iri_chars})>").set_parse_action(
            lambda t: NamedNode(t["iri"])
        )
        blank_node = Regex(
            r"_:(?P<label>[A-Za-z0-9_](?:[A-Za-z0-9_.\-]*[A-Za-z0-9_\-])?)"
        ).set_parse_action(lambda t: BlankNode(t["label"]))
        literal = Regex(
            rf'"(?P<lex>{_LEX_PATTERN})"(?:@(?P<lang>{_LANG_PATTERN})|\^\^<(?P<dt>{iri_chars})>)?'
        ).set_parse_action(_make_literal)

        quoted_triple = Forward()
        subject = quoted_triple | iri | blank_node
        obj = quoted_triple | iri | blank_node | literal
        quoted_triple <<= (
            Suppress("<<") + subject + iri + obj + Suppress(">>")
        ).set_parse_action(_make_quad)

        graph_label = iri | blank_node
        comment = Regex(r"#.*")

        statement = (
            subject + iri + obj + Opt(graph_label) + Suppress(".")
        ).set_parse_action(_make_quad)
        return statement + Opt(comment).suppress()

    def parse(self, source: Union[str, Path, StringIO]) -> list[Quad]:
        """
        Parse N-Quads content.

        Args:
            source: N-Quads content as string, file path, or StringIO

        Returns:
            List of quads in document order
        """
        if isinstance(source, Path):
            text = source.read_text(encoding="utf-8")
        elif isinstance(source, StringIO):
            text = source.read()
        else:
            text = source

        return list(self.parse_quads(text.splitlines()))

    def parse_quads(self, lines: Iterable[str]) -> Iterator[Quad]:
        """
        Parse lines of N-Quads.

        Yields:
            Quad objects

        Raises:
            NQuadsSyntaxError: On the first malformed statement.
        """
        for i, line in enumerate(lines):
            self.line_number = i + 1

            line = line.strip()
            if not line or line.startswith("#"):
                continue

            try:
                yield self._statement.parse_string(line, parse_all=True)[0]
            except (pp.ParseException, ValueError) as e:
                raise NQuadsSyntaxError(f"{e}\nLine: {line}", self.line_number) from e


class NQuadsSerializer:
    """Serializer for N-Quads with RDF-star quoted triples."""

    def format_term(self, term: Term) -> str:
        """Format a single term in N-Quads syntax."""
        if isinstance(term, NamedNode):
            return f"<{term.value}>"
        if isinstance(term, BlankNode):
            return f"_:{term.value}"
        if isinstance(term, Literal):
            base = f'"{escape_literal(term.value)}"'
            if term.language:
                return f"{base}@{term.language}"
            if term.datatype is not None and term.datatype.value != XSD_STRING:
                return f"{base}^^<{term.datatype.value}>"
            return base
        if isinstance(term, Quad):
            if not isinstance(term.graph, DefaultGraph):
                raise ValueError("Quoted triples cannot carry a graph label in N-Quads")
            return (
                f"<< {self.format_term(term.subject)} {self.format_term(term.predicate)} "
                f"{self.format_term(term.object)} >>"
            )
        if isinstance(term, (Variable, DefaultGraph)):
            raise ValueError(f"{term.term_type} terms cannot be written as N-Quads terms")
        raise TypeError(f"Unknown term kind: {type(term).__name__}")

    def serialize_quads(self, quads: Iterable[Quad]) -> str:
        """
        Serialize quads to N-Quads format.

        Returns:
            N-Quads formatted string, one statement per line
        """
        lines = []
        for quad in quads:
            parts = [
                self.format_term(quad.subject),
                self.format_term(quad.predicate),
                self.format_term(quad.object),
            ]
            if not isinstance(quad.graph, DefaultGraph):
                parts.append(self.format_term(quad.graph))
            lines.append(" ".join(parts) + " .")
        return "\n".join(lines)


def parse_nquads(source: Union[str, Path, StringIO]) -> list[Quad]:
    """
    Parse N-Quads content.

    Args:
        source: N-Quads content as string, file path, or StringIO

    Returns:
        List of quads
    """
    return NQuadsParser().parse(source)


def serialize_nquads(quads: Iterable[Quad]) -> str:
    """Serialize quads to an N-Quads string."""
    return NQuadsSerializer().serialize_quads(quads)
