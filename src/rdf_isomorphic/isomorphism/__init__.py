"""
Isomorphism engine components.

- hashing: pluggable hash primitives
- partitioning: blank/non-blank graph split and set indexing
- signatures: per-quad signatures around a target term
- refinement: iterative blank node hashing
- context: search budget and statistics
- bijection: the search and public entry points
"""
