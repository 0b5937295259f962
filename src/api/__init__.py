"""
rdf-isomorphic API Layer

FastAPI-based REST API over the isomorphism engine.
Separates API concerns from the core engine (rdf_isomorphic).
"""

from api.isomorphism import (
    CompareRequest,
    CompareResponse,
    IsomorphismStatusResponse,
    create_isomorphism_router,
)

# Import directly from api.web when needed: from api.web import create_app

__all__ = [
    "CompareRequest",
    "CompareResponse",
    "IsomorphismStatusResponse",
    "create_isomorphism_router",
]
