"""
Isomorphism API Endpoints - REST API for comparing RDF graphs

Provides endpoints for:
- Comparing two N-Quads(-star) documents up to blank node renaming
- Reporting available hash primitives and the active defaults
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from rdf_isomorphic.config import ConfigValidationError, ConfigValidator, IsomorphismConfig
from rdf_isomorphic.formats.nquads import NQuadsSyntaxError, parse_nquads
from rdf_isomorphic.isomorphism.bijection import compare
from rdf_isomorphic.isomorphism.hashing import HASH_FUNCTIONS

logger = logging.getLogger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================

class CompareRequest(BaseModel):
    """Request to compare two graphs."""
    graph_a: str = Field(..., description="First graph as N-Quads")
    graph_b: str = Field(..., description="Second graph as N-Quads")
    hash_algorithm: Optional[str] = Field(None, description="Hash primitive (sha1, md5, blake2b)")
    verify_bijection: Optional[bool] = Field(None, description="Check the mapping against the quads")
    max_depth: Optional[int] = Field(None, description="Limit on nested speculative pairings")
    max_calls: Optional[int] = Field(None, description="Limit on solver invocations")
    timeout_seconds: Optional[float] = Field(None, description="Wall-clock limit in seconds")


class CompareResponse(BaseModel):
    """Result of a graph comparison."""
    status: str = Field(..., description="isomorphic, not_isomorphic or undetermined")
    isomorphic: Optional[bool] = Field(None, description="Verdict, null when undetermined")
    bijection: Optional[dict[str, str]] = Field(None, description="Blank nodes of A mapped to blank nodes of B")
    stats: dict[str, Any] = Field(default_factory=dict, description="Search statistics")


class IsomorphismStatusResponse(BaseModel):
    """Service capabilities."""
    hash_algorithms: list[str] = Field(..., description="Available hash primitives")
    defaults: dict[str, Any] = Field(default_factory=dict, description="Default configuration")


# ============================================================================
# Router
# ============================================================================

def create_isomorphism_router(config: Optional[IsomorphismConfig] = None) -> APIRouter:
    """
    Create the isomorphism router.

    Args:
        config: Defaults applied to every request; request fields override them.

    Returns:
        APIRouter mounted under /isomorphism
    """
    defaults = config or IsomorphismConfig()
    router = APIRouter(prefix="/isomorphism", tags=["Isomorphism"])

    @router.get("/status", response_model=IsomorphismStatusResponse)
    async def get_status():
        """List available hash primitives and the default configuration."""
        return IsomorphismStatusResponse(
            hash_algorithms=sorted(HASH_FUNCTIONS),
            defaults=defaults.to_dict(),
        )

    @router.post("/compare", response_model=CompareResponse)
    def compare_graphs(request: CompareRequest):
        """
        Compare two graphs up to blank node renaming.

        Budget exhaustion is reported as status "undetermined", not as an error.
        """
        overrides = request.model_dump(exclude={"graph_a", "graph_b"}, exclude_none=True)
        query_config = IsomorphismConfig.from_dict({**defaults.to_dict(), **overrides})

        try:
            ConfigValidator.validate_or_raise(query_config)
        except ConfigValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        try:
            graph_a = parse_nquads(request.graph_a)
            graph_b = parse_nquads(request.graph_b)
        except NQuadsSyntaxError as e:
            raise HTTPException(status_code=400, detail=f"Invalid N-Quads: {e}")

        result = compare(graph_a, graph_b, query_config)
        logger.info(
            f"Compared graphs of {len(graph_a)} and {len(graph_b)} quads: "
            f"{result.status.value} in {result.stats.duration_ms:.1f}ms"
        )
        return CompareResponse(**result.to_dict())

    return router
