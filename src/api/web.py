"""
FastAPI application for the isomorphism service.
"""

from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.isomorphism import create_isomorphism_router
from rdf_isomorphic import __version__
from rdf_isomorphic.config import IsomorphismConfig


def create_app(config: Optional[IsomorphismConfig] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Default isomorphism settings (read from the environment if omitted)

    Returns:
        Configured FastAPI application
    """
    production_mode = os.getenv("RDF_ISOMORPHIC_PRODUCTION", "false").lower() == "true"

    # Comma-separated origins; development mode allows all
    allowed_origins_env = os.getenv("RDF_ISOMORPHIC_CORS_ORIGINS", "")
    if allowed_origins_env:
        allowed_origins = [o.strip() for o in allowed_origins_env.split(",")]
    elif production_mode:
        allowed_origins = []
    else:
        allowed_origins = ["*"]

    app = FastAPI(
        title="rdf-isomorphic API",
        description="RDF graph isomorphism up to blank node renaming",
        version=__version__,
        docs_url="/docs" if not production_mode else None,
        redoc_url="/redoc" if not production_mode else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(create_isomorphism_router(config or IsomorphismConfig.from_env()))

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    return app


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    host = os.getenv("RDF_ISOMORPHIC_HOST", "127.0.0.1")
    port = int(os.getenv("RDF_ISOMORPHIC_PORT", "8000"))
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()
