"""FastAPI application setup."""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from leadscout import __version__
from leadscout.models.database import init_db
from leadscout.search import SearchService, build_service
from .routes import router


def create_app(
    service: Optional[SearchService] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """Create the API app, wiring a default search service when none is given."""
    if service is None:
        service = build_service(session_factory or init_db())

    app = FastAPI(
        title="Lead Scout",
        description="Discover, enrich, score and rank local business leads",
        version=__version__,
    )
    app.state.service = service

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    app.include_router(router, prefix="/api")
    return app
