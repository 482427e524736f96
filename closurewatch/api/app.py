"""FastAPI application factory.

Lifespan
--------
On startup the app configures logging and creates the single
:class:`StatusService` shared across all requests via
``request.app.state.status_service``.  Its cache lives as long as the process.

Routers
-------
    /api/status   : current school status (JSON)
    /api/health   : liveness check
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from closurewatch import __version__
from closurewatch.log import configure_logging
from closurewatch.status.service import StatusService

from closurewatch.api.routers import status as status_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the status service on startup."""
    configure_logging()
    app.state.status_service = StatusService()
    yield


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="closure-watch API",
        description=(
            "Reports whether district schools are open, closed, delayed or on an "
            "online learning day, classified from the district's status page."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # The status page is read by browser frontends on other origins.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(status_router.router, prefix="/api", tags=["status"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn closurewatch.api.app:app --reload
app = create_app()
