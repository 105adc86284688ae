"""FastAPI application for SealRegistry."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from seal_registry import __version__
from seal_registry.api import observations, sessions
from seal_registry.config import settings
from seal_registry.db import init_db
from seal_registry.resolution.errors import ObservationRejected
from seal_registry.sessions import SessionStore, StaticCredentials


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler."""
    await init_db()
    yield


app = FastAPI(
    title="SealRegistry",
    description="Seal sightings reconciled against a mark and tag registry",
    version=__version__,
    lifespan=lifespan,
)
app.state.session_store = SessionStore(ttl=timedelta(seconds=settings.session_ttl_seconds))
app.state.credential_verifier = StaticCredentials(settings.api_users)
app.include_router(observations.router)
app.include_router(sessions.router)


@app.exception_handler(ObservationRejected)
async def observation_rejected_handler(request: Request, exc: ObservationRejected) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": exc.messages})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"errors": [str(exc.detail)]},
        headers=exc.headers,
    )


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}
