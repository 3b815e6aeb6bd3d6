"""FastAPI application entrypoint."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from debrief.api import debriefs
from debrief.core.config import settings
from debrief.core.deps import get_orchestrator

PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Missing configuration must fail startup, not the first request
    if get_orchestrator not in app.dependency_overrides:
        get_orchestrator()
    yield


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.state.last_report = None

app.include_router(debriefs.router, prefix=PREFIX)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
