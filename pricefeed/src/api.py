"""FastAPI application exposing the latest consensus price."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from .PriceScheduler import PriceScheduler
from .PublishedState import PublishedState
from .SourceStats import SourceStats

__version__ = "0.1.0"


class AverageResponse(BaseModel):
    """Latest consensus value; null until the first cycle succeeds."""

    average_price: float | None


class StatusResponse(BaseModel):
    """Latest cycle details and per-source counters."""

    average_price: float | None
    contributing_count: int
    sources: list[str]
    timestamp: float | None
    age_seconds: float | None
    providers: dict[str, dict]


def create_app(
    state: PublishedState,
    stats: SourceStats | None = None,
    scheduler: PriceScheduler | None = None,
) -> FastAPI:
    """Create the query application.

    :param state: Published state to read from.
    :param stats: Optional per-source counters for /status.
    :param scheduler: Optional scheduler started and stopped with the app.
    :returns: Configured FastAPI instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the price loop with the server and stop it on shutdown."""
        if scheduler is not None:
            scheduler.start()
        yield
        if scheduler is not None:
            await scheduler.stop()

    app = FastAPI(
        title="BTC/USD Price Feed",
        description="Average BTC/USD price across exchanges",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/", response_model=AverageResponse)
    async def get_average():
        """Latest average price."""
        return state.get_current_average()

    @app.get("/version", response_class=PlainTextResponse)
    async def get_version():
        """Service version."""
        return __version__

    @app.get("/status", response_model=StatusResponse)
    async def get_status():
        """Latest cycle details and per-source failure counters."""
        result = state.read()
        return StatusResponse(
            average_price=result.consensus_value if result else None,
            contributing_count=result.contributing_count if result else 0,
            sources=list(result.sources) if result else [],
            timestamp=result.timestamp if result else None,
            age_seconds=time.time() - result.timestamp if result else None,
            providers=stats.get_all_status() if stats else {},
        )

    return app
