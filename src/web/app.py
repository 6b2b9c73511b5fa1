"""
FastAPI application factory for the analytics dashboard API.

Routes:
- /api/health -> basic health info
- /api/analytics/* -> summary, recent events, tracking, export, clear
- /api/dashboard/* -> dashboard panel state (open, close, toggle, poll)
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from runtime.context import RuntimeContext
from .routes import api
from .state import DashboardState

DEFAULT_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")


def create_app(
    ctx: RuntimeContext,
    allow_origins: Sequence[str] = DEFAULT_ORIGINS,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Create the FastAPI app bound to one analytics context."""
    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        ctx.close()

    app = FastAPI(
        title="Portfolio Analytics",
        version="0.1.0",
        description="Visit, download and contact analytics for the portfolio site",
        lifespan=lifespan,
    )
    app.state.ctx = ctx
    app.state.dashboard = DashboardState(
        ctx.service,
        refresh_interval_s=ctx.config.dashboard.refresh_interval_s,
        clock=clock,
    )

    # CORS for the site's dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api.router, prefix="/api")

    return app
