from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from runtime.context import RuntimeContext
from runtime.environment import RequestEnvironment
from ..api_models import DashboardResponse, EventResponse, SummaryResponse, TrackResponse
from ..services.health_service import HealthService
from ..services.stats_service import StatsService
from ..state import DashboardState

router = APIRouter()


def get_context(request: Request) -> RuntimeContext:
    return request.app.state.ctx


def get_dashboard(request: Request) -> DashboardState:
    return request.app.state.dashboard


def _stats(ctx: RuntimeContext) -> StatsService:
    return StatsService(
        service=ctx.service,
        default_limit=ctx.config.dashboard.recent_events_limit,
    )


def _track(request: Request, ctx: RuntimeContext, kind: str, action) -> TrackResponse:
    """
    Run a tracking call with the request's headers as the client metadata.

    Handlers are async so tracking calls run on the event loop thread, one
    at a time.
    """
    environment = ctx.store.environment
    user_agent = request.headers.get("user-agent")
    referrer = request.headers.get("referer")
    if isinstance(environment, RequestEnvironment):
        with environment.bind(user_agent, referrer):
            action()
    else:
        action()
    return TrackResponse(tracked=kind, total=_stats(ctx).get_totals())


@router.get("/health")
async def health(ctx: RuntimeContext = Depends(get_context)) -> Dict[str, Any]:
    return HealthService(ctx=ctx).get_health_summary()


@router.get("/analytics/summary", response_model=SummaryResponse)
async def analytics_summary(ctx: RuntimeContext = Depends(get_context)):
    """Pure read; recomputed from the event list on every call."""
    return _stats(ctx).get_summary()


@router.get("/analytics/events", response_model=List[EventResponse])
async def recent_events(
    limit: Optional[int] = Query(None, description="Maximum events; negative values yield none"),
    ctx: RuntimeContext = Depends(get_context),
):
    return _stats(ctx).get_recent(limit)


@router.post("/analytics/downloads", response_model=TrackResponse)
async def track_download(request: Request, ctx: RuntimeContext = Depends(get_context)):
    return _track(request, ctx, "download", ctx.service.track_resume_download)


@router.post("/analytics/contacts", response_model=TrackResponse)
async def track_contact(request: Request, ctx: RuntimeContext = Depends(get_context)):
    return _track(request, ctx, "contact", ctx.service.track_contact_interaction)


@router.get("/analytics/export")
async def export_analytics(ctx: RuntimeContext = Depends(get_context)):
    filename = ctx.service.export_filename()
    return Response(
        content=ctx.service.export_analytics_data(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/analytics", response_model=SummaryResponse)
async def clear_analytics(ctx: RuntimeContext = Depends(get_context)):
    ctx.service.clear_analytics_data()
    logging.info(f"Analytics cleared via API in context {ctx.context_id}")
    return _stats(ctx).get_summary()


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard_state(dashboard: DashboardState = Depends(get_dashboard)):
    """Polled by the open dashboard; refreshes once the interval has elapsed."""
    if dashboard.is_open:
        dashboard.poll()
    return DashboardResponse.from_state(dashboard)


@router.post("/dashboard/open", response_model=DashboardResponse)
async def dashboard_open(dashboard: DashboardState = Depends(get_dashboard)):
    dashboard.open()
    return DashboardResponse.from_state(dashboard)


@router.post("/dashboard/close", response_model=DashboardResponse)
async def dashboard_close(dashboard: DashboardState = Depends(get_dashboard)):
    dashboard.close()
    return DashboardResponse.from_state(dashboard)


@router.post("/dashboard/toggle", response_model=DashboardResponse)
async def dashboard_toggle(dashboard: DashboardState = Depends(get_dashboard)):
    dashboard.toggle()
    return DashboardResponse.from_state(dashboard)
