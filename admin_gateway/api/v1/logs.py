from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from admin_gateway.config import settings
from admin_gateway.dependencies import get_log_query_service, get_log_stream_service
from admin_gateway.domain.entities.log_entry import LogEntry, LogLevel
from admin_gateway.domain.services.log_query_service import LogQueryService
from admin_gateway.domain.services.log_stream_service import LogStreamService
from admin_gateway.schemas.logs import build_log_filter
from admin_gateway.schemas.responses import ApiResponse

router = APIRouter(tags=["logs"])


@router.get(
    "/logs",
    response_model=None,
    responses={200: {"model": ApiResponse[LogEntry]}},
)
async def get_logs(
    service: Optional[str] = Query(None),
    level: Optional[LogLevel] = Query(None, description="error, warn or info (any case)"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    limit: Optional[int] = Query(None, ge=0),
    log_service: LogQueryService = Depends(get_log_query_service),
):
    """Query the service logs, newest first."""
    log_filter = build_log_filter(
        service=service,
        level=level,
        start_date=start_date,
        end_date=end_date,
        search_term=search_term,
        limit=limit,
        max_limit=settings.LOGS_MAX_LIMIT,
    )
    # File reads block, keep them off the event loop
    results = await run_in_threadpool(log_service.get_logs, log_filter)
    return ApiResponse[LogEntry](message=f"Retrieved {len(results)} log entries", results=results)


@router.get("/logs/stream")
async def stream_logs(
    request: Request,
    stream_service: LogStreamService = Depends(get_log_stream_service),
):
    """Follow the service logs live as Server-Sent Events."""
    return StreamingResponse(
        stream_service.stream(is_disconnected=request.is_disconnected),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
