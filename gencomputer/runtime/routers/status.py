"""Runtime status and agent usage endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

from gencomputer.runtime.deps import Settings, Usage
from gencomputer.runtime.models.agent import AuthStatus
from gencomputer.runtime.models.api import StatusResponse, UsageResponse

router = APIRouter(tags=["status"])

NO_USAGE_MESSAGE = "No agent API usage has been recorded in this session."


@router.get("/status", response_model=StatusResponse)
async def get_status(request: Request, settings: Settings) -> StatusResponse:
    auth: AuthStatus = getattr(request.app.state, "auth_status", None) or AuthStatus(authenticated=False)
    return StatusResponse(
        authenticated=auth.authenticated,
        agent_mode=settings.agent_mode,
        auth_error=auth.error,
        debug_enabled=settings.debug_agent,
        workspace_dir=str(settings.workspace_path),
    )


@router.get("/usage", response_model=UsageResponse, response_model_exclude_none=True)
async def get_usage(usage: Usage) -> UsageResponse:
    """Latest and aggregate usage since startup.  ``success=False`` until the first recorded run."""
    report = usage.snapshot()
    if report.latest is None and report.aggregate is None:
        return UsageResponse(success=False, message=NO_USAGE_MESSAGE)
    return UsageResponse(success=True, summary=report)
