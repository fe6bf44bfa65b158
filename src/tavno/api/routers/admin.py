"""Administrator endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

import tavno.api.deps as deps

router = APIRouter(tags=["Admin"])


@router.get(
    "/logs",
    response_class=PlainTextResponse,
    dependencies=[Depends(deps.require_admin)],
)
async def read_activity_log() -> str:
    """Return the raw suspicious-activity log (JSON lines)."""
    return await deps.auditor.read()
