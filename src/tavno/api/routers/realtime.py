from fastapi import APIRouter, WebSocket

import tavno.api.deps as deps

router = APIRouter(tags=["Real-time"])


@router.websocket("/ws")
async def quest_events(websocket: WebSocket) -> None:
    """Push QUEST_CREATED / QUEST_UPDATED / QUEST_DELETED events to the client."""
    await deps.broadcaster.serve(websocket)
