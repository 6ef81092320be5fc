"""
Live update stream.

GET /api/watch?path= opens a Server-Sent Events stream backed by one
WatchSession. The first message carries the initial scan; later messages
follow debounced re-scans. Each message is:

    data: {"type": "update", "data": <Project>}

Comment lines (``: ping``) keep idle connections open. When the client
disconnects the generator is cancelled and the session is closed.
"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from specboard.core.dashboard.api.state import DashboardState, get_state
from specboard.core.speckit.models import UpdateEvent
from specboard.core.watch.session import WatchSession

logger = logging.getLogger(__name__)

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def format_sse(event: UpdateEvent) -> str:
    """
    Frame an update event as one SSE message.

    Example:
        >>> format_sse(UpdateEvent(type="error", error="boom"))
        'data: {"type":"error","data":null,"error":"boom"}\\n\\n'
    """
    payload = event.model_dump(mode="json", by_alias=True)
    return f"data: {json.dumps(payload, separators=(',', ':'))}\n\n"


async def stream_updates(
    request: Request, state: DashboardState, session: WatchSession
) -> AsyncIterator[str]:
    """Yield SSE frames for one subscriber until it disconnects."""
    try:
        await session.start()
        while True:
            if await request.is_disconnected():
                break
            try:
                event = await session.next_event(timeout=state.keepalive_seconds)
            except asyncio.TimeoutError:
                yield ": ping\n\n"
                continue
            if event is None:
                break
            yield format_sse(event)
    finally:
        state.close_session(session)
        logger.debug(f"Watch stream for {session.root} ended")


@router.get("/watch")
async def watch_project(
    request: Request,
    path: str = Query(..., min_length=1, description="Project root directory (~ allowed)"),
    state: DashboardState = Depends(get_state),
) -> StreamingResponse:
    """
    Stream project updates via Server-Sent Events.

    Raises:
        HTTPException: 403 if the path is outside the allowed roots
    """
    root = state.check_path(path)
    session = state.open_session(root)
    return StreamingResponse(
        stream_updates(request, state, session),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
