import json
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from payguard.constants import API_PREFIX
from payguard.pipeline import Pipeline, get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{API_PREFIX}/events", tags=["Events"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

def _sse(payload) -> str:
    return f"data: {json.dumps(payload)}\n\n"

@router.get("/stream")
async def events_stream(pipeline: Pipeline = Depends(get_pipeline)):
    """Server-sent events: a connection message followed by the buffered event history."""
    logger.info("Starting SSE stream for PayGuard events")
    history = pipeline.bus.recent()

    async def generate():
        yield _sse({
            "type": "connection",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": "Connected to PayGuard event stream",
        })
        for entry in history:
            yield _sse({"type": "event", **entry})

    return StreamingResponse(generate(), media_type="text/event-stream", headers=SSE_HEADERS)
