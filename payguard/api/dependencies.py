from typing import Optional
from fastapi import Header
from payguard.utils.ids import generate_trace_id

async def get_trace_id(x_trace_id: Optional[str] = Header(None)) -> str:
    """Trace id from the X-Trace-Id header, or a fresh one."""
    return x_trace_id or generate_trace_id()
