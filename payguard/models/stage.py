from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import Field
from payguard.models.base import RecordModel

class StageResult(RecordModel):
    """Outcome of one scheduled stage run, including redeliveries."""
    stage: str
    success: bool
    attempts: int = 1
    started_at: datetime
    finished_at: datetime
    error: Optional[str] = None
    stats: Dict[str, Any] = Field(default_factory=dict)
