from datetime import datetime
from enum import Enum
from pydantic import Field
from payguard.models.base import RecordModel

class EscalationLevel(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"

class EscalationContext(RecordModel):
    """Severity assessment for one overdue bill. Never persisted."""
    bill_id: str
    days_overdue: int = Field(..., ge=0)
    level: EscalationLevel
    timestamp: datetime
