from datetime import datetime
from typing import Any, Dict, TypedDict
from pydantic import Field
from payguard.models.base import RecordModel
from payguard.models.bill import Bill, Subscription
from payguard.models.escalation import EscalationContext
from payguard.models.summary import DailySummary

class Event(TypedDict):
    """Envelope handed to the event bus."""
    topic: str
    data: Dict[str, Any]

class BillCreatedEvent(RecordModel):
    bill: Bill
    timestamp: datetime

class SubscriptionCreatedEvent(RecordModel):
    subscription: Subscription
    timestamp: datetime

class BillOverdueEvent(RecordModel):
    bill: Bill
    days_overdue: int = Field(..., ge=0)
    timestamp: datetime

class EscalationEvaluateEvent(RecordModel):
    escalation_context: EscalationContext
    bill: Bill
    timestamp: datetime

class NotificationSendEvent(RecordModel):
    """Intent to notify. Delivery is handled outside the pipeline."""
    recipient: str
    message_template: str
    context_data: Dict[str, Any]
    timestamp: datetime
    trace_id: str

class DailySummaryGeneratedEvent(RecordModel):
    summary: DailySummary
    timestamp: datetime
