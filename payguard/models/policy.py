from enum import Enum
from typing import Optional
from pydantic import Field
from payguard.models.base import RecordModel, CalendarDate

class NotificationType(str, Enum):
    BEFORE_DUE = "before_due"
    ON_DUE_DATE = "on_due_date"
    OVERDUE_DAILY = "overdue_daily"

class ReminderPolicy(RecordModel):
    """Rules governing when a reminder fires relative to a bill's due date."""
    notify_before_days: int = Field(3, ge=0)
    notify_on_due_date: bool = True
    repeat_overdue_daily: bool = True

class PolicyEvaluationResult(RecordModel):
    """A reminder rule that fired for a bill on the evaluated date."""
    bill_id: str
    should_notify: bool = True
    notification_type: NotificationType
    scheduled_date: CalendarDate
    days_before_due: Optional[int] = None
    days_overdue: Optional[int] = None

class NotificationSchedule(RecordModel):
    """A projected future reminder date for planning."""
    bill_id: str
    notification_type: NotificationType
    scheduled_date: CalendarDate
    days_before_due: Optional[int] = None
