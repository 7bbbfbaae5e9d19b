from datetime import datetime
from typing import List
from pydantic import Field
from payguard.models.base import RecordModel, CalendarDate
from payguard.models.bill import Bill

class DailySummary(RecordModel):
    """Point-in-time rollup of bill counts and amounts."""
    date: CalendarDate
    total_bills: int = Field(0, ge=0)
    overdue: int = Field(0, ge=0)
    critical: int = Field(0, ge=0)
    total_amount: int = Field(0, ge=0)
    overdue_amount: int = Field(0, ge=0)

class DashboardSummary(RecordModel):
    total_bills: int = 0
    overdue_bills: int = 0
    critical_bills: int = 0
    due_soon_bills: int = 0
    total_amount: int = 0
    overdue_amount: int = 0
    recent_bills: List[Bill] = []
    last_updated: datetime
