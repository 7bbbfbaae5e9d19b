from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from payguard.models.base import RecordModel, CalendarDate

class BillStatus(str, Enum):
    PENDING = "pending"
    OVERDUE = "overdue"
    PAID = "paid"

class Bill(RecordModel):
    """
    A single payable obligation tracked through pending -> overdue -> paid.
    Amounts are integer minor currency units.
    """
    id: str = Field(..., description="Unique bill ID (bill_<millis>_<random>)")
    name: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, strict=True, description="Amount in cents")
    due_date: CalendarDate
    status: BillStatus = Field(default=BillStatus.PENDING)

    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "bill_1735000000000_k3j9x2a",
                "name": "Electricity",
                "amount": 12500,
                "dueDate": "2025-12-25",
                "status": "pending",
                "createdAt": "2025-12-01T09:00:00Z",
                "updatedAt": "2025-12-01T09:00:00Z"
            }
        }
    )

class Subscription(RecordModel):
    """Recurring charge renewed on a fixed day of the month."""
    id: str = Field(..., description="Unique subscription ID (sub_<millis>_<random>)")
    name: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, strict=True)
    renewal_day: int = Field(..., ge=1, le=31, strict=True)
    is_active: bool = True

    created_at: datetime
    updated_at: datetime

# Request Models
class CreateBillRequest(RecordModel):
    name: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, strict=True)
    due_date: CalendarDate

class CreateSubscriptionRequest(RecordModel):
    name: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, strict=True)
    # Range is checked by the lifecycle so it can report INVALID_RENEWAL_DAY
    renewal_day: int = Field(..., strict=True)

class PayBillRequest(RecordModel):
    payment_amount: Optional[int] = Field(None, gt=0, strict=True)
    payment_date: Optional[str] = None

class DeletedBill(BaseModel):
    id: str
    name: str
