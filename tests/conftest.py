import pytest
from datetime import datetime, timedelta, timezone
from typing import Optional

from payguard.models.bill import Bill, BillStatus
from payguard.pipeline import Pipeline
from payguard.repositories.state_store import InMemoryStateStore
from payguard.utils.ids import generate_bill_id

# Monday 22 Dec 2025, 09:30 UTC
FIXED_NOW = datetime(2025, 12, 22, 9, 30, tzinfo=timezone.utc)

class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0):
        self.now = self.now + timedelta(days=days, hours=hours)

@pytest.fixture
def clock():
    return FixedClock(FIXED_NOW)

@pytest.fixture
def store():
    return InMemoryStateStore()

@pytest.fixture
def test_pipeline(store, clock):
    pipeline = Pipeline()
    pipeline.connect(store=store, clock=clock)
    return pipeline

@pytest.fixture
def make_bill(clock):
    def _make(due_in_days: int = 0, status: BillStatus = BillStatus.PENDING,
              amount: int = 12500, name: str = "Electricity", id: Optional[str] = None) -> Bill:
        now = clock()
        return Bill(
            id=id or generate_bill_id(),
            name=name,
            amount=amount,
            due_date=now.date() + timedelta(days=due_in_days),
            status=status,
            created_at=now,
            updated_at=now,
        )
    return _make
