import asyncio
import logging
from datetime import timedelta
from payguard.config import settings
from payguard.models.bill import Bill, BillStatus, CreateSubscriptionRequest
from payguard.pipeline import pipeline
from payguard.utils.dates import utc_now
from payguard.utils.ids import generate_bill_id

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# (name, amount in cents, due in N days, status)
SAMPLE_BILLS = [
    ("Electricity", 12500, -5, BillStatus.PENDING),
    ("Water", 4300, -2, BillStatus.OVERDUE),
    ("Internet", 5999, 0, BillStatus.PENDING),
    ("Rent", 150000, 3, BillStatus.PENDING),
    ("Phone", 2500, 10, BillStatus.PENDING),
    ("Insurance", 32000, -20, BillStatus.PAID),
]

SAMPLE_SUBSCRIPTIONS = [
    ("Streaming", 1599, 15),
    ("Cloud Storage", 299, 31),
]

async def seed() -> bool:
    """
    Writes sample bills straight to the store (past due dates included)
    and creates subscriptions through the lifecycle.
    Only a persistent backend is seeded.
    """
    if settings.STATE_BACKEND != "mongo":
        logger.warning(
            f"STATE_BACKEND is '{settings.STATE_BACKEND}': seeded data would be lost when this process exits. "
            "Set STATE_BACKEND=mongo to seed a persistent store."
        )
        return False

    now = utc_now()
    logger.info(f"Seeding {settings.STATE_BACKEND} state store...")

    for name, amount, due_in, status in SAMPLE_BILLS:
        bill = Bill(
            id=generate_bill_id(),
            name=name,
            amount=amount,
            due_date=now.date() + timedelta(days=due_in),
            status=status,
            created_at=now,
            updated_at=now,
        )
        await pipeline.bills.save(bill)
        logger.info(f"Seeded bill {bill.id} '{name}' due {bill.due_date} ({status.value})")

    for name, amount, renewal_day in SAMPLE_SUBSCRIPTIONS:
        await pipeline.lifecycle.create_subscription(
            CreateSubscriptionRequest(name=name, amount=amount, renewal_day=renewal_day)
        )

    logger.info("Seeding complete.")
    return True

if __name__ == "__main__":
    pipeline.connect()
    try:
        ok = asyncio.run(seed())
    finally:
        pipeline.close()
    raise SystemExit(0 if ok else 1)
