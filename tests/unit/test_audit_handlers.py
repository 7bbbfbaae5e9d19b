import pytest
from datetime import date, datetime, timezone

from payguard.agents.audit_handlers import AuditHandlers, calculate_next_renewal_date
from payguard.models.events import BillCreatedEvent, SubscriptionCreatedEvent
from payguard.models.bill import Subscription
from payguard.models.policy import NotificationType, ReminderPolicy

@pytest.mark.parametrize("renewal_day, today, expected", [
    (25, date(2025, 12, 22), date(2025, 12, 25)),
    (22, date(2025, 12, 22), date(2026, 1, 22)),
    (10, date(2025, 12, 22), date(2026, 1, 10)),
    (31, date(2025, 4, 10), date(2025, 4, 30)),
    (31, date(2025, 4, 30), date(2025, 5, 31)),
    (30, date(2025, 1, 31), date(2025, 2, 28)),
    (29, date(2024, 2, 1), date(2024, 2, 29)),
])
def test_next_renewal_date(renewal_day, today, expected):
    assert calculate_next_renewal_date(renewal_day, today) == expected

@pytest.mark.asyncio
async def test_bill_created_plans_reminders(clock, make_bill):
    handlers = AuditHandlers(clock=clock, policy_provider=lambda: ReminderPolicy(notify_before_days=3))
    bill = make_bill(due_in_days=10)
    payload = BillCreatedEvent(bill=bill, timestamp=clock()).to_record()

    schedule = await handlers.handle_bill_created(payload, "trace_audit")

    assert [(s.notification_type, s.scheduled_date) for s in schedule] == [
        (NotificationType.BEFORE_DUE, date(2025, 12, 29)),
        (NotificationType.ON_DUE_DATE, date(2026, 1, 1)),
    ]

@pytest.mark.asyncio
async def test_bill_created_rejects_malformed_payload(clock):
    with pytest.raises(Exception):
        await AuditHandlers(clock=clock).handle_bill_created({"bill": {"id": "bill_x"}}, "trace_audit")

@pytest.mark.asyncio
async def test_subscription_created_computes_next_renewal(clock):
    now = clock()
    subscription = Subscription(
        id="sub_1", name="Streaming", amount=1599, renewal_day=5, created_at=now, updated_at=now
    )
    payload = SubscriptionCreatedEvent(subscription=subscription, timestamp=now).to_record()

    next_renewal = await AuditHandlers(clock=clock).handle_subscription_created(payload, "trace_audit")

    assert next_renewal == date(2026, 1, 5)

@pytest.mark.asyncio
async def test_audit_handlers_do_not_touch_state(test_pipeline):
    bill = await test_pipeline.lifecycle.create_bill({"name": "Rent", "amount": 90000, "dueDate": "2025-12-31"})
    await test_pipeline.lifecycle.create_subscription({"name": "Cloud", "amount": 999, "renewalDay": 1})

    assert await test_pipeline.bills.list() == [bill]
    assert len(await test_pipeline.subscriptions.list()) == 1
