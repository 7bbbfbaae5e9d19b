import pytest
from datetime import date

from payguard.agents.daily_summary import DailySummaryGenerator
from payguard.events.bus import EventBus
from payguard.models.bill import BillStatus
from payguard.repositories.bill import BillRepository
from payguard.services.summary import calculate_daily_summary, build_dashboard_summary

TODAY = date(2025, 12, 22)

def test_empty_bill_set():
    summary = calculate_daily_summary([], TODAY)
    assert summary.date == TODAY
    assert summary.to_record() == {
        "date": "2025-12-22",
        "totalBills": 0,
        "overdue": 0,
        "critical": 0,
        "totalAmount": 0,
        "overdueAmount": 0,
    }

def test_counts_and_amounts(make_bill):
    bills = [
        make_bill(due_in_days=5, amount=1000),
        make_bill(due_in_days=0, amount=2000),
        make_bill(due_in_days=-2, status=BillStatus.OVERDUE, amount=3000),
        make_bill(due_in_days=-4, status=BillStatus.OVERDUE, amount=4000),
        # Past due but not yet scanned: counted from the date, not the status
        make_bill(due_in_days=-10, status=BillStatus.PENDING, amount=5000),
        make_bill(due_in_days=-30, status=BillStatus.PAID, amount=6000),
    ]

    summary = calculate_daily_summary(bills, TODAY)

    assert summary.total_bills == 5
    assert summary.overdue == 3
    assert summary.critical == 2
    assert summary.total_amount == 21000
    assert summary.overdue_amount == 12000

def test_invariants_hold(make_bill):
    bills = [make_bill(due_in_days=d, status=s, amount=100 * (i + 1))
             for i, (d, s) in enumerate((d, s) for d in range(-8, 8)
                                        for s in (BillStatus.PENDING, BillStatus.OVERDUE, BillStatus.PAID))]

    summary = calculate_daily_summary(bills, TODAY)

    assert summary.critical <= summary.overdue <= summary.total_bills
    assert summary.overdue_amount <= summary.total_amount

def test_dashboard_due_soon_excludes_today_and_paid(make_bill, clock):
    bills = [
        make_bill(due_in_days=0),
        make_bill(due_in_days=1),
        make_bill(due_in_days=7),
        make_bill(due_in_days=8),
        make_bill(due_in_days=3, status=BillStatus.PAID),
        make_bill(due_in_days=-1, status=BillStatus.OVERDUE),
    ]

    dashboard = build_dashboard_summary(bills, TODAY, clock())

    assert dashboard.due_soon_bills == 2
    assert dashboard.total_bills == 5
    assert dashboard.overdue_bills == 1
    assert dashboard.last_updated == clock()

def test_dashboard_recent_bills_newest_first(make_bill, clock):
    bills = []
    for i in range(7):
        bills.append(make_bill(name=f"Bill {i}"))
        clock.advance(hours=1)

    dashboard = build_dashboard_summary(bills, TODAY, clock())

    assert [b.name for b in dashboard.recent_bills] == ["Bill 6", "Bill 5", "Bill 4", "Bill 3", "Bill 2"]

@pytest.mark.asyncio
async def test_generator_emits_exactly_one_event(store, clock, make_bill):
    bus = EventBus()
    bills = BillRepository(store)
    await bills.save(make_bill(due_in_days=-5, status=BillStatus.OVERDUE, amount=12500))

    summary = await DailySummaryGenerator(bills, bus, clock=clock).run(trace_id="trace_summary")

    assert summary.overdue == 1
    assert summary.critical == 1
    events = bus.recent("daily.summary.generated")
    assert len(events) == 1
    assert events[0]["data"]["summary"]["date"] == "2025-12-22"
    assert events[0]["data"]["summary"]["overdueAmount"] == 12500
    assert events[0]["traceId"] == "trace_summary"

@pytest.mark.asyncio
async def test_generator_runs_on_empty_store(store, clock):
    bus = EventBus()

    summary = await DailySummaryGenerator(BillRepository(store), bus, clock=clock).run()

    assert summary.total_bills == 0
    assert len(bus.recent("daily.summary.generated")) == 1

@pytest.mark.asyncio
async def test_generator_does_not_mutate_bills(store, clock, make_bill):
    bills = BillRepository(store)
    bill = await bills.save(make_bill(due_in_days=-3, status=BillStatus.PENDING))

    await DailySummaryGenerator(bills, EventBus(), clock=clock).run()

    assert await bills.get(bill.id) == bill
