from datetime import date, datetime
from typing import List

from payguard.constants import CRITICAL_OVERDUE_DAYS, DUE_SOON_DAYS, RECENT_BILLS_LIMIT
from payguard.models.bill import Bill, BillStatus
from payguard.models.summary import DailySummary, DashboardSummary
from payguard.utils.dates import days_difference, days_overdue

def calculate_daily_summary(bills: List[Bill], today: date) -> DailySummary:
    """
    Rollup over the full bill set. Paid bills count towards total_amount only.
    """
    summary = DailySummary(date=today)

    for bill in bills:
        summary.total_amount += bill.amount
        if bill.status == BillStatus.PAID:
            continue

        summary.total_bills += 1
        overdue_days = days_overdue(bill.due_date, today)
        if overdue_days > 0:
            summary.overdue += 1
            summary.overdue_amount += bill.amount
            if overdue_days > CRITICAL_OVERDUE_DAYS:
                summary.critical += 1

    return summary

def build_dashboard_summary(bills: List[Bill], today: date, now: datetime) -> DashboardSummary:
    """Daily rollup plus the due-soon counter and the most recently created bills."""
    rollup = calculate_daily_summary(bills, today)

    due_soon = 0
    for bill in bills:
        if bill.status == BillStatus.PAID:
            continue
        # Due later than today and within the window
        if 0 < days_difference(today, bill.due_date) <= DUE_SOON_DAYS:
            due_soon += 1

    recent = sorted(bills, key=lambda b: b.created_at, reverse=True)[:RECENT_BILLS_LIMIT]

    return DashboardSummary(
        total_bills=rollup.total_bills,
        overdue_bills=rollup.overdue,
        critical_bills=rollup.critical,
        due_soon_bills=due_soon,
        total_amount=rollup.total_amount,
        overdue_amount=rollup.overdue_amount,
        recent_bills=recent,
        last_updated=now,
    )
