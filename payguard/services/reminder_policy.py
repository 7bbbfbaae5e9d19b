import logging
from datetime import date, timedelta
from typing import List, Optional

from payguard.config import settings
from payguard.models.bill import Bill, BillStatus
from payguard.models.policy import ReminderPolicy, NotificationType, PolicyEvaluationResult, NotificationSchedule
from payguard.utils.dates import days_difference

logger = logging.getLogger(__name__)

def get_default_reminder_policy() -> ReminderPolicy:
    """The globally active policy, taken from settings."""
    return ReminderPolicy(
        notify_before_days=settings.REMINDER_NOTIFY_BEFORE_DAYS,
        notify_on_due_date=settings.REMINDER_NOTIFY_ON_DUE_DATE,
        repeat_overdue_daily=settings.REMINDER_REPEAT_OVERDUE_DAILY,
    )

def evaluate_notify_before_days(bill: Bill, policy: ReminderPolicy, current_date: date) -> Optional[PolicyEvaluationResult]:
    """
    Fires only when today is exactly `notify_before_days` before the due date.
    """
    if policy.notify_before_days <= 0:
        return None

    days_to_due = days_difference(current_date, bill.due_date)
    if days_to_due == policy.notify_before_days:
        return PolicyEvaluationResult(
            bill_id=bill.id,
            notification_type=NotificationType.BEFORE_DUE,
            scheduled_date=current_date,
            days_before_due=policy.notify_before_days,
        )
    return None

def evaluate_notify_on_due_date(bill: Bill, policy: ReminderPolicy, current_date: date) -> Optional[PolicyEvaluationResult]:
    if not policy.notify_on_due_date:
        return None

    if current_date == bill.due_date:
        return PolicyEvaluationResult(
            bill_id=bill.id,
            notification_type=NotificationType.ON_DUE_DATE,
            scheduled_date=current_date,
        )
    return None

def evaluate_repeat_overdue_daily(bill: Bill, policy: ReminderPolicy, current_date: date) -> Optional[PolicyEvaluationResult]:
    """
    Daily reminder for bills already marked overdue and still past due on `current_date`.
    """
    if not policy.repeat_overdue_daily:
        return None
    if bill.status != BillStatus.OVERDUE:
        return None

    overdue_days = days_difference(bill.due_date, current_date)
    if overdue_days > 0:
        return PolicyEvaluationResult(
            bill_id=bill.id,
            notification_type=NotificationType.OVERDUE_DAILY,
            scheduled_date=current_date,
            days_overdue=overdue_days,
        )
    return None

def create_notification_schedule(bill: Bill, policy: ReminderPolicy, start_date: date) -> List[NotificationSchedule]:
    """
    Projects the future before-due and on-due-date reminders for a bill.
    Overdue reminders depend on future status and are left to the daily scan.
    """
    schedules: List[NotificationSchedule] = []

    if policy.notify_before_days > 0:
        scheduled_date = bill.due_date - timedelta(days=policy.notify_before_days)
        if scheduled_date >= start_date:
            schedules.append(NotificationSchedule(
                bill_id=bill.id,
                notification_type=NotificationType.BEFORE_DUE,
                scheduled_date=scheduled_date,
                days_before_due=policy.notify_before_days,
            ))

    if policy.notify_on_due_date and bill.due_date >= start_date:
        schedules.append(NotificationSchedule(
            bill_id=bill.id,
            notification_type=NotificationType.ON_DUE_DATE,
            scheduled_date=bill.due_date,
        ))

    return schedules

def apply_policies_across_bills(bills: List[Bill], policy: ReminderPolicy, current_date: date) -> List[PolicyEvaluationResult]:
    """
    Evaluates every rule for every unpaid bill and returns all reminders due on `current_date`.
    """
    results: List[PolicyEvaluationResult] = []

    for bill in bills:
        if bill.status == BillStatus.PAID:
            continue

        for rule in (evaluate_notify_before_days, evaluate_notify_on_due_date, evaluate_repeat_overdue_daily):
            result = rule(bill, policy, current_date)
            if result:
                results.append(result)

    logger.debug(f"Reminder policy evaluation on {current_date}: {len(results)} reminders for {len(bills)} bills")
    return results
