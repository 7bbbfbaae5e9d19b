import calendar
import logging
from datetime import date
from typing import Any, Callable, Dict, List

from payguard.models.events import BillCreatedEvent, SubscriptionCreatedEvent
from payguard.models.policy import ReminderPolicy, NotificationSchedule
from payguard.services.reminder_policy import get_default_reminder_policy, create_notification_schedule
from payguard.utils.dates import Clock, utc_now, current_date

logger = logging.getLogger(__name__)

def _clamped(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))

def calculate_next_renewal_date(renewal_day: int, today: date) -> date:
    """
    This month's renewal day if it is still ahead, otherwise next month's.
    Days missing from a month (e.g. the 31st in April) fall on its last day.
    """
    candidate = _clamped(today.year, today.month, renewal_day)
    if candidate <= today:
        year, month = (today.year + 1, 1) if today.month == 12 else (today.year, today.month + 1)
        candidate = _clamped(year, month, renewal_day)
    return candidate

class AuditHandlers:
    """
    Observers of creation events. They record the audit trail and the reminder
    and renewal plans derived from it; they never mutate state.
    """

    def __init__(self, clock: Clock = utc_now,
                 policy_provider: Callable[[], ReminderPolicy] = get_default_reminder_policy):
        self.clock = clock
        self.policy_provider = policy_provider

    async def handle_bill_created(self, data: Dict[str, Any], trace_id: str) -> List[NotificationSchedule]:
        bill_id = (data.get("bill") or {}).get("id")
        try:
            event = BillCreatedEvent.model_validate(data)
            bill = event.bill
            logger.info(f"Processing bill.created for {bill.id} '{bill.name}' due {bill.due_date} (trace {trace_id})")

            policy = self.policy_provider()
            schedule = create_notification_schedule(bill, policy, current_date(self.clock))
            logger.info(
                f"Applied reminder policy to {bill.id}: before={policy.notify_before_days}d "
                f"on_due={policy.notify_on_due_date} repeat_overdue={policy.repeat_overdue_daily}; "
                f"planned reminders: {[(s.notification_type.value, s.scheduled_date.isoformat()) for s in schedule]}"
            )
            logger.info(
                f"AUDIT [BILL_CREATED_PROCESSED]: {bill.id} amount={bill.amount} "
                f"due={bill.due_date} status={bill.status.value} created={bill.created_at.isoformat()}"
            )
        except Exception as e:
            logger.error(f"Error processing bill created event for {bill_id}: {e}")
            raise
        return schedule

    async def handle_subscription_created(self, data: Dict[str, Any], trace_id: str) -> date:
        subscription_id = (data.get("subscription") or {}).get("id")
        try:
            event = SubscriptionCreatedEvent.model_validate(data)
            subscription = event.subscription
            logger.info(
                f"Processing subscription.created for {subscription.id} '{subscription.name}' "
                f"renewing on day {subscription.renewal_day} (trace {trace_id})"
            )

            next_renewal = calculate_next_renewal_date(subscription.renewal_day, current_date(self.clock))
            logger.info(f"Next renewal for {subscription.id}: {next_renewal.isoformat()}")
            logger.info(
                f"AUDIT [SUBSCRIPTION_CREATED_PROCESSED]: {subscription.id} amount={subscription.amount} "
                f"active={subscription.is_active} next_renewal={next_renewal.isoformat()}"
            )
        except Exception as e:
            logger.error(f"Error processing subscription created event for {subscription_id}: {e}")
            raise
        return next_renewal
