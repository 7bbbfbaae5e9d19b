from enum import Enum

class EventTopic(str, Enum):
    BILL_CREATED = "bill.created"
    SUBSCRIPTION_CREATED = "subscription.created"
    BILL_OVERDUE = "bill.overdue"
    ESCALATION_EVALUATE = "escalation.evaluate"
    NOTIFICATION_SEND = "notification.send"
    DAILY_SUMMARY_GENERATED = "daily.summary.generated"

class StateKey(str, Enum):
    BILLS = "bills"
    SUBSCRIPTIONS = "subscriptions"

class MessageTemplate(str, Enum):
    BILL_DUE_TODAY = "bill_due_today"
    BILL_OVERDUE_WARNING = "bill_overdue_warning"
    BILL_OVERDUE_CRITICAL = "bill_overdue_critical"
    BILL_OVERDUE_GENERIC = "bill_overdue_generic"

API_PREFIX = "/payguard"

# Days overdue above which a bill counts as critical
CRITICAL_OVERDUE_DAYS = 3

# Window used by the dashboard "due soon" counter
DUE_SOON_DAYS = 7
RECENT_BILLS_LIMIT = 5
