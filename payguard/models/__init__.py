from payguard.models.base import RecordModel, CalendarDate
from payguard.models.bill import Bill, BillStatus, Subscription, CreateBillRequest, CreateSubscriptionRequest, PayBillRequest, DeletedBill
from payguard.models.policy import ReminderPolicy, NotificationType, PolicyEvaluationResult, NotificationSchedule
from payguard.models.escalation import EscalationLevel, EscalationContext
from payguard.models.summary import DailySummary, DashboardSummary
from payguard.models.events import Event, BillCreatedEvent, SubscriptionCreatedEvent, BillOverdueEvent, EscalationEvaluateEvent, NotificationSendEvent, DailySummaryGeneratedEvent
from payguard.models.stage import StageResult
