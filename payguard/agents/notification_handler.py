import logging
from typing import Any, Dict, Optional, Union

from payguard.config import settings
from payguard.constants import EventTopic, MessageTemplate
from payguard.events.bus import EventBus
from payguard.models.escalation import EscalationLevel
from payguard.models.events import EscalationEvaluateEvent, NotificationSendEvent
from payguard.utils.dates import Clock, utc_now, current_timestamp

logger = logging.getLogger(__name__)

TEMPLATES_BY_LEVEL = {
    EscalationLevel.INFO: MessageTemplate.BILL_DUE_TODAY,
    EscalationLevel.WARNING: MessageTemplate.BILL_OVERDUE_WARNING,
    EscalationLevel.CRITICAL: MessageTemplate.BILL_OVERDUE_CRITICAL,
}

def select_message_template(level: Union[EscalationLevel, str]) -> str:
    try:
        level = EscalationLevel(level)
    except ValueError:
        return MessageTemplate.BILL_OVERDUE_GENERIC.value
    return TEMPLATES_BY_LEVEL.get(level, MessageTemplate.BILL_OVERDUE_GENERIC).value

class NotificationHandler:
    """
    Turns each `escalation.evaluate` into one `notification.send` intent.
    Delivery is outside the pipeline; the recipient is a fixed lookup.
    """

    def __init__(self, bus: EventBus, clock: Clock = utc_now, recipient: Optional[str] = None):
        self.bus = bus
        self.clock = clock
        self.recipient = recipient or settings.NOTIFICATION_RECIPIENT

    async def handle_escalation(self, data: Dict[str, Any], trace_id: str) -> NotificationSendEvent:
        timestamp = current_timestamp(self.clock)
        bill_id = (data.get("bill") or {}).get("id")
        level = (data.get("escalationContext") or {}).get("level")
        logger.info(f"Processing escalation.evaluate for {bill_id} at level {level} (trace {trace_id})")

        try:
            escalation = EscalationEvaluateEvent.model_validate(data)
            context = escalation.escalation_context
            bill = escalation.bill
            template = select_message_template(context.level)

            notification = NotificationSendEvent(
                recipient=self.recipient,
                message_template=template,
                context_data={
                    "billId": bill.id,
                    "billName": bill.name,
                    "amount": bill.amount,
                    "dueDate": bill.due_date.isoformat(),
                    "daysOverdue": context.days_overdue,
                    "escalationLevel": context.level.value,
                    "status": bill.status.value,
                },
                timestamp=timestamp,
                trace_id=trace_id,
            )
            logger.info(f"Sending notification {template} for {bill_id} to {self.recipient}")
            await self.bus.emit(
                {"topic": EventTopic.NOTIFICATION_SEND.value, "data": notification.to_record()},
                trace_id=trace_id
            )
        except Exception as e:
            logger.error(f"Error processing notification for bill {bill_id}: {e}")
            raise

        return notification
