import logging
from typing import Any, Dict

from payguard.constants import EventTopic
from payguard.events.bus import EventBus
from payguard.models.escalation import EscalationContext
from payguard.models.events import BillOverdueEvent, EscalationEvaluateEvent
from payguard.utils.dates import Clock, utc_now, current_timestamp
from payguard.utils.escalation import calculate_escalation_level

logger = logging.getLogger(__name__)

class EscalationEngine:
    """
    Stateless stage: classifies each `bill.overdue` and emits one `escalation.evaluate`.
    """

    def __init__(self, bus: EventBus, clock: Clock = utc_now):
        self.bus = bus
        self.clock = clock

    async def handle_bill_overdue(self, data: Dict[str, Any], trace_id: str) -> EscalationEvaluateEvent:
        timestamp = current_timestamp(self.clock)
        bill_id = (data.get("bill") or {}).get("id")
        logger.info(f"Processing bill.overdue for {bill_id}: {data.get('daysOverdue')} days (trace {trace_id})")

        try:
            overdue_event = BillOverdueEvent.model_validate(data)
            level = calculate_escalation_level(overdue_event.days_overdue)
            context = EscalationContext(
                bill_id=overdue_event.bill.id,
                days_overdue=overdue_event.days_overdue,
                level=level,
                timestamp=timestamp,
            )
            logger.info(f"Escalation level for {bill_id}: {level.value}")

            escalation = EscalationEvaluateEvent(
                escalation_context=context,
                bill=overdue_event.bill,
                timestamp=timestamp,
            )
            await self.bus.emit(
                {"topic": EventTopic.ESCALATION_EVALUATE.value, "data": escalation.to_record()},
                trace_id=trace_id
            )
        except Exception as e:
            logger.error(f"Error processing escalation for bill {bill_id}: {e}")
            raise

        return escalation
