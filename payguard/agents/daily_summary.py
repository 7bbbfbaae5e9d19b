import logging
from typing import Optional

from payguard.constants import EventTopic
from payguard.events.bus import EventBus
from payguard.models.events import DailySummaryGeneratedEvent
from payguard.models.summary import DailySummary
from payguard.repositories.bill import BillRepository
from payguard.services.summary import calculate_daily_summary
from payguard.utils.dates import Clock, utc_now, current_timestamp

logger = logging.getLogger(__name__)

class DailySummaryGenerator:
    """
    Daily rollup of the bill set. Recomputed from scratch on every run and
    always emits exactly one `daily.summary.generated`, even with no bills.
    """

    def __init__(self, bills: BillRepository, bus: EventBus, clock: Clock = utc_now):
        self.bills = bills
        self.bus = bus
        self.clock = clock

    async def run(self, trace_id: Optional[str] = None) -> DailySummary:
        timestamp = current_timestamp(self.clock)
        today = timestamp.date()
        logger.info(f"Starting daily summary generation for {today}")

        try:
            bills = await self.bills.list()
            logger.info(f"Retrieved {len(bills)} bills for summary calculation")

            summary = calculate_daily_summary(bills, today)
            logger.info(
                f"Generated daily summary for {today}: total={summary.total_bills} "
                f"overdue={summary.overdue} critical={summary.critical} "
                f"amount={summary.total_amount} overdue_amount={summary.overdue_amount}"
            )

            event = DailySummaryGeneratedEvent(summary=summary, timestamp=timestamp)
            await self.bus.emit(
                {"topic": EventTopic.DAILY_SUMMARY_GENERATED.value, "data": event.to_record()},
                trace_id=trace_id
            )
        except Exception as e:
            logger.error(f"Error during daily summary generation for {today}: {e}")
            raise

        return summary
