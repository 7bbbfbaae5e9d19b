import logging
from datetime import date, datetime
from typing import Dict, Optional

from payguard.constants import EventTopic
from payguard.events.bus import EventBus
from payguard.exceptions import ScanAggregateError
from payguard.models.bill import Bill, BillStatus
from payguard.models.events import BillOverdueEvent
from payguard.repositories.bill import BillRepository
from payguard.agents.bill_lifecycle import transition_bill
from payguard.utils.dates import Clock, utc_now, current_timestamp, days_overdue
from payguard.utils.ids import generate_trace_id

logger = logging.getLogger(__name__)

class BillChecker:
    """
    Daily overdue scan.

    Moves pending bills past their due date to overdue and emits `bill.overdue`
    for every unpaid overdue bill, including ones already marked overdue on a
    previous run. Re-running on the same day changes no state but emits again.
    """

    def __init__(self, bills: BillRepository, bus: EventBus, clock: Clock = utc_now,
                 isolate_failures: bool = False):
        self.bills = bills
        self.bus = bus
        self.clock = clock
        self.isolate_failures = isolate_failures

    async def run(self, trace_id: Optional[str] = None) -> Dict[str, int]:
        timestamp = current_timestamp(self.clock)
        today = timestamp.date()
        trace_id = trace_id or generate_trace_id()
        logger.info(f"Starting bill checker for {today} (trace {trace_id})")

        stats = {"checked": 0, "overdue": 0, "updated": 0, "emitted": 0}
        failures: Dict[str, Exception] = {}

        try:
            bills = await self.bills.list()
        except Exception as e:
            logger.error(f"Bill checker could not load bills: {e}")
            raise
        logger.info(f"Retrieved {len(bills)} bills for checking")

        for bill in bills:
            stats["checked"] += 1
            if bill.status == BillStatus.PAID:
                continue
            try:
                await self._check_bill(bill, today, timestamp, trace_id, stats)
            except Exception as e:
                if not self.isolate_failures:
                    logger.error(f"Error during bill checking at bill {bill.id}: {e}")
                    raise
                logger.exception(f"Bill {bill.id} failed during overdue scan, continuing")
                failures[bill.id] = e

        logger.info(
            f"Completed bill checker for {today}: checked={stats['checked']} "
            f"overdue={stats['overdue']} updated={stats['updated']} emitted={stats['emitted']}"
        )
        if failures:
            raise ScanAggregateError(failures)
        return stats

    async def _check_bill(self, bill: Bill, today: date, timestamp: datetime, trace_id: str, stats: Dict[str, int]):
        overdue_days = days_overdue(bill.due_date, today)
        if overdue_days <= 0:
            logger.debug(f"Bill {bill.id} not overdue (due {bill.due_date}, status {bill.status.value})")
            return

        stats["overdue"] += 1
        logger.info(f"Found overdue bill {bill.id} '{bill.name}': {overdue_days} days, status {bill.status.value}")

        if bill.status == BillStatus.PENDING:
            updated = transition_bill(bill, BillStatus.OVERDUE, timestamp)
            await self.bills.save(updated)
            stats["updated"] += 1
            logger.info(f"Updated bill {bill.id} status pending -> overdue")
            await self._emit_overdue(updated, overdue_days, timestamp, trace_id)
            stats["emitted"] += 1
        elif bill.status == BillStatus.OVERDUE:
            # No "already notified today" check: each run re-drives escalation
            await self._emit_overdue(bill, overdue_days, timestamp, trace_id)
            stats["emitted"] += 1

    async def _emit_overdue(self, bill: Bill, overdue_days: int, timestamp: datetime, trace_id: str):
        event = BillOverdueEvent(bill=bill, days_overdue=overdue_days, timestamp=timestamp)
        await self.bus.emit({"topic": EventTopic.BILL_OVERDUE.value, "data": event.to_record()}, trace_id=trace_id)
        logger.info(f"Emitted bill.overdue for {bill.id} ({overdue_days} days)")
