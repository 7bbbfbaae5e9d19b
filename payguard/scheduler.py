"""Stage runner and cron scheduling for the daily jobs."""
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from payguard.config import settings
from payguard.models.base import RecordModel
from payguard.models.stage import StageResult
from payguard.utils.dates import Clock, utc_now

logger = logging.getLogger(__name__)

def _stats_from(outcome: Any) -> Dict[str, Any]:
    if isinstance(outcome, RecordModel):
        return outcome.to_record()
    if isinstance(outcome, dict):
        return outcome
    return {}

async def run_stage(name: str, stage: Callable[[], Awaitable[Any]],
                    max_attempts: Optional[int] = None, clock: Clock = utc_now) -> StageResult:
    """
    Runs a scheduled stage and reports the outcome as a StageResult.

    Stages raise on failure; redelivery happens here, bounded by `max_attempts`.
    """
    max_attempts = max_attempts or settings.STAGE_MAX_ATTEMPTS
    started_at = clock()
    last_error = None

    for attempt in range(1, max_attempts + 1):
        try:
            outcome = await stage()
        except Exception as e:
            last_error = e
            logger.exception(f"Stage {name} failed (attempt {attempt}/{max_attempts})")
            continue

        logger.info(f"Stage {name} succeeded on attempt {attempt}")
        return StageResult(
            stage=name,
            success=True,
            attempts=attempt,
            started_at=started_at,
            finished_at=clock(),
            stats=_stats_from(outcome),
        )

    logger.error(f"Stage {name} gave up after {max_attempts} attempts: {last_error}")
    return StageResult(
        stage=name,
        success=False,
        attempts=max_attempts,
        started_at=started_at,
        finished_at=clock(),
        error=str(last_error),
    )

def create_scheduler(bill_checker_job: Callable[[], Awaitable[StageResult]],
                     daily_summary_job: Callable[[], Awaitable[StageResult]]) -> AsyncIOScheduler:
    """Registers both daily jobs. Overlapping runs of the same job are not allowed."""
    scheduler = AsyncIOScheduler(timezone="UTC")

    scheduler.add_job(
        bill_checker_job,
        CronTrigger.from_crontab(settings.BILL_CHECKER_CRON, timezone="UTC"),
        id="bill-checker",
        name="Bill Checker: Overdue Scan",
        max_instances=1,
        coalesce=True,
    )
    logger.info(f"Registered job: Bill Checker ({settings.BILL_CHECKER_CRON})")

    scheduler.add_job(
        daily_summary_job,
        CronTrigger.from_crontab(settings.DAILY_SUMMARY_CRON, timezone="UTC"),
        id="daily-summary",
        name="Daily Summary Generator",
        max_instances=1,
        coalesce=True,
    )
    logger.info(f"Registered job: Daily Summary ({settings.DAILY_SUMMARY_CRON})")

    return scheduler
