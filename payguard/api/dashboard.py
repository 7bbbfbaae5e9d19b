import logging
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from payguard.constants import API_PREFIX
from payguard.exceptions import InternalError
from payguard.models.summary import DashboardSummary
from payguard.pipeline import Pipeline, get_pipeline
from payguard.services.reminder_policy import get_default_reminder_policy, apply_policies_across_bills
from payguard.services.summary import build_dashboard_summary
from payguard.utils.dates import current_timestamp

logger = logging.getLogger(__name__)

router = APIRouter(prefix=API_PREFIX, tags=["Dashboard"])

@router.get("/summary", response_model=DashboardSummary)
async def get_summary(pipeline: Pipeline = Depends(get_pipeline)):
    """Bill counts, amounts and the most recent bills."""
    try:
        bills = await pipeline.bills.list()
    except Exception as e:
        logger.exception("Error generating summary")
        raise InternalError("Failed to generate summary") from e

    now = current_timestamp(pipeline.clock)
    summary = build_dashboard_summary(bills, now.date(), now)
    logger.info(f"Generated summary: {summary.total_bills} active, {summary.overdue_bills} overdue")
    return summary

@router.get("/reminders")
async def get_reminders(on: Optional[date] = None, pipeline: Pipeline = Depends(get_pipeline)) -> Dict[str, Any]:
    """Reminders the default policy fires on the given day (today by default)."""
    try:
        bills = await pipeline.bills.list()
    except Exception as e:
        logger.exception("Error evaluating reminders")
        raise InternalError("Failed to evaluate reminders") from e

    evaluation_date = on or current_timestamp(pipeline.clock).date()
    policy = get_default_reminder_policy()
    reminders = apply_policies_across_bills(bills, policy, evaluation_date)
    return {
        "date": evaluation_date.isoformat(),
        "policy": policy.to_record(),
        "reminders": [r.to_record() for r in reminders],
        "total": len(reminders),
    }
