import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from payguard.api.dependencies import get_trace_id
from payguard.constants import API_PREFIX
from payguard.exceptions import PayGuardError, InternalError
from payguard.models.bill import Subscription, CreateSubscriptionRequest
from payguard.pipeline import Pipeline, get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{API_PREFIX}/subscriptions", tags=["Subscriptions"])

@router.post("", response_model=Subscription)
async def add_subscription(
    request: CreateSubscriptionRequest,
    pipeline: Pipeline = Depends(get_pipeline),
    trace_id: str = Depends(get_trace_id)
):
    try:
        return await pipeline.lifecycle.create_subscription(request, trace_id=trace_id)
    except PayGuardError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error creating subscription (trace {trace_id})")
        raise InternalError("An unexpected error occurred while creating the subscription") from e

@router.get("")
async def get_subscriptions(pipeline: Pipeline = Depends(get_pipeline)) -> Dict[str, Any]:
    try:
        subscriptions = await pipeline.lifecycle.list_subscriptions()
    except Exception as e:
        logger.exception("Error retrieving subscriptions")
        raise InternalError("Failed to retrieve subscriptions") from e

    return {
        "subscriptions": [s.to_record() for s in subscriptions],
        "total": len(subscriptions),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
