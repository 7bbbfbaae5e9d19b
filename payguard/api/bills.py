import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from payguard.api.dependencies import get_trace_id
from payguard.constants import API_PREFIX
from payguard.exceptions import PayGuardError, InternalError
from payguard.models.bill import Bill, CreateBillRequest, PayBillRequest
from payguard.pipeline import Pipeline, get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{API_PREFIX}/bills", tags=["Bills"])

@router.post("", response_model=Bill)
async def add_bill(
    request: CreateBillRequest,
    pipeline: Pipeline = Depends(get_pipeline),
    trace_id: str = Depends(get_trace_id)
):
    try:
        return await pipeline.lifecycle.create_bill(request, trace_id=trace_id)
    except PayGuardError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error creating bill (trace {trace_id})")
        raise InternalError("An unexpected error occurred while creating the bill") from e

@router.get("")
async def get_bills(pipeline: Pipeline = Depends(get_pipeline)) -> Dict[str, Any]:
    try:
        bills = await pipeline.lifecycle.list_bills()
    except Exception as e:
        logger.exception("Error retrieving bills")
        raise InternalError("Failed to retrieve bills") from e

    logger.info(f"Retrieved {len(bills)} bills")
    return {
        "bills": [bill.to_record() for bill in bills],
        "total": len(bills),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

@router.patch("/{bill_id}/pay", response_model=Bill)
async def pay_bill(
    bill_id: str,
    request: Optional[PayBillRequest] = Body(None),
    pipeline: Pipeline = Depends(get_pipeline)
):
    try:
        return await pipeline.lifecycle.pay_bill(bill_id, request)
    except PayGuardError:
        raise
    except Exception as e:
        logger.exception(f"Error processing payment for bill {bill_id}")
        raise InternalError("Failed to process bill payment") from e

@router.delete("/{bill_id}")
async def delete_bill(bill_id: str, pipeline: Pipeline = Depends(get_pipeline)) -> Dict[str, Any]:
    try:
        deleted = await pipeline.lifecycle.delete_bill(bill_id)
    except PayGuardError:
        raise
    except Exception as e:
        logger.exception(f"Error deleting bill {bill_id}")
        raise InternalError("Failed to delete bill") from e

    return {"message": "Bill deleted successfully", "deletedBill": deleted.model_dump()}
