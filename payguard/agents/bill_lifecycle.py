import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as SchemaError

from payguard.constants import EventTopic
from payguard.events.bus import EventBus
from payguard.exceptions import (
    ValidationError, InvalidDueDateError, InvalidRenewalDayError,
    BillNotFoundError, BillAlreadyPaidError, InvalidTransitionError,
)
from payguard.models.bill import (
    Bill, BillStatus, Subscription, CreateBillRequest, CreateSubscriptionRequest,
    PayBillRequest, DeletedBill,
)
from payguard.models.events import BillCreatedEvent, SubscriptionCreatedEvent
from payguard.repositories.bill import BillRepository
from payguard.repositories.subscription import SubscriptionRepository
from payguard.utils.dates import Clock, utc_now, current_timestamp, is_not_past
from payguard.utils.ids import generate_bill_id, generate_subscription_id

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# pending -> overdue -> paid; paid is terminal
ALLOWED_TRANSITIONS = {
    BillStatus.PENDING: {BillStatus.OVERDUE, BillStatus.PAID},
    BillStatus.OVERDUE: {BillStatus.PAID},
    BillStatus.PAID: set(),
}

def transition_bill(bill: Bill, new_status: BillStatus, timestamp: datetime) -> Bill:
    """Returns a copy of the bill in `new_status` with a fresh updated_at."""
    if new_status not in ALLOWED_TRANSITIONS[bill.status]:
        raise InvalidTransitionError(
            f"Cannot move bill from {bill.status.value} to {new_status.value}",
            details=[f"Bill ID: {bill.id}"]
        )
    return bill.model_copy(update={"status": new_status, "updated_at": timestamp})

def format_schema_errors(exc: SchemaError) -> List[str]:
    return [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]

class BillLifecycle:
    """
    Request-side operations on bills and subscriptions: creation, payment, deletion.
    All failures are raised synchronously and leave state untouched.
    """

    def __init__(self, bills: BillRepository, subscriptions: SubscriptionRepository,
                 bus: EventBus, clock: Clock = utc_now):
        self.bills = bills
        self.subscriptions = subscriptions
        self.bus = bus
        self.clock = clock

    def _parse(self, model_cls: Type[M], data: Union[M, Dict[str, Any]], message: str) -> M:
        if isinstance(data, model_cls):
            return data
        try:
            return model_cls.model_validate(data)
        except SchemaError as e:
            raise ValidationError(message, details=format_schema_errors(e))

    async def create_bill(self, request: Union[CreateBillRequest, Dict[str, Any]],
                          trace_id: Optional[str] = None) -> Bill:
        request = self._parse(CreateBillRequest, request, "Bill request validation failed")
        logger.info(f"Processing add bill request '{request.name}' due {request.due_date} (trace {trace_id})")

        timestamp = current_timestamp(self.clock)
        if not is_not_past(request.due_date, timestamp.date()):
            logger.warning(f"Bill creation failed: due date {request.due_date} is in the past (trace {trace_id})")
            raise InvalidDueDateError(
                "Due date cannot be in the past",
                details=[f"Provided due date: {request.due_date.isoformat()}"]
            )

        record = {
            "id": generate_bill_id(),
            "name": request.name,
            "amount": request.amount,
            "dueDate": request.due_date.isoformat(),
            "status": BillStatus.PENDING.value,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }
        # Re-check the constructed record against the stored schema
        try:
            bill = Bill.model_validate(record)
        except SchemaError as e:
            logger.error(f"Bill validation failed for {record['id']}: {e}")
            raise ValidationError("Bill data validation failed", details=format_schema_errors(e))

        await self.bills.save(bill)
        logger.info(f"Bill {bill.id} created and stored (trace {trace_id})")

        event = BillCreatedEvent(bill=bill, timestamp=timestamp)
        await self.bus.emit({"topic": EventTopic.BILL_CREATED.value, "data": event.to_record()}, trace_id=trace_id)
        return bill

    async def pay_bill(self, bill_id: str, request: Optional[PayBillRequest] = None) -> Bill:
        timestamp = current_timestamp(self.clock)
        request = request or PayBillRequest()
        logger.info(
            f"Processing payment for bill {bill_id} "
            f"(amount={request.payment_amount}, date={request.payment_date})"
        )

        bill = await self.bills.get(bill_id)
        if not bill:
            logger.warning(f"Bill {bill_id} not found for payment")
            raise BillNotFoundError("Bill not found", details=[f"Bill ID: {bill_id}"])

        if bill.status == BillStatus.PAID:
            logger.warning(f"Bill {bill_id} already paid")
            raise BillAlreadyPaidError("Bill is already marked as paid", details=[f"Bill ID: {bill_id}"])

        updated = transition_bill(bill, BillStatus.PAID, timestamp)
        await self.bills.save(updated)
        logger.info(f"Bill {bill_id} marked as paid (was {bill.status.value})")
        return updated

    async def delete_bill(self, bill_id: str) -> DeletedBill:
        bill = await self.bills.get(bill_id)
        if not bill:
            logger.warning(f"Bill {bill_id} not found for deletion")
            raise BillNotFoundError("Bill not found", details=[f"Bill ID: {bill_id}"])

        await self.bills.delete(bill_id)
        logger.info(f"Bill {bill_id} ('{bill.name}') deleted")
        return DeletedBill(id=bill.id, name=bill.name)

    async def list_bills(self) -> List[Bill]:
        return await self.bills.list()

    async def create_subscription(self, request: Union[CreateSubscriptionRequest, Dict[str, Any]],
                                  trace_id: Optional[str] = None) -> Subscription:
        request = self._parse(CreateSubscriptionRequest, request, "Subscription request validation failed")
        logger.info(f"Processing add subscription request '{request.name}' (trace {trace_id})")

        if request.renewal_day < 1 or request.renewal_day > 31:
            logger.warning(f"Subscription creation failed: invalid renewal day {request.renewal_day}")
            raise InvalidRenewalDayError(
                "Renewal day must be between 1 and 31",
                details=[f"Provided renewal day: {request.renewal_day}"]
            )

        timestamp = current_timestamp(self.clock)
        record = {
            "id": generate_subscription_id(),
            "name": request.name,
            "amount": request.amount,
            "renewalDay": request.renewal_day,
            "isActive": True,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }
        try:
            subscription = Subscription.model_validate(record)
        except SchemaError as e:
            logger.error(f"Subscription validation failed for {record['id']}: {e}")
            raise ValidationError("Subscription data validation failed", details=format_schema_errors(e))

        await self.subscriptions.save(subscription)
        logger.info(f"Subscription {subscription.id} created and stored (trace {trace_id})")

        event = SubscriptionCreatedEvent(subscription=subscription, timestamp=timestamp)
        await self.bus.emit(
            {"topic": EventTopic.SUBSCRIPTION_CREATED.value, "data": event.to_record()},
            trace_id=trace_id
        )
        return subscription

    async def list_subscriptions(self) -> List[Subscription]:
        return await self.subscriptions.list()
