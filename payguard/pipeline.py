import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from payguard.config import settings
from payguard.constants import EventTopic
from payguard.events.bus import EventBus
from payguard.models.stage import StageResult
from payguard.repositories.bill import BillRepository
from payguard.repositories.subscription import SubscriptionRepository
from payguard.repositories.state_store import StateStore, InMemoryStateStore, MongoStateStore
from payguard.agents.bill_lifecycle import BillLifecycle
from payguard.agents.bill_checker import BillChecker
from payguard.agents.escalation_engine import EscalationEngine
from payguard.agents.notification_handler import NotificationHandler
from payguard.agents.daily_summary import DailySummaryGenerator
from payguard.agents.audit_handlers import AuditHandlers
from payguard.scheduler import run_stage
from payguard.utils.dates import Clock, utc_now

logger = logging.getLogger(__name__)

class Pipeline:
    client: AsyncIOMotorClient = None
    store: StateStore = None
    bus: EventBus = None
    clock: Clock = None

    # Repositories
    bills: BillRepository = None
    subscriptions: SubscriptionRepository = None

    # Stages
    lifecycle: BillLifecycle = None
    bill_checker: BillChecker = None
    escalation_engine: EscalationEngine = None
    notification_handler: NotificationHandler = None
    daily_summary: DailySummaryGenerator = None
    audit_handlers: AuditHandlers = None

    def connect(self, store: Optional[StateStore] = None, clock: Clock = utc_now):
        """Initialize the state store, event bus and stages, and wire subscriptions."""
        if store is None:
            if settings.STATE_BACKEND == "mongo":
                self.client = AsyncIOMotorClient(settings.MONGODB_URL)
                store = MongoStateStore(self.client[settings.DB_NAME])
            else:
                store = InMemoryStateStore()
        self.store = store
        self.clock = clock
        self.bus = EventBus(history_limit=settings.EVENT_HISTORY_LIMIT)

        self.bills = BillRepository(store)
        self.subscriptions = SubscriptionRepository(store)

        self.lifecycle = BillLifecycle(self.bills, self.subscriptions, self.bus, clock=clock)
        self.bill_checker = BillChecker(
            self.bills, self.bus, clock=clock, isolate_failures=settings.SCAN_ISOLATE_FAILURES
        )
        self.escalation_engine = EscalationEngine(self.bus, clock=clock)
        self.notification_handler = NotificationHandler(self.bus, clock=clock)
        self.daily_summary = DailySummaryGenerator(self.bills, self.bus, clock=clock)
        self.audit_handlers = AuditHandlers(clock=clock)

        self.bus.subscribe(EventTopic.BILL_CREATED, self.audit_handlers.handle_bill_created)
        self.bus.subscribe(EventTopic.SUBSCRIPTION_CREATED, self.audit_handlers.handle_subscription_created)
        self.bus.subscribe(EventTopic.BILL_OVERDUE, self.escalation_engine.handle_bill_overdue)
        self.bus.subscribe(EventTopic.ESCALATION_EVALUATE, self.notification_handler.handle_escalation)

        logger.info(f"Pipeline connected using {type(store).__name__}")

    def close(self):
        if self.client:
            self.client.close()
            self.client = None
            logger.info("Disconnected from MongoDB")

    async def run_bill_checker(self) -> StageResult:
        return await run_stage("bill_checker", self.bill_checker.run, clock=self.clock)

    async def run_daily_summary(self) -> StageResult:
        return await run_stage("daily_summary", self.daily_summary.run, clock=self.clock)

pipeline = Pipeline()

async def get_pipeline() -> Pipeline:
    """Dependency for FastAPI."""
    return pipeline
