from payguard.constants import StateKey
from payguard.models.bill import Subscription
from payguard.repositories.base import BaseRepository
from payguard.repositories.state_store import StateStore

class SubscriptionRepository(BaseRepository[Subscription]):
    def __init__(self, store: StateStore):
        super().__init__(store, StateKey.SUBSCRIPTIONS.value, Subscription)
