from payguard.constants import StateKey
from payguard.models.bill import Bill
from payguard.repositories.base import BaseRepository
from payguard.repositories.state_store import StateStore

class BillRepository(BaseRepository[Bill]):
    def __init__(self, store: StateStore):
        super().__init__(store, StateKey.BILLS.value, Bill)
