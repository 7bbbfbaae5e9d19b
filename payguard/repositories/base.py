from typing import Generic, List, Optional, Type, TypeVar
from payguard.models.base import RecordModel
from payguard.repositories.state_store import StateStore

T = TypeVar("T", bound=RecordModel)

class BaseRepository(Generic[T]):
    def __init__(self, store: StateStore, collection: str, model_cls: Type[T]):
        self.store = store
        self.collection = collection
        self.model_cls = model_cls

    async def get(self, id: str) -> Optional[T]:
        """Get a record by ID."""
        record = await self.store.get(self.collection, id)
        return self.model_cls.from_record(record) if record else None

    async def list(self) -> List[T]:
        """All records in the collection, in store order."""
        records = await self.store.get_group(self.collection)
        return [self.model_cls.from_record(record) for record in records]

    async def save(self, model: T) -> T:
        """Create or replace the whole record."""
        await self.store.set(self.collection, model.id, model.to_record())
        return model

    async def delete(self, id: str) -> bool:
        return await self.store.delete(self.collection, id)

    async def count(self) -> int:
        return len(await self.store.get_group(self.collection))
