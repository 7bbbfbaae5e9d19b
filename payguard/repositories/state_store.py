import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

class StateStore(ABC):
    """
    Keyed record store grouped by collection.
    Writes are whole-record replacements; there is no compare-and-swap.
    """

    @abstractmethod
    async def set(self, collection: str, id: str, record: Record) -> None:
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> Optional[Record]:
        pass

    @abstractmethod
    async def get_group(self, collection: str) -> List[Record]:
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        pass

class InMemoryStateStore(StateStore):
    def __init__(self):
        self._groups: Dict[str, Dict[str, Record]] = {}

    async def set(self, collection: str, id: str, record: Record) -> None:
        self._groups.setdefault(collection, {})[id] = copy.deepcopy(record)

    async def get(self, collection: str, id: str) -> Optional[Record]:
        record = self._groups.get(collection, {}).get(id)
        return copy.deepcopy(record) if record is not None else None

    async def get_group(self, collection: str) -> List[Record]:
        return [copy.deepcopy(r) for r in self._groups.get(collection, {}).values()]

    async def delete(self, collection: str, id: str) -> bool:
        return self._groups.get(collection, {}).pop(id, None) is not None

    def clear(self):
        self._groups.clear()

class MongoStateStore(StateStore):
    """One MongoDB collection per group, keyed by `_id` = record id."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.database = database

    async def set(self, collection: str, id: str, record: Record) -> None:
        doc = dict(record)
        doc["_id"] = id
        await self.database[collection].replace_one({"_id": id}, doc, upsert=True)

    async def get(self, collection: str, id: str) -> Optional[Record]:
        doc = await self.database[collection].find_one({"_id": id})
        if not doc:
            return None
        doc.pop("_id", None)
        return doc

    async def get_group(self, collection: str) -> List[Record]:
        docs = await self.database[collection].find({}).to_list(length=None)
        for doc in docs:
            doc.pop("_id", None)
        return docs

    async def delete(self, collection: str, id: str) -> bool:
        result = await self.database[collection].delete_one({"_id": id})
        return result.deleted_count > 0
