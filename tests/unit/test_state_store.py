import pytest
from unittest.mock import AsyncMock, MagicMock

from payguard.models.bill import Bill
from payguard.repositories.bill import BillRepository
from payguard.repositories.state_store import StateStore, InMemoryStateStore, MongoStateStore

@pytest.mark.asyncio
async def test_in_memory_set_get_delete():
    store = InMemoryStateStore()
    await store.set("bills", "bill_1", {"id": "bill_1", "name": "Rent"})

    assert await store.get("bills", "bill_1") == {"id": "bill_1", "name": "Rent"}
    assert await store.get("bills", "bill_2") is None
    assert await store.get("subscriptions", "bill_1") is None

    assert await store.delete("bills", "bill_1") is True
    assert await store.delete("bills", "bill_1") is False
    assert await store.get_group("bills") == []

@pytest.mark.asyncio
async def test_in_memory_returns_copies():
    store = InMemoryStateStore()
    record = {"id": "bill_1", "tags": ["a"]}
    await store.set("bills", "bill_1", record)

    record["tags"].append("b")
    fetched = await store.get("bills", "bill_1")
    fetched["tags"].append("c")

    assert (await store.get("bills", "bill_1"))["tags"] == ["a"]

@pytest.mark.asyncio
async def test_in_memory_set_replaces_whole_record():
    store = InMemoryStateStore()
    await store.set("bills", "bill_1", {"id": "bill_1", "status": "pending", "note": "x"})
    await store.set("bills", "bill_1", {"id": "bill_1", "status": "paid"})

    assert await store.get_group("bills") == [{"id": "bill_1", "status": "paid"}]

@pytest.mark.asyncio
async def test_repository_round_trip(store, make_bill):
    bills = BillRepository(store)
    bill = make_bill(due_in_days=3)

    await bills.save(bill)

    raw = await store.get("bills", bill.id)
    assert raw["dueDate"] == bill.due_date.isoformat()
    assert raw["status"] == "pending"
    assert await bills.get(bill.id) == bill
    assert await bills.count() == 1

@pytest.fixture
def mock_database():
    database = MagicMock()
    collection = MagicMock()
    database.__getitem__.return_value = collection
    return database, collection

@pytest.mark.asyncio
async def test_mongo_set_upserts_by_id(mock_database):
    database, collection = mock_database
    collection.replace_one = AsyncMock()

    await MongoStateStore(database).set("bills", "bill_1", {"id": "bill_1", "name": "Rent"})

    database.__getitem__.assert_called_with("bills")
    args, kwargs = collection.replace_one.call_args
    assert args[0] == {"_id": "bill_1"}
    assert args[1] == {"_id": "bill_1", "id": "bill_1", "name": "Rent"}
    assert kwargs["upsert"] is True

@pytest.mark.asyncio
async def test_mongo_get_strips_internal_id(mock_database):
    database, collection = mock_database
    collection.find_one = AsyncMock(return_value={"_id": "bill_1", "id": "bill_1"})

    assert await MongoStateStore(database).get("bills", "bill_1") == {"id": "bill_1"}

    collection.find_one = AsyncMock(return_value=None)
    assert await MongoStateStore(database).get("bills", "bill_2") is None

@pytest.mark.asyncio
async def test_mongo_get_group(mock_database):
    database, collection = mock_database
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[{"_id": "a", "id": "a"}, {"_id": "b", "id": "b"}])
    collection.find.return_value = cursor

    assert await MongoStateStore(database).get_group("bills") == [{"id": "a"}, {"id": "b"}]

@pytest.mark.asyncio
async def test_mongo_delete(mock_database):
    database, collection = mock_database
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))

    assert await MongoStateStore(database).delete("bills", "bill_1") is True
    collection.delete_one.assert_awaited_once_with({"_id": "bill_1"})

def test_incomplete_backend_cannot_be_instantiated():
    class WriteOnlyStore(StateStore):
        async def set(self, collection, id, record):
            pass

    with pytest.raises(TypeError):
        WriteOnlyStore()
