import pytest
from unittest.mock import AsyncMock

from payguard.constants import EventTopic
from payguard.events.bus import EventBus

@pytest.mark.asyncio
async def test_emit_delivers_to_every_subscriber_in_order():
    bus = EventBus()
    calls = []

    async def first(data, trace_id):
        calls.append(("first", data["n"], trace_id))

    async def second(data, trace_id):
        calls.append(("second", data["n"], trace_id))

    bus.subscribe(EventTopic.BILL_CREATED, first)
    bus.subscribe("bill.created", second)

    await bus.emit({"topic": "bill.created", "data": {"n": 1}}, trace_id="trace_1")

    assert calls == [("first", 1, "trace_1"), ("second", 1, "trace_1")]

@pytest.mark.asyncio
async def test_emit_without_subscribers_is_recorded():
    bus = EventBus()
    await bus.emit({"topic": EventTopic.DAILY_SUMMARY_GENERATED.value, "data": {}})

    entries = bus.recent(EventTopic.DAILY_SUMMARY_GENERATED)
    assert len(entries) == 1
    assert entries[0]["traceId"].startswith("trace_")
    assert "emittedAt" in entries[0]

@pytest.mark.asyncio
async def test_subscriber_error_reaches_producer():
    bus = EventBus()
    later = AsyncMock()
    bus.subscribe("bill.overdue", AsyncMock(side_effect=ValueError("boom")))
    bus.subscribe("bill.overdue", later)

    with pytest.raises(ValueError):
        await bus.emit({"topic": "bill.overdue", "data": {}})

    later.assert_not_awaited()

@pytest.mark.asyncio
async def test_history_is_bounded():
    bus = EventBus(history_limit=3)
    for i in range(5):
        await bus.emit({"topic": "bill.created", "data": {"n": i}})

    assert [e["data"]["n"] for e in bus.recent()] == [2, 3, 4]

@pytest.mark.asyncio
async def test_topics_are_isolated():
    bus = EventBus()
    handler = AsyncMock()
    bus.subscribe("bill.overdue", handler)

    await bus.emit({"topic": "bill.created", "data": {}})

    handler.assert_not_awaited()
    assert bus.subscribers("bill.created") == []
