import logging
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional, Union

from payguard.models.events import Event
from payguard.utils.ids import generate_trace_id

logger = logging.getLogger(__name__)

# Subscribers receive the event payload and the trace id of the emission
Handler = Callable[[Dict[str, Any], str], Awaitable[None]]

class EventBus:
    """
    In-process publish/subscribe bus.

    `emit` awaits every subscriber of the topic inline, so a stage triggered
    by an event has finished before the producer's `emit` returns. Subscriber
    errors propagate back to the producer.
    """

    def __init__(self, history_limit: int = 200):
        self._subscribers: Dict[str, List[Handler]] = {}
        self.history: Deque[Dict[str, Any]] = deque(maxlen=history_limit)

    @staticmethod
    def _topic_name(topic: Union[str, Enum]) -> str:
        return topic.value if isinstance(topic, Enum) else str(topic)

    def subscribe(self, topic: Union[str, Enum], handler: Handler):
        name = self._topic_name(topic)
        self._subscribers.setdefault(name, []).append(handler)
        logger.debug(f"Subscribed {getattr(handler, '__qualname__', handler)} to {name}")

    def subscribers(self, topic: Union[str, Enum]) -> List[Handler]:
        return list(self._subscribers.get(self._topic_name(topic), []))

    async def emit(self, event: Event, trace_id: Optional[str] = None) -> None:
        topic = self._topic_name(event["topic"])
        data = event["data"]
        trace_id = trace_id or generate_trace_id()

        self.history.append({
            "topic": topic,
            "data": data,
            "traceId": trace_id,
            "emittedAt": datetime.now(timezone.utc).isoformat(),
        })

        handlers = self.subscribers(topic)
        logger.debug(f"Emitting {topic} to {len(handlers)} subscriber(s) (trace {trace_id})")
        for handler in handlers:
            await handler(data, trace_id)

    def recent(self, topic: Optional[Union[str, Enum]] = None) -> List[Dict[str, Any]]:
        if topic is None:
            return list(self.history)
        name = self._topic_name(topic)
        return [entry for entry in self.history if entry["topic"] == name]
