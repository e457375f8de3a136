"""Outbound position-change events.

The settlement engine and position edits publish `PositionsChanged` after
their unit of work commits. Delivery to clients (SSE, pub/sub) happens
outside this package by draining the queue.
"""

import logging
import threading
from collections import deque
from typing import Optional, Protocol

from fundledger.domain.models import PositionsChanged

logger = logging.getLogger(__name__)


class PositionEventPublisher(Protocol):
    """Sink for position change notifications."""

    def publish(self, event: PositionsChanged) -> None:
        """Hand an event to the delivery layer. Must not block."""
        ...


class InMemoryPositionEventQueue:
    """
    Bounded in-process queue of position change events.

    When full, the oldest events are discarded; consumers only need the
    latest state per user, so a dropped event is covered by any later one.
    """

    def __init__(self, maxlen: int = 1000):
        self._events: deque[PositionsChanged] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def publish(self, event: PositionsChanged) -> None:
        with self._lock:
            self._events.append(event)
        logger.debug(
            "Queued PositionsChanged from %s for %d position(s)",
            event.source,
            len(event.pairs),
        )

    def drain(self) -> list[PositionsChanged]:
        """Remove and return all queued events, oldest first."""
        with self._lock:
            events = list(self._events)
            self._events.clear()
        return events

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


_event_queue: Optional[InMemoryPositionEventQueue] = None


def get_event_queue() -> InMemoryPositionEventQueue:
    """Return the process-wide event queue."""
    global _event_queue
    if _event_queue is None:
        _event_queue = InMemoryPositionEventQueue()
    return _event_queue


def publish_safely(publisher: Optional[PositionEventPublisher], event: PositionsChanged) -> None:
    """Publish an event, logging (never raising) on publisher failure."""
    if publisher is None:
        return
    try:
        publisher.publish(event)
    except Exception:
        logger.exception("Failed to publish PositionsChanged from %s", event.source)
