import logging
import threading
from typing import Callable, List

logger = logging.getLogger(__name__)


class EventDispatcher:
    def __init__(self):
        # Subscribers are called in registration order for every event.
        self.subscribers: List[Callable] = []

    def subscribe(self, subscriber: Callable):
        self.subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Callable):
        if subscriber in self.subscribers:
            self.subscribers.remove(subscriber)

    def publish(self, event):
        for subscriber in list(self.subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.exception("Subscriber %r failed on %s", subscriber, event.type)


class EventLog:
    """Ordered history of every event the election published."""

    def __init__(self):
        self._events = []
        self._lock = threading.Lock()

    def __call__(self, event):
        with self._lock:
            self._events.append(event)

    def all(self):
        with self._lock:
            return list(self._events)
