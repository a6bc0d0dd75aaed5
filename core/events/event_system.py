"""
Synchronous publish/subscribe bus for NotchPanel.

Settings changes and widget selection events travel through here. A
subscription names either one event type (``settings.changed.fileTrayPort``)
or a whole family with a trailing ``*`` (``settings.changed.*``).
"""
import threading
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional

from core.events.event_types import WILDCARD, Event, Subscription
from core.logging.logger import get_logger

logger = get_logger(__name__)


class EventSystem:
    """
    Event bus with priorities, filters and wildcard families.

    Delivery order for one publish: higher priority first, then
    registration order. Exact and wildcard subscribers are merged before
    ordering, so a wildcard observer can still run first.
    """

    def __init__(self, max_history: int = 200):
        self._by_type: Dict[str, List[Subscription]] = {}
        self._by_id: Dict[str, Subscription] = {}
        self._history: Deque[Event] = deque(maxlen=max_history)
        self._sequence = 0
        self._lock = threading.RLock()

    def subscribe(
        self,
        event_type: str,
        callback: Callable[[Event], None],
        priority: int = 50,
        filter_fn: Optional[Callable[[Event], bool]] = None,
    ) -> str:
        """
        Register *callback* for *event_type*.

        Args:
            event_type: Exact type, or a prefix ending in ``*``
            callback: Called with the Event
            priority: Higher runs earlier; default 50
            filter_fn: Optional predicate; the callback runs only when it
                returns True

        Returns:
            Subscription id for unsubscribe()

        Raises:
            ValueError: If callback is not callable or event_type is empty
        """
        if not callable(callback):
            raise ValueError("Callback must be callable")
        _check_type(event_type)

        with self._lock:
            self._sequence += 1
            subscription = Subscription(callback, event_type, priority, filter_fn, sequence=self._sequence)
            bucket = self._by_type.setdefault(event_type, [])
            bucket.append(subscription)
            bucket.sort()
            self._by_id[subscription.id] = subscription

        logger.debug("Subscribed %s to %s (priority=%s)", subscription.id, event_type, priority)
        return subscription.id

    def unsubscribe(self, subscription_id: str) -> bool:
        """Remove a subscription; False when the id is unknown."""
        with self._lock:
            subscription = self._by_id.pop(subscription_id, None)
            if subscription is None:
                return False
            subscription.active = False
            bucket = self._by_type[subscription.event_type]
            bucket.remove(subscription)
            if not bucket:
                del self._by_type[subscription.event_type]
        logger.debug("Unsubscribed %s", subscription_id)
        return True

    def publish(self, event_type: str, data: Any = None, source: Any = None) -> Event:
        """
        Deliver an event to every matching subscriber, synchronously.

        A subscriber that raises is logged and skipped. A subscriber may
        call ``event.mark_handled()`` to stop delivery to the rest.

        Returns:
            The delivered Event
        """
        _check_type(event_type)
        event = Event(event_type, data, source)

        with self._lock:
            # Copy first; callbacks may subscribe or unsubscribe
            targets = sorted(self._matching(event_type))
            for subscription in targets:
                if event.is_handled:
                    break
                try:
                    subscription(event)
                except Exception:
                    logger.error("Error in event handler for %s", event_type, exc_info=True)
            self._history.append(event)
        return event

    def _matching(self, event_type: str) -> List[Subscription]:
        found = list(self._by_type.get(event_type, ()))
        for pattern, bucket in self._by_type.items():
            if pattern.endswith(WILDCARD) and event_type.startswith(pattern[:-1]):
                found.extend(bucket)
        return found

    def get_event_history(self, limit: int = 100) -> List[Event]:
        """Most recent events, oldest first."""
        with self._lock:
            return list(self._history)[-limit:]

    def clear(self) -> None:
        """Drop every subscription and the history."""
        with self._lock:
            for subscription in self._by_id.values():
                subscription.active = False
            self._by_type.clear()
            self._by_id.clear()
            self._history.clear()

    def get_subscription_count(self) -> int:
        with self._lock:
            return len(self._by_id)

    def get_subscriptions_for_type(self, event_type: str) -> int:
        """Subscribers registered under exactly *event_type*."""
        with self._lock:
            return len(self._by_type.get(event_type, ()))


def _check_type(event_type: Any) -> None:
    if not isinstance(event_type, str) or not event_type.strip():
        raise ValueError("event_type must be a non-empty string")
