"""
Events, subscriptions and event type names used on the NotchPanel bus.
"""
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

# Trailing marker for subscribing to a family of event types
WILDCARD = "*"


def _short_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class Event:
    event_type: str
    data: Any = None
    source: Any = None
    id: str = field(default_factory=_short_id)
    timestamp: float = field(default_factory=time.time)
    is_handled: bool = False

    def mark_handled(self) -> None:
        """Stop delivery to the remaining, lower-priority subscribers."""
        self.is_handled = True


@dataclass
class Subscription:
    callback: Callable[[Event], None]
    event_type: str
    priority: int = 0
    filter_fn: Optional[Callable[[Event], bool]] = None
    # Registration counter; breaks priority ties
    sequence: int = 0
    id: str = field(default_factory=_short_id)
    active: bool = True

    def __call__(self, event: Event) -> None:
        if not self.active:
            return
        if self.filter_fn is not None and not self.filter_fn(event):
            return
        self.callback(event)

    def __lt__(self, other: 'Subscription') -> bool:
        return (-self.priority, self.sequence) < (-other.priority, other.sequence)


class EventType:
    """Event type names."""

    # One event per setting key: SETTING_CHANGED_PREFIX + key
    SETTING_CHANGED_PREFIX = "settings.changed."
    ANY_SETTING_CHANGED = SETTING_CHANGED_PREFIX + WILDCARD
    # Published after load() or reset_to_defaults(); data is a snapshot
    SETTINGS_RELOADED = "settings.reloaded"

    WIDGET_SELECTED = "widgets.selected"
    WIDGET_DESELECTED = "widgets.deselected"
    WIDGETS_REBUILT = "widgets.rebuilt"

    @classmethod
    def setting_changed(cls, key: str) -> str:
        return f"{cls.SETTING_CHANGED_PREFIX}{key}"

    @classmethod
    def setting_key(cls, event_type: str) -> Optional[str]:
        """Inverse of setting_changed(); None for other event types."""
        if event_type.startswith(cls.SETTING_CHANGED_PREFIX):
            return event_type[len(cls.SETTING_CHANGED_PREFIX):]
        return None
