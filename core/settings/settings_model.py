"""
Settings model for NotchPanel.

Owns the canonical in-memory value of every setting, loads them from a
DurableStore, applies each field's validation policy and republishes
every change. One instance is built per process by
``core.app_context.create_app_context`` and handed to consumers.
"""
from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QScreen

from core.events import EventSystem, EventType
from core.logging.logger import get_logger, is_verbose_logging
from core.logging.tags import TAG_SETTINGS
from core.settings.schema import SETTINGS_SCHEMA, SettingDefinition
from core.settings.store import DurableStore
from core.windows.activation_policy import ActivationScheduler
from rendering.widget_catalog import WidgetLookup
from utils.monitors import DisplayResolver

logger = get_logger(__name__)

SCREEN_KEY = "selectedScreenID"
API_KEY = "aiApiKey"
SETTINGS_WINDOW_KEY = "isSettingsWindowOpen"

# Never written to logs in clear text
_SECRET_KEYS = frozenset({API_KEY, "localHostPin"})

DEFAULT_PRESERVED_ON_RESET: Tuple[str, ...] = (API_KEY, "fileTrayDefaultFolder")


def _loggable(key: str, value: Any) -> Any:
    if key in _SECRET_KEYS and value:
        return "***"
    return value


class SettingsModel(QObject):
    """
    Centralized, validated application settings.

    Every mutation goes through ``set()``: the value is repaired according
    to its field policy, stored in memory, published synchronously and then
    persisted. Observers therefore only ever see post-validation values.
    """

    # key, new value; key '*' means "everything may have changed"
    setting_changed = Signal(str, object)

    def __init__(
        self,
        store: DurableStore,
        display_resolver: Optional[DisplayResolver] = None,
        widget_catalog: Optional[WidgetLookup] = None,
        activation: Optional[ActivationScheduler] = None,
        event_system: Optional[EventSystem] = None,
        parent: Optional[QObject] = None,
        autoload: bool = True,
    ):
        """
        Initialize the settings model.

        Args:
            store: Durable key-value store to load from and save to
            display_resolver: Maps the stored display id to a live screen
            widget_catalog: Supplies the default widget selection
            activation: Debounced activation policy driven by the
                settings-window flag
            event_system: Bus used for per-key subscriptions
            autoload: Load from the store immediately
        """
        super().__init__(parent)
        self._store = store
        self._resolver = display_resolver or DisplayResolver()
        self._activation = activation
        self._events = event_system or EventSystem()
        self._lock = threading.RLock()
        self._change_handlers: Dict[str, List[Callable[[Any, Any], None]]] = {}

        self._schema: Dict[str, SettingDefinition] = dict(SETTINGS_SCHEMA)
        if widget_catalog is not None:
            self._schema["selectedWidgets"] = replace(
                self._schema["selectedWidgets"],
                default_factory=lambda: list(widget_catalog.default_widget_names()),
            )

        self._values: Dict[str, Any] = {
            key: definition.default_value() for key, definition in self._schema.items()
        }
        self._selected_screen: Optional[QScreen] = None

        if self._activation is not None:
            self.subscribe(SETTINGS_WINDOW_KEY, self._on_settings_window_toggled)

        if autoload:
            self.load()

        logger.info("%s SettingsModel initialized", TAG_SETTINGS)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def event_system(self) -> EventSystem:
        return self._events

    @property
    def selected_screen(self) -> Optional[QScreen]:
        """The live display the panel is shown on."""
        return self._selected_screen

    def definition(self, key: str) -> SettingDefinition:
        """Return the definition for *key*; raises KeyError for unknown keys."""
        return self._schema[key]

    def get(self, key: str) -> Any:
        """
        Get a setting value.

        Raises:
            KeyError: If *key* is not a known setting
        """
        with self._lock:
            value = self._values[key]
        return list(value) if isinstance(value, list) else value

    def snapshot(self) -> Dict[str, Any]:
        """Return a shallow copy of every current value."""
        with self._lock:
            return {k: (list(v) if isinstance(v, list) else v) for k, v in self._values.items()}

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any) -> Any:
        """
        Validate, store, publish and persist a setting.

        Out-of-range or malformed input is clamped, reset or rejected per
        the field's policy; it is never raised to the caller.

        Returns:
            The value actually stored.

        Raises:
            KeyError: If *key* is not a known setting
        """
        definition = self._schema[key]
        if key == SCREEN_KEY:
            repaired = definition.repair(value)
            screen = self._resolver.resolve(repaired)
            return self._apply_screen(screen, fallback_id=repaired)

        with self._lock:
            old_value = self._values[key]
            new_value = definition.repair(value, current=old_value)
            if new_value != value:
                logger.debug(
                    "%s Adjusted %s: %r -> %r (%s)",
                    TAG_SETTINGS, key, _loggable(key, value), _loggable(key, new_value),
                    definition.policy.value,
                )
            self._values[key] = new_value
            self._notify(key, new_value, old_value)
            if definition.persist:
                self._persist(definition, new_value)

        return new_value

    def update(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Apply several settings in order; returns the stored values."""
        return {key: self.set(key, value) for key, value in values.items()}

    def save_display(self, screen: QScreen) -> int:
        """Adopt *screen* as the panel display and persist its id now."""
        return self._apply_screen(screen, fallback_id=None)

    def _apply_screen(self, screen: Optional[QScreen], fallback_id: Optional[int]) -> Optional[int]:
        with self._lock:
            old_value = self._values[SCREEN_KEY]
            self._selected_screen = screen
            new_value = self._resolver.persist(screen) if screen is not None else fallback_id
            self._values[SCREEN_KEY] = new_value
            self._notify(SCREEN_KEY, new_value, old_value)
            self._persist(self._schema[SCREEN_KEY], new_value)
        return new_value

    def reset_notch_min_fallback_height(self) -> float:
        definition = self._schema["notchMinFallbackHeight"]
        return self.set(definition.key, definition.default_value())

    def reset_to_defaults(self, preserve: Iterable[str] = DEFAULT_PRESERVED_ON_RESET) -> None:
        """Restore compiled defaults for every persisted setting.

        Keys in *preserve* keep their current value. Session-only state
        (open tabs, window flags) is left untouched.
        """
        preserved = set(preserve)
        with self._lock:
            for key, definition in self._schema.items():
                if not definition.persist or key in preserved:
                    continue
                if key == SCREEN_KEY:
                    screen = self._resolver.resolve(None)
                    self._selected_screen = screen
                    value = self._resolver.persist(screen) if screen is not None else None
                else:
                    value = definition.default_value()
                self._values[key] = value
                if key == API_KEY and not value:
                    remove = getattr(self._store, "remove", None)
                    if remove is not None:
                        remove(key)
                    continue
                self._persist(definition, value)
            self._sync_store()

        logger.info("%s Settings reset to defaults (preserved: %s)", TAG_SETTINGS, sorted(preserved))
        self._notify_all()

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Load every persisted setting, substituting defaults.

        Never fails: absent or malformed values become the compiled default
        and every value passes through its field policy.
        """
        defaulted: List[str] = []
        with self._lock:
            for key, definition in self._schema.items():
                if not definition.persist or key == SCREEN_KEY:
                    continue
                raw = self._store.get(key, definition.storage_type)
                if raw is None:
                    value = definition.default_value()
                    defaulted.append(key)
                else:
                    value = definition.repair(raw)
                    if value != definition.coerce(raw):
                        logger.debug(
                            "%s Stored %s=%r invalid, using %r",
                            TAG_SETTINGS, key, _loggable(key, raw), _loggable(key, value),
                        )
                self._values[key] = value

            stored_id = self._store.get(SCREEN_KEY, int)
            screen = self._resolver.resolve(stored_id)
            self._selected_screen = screen
            self._values[SCREEN_KEY] = self._resolver.persist(screen) if screen is not None else stored_id

        if defaulted:
            logger.debug("%s Using defaults for: %s", TAG_SETTINGS, ", ".join(defaulted))
        logger.info("%s Settings loaded (%d defaulted)", TAG_SETTINGS, len(defaulted))
        self._notify_all()

    def save(self) -> None:
        """Re-validate every field and write all persisted ones.

        An empty API key is skipped so it never overwrites a stored key.
        """
        repaired: List[Tuple[str, Any, Any]] = []
        with self._lock:
            for key, definition in self._schema.items():
                current = self._values[key]
                if key == SCREEN_KEY:
                    fixed = current
                else:
                    fixed = definition.repair(current)
                if fixed != current:
                    logger.warning(
                        "%s Repaired %s on save: %r -> %r",
                        TAG_SETTINGS, key, _loggable(key, current), _loggable(key, fixed),
                    )
                    self._values[key] = fixed
                    repaired.append((key, fixed, current))
                if definition.persist:
                    self._persist(definition, fixed)
            self._sync_store()

            for key, new_value, old_value in repaired:
                self._notify(key, new_value, old_value)

        logger.debug("%s Settings saved", TAG_SETTINGS)

    def shutdown(self) -> None:
        """Cancel pending activation changes and flush to the store."""
        if self._activation is not None:
            self._activation.cancel()
        self.save()

    def _persist(self, definition: SettingDefinition, value: Any) -> None:
        key = definition.key
        if value is None:
            return
        if key == API_KEY and not value:
            logger.debug("%s Empty API key not persisted", TAG_SETTINGS)
            return
        self._store.set(key, definition.serialize(value))

    def _sync_store(self) -> None:
        sync = getattr(self._store, "sync", None)
        if sync is not None:
            sync()

    # ------------------------------------------------------------------
    # Notification
    # ------------------------------------------------------------------

    def subscribe(self, key: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """
        Call *callback* with the validated value whenever *key* changes.

        Callbacks run synchronously in registration order.

        Returns:
            A callable that removes the subscription.

        Raises:
            KeyError: If *key* is not a known setting
        """
        if key not in self._schema:
            raise KeyError(key)
        sub_id = self._events.subscribe(
            EventType.setting_changed(key),
            lambda event: callback(event.data),
        )

        def unsubscribe() -> None:
            self._events.unsubscribe(sub_id)

        return unsubscribe

    def subscribe_all(self, callback: Callable[[str, Any], None]) -> Callable[[], None]:
        """Call *callback(key, value)* after every individual setting change."""
        sub_id = self._events.subscribe(
            EventType.ANY_SETTING_CHANGED,
            lambda event: callback(EventType.setting_key(event.event_type), event.data),
        )
        return lambda: self._events.unsubscribe(sub_id)

    def on_changed(self, key: str, handler: Callable[[Any, Any], None]) -> None:
        """
        Register a handler for when a specific setting changes.

        Args:
            key: Setting key to watch
            handler: Callback function(new_value, old_value)
        """
        if key not in self._schema:
            raise KeyError(key)
        with self._lock:
            self._change_handlers.setdefault(key, []).append(handler)
        logger.debug("%s Registered change handler for %s", TAG_SETTINGS, key)

    def _notify(self, key: str, new_value: Any, old_value: Any) -> None:
        payload = list(new_value) if isinstance(new_value, list) else new_value
        self.setting_changed.emit(key, payload)
        self._events.publish(EventType.setting_changed(key), payload, source=self)

        for handler in list(self._change_handlers.get(key, ())):
            try:
                handler(payload, old_value)
            except Exception:
                logger.error("%s Error in change handler for %s", TAG_SETTINGS, key, exc_info=True)

        if is_verbose_logging():
            logger.debug(
                "%s Setting changed: %s: %r -> %r",
                TAG_SETTINGS, key, _loggable(key, old_value), _loggable(key, new_value),
            )
        else:
            logger.debug("%s Setting changed: %s", TAG_SETTINGS, key)

    def _notify_all(self) -> None:
        self.setting_changed.emit('*', None)
        self._events.publish(EventType.SETTINGS_RELOADED, self.snapshot(), source=self)

    def _on_settings_window_toggled(self, is_open: bool) -> None:
        if is_open:
            self._activation.window_opened()
        else:
            self._activation.window_closed()
