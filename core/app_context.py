"""
Application context.

Builds the settings model and its collaborators once per process and
hands them out explicitly; there is no module-level singleton. Call
``teardown()`` before the QApplication exits.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from PySide6.QtGui import QScreen

from core.constants.sizes import WIDGET_SIZE_MAX
from core.events import EventSystem
from core.logging.logger import get_logger
from core.logging.tags import TAG_LIFECYCLE
from core.settings.settings_model import SettingsModel
from core.settings.store import DurableStore, QSettingsStore
from core.settings.widget_selection import WidgetSelectionController
from core.windows.activation_policy import ActivationPolicy, ActivationScheduler, WindowActivationPolicy
from rendering.widget_catalog import WidgetCatalog
from rendering.widget_surface import PanelWidgetSurface
from utils.monitors import DisplayResolver
from versioning import SETTINGS_PATH_ENV
from widgets.builtin import register_builtin_widgets

logger = get_logger(__name__)


def create_store(path: Optional[str] = None) -> QSettingsStore:
    """Open the settings store.

    An explicit *path*, or the NOTCHPANEL_SETTINGS_PATH environment
    variable, selects a portable INI file instead of the native location.
    """
    path = path or os.environ.get(SETTINGS_PATH_ENV) or None
    return QSettingsStore(path=path)


@dataclass
class AppContext:
    """Everything that used to hang off the shared settings instance."""

    settings: SettingsModel
    widgets: WidgetSelectionController
    catalog: WidgetCatalog
    surface: PanelWidgetSurface
    activation: ActivationScheduler
    events: EventSystem
    _unsubscribers: List[Callable[[], None]] = field(default_factory=list)
    _torn_down: bool = False

    def teardown(self) -> None:
        """Flush settings, cancel timers and drop live subscriptions."""
        if self._torn_down:
            return
        self._torn_down = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.settings.shutdown()
        logger.info("%s App context torn down", TAG_LIFECYCLE)


def position_panel(surface: PanelWidgetSurface, screen: Optional[QScreen]) -> None:
    """Center the panel along the top edge of *screen*."""
    if screen is None:
        return
    geometry = screen.geometry()
    surface.adjustSize()
    x = geometry.x() + (geometry.width() - surface.width()) // 2
    surface.move(x, geometry.y())


def _widget_extent(value: float) -> int:
    """Convert a size setting to pixels Qt accepts for a widget bound."""
    return max(0, min(int(value), WIDGET_SIZE_MAX))


def _bind_surface(settings: SettingsModel, surface: PanelWidgetSurface) -> List[Callable[[], None]]:
    """Make the panel follow its live settings."""
    surface.set_show_dividers(settings.get("showDividerBetweenWidgets"))
    surface.setMaximumWidth(_widget_extent(settings.get("notchMaxWidth")))
    surface.setMinimumHeight(_widget_extent(settings.get("notchMinFallbackHeight")))

    return [
        settings.subscribe("showDividerBetweenWidgets", surface.set_show_dividers),
        settings.subscribe("notchMaxWidth", lambda value: surface.setMaximumWidth(_widget_extent(value))),
        settings.subscribe("notchMinFallbackHeight", lambda value: surface.setMinimumHeight(_widget_extent(value))),
        settings.subscribe("selectedScreenID", lambda _value: position_panel(surface, settings.selected_screen)),
    ]


def create_app_context(
    store: Optional[DurableStore] = None,
    catalog: Optional[WidgetCatalog] = None,
    surface: Optional[PanelWidgetSurface] = None,
    activation_policy: Optional[ActivationPolicy] = None,
    display_resolver: Optional[DisplayResolver] = None,
) -> AppContext:
    """
    Build and wire the application's settings and widget services.

    Requires a QApplication. Omitted collaborators get the production
    defaults: the native settings store, the built-in widget catalog, a
    new panel surface and a window activation policy on that panel.
    """
    events = EventSystem()
    if catalog is None:
        catalog = register_builtin_widgets(WidgetCatalog())
    if surface is None:
        surface = PanelWidgetSurface()
    if activation_policy is None:
        activation_policy = WindowActivationPolicy(surface)
    activation = ActivationScheduler(activation_policy)

    settings = SettingsModel(
        store if store is not None else create_store(),
        display_resolver=display_resolver,
        widget_catalog=catalog,
        activation=activation,
        event_system=events,
    )
    widgets = WidgetSelectionController(settings, catalog, surface)

    context = AppContext(
        settings=settings,
        widgets=widgets,
        catalog=catalog,
        surface=surface,
        activation=activation,
        events=events,
    )
    context._unsubscribers.extend(_bind_surface(settings, surface))
    widgets.rebuild_from_persisted()
    position_panel(surface, settings.selected_screen)

    logger.info("%s App context created (%d widgets selected)", TAG_LIFECYCLE, len(widgets.selected_widgets))
    return context
