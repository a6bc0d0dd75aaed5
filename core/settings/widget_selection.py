"""
Widget selection controller.

Keeps the ordered ``selectedWidgets`` setting, the widget catalog and the
panel surface consistent. Every name is either selected or not; the
settings model is the source of truth for the order, and the surface is
brought in line after each successful transition.
"""
from __future__ import annotations

from enum import Enum
from typing import List

from core.events import EventType
from core.logging.logger import get_logger
from core.logging.tags import TAG_WIDGETS
from core.settings.settings_model import SettingsModel
from rendering.widget_catalog import WidgetLookup
from rendering.widget_surface import WidgetSurface

logger = get_logger(__name__)

SELECTION_KEY = "selectedWidgets"


class SelectionResult(Enum):
    SELECTED = "selected"
    ALREADY_SELECTED = "already_selected"
    DESELECTED = "deselected"
    MOVED = "moved"
    NOT_FOUND = "not_found"

    @property
    def ok(self) -> bool:
        return self is not SelectionResult.NOT_FOUND


class WidgetSelectionController:
    """Select, deselect and reorder panel widgets."""

    def __init__(self, settings: SettingsModel, catalog: WidgetLookup, surface: WidgetSurface):
        self._settings = settings
        self._catalog = catalog
        self._surface = surface
        self._relayout_pending = False

        # Qt surfaces announce when they become visible again
        panel_shown = getattr(surface, "panel_shown", None)
        if panel_shown is not None:
            panel_shown.connect(self.handle_panel_shown)

    @property
    def selected_widgets(self) -> List[str]:
        return self._settings.get(SELECTION_KEY)

    @property
    def relayout_pending(self) -> bool:
        return self._relayout_pending

    def is_selected(self, name: str) -> bool:
        return name in self._settings.get(SELECTION_KEY)

    def select(self, name: str) -> SelectionResult:
        """
        Add *name* to the end of the selection.

        A name missing from the catalog is still recorded so it appears
        once the catalog catches up.
        """
        selection = self._settings.get(SELECTION_KEY)
        if name in selection:
            return SelectionResult.ALREADY_SELECTED

        selection.append(name)
        definition = self._catalog.lookup(name)
        if definition is not None:
            self._surface.add_widget(definition)
            logger.debug("%s Added widget: %s", TAG_WIDGETS, name)
        else:
            logger.warning("%s Widget %s not in catalog yet; kept as selected", TAG_WIDGETS, name)

        self._commit(selection)
        self._settings.event_system.publish(EventType.WIDGET_SELECTED, name, source=self)
        return SelectionResult.SELECTED

    def deselect(self, name: str) -> SelectionResult:
        """
        Remove *name* from the selection.

        Returns:
            NOT_FOUND, with nothing changed, when *name* is not selected.
        """
        selection = self._settings.get(SELECTION_KEY)
        if name not in selection:
            logger.warning("%s Widget %s not found in selected widgets", TAG_WIDGETS, name)
            return SelectionResult.NOT_FOUND

        selection.remove(name)
        self._surface.remove_widget(name)
        logger.debug("%s Removed widget: %s", TAG_WIDGETS, name)

        self._commit(selection)
        self._settings.event_system.publish(EventType.WIDGET_DESELECTED, name, source=self)
        return SelectionResult.DESELECTED

    def update_selected_widgets(self, name: str, is_selected: bool) -> SelectionResult:
        """Toggle entry point used by the settings UI checkboxes."""
        if is_selected:
            return self.select(name)
        return self.deselect(name)

    def move_widget(self, name: str, index: int) -> SelectionResult:
        """Move a selected widget to *index* (clamped) and rebuild the surface."""
        selection = self._settings.get(SELECTION_KEY)
        if name not in selection:
            logger.warning("%s Cannot move unselected widget %s", TAG_WIDGETS, name)
            return SelectionResult.NOT_FOUND

        selection.remove(name)
        index = max(0, min(int(index), len(selection)))
        selection.insert(index, name)
        self._settings.set(SELECTION_KEY, selection)
        self.rebuild_from_persisted()
        return SelectionResult.MOVED

    def rebuild_from_persisted(self) -> List[str]:
        """
        Clear the surface and re-add every selected widget in order.

        Returns:
            Names skipped because the catalog does not know them.
        """
        logger.debug("%s Rebuilding panel widgets from selection", TAG_WIDGETS)
        self._surface.clear_widgets()
        skipped: List[str] = []
        for name in self._settings.get(SELECTION_KEY):
            definition = self._catalog.lookup(name)
            if definition is None:
                logger.warning("%s Widget %s not found in catalog, skipping", TAG_WIDGETS, name)
                skipped.append(name)
                continue
            self._surface.add_widget(definition)

        self.refresh_ui()
        self._settings.event_system.publish(EventType.WIDGETS_REBUILT, skipped, source=self)
        return skipped

    def refresh_ui(self) -> bool:
        """
        Relayout now if the panel is visible, otherwise defer it.

        Returns:
            True when the relayout ran immediately.
        """
        if self._surface.is_panel_visible():
            self._relayout_pending = False
            self._surface.request_relayout()
            return True
        logger.debug("%s Panel is not visible, deferring relayout", TAG_WIDGETS)
        self._relayout_pending = True
        return False

    def handle_panel_shown(self) -> None:
        """Run a relayout deferred while the panel was hidden."""
        if self._relayout_pending:
            self._relayout_pending = False
            self._surface.request_relayout()

    def _commit(self, selection: List[str]) -> None:
        self._settings.set(SELECTION_KEY, selection)
        self.refresh_ui()

