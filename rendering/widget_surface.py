"""
Panel widget surface.

The surface is the live container the selected widgets are shown in,
laid out left to right in selection order. ``WidgetSurface`` is the
contract the selection controller talks to; ``PanelWidgetSurface`` is
the Qt implementation used by the application.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Protocol, runtime_checkable

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QHBoxLayout, QWidget

from core.logging.logger import get_logger
from core.logging.tags import TAG_WIDGETS
from rendering.widget_catalog import WidgetDefinition

logger = get_logger(__name__)


@runtime_checkable
class WidgetSurface(Protocol):
    """UI layer that hosts the active widgets."""

    def add_widget(self, definition: WidgetDefinition) -> None: ...
    def remove_widget(self, name: str) -> None: ...
    def clear_widgets(self) -> None: ...
    def request_relayout(self) -> None: ...
    def is_panel_visible(self) -> bool: ...


class PanelWidgetSurface(QWidget):
    """Frameless top-of-screen panel hosting the selected widgets."""

    # Emitted from showEvent so deferred relayouts can run
    panel_shown = Signal()

    def __init__(self, parent: Optional[QWidget] = None, spacing: int = 12, margin: int = 8):
        super().__init__(parent)
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
        )
        self._widgets: Dict[str, QWidget] = {}
        self._show_dividers = False
        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(margin, margin, margin, margin)
        self._layout.setSpacing(spacing)
        self.relayout_count = 0

    # ------------------------------------------------------------------
    # WidgetSurface
    # ------------------------------------------------------------------

    def add_widget(self, definition: WidgetDefinition) -> None:
        """Instantiate *definition* and append it to the row."""
        if definition.name in self._widgets:
            logger.debug("%s Surface already hosts %s", TAG_WIDGETS, definition.name)
            return
        widget = definition.create(self)
        self._widgets[definition.name] = widget
        self._rebuild_layout()
        logger.debug("%s Surface added widget: %s", TAG_WIDGETS, definition.name)

    def remove_widget(self, name: str) -> None:
        widget = self._widgets.pop(name, None)
        if widget is None:
            return
        self._layout.removeWidget(widget)
        widget.hide()
        widget.deleteLater()
        self._rebuild_layout()
        logger.debug("%s Surface removed widget: %s", TAG_WIDGETS, name)

    def clear_widgets(self) -> None:
        for name in list(self._widgets):
            widget = self._widgets.pop(name)
            self._layout.removeWidget(widget)
            widget.hide()
            widget.deleteLater()
        self._rebuild_layout()
        logger.debug("%s Surface cleared", TAG_WIDGETS)

    def request_relayout(self) -> None:
        self._layout.invalidate()
        self._layout.activate()
        self.adjustSize()
        self.update()
        self.relayout_count += 1

    def is_panel_visible(self) -> bool:
        return self.isVisible()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def widget_names(self) -> List[str]:
        """Hosted widget names in display order."""
        return list(self._widgets.keys())

    def get_widget(self, name: str) -> Optional[QWidget]:
        return self._widgets.get(name)

    def set_show_dividers(self, enabled: bool) -> None:
        """Draw a thin vertical divider between neighbouring widgets."""
        enabled = bool(enabled)
        if enabled == self._show_dividers:
            return
        self._show_dividers = enabled
        self._rebuild_layout()

    def _rebuild_layout(self) -> None:
        # Take everything out, drop old dividers, re-add in dict order.
        while self._layout.count():
            item = self._layout.takeAt(0)
            child = item.widget()
            if child is not None and child.objectName() == "_panel_divider":
                child.deleteLater()
        for index, widget in enumerate(self._widgets.values()):
            if index and self._show_dividers:
                divider = QFrame(self)
                divider.setObjectName("_panel_divider")
                divider.setFrameShape(QFrame.Shape.VLine)
                self._layout.addWidget(divider)
            self._layout.addWidget(widget)
            widget.show()

    def showEvent(self, event):
        super().showEvent(event)
        self.panel_shown.emit()
