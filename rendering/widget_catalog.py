"""
Widget catalog.

Central registry of the panel widgets the application knows how to build.
Each entry is a ``WidgetDefinition`` whose factory creates the QWidget on
demand; the selection controller looks definitions up by name and the
panel surface instantiates them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, runtime_checkable

from PySide6.QtWidgets import QWidget

from core.logging.logger import get_logger
from core.logging.tags import TAG_WIDGETS

logger = get_logger(__name__)


@dataclass(frozen=True)
class WidgetDefinition:
    """A pluggable panel widget, identified by name."""

    name: str
    factory: Callable[[Optional[QWidget]], QWidget]
    display_name: str = ""
    # Part of the selection a fresh install starts with
    default_selected: bool = False

    def create(self, parent: Optional[QWidget] = None) -> QWidget:
        """Build a new widget instance parented to *parent*."""
        widget = self.factory(parent)
        widget.setObjectName(self.name)
        return widget

    @property
    def label(self) -> str:
        return self.display_name or self.name.replace("_", " ").title()


@runtime_checkable
class WidgetLookup(Protocol):
    """What the selection controller needs from a widget catalog."""

    def lookup(self, name: str) -> Optional[WidgetDefinition]: ...
    def default_widget_names(self) -> List[str]: ...


class WidgetCatalog:
    """
    Registry for widget definitions.

    Registration order is preserved and drives the order of
    ``default_widget_names()``.
    """

    def __init__(self):
        self._definitions: Dict[str, WidgetDefinition] = {}

    def register(self, definition: WidgetDefinition) -> None:
        """
        Register a widget definition, replacing any previous one with the
        same name.
        """
        if definition.name in self._definitions:
            logger.debug("%s Replacing catalog entry: %s", TAG_WIDGETS, definition.name)
        self._definitions[definition.name] = definition
        logger.debug("%s Registered widget: %s", TAG_WIDGETS, definition.name)

    def unregister(self, name: str) -> Optional[WidgetDefinition]:
        return self._definitions.pop(name, None)

    def lookup(self, name: str) -> Optional[WidgetDefinition]:
        """
        Get a definition by widget name.

        Returns:
            The definition, or None if no widget with that name is registered
        """
        return self._definitions.get(name)

    def default_widget_names(self) -> List[str]:
        """Names selected on a fresh install, in registration order."""
        return [d.name for d in self._definitions.values() if d.default_selected]

    def names(self) -> List[str]:
        return list(self._definitions.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
