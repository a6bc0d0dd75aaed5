"""Panel rendering: the widget catalog and the surface widgets are drawn on."""

from .widget_catalog import WidgetCatalog, WidgetDefinition, WidgetLookup
from .widget_surface import PanelWidgetSurface, WidgetSurface

__all__ = ['WidgetCatalog', 'WidgetDefinition', 'WidgetLookup', 'PanelWidgetSurface', 'WidgetSurface']
