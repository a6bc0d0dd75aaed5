"""Built-in widget definitions registered at startup."""
from rendering.widget_catalog import WidgetCatalog, WidgetDefinition
from widgets.clock_widget import ClockWidget, DateWidget, TimeFormat


def register_builtin_widgets(catalog: WidgetCatalog) -> WidgetCatalog:
    """Register the widgets that ship with the application."""
    catalog.register(WidgetDefinition(
        name="clock",
        factory=lambda parent: ClockWidget(parent),
        display_name="Clock",
        default_selected=True,
    ))
    catalog.register(WidgetDefinition(
        name="clock_12h",
        factory=lambda parent: ClockWidget(parent, time_format=TimeFormat.TWELVE_HOUR),
        display_name="Clock (12h)",
    ))
    catalog.register(WidgetDefinition(
        name="date",
        factory=lambda parent: DateWidget(parent),
        display_name="Date",
        default_selected=True,
    ))
    return catalog
