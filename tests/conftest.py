"""
Shared pytest fixtures for NotchPanel tests.
"""
import os
import sys

# Headless runs (CI, containers) have no display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QRect
from PySide6.QtWidgets import QApplication, QLabel


class FakeScreen:
    """Stand-in for QScreen exposing what DisplayResolver and the panel use."""

    def __init__(self, name, display_id, geometry=None):
        self._name = name
        self.display_id = display_id
        self._geometry = geometry or QRect(0, 0, 1920, 1080)

    def name(self):
        return self._name

    def geometry(self):
        return self._geometry

    def __repr__(self):
        return f"FakeScreen({self._name!r}, {self.display_id})"


class FakeScreens:
    """Mutable display configuration driving a DisplayResolver."""

    def __init__(self, *screens, primary=None):
        self.screens = list(screens)
        self.primary = primary if primary is not None else (self.screens[0] if self.screens else None)

    def list(self):
        return list(self.screens)

    def get_primary(self):
        return self.primary

    def unplug(self, screen):
        self.screens.remove(screen)
        if self.primary is screen:
            self.primary = self.screens[0] if self.screens else None


class RecordingSurface:
    """WidgetSurface that records calls instead of drawing."""

    def __init__(self, visible=True):
        self.visible = visible
        self.widgets = []
        self.relayouts = 0
        self.calls = []

    def add_widget(self, definition):
        self.calls.append(("add", definition.name))
        if definition.name not in self.widgets:
            self.widgets.append(definition.name)

    def remove_widget(self, name):
        self.calls.append(("remove", name))
        if name in self.widgets:
            self.widgets.remove(name)

    def clear_widgets(self):
        self.calls.append(("clear", None))
        self.widgets.clear()

    def request_relayout(self):
        self.relayouts += 1

    def is_panel_visible(self):
        return self.visible


def label_factory(text):
    return lambda parent: QLabel(text, parent)


def make_catalog():
    from rendering.widget_catalog import WidgetCatalog, WidgetDefinition

    catalog = WidgetCatalog()
    catalog.register(WidgetDefinition("clock", label_factory("12:00"), "Clock", default_selected=True))
    catalog.register(WidgetDefinition("date", label_factory("Mon 19 Oct"), "Date", default_selected=True))
    catalog.register(WidgetDefinition("weather", label_factory("18C"), "Weather"))
    catalog.register(WidgetDefinition("battery", label_factory("80%"), "Battery"))
    return catalog


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.ini"


@pytest.fixture
def store(qt_app, settings_path):
    """QSettingsStore backed by a throwaway INI file."""
    from core.settings.store import QSettingsStore
    return QSettingsStore(path=settings_path)


@pytest.fixture
def catalog():
    return make_catalog()


@pytest.fixture
def screens():
    return FakeScreens(
        FakeScreen("Built-in", 101, QRect(0, 0, 1512, 982)),
        FakeScreen("External", 202, QRect(1512, 0, 2560, 1440)),
    )


@pytest.fixture
def resolver(screens):
    from utils.monitors import DisplayResolver
    return DisplayResolver(
        screens_provider=screens.list,
        primary_provider=screens.get_primary,
        id_fn=lambda screen: screen.display_id,
    )


@pytest.fixture
def event_system():
    """Create EventSystem instance for testing."""
    from core.events import EventSystem
    system = EventSystem()
    yield system
    system.clear()


@pytest.fixture
def settings_model(store, resolver, catalog, event_system):
    """SettingsModel loaded from an empty store."""
    from core.settings.settings_model import SettingsModel
    model = SettingsModel(store, display_resolver=resolver, widget_catalog=catalog, event_system=event_system)
    yield model


@pytest.fixture
def make_model(store, resolver, catalog):
    """Build a fresh SettingsModel over the same store, like a restart."""
    from core.settings.settings_model import SettingsModel

    def _make(**kwargs):
        kwargs.setdefault("display_resolver", resolver)
        kwargs.setdefault("widget_catalog", catalog)
        return SettingsModel(store, **kwargs)

    return _make


@pytest.fixture
def recording_surface():
    return RecordingSurface()


@pytest.fixture
def panel_surface(qtbot):
    """Hidden PanelWidgetSurface cleaned up by qtbot."""
    from rendering.widget_surface import PanelWidgetSurface
    surface = PanelWidgetSurface()
    qtbot.addWidget(surface)
    return surface
