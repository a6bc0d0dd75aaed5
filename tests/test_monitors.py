"""Tests for display identifier resolution."""
from unittest.mock import MagicMock

from conftest import FakeScreen
from utils.monitors import DisplayResolver, get_all_screens, get_primary_screen, screen_display_id


def test_resolve_matching_display(resolver, screens):
    assert resolver.resolve(202) is screens.screens[1]


def test_resolve_unknown_id_falls_back_to_primary(resolver, screens):
    assert resolver.resolve(999) is screens.primary


def test_resolve_none_uses_primary(resolver, screens):
    assert resolver.resolve(None) is screens.primary


def test_resolve_without_primary_uses_first_screen():
    only = FakeScreen("Only", 7)
    resolver = DisplayResolver(lambda: [only], lambda: None, lambda s: s.display_id)
    assert resolver.resolve(1) is only


def test_resolve_without_screens_returns_none():
    resolver = DisplayResolver(list, lambda: None, lambda s: s.display_id)
    assert resolver.resolve(1) is None


def test_persist_and_available_ids(resolver, screens):
    assert resolver.persist(screens.screens[1]) == 202
    assert resolver.available_ids() == [101, 202]


def test_display_id_is_stable_fingerprint():
    screen = MagicMock()
    screen.name.return_value = "DP-1"
    screen.manufacturer.return_value = "Dell"
    screen.model.return_value = "U2720Q"
    screen.serialNumber.return_value = "ABC123"

    first = screen_display_id(screen)
    assert first == screen_display_id(screen)

    screen.serialNumber.return_value = "XYZ789"
    assert screen_display_id(screen) != first


def test_live_screens_resolve(qt_app):
    """With a QGuiApplication the default providers report real screens."""
    screens = get_all_screens()
    primary = get_primary_screen()
    resolver = DisplayResolver()

    assert primary is not None
    assert primary in screens
    assert resolver.resolve(None) == primary
    assert resolver.resolve(screen_display_id(primary)) == primary
