"""
Tests for SettingsModel: load, set, save, notification and display resolution.
"""
import math
from pathlib import Path

import pytest

from core.events import EventType
from core.settings.models import HoverTarget
from core.settings.schema import SettingType, iter_persisted, persisted_keys
from core.settings.settings_model import SettingsModel
from core.settings.store import QSettingsStore


class TestLoad:
    """Loading always produces a complete, valid state."""

    def test_fresh_store_yields_defaults(self, settings_model):
        assert settings_model.get("fileTrayPort") == 8000
        assert settings_model.get("localHostPin") == "1111"
        assert settings_model.get("notchMaxWidth") == 710.0
        assert settings_model.get("hoverTargetMode") is HoverTarget.ALBUM

    def test_fresh_store_uses_catalog_default_widgets(self, settings_model):
        assert settings_model.get("selectedWidgets") == ["clock", "date"]

    def test_fresh_store_resolves_primary_display(self, settings_model, screens):
        assert settings_model.selected_screen is screens.primary
        assert settings_model.get("selectedScreenID") == 101

    def test_corrupt_values_replaced_by_defaults(self, store, make_model):
        store.set("fileTrayPort", "garbage")
        store.set("notchMaxWidth", 5000)
        store.set("localHostPin", "")
        store.set("selectedWidgets", "{not json")
        store.set("hoverTargetMode", "sideways")

        model = make_model()

        assert model.get("fileTrayPort") == 8000
        assert model.get("notchMaxWidth") == 1000.0
        assert model.get("localHostPin") == "1111"
        assert model.get("selectedWidgets") == ["clock", "date"]
        assert model.get("hoverTargetMode") is HoverTarget.ALBUM

    def test_infinite_stored_values_recovered(self, store, make_model):
        store.set("notchMinFallbackHeight", "inf")
        store.set("notchMaxWidth", "1e999")
        store.set("quickAccessWidgetDistanceFromLeft", "-inf")

        model = make_model()

        assert model.get("notchMinFallbackHeight") == 40.0
        assert model.get("notchMaxWidth") == 1000.0
        assert model.get("quickAccessWidgetDistanceFromLeft") == 18.0

    def test_persisted_empty_selection_stays_empty(self, store, make_model):
        """An explicitly emptied selection is not replaced by catalog defaults."""
        store.set("selectedWidgets", [])
        model = make_model()
        assert model.get("selectedWidgets") == []

    def test_load_emits_wildcard_and_reload_event(self, store, resolver, catalog, event_system):
        model = SettingsModel(store, display_resolver=resolver, widget_catalog=catalog,
                              event_system=event_system, autoload=False)
        keys = []
        snapshots = []
        model.setting_changed.connect(lambda key, value: keys.append(key))
        event_system.subscribe(EventType.SETTINGS_RELOADED, lambda event: snapshots.append(event.data))

        model.load()

        assert keys == ['*']
        assert snapshots[0]["fileTrayPort"] == 8000

    def test_autoload_false_keeps_defaults_until_load(self, store, make_model):
        store.set("fileTrayPort", 9000)
        model = make_model(autoload=False)
        assert model.get("fileTrayPort") == 8000
        model.load()
        assert model.get("fileTrayPort") == 9000


class TestSet:
    def test_port_out_of_range_resets(self, settings_model, store):
        assert settings_model.set("fileTrayPort", 70000) == 8000
        assert settings_model.get("fileTrayPort") == 8000
        assert store.get("fileTrayPort", int) == 8000

    def test_notch_width_clamps_to_floor(self, settings_model):
        assert settings_model.set("notchMaxWidth", 50) == 500.0
        assert settings_model.get("notchMaxWidth") == 500.0

    def test_clamp_is_idempotent(self, settings_model):
        first = settings_model.set("notchMaxWidth", 5000)
        assert settings_model.set("notchMaxWidth", first) == first

    def test_reject_keeps_previous_value(self, settings_model):
        settings_model.set("clipboardManagerMaxHistory", 50)
        assert settings_model.set("clipboardManagerMaxHistory", -5) == 50

    def test_non_finite_numbers_never_stored(self, settings_model):
        assert settings_model.set("notchMinFallbackHeight", float("inf")) == 40.0
        assert settings_model.set("notchScrollThreshold", float("-inf")) == 50.0
        assert math.isfinite(settings_model.get("notchMinFallbackHeight"))

    def test_oversized_int_clamps(self, settings_model):
        assert settings_model.set("notchMaxWidth", 10 ** 400) == 1000.0
        assert settings_model.set("notchMaxWidth", -(10 ** 400)) == 500.0
        assert settings_model.set("cameraOverlayTimer", 10 ** 30) == 20

    def test_unknown_key_raises(self, settings_model):
        with pytest.raises(KeyError):
            settings_model.set("noSuchSetting", 1)
        with pytest.raises(KeyError):
            settings_model.get("noSuchSetting")

    def test_get_returns_copy_of_lists(self, settings_model):
        widgets = settings_model.get("selectedWidgets")
        widgets.append("weather")
        assert settings_model.get("selectedWidgets") == ["clock", "date"]

    def test_session_state_not_persisted(self, settings_model, store):
        settings_model.set("hasFirstWindowBeenOpenOnce", True)
        assert settings_model.get("hasFirstWindowBeenOpenOnce") is True
        assert not store.contains("hasFirstWindowBeenOpenOnce")

    def test_update_applies_in_order(self, settings_model):
        stored = settings_model.update({"fileTrayPort": 8080, "notchMaxWidth": 2000})
        assert stored == {"fileTrayPort": 8080, "notchMaxWidth": 1000.0}

    def test_reset_notch_min_fallback_height(self, settings_model):
        settings_model.set("notchMinFallbackHeight", 48)
        assert settings_model.reset_notch_min_fallback_height() == 40.0
        assert settings_model.get("notchMinFallbackHeight") == 40.0


def _changed_value(definition):
    """A valid value for *definition* that differs from its default."""
    default = definition.default_value()
    st = definition.setting_type
    if st is SettingType.BOOL:
        return not default
    if st is SettingType.INT:
        return default + 1
    if st is SettingType.FLOAT:
        return default + 1.5
    if st is SettingType.STRING:
        return f"{default}-alt"
    if st is SettingType.PATH:
        return Path("/tmp/tray")
    if st is SettingType.ENUM:
        return next(member for member in definition.enum_type if member is not default)
    return ["weather", "clock"]


ROUND_TRIP_FIELDS = [d for d in iter_persisted() if d.key != "selectedScreenID"]


class TestRoundTrip:
    """Values written by one model instance are read by the next."""

    @pytest.mark.parametrize("definition", ROUND_TRIP_FIELDS, ids=lambda d: d.key)
    def test_value_survives_restart(self, settings_model, settings_path, resolver, catalog, definition):
        value = _changed_value(definition)
        assert definition.validate(value)[0]
        assert settings_model.set(definition.key, value) == value
        settings_model.save()

        reopened = SettingsModel(QSettingsStore(path=settings_path),
                                 display_resolver=resolver, widget_catalog=catalog)
        assert reopened.get(definition.key) == value

    def test_every_persisted_field_covered(self):
        keys = {d.key for d in ROUND_TRIP_FIELDS} | {"selectedScreenID"}
        assert keys == set(persisted_keys())


class TestApiKey:
    """An empty API key never overwrites a stored one."""

    def test_empty_key_not_written(self, settings_model, store):
        settings_model.set("aiApiKey", "sk-live")
        settings_model.set("aiApiKey", "")
        settings_model.save()

        assert settings_model.get("aiApiKey") == ""
        assert store.get("aiApiKey", str) == "sk-live"

    def test_stored_key_loaded(self, store, make_model):
        store.set("aiApiKey", "sk-live")
        assert make_model().get("aiApiKey") == "sk-live"


class TestNotification:
    def test_subscribers_see_repaired_value(self, settings_model):
        seen = []
        settings_model.subscribe("fileTrayPort", seen.append)

        settings_model.set("fileTrayPort", 70000)
        settings_model.set("fileTrayPort", 8081)

        assert seen == [8000, 8081]

    def test_callbacks_run_in_registration_order(self, settings_model):
        order = []
        settings_model.subscribe("notchMaxWidth", lambda v: order.append(("first", v)))
        settings_model.subscribe("notchMaxWidth", lambda v: order.append(("second", v)))

        settings_model.set("notchMaxWidth", 50)

        assert order == [("first", 500.0), ("second", 500.0)]

    def test_unsubscribe_stops_delivery(self, settings_model):
        seen = []
        unsubscribe = settings_model.subscribe("fileTrayPort", seen.append)
        settings_model.set("fileTrayPort", 8001)
        unsubscribe()
        settings_model.set("fileTrayPort", 8002)
        assert seen == [8001]

    def test_subscribe_unknown_key_raises(self, settings_model):
        with pytest.raises(KeyError):
            settings_model.subscribe("noSuchSetting", print)

    def test_qt_signal_carries_value(self, settings_model, qtbot):
        with qtbot.waitSignal(settings_model.setting_changed, timeout=1000) as blocker:
            settings_model.set("notchMaxWidth", 1500)
        assert blocker.args == ["notchMaxWidth", 1000.0]

    def test_failing_observer_does_not_block_others(self, settings_model):
        seen = []

        def broken(_value):
            raise RuntimeError("observer bug")

        settings_model.subscribe("fileTrayPort", broken)
        settings_model.subscribe("fileTrayPort", seen.append)

        assert settings_model.set("fileTrayPort", 8123) == 8123
        assert seen == [8123]


class TestSave:
    def test_save_repairs_drifted_values(self, settings_model, store):
        """Out-of-range values injected behind set() are fixed on save."""
        seen = []
        settings_model.subscribe("fileTrayPort", seen.append)
        settings_model._values["fileTrayPort"] = 0
        settings_model._values["notchMaxWidth"] = 99.0

        settings_model.save()

        assert settings_model.get("fileTrayPort") == 8000
        assert settings_model.get("notchMaxWidth") == 500.0
        assert store.get("notchMaxWidth", float) == 500.0
        assert seen == [8000]

    def test_save_writes_every_persisted_field(self, settings_model, store):
        settings_model.save()
        assert store.get("fileTrayPort", int) == 8000
        assert store.get("selectedWidgets", list) == ["clock", "date"]
        assert store.get("selectedScreenID", int) == 101
        assert not store.contains("aiApiKey")


class TestResetToDefaults:
    def test_reset_restores_defaults_and_preserves_key_and_folder(self, settings_model, store):
        settings_model.set("aiApiKey", "sk-keep")
        settings_model.set("fileTrayDefaultFolder", "/tmp/keep")
        settings_model.set("fileTrayPort", 9999)
        settings_model.set("selectedWidgets", ["weather"])

        settings_model.reset_to_defaults()

        assert settings_model.get("fileTrayPort") == 8000
        assert settings_model.get("selectedWidgets") == ["clock", "date"]
        assert settings_model.get("aiApiKey") == "sk-keep"
        assert settings_model.get("fileTrayDefaultFolder") == Path("/tmp/keep")
        assert store.get("fileTrayPort", int) == 8000

    def test_reset_without_preserve_removes_api_key(self, settings_model, store):
        settings_model.set("aiApiKey", "sk-gone")
        settings_model.reset_to_defaults(preserve=())
        assert settings_model.get("aiApiKey") == ""
        assert not store.contains("aiApiKey")

    def test_reset_leaves_session_state(self, settings_model):
        settings_model.set("hasFirstWindowBeenOpenOnce", True)
        settings_model.reset_to_defaults()
        assert settings_model.get("hasFirstWindowBeenOpenOnce") is True


class TestDisplay:
    def test_stored_display_resolved(self, store, make_model, screens):
        store.set("selectedScreenID", 202)
        model = make_model()
        assert model.selected_screen is screens.screens[1]
        assert model.get("selectedScreenID") == 202

    def test_unplugged_display_falls_back_to_primary(self, store, make_model, screens):
        store.set("selectedScreenID", 202)
        screens.unplug(screens.screens[1])

        model = make_model()

        assert model.selected_screen is screens.primary
        assert model.get("selectedScreenID") == 101

    def test_set_unknown_display_falls_back(self, settings_model, screens):
        assert settings_model.set("selectedScreenID", 999) == 101
        assert settings_model.selected_screen is screens.primary

    def test_save_display_persists_immediately(self, settings_model, store, screens):
        seen = []
        settings_model.subscribe("selectedScreenID", seen.append)

        assert settings_model.save_display(screens.screens[1]) == 202

        assert store.get("selectedScreenID", int) == 202
        assert settings_model.selected_screen is screens.screens[1]
        assert seen == [202]

    def test_no_screens_keeps_stored_id(self, store, catalog):
        from utils.monitors import DisplayResolver

        store.set("selectedScreenID", 202)
        resolver = DisplayResolver(screens_provider=list, primary_provider=lambda: None)
        model = SettingsModel(store, display_resolver=resolver, widget_catalog=catalog)

        assert model.selected_screen is None
        assert model.get("selectedScreenID") == 202


class TestOnChanged:
    def test_handler_receives_new_and_old(self, settings_model):
        calls = []
        settings_model.on_changed("notchMaxWidth", lambda new, old: calls.append((new, old)))

        settings_model.set("notchMaxWidth", 50)

        assert calls == [(500.0, 710.0)]

    def test_handler_runs_after_subscribers(self, settings_model):
        order = []
        settings_model.on_changed("fileTrayPort", lambda new, old: order.append("handler"))
        settings_model.subscribe("fileTrayPort", lambda value: order.append("subscriber"))

        settings_model.set("fileTrayPort", 8001)

        assert order == ["subscriber", "handler"]

    def test_unknown_key_raises(self, settings_model):
        with pytest.raises(KeyError):
            settings_model.on_changed("noSuchSetting", lambda new, old: None)


class TestSubscribeAll:
    def test_receives_every_key(self, settings_model):
        seen = []
        unsubscribe = settings_model.subscribe_all(lambda key, value: seen.append((key, value)))

        settings_model.set("fileTrayPort", 70000)
        settings_model.set("notchMaxWidth", 50)
        unsubscribe()
        settings_model.set("localHostPin", "")

        assert seen == [("fileTrayPort", 8000), ("notchMaxWidth", 500.0)]
