"""Settings model, schema and persistence for NotchPanel."""

from .schema import SETTINGS_SCHEMA, InvalidPolicy, SettingDefinition, SettingType
from .settings_model import SettingsModel
from .store import DurableStore, QSettingsStore
from .widget_selection import SelectionResult, WidgetSelectionController

__all__ = [
    'SETTINGS_SCHEMA',
    'InvalidPolicy',
    'SettingDefinition',
    'SettingType',
    'SettingsModel',
    'DurableStore',
    'QSettingsStore',
    'SelectionResult',
    'WidgetSelectionController',
]
