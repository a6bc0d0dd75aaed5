"""
Settings schema: every user-tunable field, its type, default and the
policy applied when a value is missing, malformed or out of range.

Policies differ per field on purpose and must not be unified:

- ``CLAMP``  forces a number into ``[min_value, max_value]``.
- ``RESET``  replaces an invalid value with the compiled default.
- ``REJECT`` keeps the current in-memory value when given one (``set``)
  and falls back to the default otherwise (``load``).

A value that cannot be coerced to the field's type is never clamped; it
follows RESET (or REJECT) semantics.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Type

from PySide6.QtCore import QStandardPaths

from core.constants.sizes import (
    CAMERA_OVERLAY_TIMER_MIN_S,
    INT_STORAGE_MAX,
    INT_STORAGE_MIN,
    MESSAGES_LIMIT_MIN,
    NOTCH_MAX_WIDTH,
    NOTCH_MIN_WIDTH,
    PORT_MAX,
    PORT_MIN,
)
from core.settings.models import (
    AIProvider,
    AnthropicModel,
    CameraQuality,
    GoogleModel,
    HoverTarget,
    MusicController,
    MusicProvider,
    OpenAIModel,
    SettingsTab,
    ShaderOption,
    TouchAction,
)
from versioning import APP_NAME


class SettingType(Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    PATH = "path"
    ENUM = "enum"
    STRING_LIST = "string_list"


class InvalidPolicy(Enum):
    CLAMP = "clamp"
    RESET = "reset"
    REJECT = "reject"


_MISSING = object()


@dataclass(frozen=True)
class SettingDefinition:
    """One named, typed, validated configuration field."""

    key: str
    setting_type: SettingType
    default: Any = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    # When True the lower bound itself is invalid (``value > min_value``).
    min_exclusive: bool = False
    allow_empty: bool = True
    enum_type: Optional[Type[Enum]] = None
    policy: InvalidPolicy = InvalidPolicy.RESET
    persist: bool = True
    default_factory: Optional[Callable[[], Any]] = None
    description: str = ""

    def default_value(self) -> Any:
        """Return a fresh copy of the compiled default."""
        if self.default_factory is not None:
            return self.default_factory()
        if isinstance(self.default, list):
            return list(self.default)
        return self.default

    @property
    def storage_type(self) -> type:
        """Primitive type used when reading this field from a DurableStore."""
        return {
            SettingType.BOOL: bool,
            SettingType.INT: int,
            SettingType.FLOAT: float,
            SettingType.STRING: str,
            SettingType.PATH: str,
            SettingType.ENUM: str,
            SettingType.STRING_LIST: list,
        }[self.setting_type]

    # ------------------------------------------------------------------
    # Coercion and validation
    # ------------------------------------------------------------------

    def coerce(self, value: Any) -> Any:
        """Convert *value* to this field's in-memory type.

        Returns the sentinel ``_MISSING`` when the value has the wrong shape.
        """
        st = self.setting_type
        if value is None:
            return _MISSING

        if st is SettingType.BOOL:
            return value if isinstance(value, bool) else _MISSING

        if st is SettingType.INT:
            if isinstance(value, bool):
                return _MISSING
            if isinstance(value, int):
                return value
            if isinstance(value, float) and value.is_integer():
                return int(value)
            if isinstance(value, str):
                try:
                    return int(value.strip())
                except ValueError:
                    return _MISSING
            return _MISSING

        if st is SettingType.FLOAT:
            if isinstance(value, bool) or not isinstance(value, (int, float, str)):
                return _MISSING
            try:
                return float(value.strip() if isinstance(value, str) else value)
            except ValueError:
                return _MISSING
            except OverflowError:
                # An int beyond float range; keep its sign so CLAMP can bound it
                return math.inf if value > 0 else -math.inf

        if st is SettingType.STRING:
            return value if isinstance(value, str) else _MISSING

        if st is SettingType.PATH:
            if isinstance(value, Path):
                return value
            if isinstance(value, str):
                return Path(value) if value else ""
            return _MISSING

        if st is SettingType.ENUM:
            if isinstance(value, self.enum_type):
                return value
            try:
                return self.enum_type(value)
            except ValueError:
                return _MISSING

        if st is SettingType.STRING_LIST:
            if isinstance(value, str) or not isinstance(value, Iterable):
                return _MISSING
            items = list(value)
            if not all(isinstance(item, str) for item in items):
                return _MISSING
            # First occurrence wins; order is meaningful.
            return list(dict.fromkeys(items))

        return _MISSING

    def validate(self, value: Any) -> Tuple[bool, str]:
        """Check *value* without repairing it.

        Returns:
            ``(True, "")`` when valid, otherwise ``(False, reason)``.
        """
        if not self._has_exact_type(value):
            return False, f"{self.key}: expected {self.setting_type.value}, got {type(value).__name__}"
        if self.setting_type is SettingType.STRING_LIST and len(set(value)) != len(value):
            return False, f"{self.key}: duplicate entries"
        if not self._in_range(value):
            return False, f"{self.key}: {value!r} out of range"
        if not self.allow_empty and not str(value):
            return False, f"{self.key}: must not be empty"
        return True, ""

    def _has_exact_type(self, value: Any) -> bool:
        st = self.setting_type
        if st is SettingType.BOOL:
            return isinstance(value, bool)
        if st is SettingType.INT:
            return isinstance(value, int) and not isinstance(value, bool)
        if st is SettingType.FLOAT:
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if st is SettingType.STRING:
            return isinstance(value, str)
        if st is SettingType.PATH:
            return isinstance(value, (str, Path))
        if st is SettingType.ENUM:
            return isinstance(value, self.enum_type)
        return isinstance(value, list) and all(isinstance(item, str) for item in value)

    def _in_range(self, value: Any) -> bool:
        if self.setting_type not in (SettingType.INT, SettingType.FLOAT):
            return True
        if isinstance(value, float) and not math.isfinite(value):
            return False
        if isinstance(value, int) and not INT_STORAGE_MIN <= value <= INT_STORAGE_MAX:
            return False
        if self.min_value is not None:
            if self.min_exclusive and value <= self.min_value:
                return False
            if not self.min_exclusive and value < self.min_value:
                return False
        if self.max_value is not None and value > self.max_value:
            return False
        return True

    def _clamp(self, value: Any) -> Any:
        if self.min_value is not None and value < self.min_value:
            value = self.min_value
        if self.max_value is not None and value > self.max_value:
            value = self.max_value
        if self.setting_type is SettingType.INT:
            return int(value)
        return float(value)

    def repair(self, value: Any, current: Any = _MISSING) -> Any:
        """Return a valid value for this field derived from *value*.

        Args:
            value: Candidate value (user input or raw stored value).
            current: The current in-memory value, consulted by REJECT.
                Omit it during load so invalid stored data becomes the
                default.
        """
        coerced = self.coerce(value)
        if coerced is _MISSING:
            return self._fallback(current)

        if not self.allow_empty and not str(coerced):
            return self._fallback(current)

        if self._in_range(coerced):
            return coerced

        if self.policy is InvalidPolicy.CLAMP and not (isinstance(coerced, float) and math.isnan(coerced)):
            clamped = self._clamp(coerced)
            # Infinity past an open bound stays out of range
            if self._in_range(clamped):
                return clamped
        return self._fallback(current)

    def _fallback(self, current: Any) -> Any:
        if self.policy is InvalidPolicy.REJECT and current is not _MISSING:
            return current
        return self.default_value()

    def serialize(self, value: Any) -> Any:
        """Convert an in-memory value to the primitive written to the store."""
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, Path):
            return str(value)
        if isinstance(value, list):
            return list(value)
        return value


def default_file_tray_folder() -> Path:
    """Return ``<Documents>/<APP_NAME> Files`` for the current user."""
    documents = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.DocumentsLocation)
    base = Path(documents) if documents else Path.home() / "Documents"
    return base / f"{APP_NAME} Files"


def _build_schema(definitions: Iterable[SettingDefinition]) -> Dict[str, SettingDefinition]:
    schema: Dict[str, SettingDefinition] = {}
    for definition in definitions:
        if definition.key in schema:
            raise ValueError(f"Duplicate setting key: {definition.key}")
        if definition.setting_type is SettingType.ENUM and definition.enum_type is None:
            raise ValueError(f"Enum setting {definition.key} needs enum_type")
        schema[definition.key] = definition
    return schema


S = SettingType
P = InvalidPolicy

SETTINGS_SCHEMA: Dict[str, SettingDefinition] = _build_schema([
    # Session state, kept in memory only
    SettingDefinition("selectedTab", S.ENUM, SettingsTab.GENERAL, enum_type=SettingsTab, persist=False),
    SettingDefinition("selectedNotchTab", S.INT, 0, min_value=0, persist=False),
    SettingDefinition("isFirstLaunch", S.BOOL, True, persist=False),
    SettingDefinition("hasFirstWindowBeenOpenOnce", S.BOOL, False, persist=False),
    SettingDefinition(
        "isSettingsWindowOpen", S.BOOL, False, persist=False,
        description="Opening raises the app activation policy; closing lowers it after a delay.",
    ),
    SettingDefinition("openStateYOffset", S.FLOAT, 35.0, persist=False),
    SettingDefinition("snapOpenThreshold", S.FLOAT, 0.9, min_value=0.0, max_value=1.0, policy=P.CLAMP, persist=False),

    # Widgets; the real default comes from the widget catalog
    SettingDefinition("selectedWidgets", S.STRING_LIST, [], description="Ordered, unique widget names."),

    # AI
    SettingDefinition(
        "aiApiKey", S.STRING, "",
        description="An empty key is never written so it cannot clobber a saved one.",
    ),
    SettingDefinition("selectedProvider", S.ENUM, AIProvider.OPENAI, enum_type=AIProvider),
    SettingDefinition("selectedOpenAIModel", S.ENUM, OpenAIModel.GPT_3_5, enum_type=OpenAIModel),
    SettingDefinition("selectedAnthropicModel", S.ENUM, AnthropicModel.CLAUDE_INSTANT, enum_type=AnthropicModel),
    SettingDefinition("selectedGoogleModel", S.ENUM, GoogleModel.PALM, enum_type=GoogleModel),

    # Clipboard
    SettingDefinition("clipboardManagerMaxHistory", S.INT, 30, min_value=0, policy=P.REJECT),
    SettingDefinition("clipboardManagerPollingIntervalMS", S.INT, 1000, min_value=0, policy=P.REJECT),

    # File tray
    SettingDefinition(
        "fileTrayDefaultFolder", S.PATH, allow_empty=False, default_factory=default_file_tray_folder,
    ),
    SettingDefinition("fileTrayPersistFiles", S.BOOL, False),
    SettingDefinition("useCustomSaveFolder", S.BOOL, False),
    SettingDefinition("fileTrayAllowOpenOnLocalhost", S.BOOL, False),
    SettingDefinition("fileTrayPort", S.INT, 8000, min_value=PORT_MIN, max_value=PORT_MAX),
    SettingDefinition("localHostPin", S.STRING, "1111", allow_empty=False),

    # Notch
    SettingDefinition("showDividerBetweenWidgets", S.BOOL, False),
    SettingDefinition("hoverTargetMode", S.ENUM, HoverTarget.ALBUM, enum_type=HoverTarget),
    SettingDefinition("nowPlayingScrollSpeed", S.INT, 40, min_value=0, min_exclusive=True),
    SettingDefinition("enableNotchHUD", S.BOOL, False),
    SettingDefinition(
        "notchMaxWidth", S.FLOAT, 710.0, min_value=NOTCH_MIN_WIDTH, max_value=NOTCH_MAX_WIDTH, policy=P.CLAMP,
    ),
    SettingDefinition(
        "notchMinFallbackHeight", S.FLOAT, 40.0, min_value=0.0, min_exclusive=True,
        description="Closed panel height; a non-positive value would collapse the panel.",
    ),
    SettingDefinition("quickAccessWidgetDistanceFromLeft", S.FLOAT, 18.0),
    SettingDefinition("oneFingerAction", S.ENUM, TouchAction.NONE, enum_type=TouchAction),
    SettingDefinition("twoFingerAction", S.ENUM, TouchAction.NONE, enum_type=TouchAction),
    SettingDefinition("notchScrollThreshold", S.FLOAT, 50.0),

    # Music
    SettingDefinition("showMusicProvider", S.BOOL, True),
    SettingDefinition("musicController", S.ENUM, MusicController.MEDIA_REMOTE, enum_type=MusicController),
    SettingDefinition("overridenMusicProvider", S.ENUM, MusicProvider.NONE, enum_type=MusicProvider),

    # Camera
    SettingDefinition("isCameraFlipped", S.BOOL, False),
    SettingDefinition("enableCameraOverlay", S.BOOL, True),
    SettingDefinition("cameraOverlayTimer", S.INT, 20, min_value=CAMERA_OVERLAY_TIMER_MIN_S, policy=P.CLAMP),
    SettingDefinition("cameraQualitySelection", S.ENUM, CameraQuality.HIGH, enum_type=CameraQuality),

    # Messages
    SettingDefinition("enableMessagesNotifications", S.BOOL, False),
    SettingDefinition("messagesHandleLimit", S.INT, 30, min_value=MESSAGES_LIMIT_MIN, policy=P.CLAMP),
    SettingDefinition("messagesMessageLimit", S.INT, 20, min_value=MESSAGES_LIMIT_MIN, policy=P.CLAMP),
    SettingDefinition("currentMessageAudioFile", S.STRING, ""),

    # Display; resolved through DisplayResolver, None means "primary"
    SettingDefinition("selectedScreenID", S.INT, None),

    # Animation
    SettingDefinition("openingAnimation", S.STRING, "iOS"),
    SettingDefinition("notchBackgroundAnimation", S.ENUM, ShaderOption.AMBIENT_GRADIENT, enum_type=ShaderOption),
    SettingDefinition("enableGpuAnimation", S.BOOL, True),
    SettingDefinition("constant120FPS", S.BOOL, False),

    # Utils
    SettingDefinition("enableUtilsOption", S.BOOL, True),
    SettingDefinition("enableClipboardListener", S.BOOL, True),
])

del S, P


def get_definition(key: str) -> SettingDefinition:
    """Return the definition for *key*; raises KeyError for unknown keys."""
    return SETTINGS_SCHEMA[key]


def get_default_value(key: str) -> Any:
    return SETTINGS_SCHEMA[key].default_value()


def validate_setting(key: str, value: Any) -> Tuple[bool, str]:
    return SETTINGS_SCHEMA[key].validate(value)


def repair_setting(key: str, value: Any) -> Any:
    return SETTINGS_SCHEMA[key].repair(value)


def iter_persisted() -> Iterator[SettingDefinition]:
    """Yield every definition that is written to the durable store."""
    for definition in SETTINGS_SCHEMA.values():
        if definition.persist:
            yield definition


def persisted_keys() -> List[str]:
    return [d.key for d in iter_persisted()]
