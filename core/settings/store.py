"""
Durable key-value store for settings.

``DurableStore`` is the contract the settings model depends on;
``QSettingsStore`` implements it on top of QSettings. Reads are typed:
a missing key *and* a value of the wrong shape both come back as None,
so callers only ever deal with "have a usable value" or "use default".
"""
from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, List, Optional, Protocol, Union, runtime_checkable

from PySide6.QtCore import QSettings

from core.logging.logger import get_logger
from versioning import APP_NAME, APP_ORGANIZATION

logger = get_logger(__name__)


@runtime_checkable
class DurableStore(Protocol):
    """Typed key-value persistence that survives process restarts."""

    def get(self, key: str, value_type: type) -> Optional[Any]: ...
    def set(self, key: str, value: Any) -> None: ...


class QSettingsStore:
    """
    DurableStore backed by QSettings.

    Uses the platform's native settings location for the given
    organization/application, or an explicit INI file when *path* is set.
    Lists are written as JSON text so that an empty list survives INI
    round-trips, which otherwise come back as an invalid variant.
    """

    def __init__(self, organization: str = APP_ORGANIZATION, application: str = APP_NAME,
                 path: Optional[Union[str, Path]] = None):
        if path is not None:
            self._settings = QSettings(str(path), QSettings.Format.IniFormat)
        else:
            self._settings = QSettings(organization, application)
        self._lock = threading.RLock()
        logger.debug("QSettingsStore opened at %s", self._settings.fileName())

    @property
    def file_name(self) -> str:
        return self._settings.fileName()

    @staticmethod
    def to_bool(value: Any) -> Optional[bool]:
        """Normalize a stored value to bool, or None when it is not one.

        QSettings native/INI backends hand booleans back as strings, so
        "true"/"false"/"1"/"0" are accepted alongside real bools.
        """
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            v = value.strip().lower()
            if v in ("true", "1"):
                return True
            if v in ("false", "0"):
                return False
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        return None

    @staticmethod
    def to_int(value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return None
        return None

    @staticmethod
    def to_float(value: Any) -> Optional[float]:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return None
        return None

    @staticmethod
    def to_string_list(value: Any) -> Optional[List[str]]:
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                return None
        if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            return list(value)
        return None

    def get(self, key: str, value_type: type) -> Optional[Any]:
        """
        Read *key* as *value_type* (bool, int, float, str or list).

        Returns:
            The typed value, or None if the key is absent or malformed.
        """
        with self._lock:
            if not self._settings.contains(key):
                return None
            raw = self._settings.value(key)

        if value_type is bool:
            result = self.to_bool(raw)
        elif value_type is int:
            result = self.to_int(raw)
        elif value_type is float:
            result = self.to_float(raw)
        elif value_type is list:
            result = self.to_string_list(raw)
        elif value_type is str:
            result = raw if isinstance(raw, str) else None
        else:
            raise ValueError(f"Unsupported value type: {value_type!r}")

        if result is None:
            logger.debug("Stored value for %s has wrong shape for %s: %r", key, value_type.__name__, raw)
        return result

    def set(self, key: str, value: Any) -> None:
        """Write *value* under *key*; lists are stored as JSON text."""
        if isinstance(value, (list, tuple)):
            value = json.dumps(list(value))
        with self._lock:
            self._settings.setValue(key, value)

    def contains(self, key: str) -> bool:
        with self._lock:
            return self._settings.contains(key)

    def remove(self, key: str) -> None:
        with self._lock:
            self._settings.remove(key)
        logger.debug("Removed stored key: %s", key)

    def all_keys(self) -> List[str]:
        with self._lock:
            return list(self._settings.allKeys())

    def sync(self) -> None:
        """Flush pending writes to the backing file."""
        with self._lock:
            self._settings.sync()

    def clear(self) -> None:
        """Clear all stored values (use with caution)."""
        with self._lock:
            self._settings.clear()
            self._settings.sync()
        logger.warning("All stored settings cleared")
