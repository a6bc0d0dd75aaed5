"""NotchPanel identity: version, QSettings names and environment overrides.

Runtime code and packaging read these instead of repeating the strings.
"""
from __future__ import annotations

import re
from typing import NamedTuple


APP_NAME: str = "NotchPanel"
# QSettings organization; together with APP_NAME it picks the native store
APP_ORGANIZATION: str = "NotchPanel"
APP_VERSION: str = "0.9.0"
APP_DESCRIPTION: str = "NotchPanel - a top-of-screen widget panel with live, persisted preferences."
# Points the settings store at a portable INI file when set
SETTINGS_PATH_ENV: str = "NOTCHPANEL_SETTINGS_PATH"

_VERSION_RE = re.compile(r"^\s*v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")


class VersionInfo(NamedTuple):
    major: int
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(version_str: str = APP_VERSION) -> VersionInfo:
    """Parse ``MAJOR[.MINOR[.PATCH]]``; a suffix such as ``-beta`` is ignored.

    Unparseable input gives ``0.0.0``.
    """
    match = _VERSION_RE.match(str(version_str))
    if match is None:
        return VersionInfo(0)
    return VersionInfo(*(int(part or 0) for part in match.groups()))


__all__ = [
    "APP_NAME",
    "APP_ORGANIZATION",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "SETTINGS_PATH_ENV",
    "VersionInfo",
    "parse_version",
]
