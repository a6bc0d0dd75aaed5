"""Size and range constants for NotchPanel.

These bound the user-tunable panel geometry and the local file tray
server. Settings validation and any settings UI read them from here so
slider ranges and clamping never disagree.
"""

# =============================================================================
# Notch Geometry
# =============================================================================

NOTCH_MIN_WIDTH = 500.0
"""Lower bound for the expanded notch width."""

NOTCH_MAX_WIDTH = 1000.0
"""Upper bound for the expanded notch width."""

NOTCH_FALLBACK_HEIGHT_SLIDER_MIN = 35
"""Smallest fallback height offered by the settings slider."""

NOTCH_FALLBACK_HEIGHT_SLIDER_MAX = 50
"""Largest fallback height offered by the settings slider."""

# =============================================================================
# File Tray Server
# =============================================================================

PORT_MIN = 1
"""Lowest TCP port accepted for the local file tray server."""

PORT_MAX = 65535
"""Highest TCP port accepted for the local file tray server."""

# =============================================================================
# Feature Limits
# =============================================================================

CAMERA_OVERLAY_TIMER_MIN_S = 5
"""Shortest camera overlay auto-hide timer, in seconds."""

MESSAGES_LIMIT_MIN = 10
"""Minimum number of handles/messages the messages feature may fetch."""

# =============================================================================
# Storage and Widget Limits
# =============================================================================

INT_STORAGE_MIN = -(2 ** 63)
INT_STORAGE_MAX = 2 ** 63 - 1
"""Integer settings must fit a signed 64-bit QSettings value."""

WIDGET_SIZE_MAX = 16777215
"""Qt's QWIDGETSIZE_MAX; larger widget extents are rejected by Qt."""

# =============================================================================
# Export all constants
# =============================================================================

__all__ = [
    "NOTCH_MIN_WIDTH",
    "NOTCH_MAX_WIDTH",
    "NOTCH_FALLBACK_HEIGHT_SLIDER_MIN",
    "NOTCH_FALLBACK_HEIGHT_SLIDER_MAX",
    "PORT_MIN",
    "PORT_MAX",
    "CAMERA_OVERLAY_TIMER_MIN_S",
    "MESSAGES_LIMIT_MIN",
    "INT_STORAGE_MIN",
    "INT_STORAGE_MAX",
    "WIDGET_SIZE_MAX",
]
