"""Timing constants for NotchPanel.

All timing values are in milliseconds unless otherwise noted.
"""

# =============================================================================
# Window Activation
# =============================================================================

ACTIVATION_LOWER_DELAY_MS = 1000
"""Delay before the activation policy is lowered after the settings window closes."""

# =============================================================================
# Built-in Widgets
# =============================================================================

CLOCK_TICK_INTERVAL_MS = 1000
"""Refresh interval for the built-in clock label."""

DATE_TICK_INTERVAL_MS = 60000
"""Refresh interval for the built-in date label."""

# =============================================================================
# Export all constants
# =============================================================================

__all__ = [
    "ACTIVATION_LOWER_DELAY_MS",
    "CLOCK_TICK_INTERVAL_MS",
    "DATE_TICK_INTERVAL_MS",
]
