"""Standard logging tags for consistent log filtering.

Usage:
    from core.logging.tags import TAG_SETTINGS, TAG_FALLBACK
    logger.info("%s Display %s missing, using primary", TAG_FALLBACK, display_id)
"""

# =============================================================================
# Component Tags
# =============================================================================

TAG_SETTINGS = "[SETTINGS]"
"""Settings load/save/validation."""

TAG_WIDGETS = "[WIDGETS]"
"""Widget selection and panel surface changes."""

TAG_DISPLAY = "[DISPLAY]"
"""Display resolution and screen configuration."""

TAG_ACTIVATION = "[ACTIVATION]"
"""Window activation policy changes."""

# =============================================================================
# Status Tags
# =============================================================================

TAG_FALLBACK = "[FALLBACK]"
"""Fallback operations when the primary path fails."""

TAG_LIFECYCLE = "[LIFECYCLE]"
"""Application context startup/teardown."""

# =============================================================================
# Export all tags
# =============================================================================

__all__ = [
    # Components
    "TAG_SETTINGS",
    "TAG_WIDGETS",
    "TAG_DISPLAY",
    "TAG_ACTIVATION",
    # Status
    "TAG_FALLBACK",
    "TAG_LIFECYCLE",
]
