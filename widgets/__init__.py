"""Widgets shown in the panel."""

from .builtin import register_builtin_widgets
from .clock_widget import ClockWidget, DateWidget, TimeFormat

__all__ = [
    'ClockWidget',
    'DateWidget',
    'TimeFormat',
    'register_builtin_widgets',
]
