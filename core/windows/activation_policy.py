"""
Application activation policy.

While the settings window is open the application behaves like a regular
app (taskbar entry, can take focus). Once it closes the app drops back to
an accessory/tool presence, but only after a short delay so that quickly
reopening the settings window does not make the taskbar entry flicker.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from PySide6.QtCore import QObject, QTimer, Qt
from PySide6.QtWidgets import QWidget

from core.constants.timing import ACTIVATION_LOWER_DELAY_MS
from core.logging.logger import get_logger
from core.logging.tags import TAG_ACTIVATION

logger = get_logger(__name__)


@runtime_checkable
class ActivationPolicy(Protocol):
    """Raises or lowers how prominently the application presents itself."""

    def raise_(self) -> None: ...
    def lower(self) -> None: ...


class WindowActivationPolicy:
    """ActivationPolicy that toggles a window between normal and tool window.

    Tool windows are kept out of the taskbar and Alt+Tab, which is the Qt
    counterpart of an accessory application.
    """

    def __init__(self, window: QWidget):
        self._window = window

    def is_tool(self) -> bool:
        # Tool shares the Window bit, so test the whole mask
        return (self._window.windowFlags() & Qt.WindowType.Tool) == Qt.WindowType.Tool

    def _set_tool(self, enabled: bool) -> None:
        window = self._window
        if self.is_tool() == enabled:
            return
        was_visible = window.isVisible()
        # Swap the window type only; setWindowFlags() hides the window.
        flags = window.windowFlags() & ~Qt.WindowType.WindowType_Mask
        flags |= Qt.WindowType.Tool if enabled else Qt.WindowType.Window
        window.setWindowFlags(flags)
        if was_visible:
            window.show()

    def raise_(self) -> None:
        self._set_tool(False)
        self._window.show()
        self._window.raise_()
        self._window.activateWindow()
        logger.debug("%s Window raised to regular presence", TAG_ACTIVATION)

    def lower(self) -> None:
        self._set_tool(True)
        logger.debug("%s Window lowered to tool presence", TAG_ACTIVATION)


class ActivationScheduler(QObject):
    """Debounces activation policy changes driven by the settings window.

    A single restartable single-shot QTimer holds the pending lowering, so
    repeated close/open toggles replace the pending task instead of
    stacking several.
    """

    def __init__(self, policy: ActivationPolicy, delay_ms: int = ACTIVATION_LOWER_DELAY_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._policy = policy
        self._delay_ms = int(delay_ms)
        self._lower_timer = QTimer(self)
        self._lower_timer.setSingleShot(True)
        self._lower_timer.timeout.connect(self._do_lower)

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def is_lower_pending(self) -> bool:
        return self._lower_timer.isActive()

    def window_opened(self) -> None:
        """Cancel any pending lowering and raise immediately."""
        if self._lower_timer.isActive():
            self._lower_timer.stop()
            logger.debug("%s Pending lower cancelled by reopen", TAG_ACTIVATION)
        self._policy.raise_()

    def window_closed(self) -> None:
        """Schedule lowering after the delay, replacing any pending one."""
        self._lower_timer.start(self._delay_ms)
        logger.debug("%s Lower scheduled in %dms", TAG_ACTIVATION, self._delay_ms)

    def cancel(self) -> None:
        self._lower_timer.stop()

    def _do_lower(self) -> None:
        try:
            self._policy.lower()
        except Exception:
            logger.error("%s Failed to lower activation policy", TAG_ACTIVATION, exc_info=True)
