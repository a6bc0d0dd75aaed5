"""
Clock and date labels shown in the panel.

Displays current time with configurable 12h/24h format.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from PySide6.QtCore import QTimer, Qt, Signal
from PySide6.QtWidgets import QLabel, QWidget

from core.constants.timing import CLOCK_TICK_INTERVAL_MS, DATE_TICK_INTERVAL_MS


class TimeFormat(Enum):
    """Time format options."""
    TWELVE_HOUR = "12h"
    TWENTY_FOUR_HOUR = "24h"


class ClockWidget(QLabel):
    """Label that shows the current time and refreshes every second."""

    # Emits formatted time string
    time_updated = Signal(str)

    def __init__(self, parent: Optional[QWidget] = None,
                 time_format: TimeFormat = TimeFormat.TWENTY_FOUR_HOUR,
                 show_seconds: bool = False):
        super().__init__(parent)
        self._time_format = time_format
        self._show_seconds = show_seconds
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._timer = QTimer(self)
        self._timer.setInterval(CLOCK_TICK_INTERVAL_MS)
        self._timer.timeout.connect(self._update_time)
        self._timer.start()
        self._update_time()

    def format_time(self, now: datetime) -> str:
        if self._time_format == TimeFormat.TWELVE_HOUR:
            return now.strftime("%I:%M:%S %p" if self._show_seconds else "%I:%M %p")
        return now.strftime("%H:%M:%S" if self._show_seconds else "%H:%M")

    def _update_time(self) -> None:
        time_str = self.format_time(datetime.now())
        if time_str != self.text():
            self.setText(time_str)
            self.time_updated.emit(time_str)


class DateWidget(QLabel):
    """Label that shows today's date, e.g. ``Mon 19 Oct``."""

    def __init__(self, parent: Optional[QWidget] = None, date_format: str = "%a %d %b"):
        super().__init__(parent)
        self._date_format = date_format
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._timer = QTimer(self)
        self._timer.setInterval(DATE_TICK_INTERVAL_MS)
        self._timer.timeout.connect(self._update_date)
        self._timer.start()
        self._update_date()

    def _update_date(self) -> None:
        self.setText(datetime.now().strftime(self._date_format))
