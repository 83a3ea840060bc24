"""
QTimer-backed host hooks.

QtFrameTimer drives the FrameScheduler once per display frame (~60Hz).
QtDebouncer coalesces rapid calls (settings writes during a drag) into a
single callback after a fixed delay.
"""

from typing import Callable, Optional

from PyQt5.QtCore import QObject, Qt, QTimer

from gensynth.config import FRAME_INTERVAL_MS, PARAM_SETTINGS_SAVE_DEBOUNCE_MS
from .scheduler import monotonic_ms


class QtFrameTimer(QObject):
    """Single-shot precise timer that calls back with a monotonic ms timestamp."""

    def __init__(self, interval_ms: int = FRAME_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self._callback: Optional[Callable[[float], None]] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    def request(self, callback: Callable[[float], None]) -> None:
        self._callback = callback
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def _on_timeout(self) -> None:
        callback = self._callback
        self._callback = None
        if callback is not None:
            callback(monotonic_ms())


class QtDebouncer(QObject):
    """Restartable single-shot timer: only the last trigger within the delay fires."""

    def __init__(self, delay_ms: int = PARAM_SETTINGS_SAVE_DEBOUNCE_MS, parent=None):
        super().__init__(parent)
        self._callback: Optional[Callable[[], None]] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def pending(self) -> bool:
        return self._timer.isActive()

    def trigger(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start()  # restarts if already active

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def _on_timeout(self) -> None:
        callback = self._callback
        self._callback = None
        if callback is not None:
            callback()
