"""QTimer-backed scheduler for timers on the Qt event loop."""

from __future__ import annotations

from typing import Callable, Optional

try:
    from PySide6.QtCore import QObject, QTimer
except Exception:  # pragma: no cover
    QObject = None  # type: ignore
    QTimer = None  # type: ignore


class QtTimerHandle:
    def __init__(self, timer: "QTimer") -> None:
        self._timer: Optional["QTimer"] = timer
        timer.timeout.connect(self._release)

    def cancel(self) -> None:
        timer = self._timer
        if timer is None:
            return
        self._timer = None
        timer.stop()
        timer.deleteLater()

    def _release(self) -> None:
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.deleteLater()


class QtScheduler:
    """Timers are parented to ``owner`` so Qt, not the GC, deletes them."""

    def __init__(self, owner: Optional["QObject"] = None) -> None:
        if QTimer is None:
            raise RuntimeError("PySide6 is not installed")
        self._owner = owner if owner is not None else QObject()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self._owner)
        timer.setSingleShot(True)
        handle = QtTimerHandle(timer)
        timer.timeout.connect(callback)
        timer.start(int(delay_s * 1000))
        return handle
