"""Restartable one-shot inactivity timer."""

from __future__ import annotations

from typing import Callable, Optional

from interfaces import Scheduler, TimerHandle

STALE_AFTER_S = 2.5


class InactivityWatchdog:
    """Calls ``on_expire`` once if ``reset()`` is not called again in time."""

    def __init__(
        self,
        scheduler: Scheduler,
        on_expire: Callable[[], None],
        threshold_s: float = STALE_AFTER_S,
    ) -> None:
        self._scheduler = scheduler
        self._on_expire = on_expire
        self._threshold_s = threshold_s
        self._handle: Optional[TimerHandle] = None
        self._generation = 0

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def threshold_s(self) -> float:
        return self._threshold_s

    def reset(self) -> None:
        self.disarm()
        generation = self._generation
        self._handle = self._scheduler.call_later(
            self._threshold_s, lambda: self._fire(generation)
        )

    def disarm(self) -> None:
        # An expiry already queued on the loop must not fire after this.
        self._generation += 1
        handle = self._handle
        self._handle = None
        if handle is not None:
            handle.cancel()

    def _fire(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._handle = None
        self._on_expire()
