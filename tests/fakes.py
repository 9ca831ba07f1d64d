"""Hand-written fakes shared by the dictation tests."""

from __future__ import annotations

from typing import Callable, Optional

from errors import EngineBusyError
from models import CopyResult, ResultBatch, SpeechResult


class FakeEngine:
    """Mimics a platform recognizer: rejects a second start while active."""

    def __init__(self) -> None:
        self.language = ""
        self.continuous = True
        self.interim_results = True
        self.on_result = None
        self.on_end = None
        self.on_error = None
        self.active = False
        self.start_calls = 0
        self.stop_calls = 0
        self.closed = False
        self.start_error: Optional[Exception] = None

    def start(self) -> None:
        self.start_calls += 1
        if self.active:
            raise EngineBusyError()
        if self.start_error is not None:
            raise self.start_error
        self.active = True

    def stop(self) -> None:
        self.stop_calls += 1
        self.active = False

    def close(self) -> None:
        self.closed = True
        self.active = False

    def deliver(self, *results: SpeechResult, index: int = 0) -> None:
        assert self.on_result is not None
        self.on_result(ResultBatch(results=tuple(results), result_index=index))

    def end(self) -> None:
        self.active = False
        if self.on_end is not None:
            self.on_end()

    def fail(self, code: str = "ENGINE_FAILURE", message: str = "boom") -> None:
        self.active = False
        if self.on_error is not None:
            self.on_error(code, message)


def final(text: str) -> SpeechResult:
    return SpeechResult(transcript=text, is_final=True)


def interim(text: str) -> SpeechResult:
    return SpeechResult(transcript=text, is_final=False)


class FakeTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock: timers only fire inside ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay_s, callback)
        self.timers.append(timer)
        return timer

    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.pending() if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = timer.due
            timer.fired = True
            timer.callback()
        self.now = target


class FakeClipboard:
    def __init__(self, success: bool = True) -> None:
        self.success = success
        self.copied: list[str] = []

    def copy_text(self, text: str) -> CopyResult:
        self.copied.append(text)
        if self.success:
            return CopyResult(success=True, reason="ok")
        return CopyResult(success=False, reason="no clipboard")
