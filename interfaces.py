"""Protocol interfaces used by the dictation core."""

from __future__ import annotations

from queue import Queue
from typing import Callable, Optional, Protocol

from models import AudioFrame, CopyResult, ResultBatch

ResultHandler = Callable[[ResultBatch], None]
EndHandler = Callable[[], None]
ErrorHandler = Callable[[str, str], None]


class RecognitionEngine(Protocol):
    """Platform speech recognizer, configured once and started many times.

    ``start()`` raises ``EngineBusyError`` when a capture is already running.
    """

    language: str
    continuous: bool
    interim_results: bool
    on_result: Optional[ResultHandler]
    on_end: Optional[EndHandler]
    on_error: Optional[ErrorHandler]

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def close(self) -> None:
        """Stop for good and release worker resources."""
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle: ...


class Recorder(Protocol):
    def start(self, audio_queue: Queue[AudioFrame | None]) -> None: ...

    def stop(self) -> None: ...


class Clipboard(Protocol):
    def copy_text(self, text: str) -> CopyResult: ...
