"""Recognition engine backed by DashScope realtime ASR.

Microphone chunks from ``SoundDeviceRecorder`` are streamed to the
``paraformer-realtime-v2`` model. The SDK reports each sentence repeatedly
while it is being revised and once more with a sentence-end marker; those
updates are kept in a per-capture result list and surfaced as
``ResultBatch`` objects, so the engine looks the same as any other
incremental recognizer to ``RecognitionSession``.

SDK and audio callbacks arrive on worker threads. Everything that touches
engine state or user handlers is handed to ``dispatch`` first so it runs on
the application's event loop.
"""

from __future__ import annotations

import logging
import os
import threading
from queue import Empty, Queue
from typing import Any, Callable, Optional

from errors import (
    AUTH_FAILED,
    ENGINE_FAILURE,
    NETWORK_ERROR,
    PERMISSION_DENIED,
    CapabilityUnavailableError,
    EngineBusyError,
)
from interfaces import EndHandler, ErrorHandler, Recorder, ResultHandler
from models import AudioFrame, ResultBatch, SpeechResult
from recorder import SoundDeviceRecorder, audio_backend_available

try:
    import dashscope
    from dashscope.audio.asr import Recognition, RecognitionResult
except Exception:  # pragma: no cover
    dashscope = None  # type: ignore
    Recognition = None  # type: ignore
    RecognitionResult = None  # type: ignore

Dispatch = Callable[[Callable[[], None]], None]

DEFAULT_MODEL = "paraformer-realtime-v2"


def _call_inline(fn: Callable[[], None]) -> None:
    fn()


def language_hint(language: str) -> str:
    """``en-US`` -> ``en``."""
    return language.split("-")[0].split("_")[0].lower()


def error_code_for(message: str) -> str:
    low = message.lower()
    if "401" in low or "auth" in low or "api key" in low or "apikey" in low:
        return AUTH_FAILED
    if "permission" in low or "denied" in low:
        return PERMISSION_DENIED
    if "timeout" in low or "network" in low or "connection" in low:
        return NETWORK_ERROR
    return ENGINE_FAILURE


class _RecognitionListener:
    """SDK callback object for one capture."""

    def __init__(self, engine: "DashscopeRecognitionEngine", capture_id: int) -> None:
        self._engine = engine
        self._capture_id = capture_id

    def on_open(self) -> None:
        logging.debug("DashScope recognition %d opened", self._capture_id)

    def on_event(self, result: Any) -> None:
        sentence = result.get_sentence()
        if not isinstance(sentence, dict):
            return
        text = str(sentence.get("text", ""))
        is_final = bool(RecognitionResult.is_sentence_end(sentence))
        capture_id = self._capture_id
        self._engine._dispatch(lambda: self._engine._apply_sentence(capture_id, text, is_final))

    def on_complete(self) -> None:
        logging.debug("DashScope recognition %d completed", self._capture_id)
        capture_id = self._capture_id
        self._engine._dispatch(lambda: self._engine._remote_end(capture_id))

    def on_error(self, result: Any) -> None:
        message = str(getattr(result, "message", "") or result)
        capture_id = self._capture_id
        self._engine._dispatch(
            lambda: self._engine._fail_capture(capture_id, error_code_for(message), message)
        )

    def on_close(self) -> None:
        logging.debug("DashScope recognition %d closed", self._capture_id)
        capture_id = self._capture_id
        self._engine._dispatch(lambda: self._engine._remote_end(capture_id))


class DashscopeRecognitionEngine:
    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_MODEL,
        recorder: Optional[Recorder] = None,
        dispatch: Optional[Dispatch] = None,
        queue_maxsize: int = 50,
    ) -> None:
        self.language = "en-US"
        self.continuous = True
        self.interim_results = True
        self.on_result: Optional[ResultHandler] = None
        self.on_end: Optional[EndHandler] = None
        self.on_error: Optional[ErrorHandler] = None

        self._api_key = api_key
        self._model = model
        self._recorder: Recorder = recorder or SoundDeviceRecorder()
        self._dispatch: Dispatch = dispatch or _call_inline
        self._queue_maxsize = queue_maxsize

        self._lock = threading.Lock()
        self._active = False
        self._capture_id = 0
        self._finished_id = 0
        self._results: list[SpeechResult] = []
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def sample_rate(self) -> int:
        return getattr(self._recorder, "sample_rate", 16000)

    def start(self) -> None:
        with self._lock:
            if self._active:
                raise EngineBusyError()
            if Recognition is None:
                raise CapabilityUnavailableError("dashscope is not installed")
            self._capture_id += 1
            capture_id = self._capture_id
            api_key = self._api_key or os.getenv("DASHSCOPE_API_KEY", "")
            if not api_key:
                self._finished_id = capture_id
            else:
                self._active = True
                self._results = []
                self._stop_event = threading.Event()
            stop_event = self._stop_event

        if not api_key:
            self._report_error(AUTH_FAILED, "No API key configured")
            return

        audio_queue: Queue[AudioFrame | None] = Queue(maxsize=self._queue_maxsize)
        try:
            dashscope.api_key = api_key
            recognition = Recognition(
                model=self._model,
                format="pcm",
                sample_rate=self.sample_rate,
                callback=_RecognitionListener(self, capture_id),
                language_hints=[language_hint(self.language)],
            )
            recognition.start()
        except Exception as exc:
            self._fail_capture(capture_id, error_code_for(str(exc)), str(exc))
            return

        try:
            self._recorder.start(audio_queue)
        except Exception as exc:
            self._safe_stop_recognition(recognition)
            self._fail_capture(capture_id, error_code_for(str(exc)), str(exc))
            return

        self._thread = threading.Thread(
            target=self._pump_audio,
            args=(recognition, audio_queue, stop_event, capture_id),
            daemon=True,
        )
        self._thread.start()
        logging.debug("Recognition capture %d started (%s)", capture_id, self.language)

    def stop(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._active = False
            self._stop_event.set()
        self._safe_stop_recorder()

    def close(self, timeout_s: float = 0.5) -> None:
        """Stop and give the worker a moment to finish ``recognition.stop()``."""
        self.stop()
        thread = self._thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout_s)

    # ------------------------------------------------------------------
    # Worker thread
    # ------------------------------------------------------------------

    def _pump_audio(
        self,
        recognition: Any,
        audio_queue: Queue[AudioFrame | None],
        stop_event: threading.Event,
        capture_id: int,
    ) -> None:
        # Drain until the recorder's end marker; the event covers a marker
        # lost to a full queue.
        while True:
            try:
                frame = audio_queue.get(timeout=0.2)
            except Empty:
                if stop_event.is_set():
                    break
                continue
            if frame is None:
                break
            try:
                recognition.send_audio_frame(frame.pcm16_bytes)
            except Exception as exc:
                message = str(exc)
                self._safe_stop_recognition(recognition)
                self._dispatch(
                    lambda: self._fail_capture(capture_id, error_code_for(message), message)
                )
                return

        try:
            # Blocks until the service has delivered the last sentence.
            recognition.stop()
        except Exception as exc:
            message = str(exc)
            self._dispatch(lambda: self._fail_capture(capture_id, error_code_for(message), message))
            return
        self._dispatch(lambda: self._end_capture(capture_id))

    # ------------------------------------------------------------------
    # Event loop side
    # ------------------------------------------------------------------

    def _apply_sentence(self, capture_id: int, text: str, is_final: bool) -> None:
        if capture_id != self._capture_id or capture_id == self._finished_id:
            return
        if not is_final and not self.interim_results:
            return
        if is_final and not text.strip():
            # Silence closes the pending sentence without adding text.
            if self._results and not self._results[-1].is_final:
                self._results.pop()
                if self.on_result:
                    self.on_result(ResultBatch(results=tuple(self._results), result_index=len(self._results)))
            return
        result = SpeechResult(transcript=text, is_final=is_final)
        if self._results and not self._results[-1].is_final:
            self._results[-1] = result
        else:
            self._results.append(result)
        batch = ResultBatch(results=tuple(self._results), result_index=len(self._results) - 1)
        if self.on_result:
            self.on_result(batch)
        if is_final and not self.continuous:
            self.stop()

    def _end_capture(self, capture_id: int) -> None:
        if capture_id != self._capture_id or capture_id == self._finished_id:
            return
        self._finished_id = capture_id
        self._active = False
        if self.on_end:
            self.on_end()

    def _remote_end(self, capture_id: int) -> None:
        """The service finished the task, whether or not we asked it to."""
        if capture_id != self._capture_id or capture_id == self._finished_id:
            return
        # Claimed before stopping so the worker's own end is dropped.
        self._finished_id = capture_id
        self.stop()
        self._active = False
        if self.on_end:
            self.on_end()

    def _fail_capture(self, capture_id: int, code: str, message: str) -> None:
        if capture_id != self._capture_id or capture_id == self._finished_id:
            return
        logging.warning("Recognition capture %d failed: %s", capture_id, message)
        self._finished_id = capture_id
        self.stop()
        self._active = False
        self._report_error(code, message)
        if self.on_end:
            self.on_end()

    def _report_error(self, code: str, message: str) -> None:
        if self.on_error:
            self.on_error(code, message)

    def _safe_stop_recorder(self) -> None:
        try:
            self._recorder.stop()
        except Exception as exc:
            logging.warning("Failed to stop microphone capture: %s", exc)

    def _safe_stop_recognition(self, recognition: Any) -> None:
        try:
            recognition.stop()
        except Exception as exc:
            logging.debug("Recognition stop after failure raised: %s", exc)


def create_engine(
    api_key: str = "",
    model: str = DEFAULT_MODEL,
    dispatch: Optional[Dispatch] = None,
    recorder: Optional[Recorder] = None,
) -> DashscopeRecognitionEngine:
    """Build the engine, or raise ``CapabilityUnavailableError``."""
    if dashscope is None or Recognition is None:
        raise CapabilityUnavailableError("dashscope is not installed")
    if recorder is None and not audio_backend_available():
        raise CapabilityUnavailableError("sounddevice and numpy are required for microphone capture")
    return DashscopeRecognitionEngine(api_key=api_key, model=model, recorder=recorder, dispatch=dispatch)
