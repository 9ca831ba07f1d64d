"""Owns the recognition engine and normalizes its events."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from errors import ENGINE_FAILURE, EngineBusyError
from interfaces import RecognitionEngine
from models import PlatformProfile, ResultBatch, SessionEvent, SessionEventKind

EventSink = Callable[[SessionEvent], None]
EngineFactory = Callable[[], RecognitionEngine]

DEFAULT_LANGUAGE = "en-US"


class RecognitionSession:
    """One long-lived engine handle, restarted in place across captures.

    Raw engine callbacks are turned into ``SessionEvent`` objects and handed
    to a single sink. Within one result callback the ``PARTIAL`` event is
    always delivered before the ``FINAL`` one.
    """

    def __init__(
        self,
        engine_factory: EngineFactory,
        profile: PlatformProfile,
        language: str = DEFAULT_LANGUAGE,
        sink: Optional[EventSink] = None,
    ) -> None:
        # CapabilityUnavailableError propagates from here.
        self._engine: Optional[RecognitionEngine] = engine_factory()
        self._profile = profile
        self._sink = sink
        self._active = False

        engine = self._engine
        engine.language = language
        engine.continuous = profile.supports_continuous
        engine.interim_results = profile.supports_interim_results
        engine.on_result = self._handle_result
        engine.on_end = self._handle_end
        engine.on_error = self._handle_error

    @property
    def active(self) -> bool:
        return self._active

    @property
    def profile(self) -> PlatformProfile:
        return self._profile

    @property
    def closed(self) -> bool:
        return self._engine is None

    def connect(self, sink: EventSink) -> None:
        self._sink = sink

    def start(self) -> None:
        engine = self._engine
        if engine is None:
            logging.warning("Recognition session is closed, ignoring start")
            return
        # Set before starting: the engine may report end or error synchronously.
        self._active = True
        try:
            engine.start()
        except EngineBusyError:
            logging.debug("Recognition engine already active, start ignored")
        except Exception as exc:
            logging.warning("Recognition engine failed to start: %s", exc)
            self._active = False
            self._emit(SessionEvent(SessionEventKind.FAILED, code=ENGINE_FAILURE, message=str(exc)))

    def stop(self) -> None:
        self._active = False
        engine = self._engine
        if engine is None:
            return
        try:
            engine.stop()
        except Exception as exc:
            logging.warning("Recognition engine failed to stop cleanly: %s", exc)

    def close(self) -> None:
        """Detach every handler and force-stop the engine."""
        engine = self._engine
        if engine is None:
            return
        engine.on_result = None
        engine.on_end = None
        engine.on_error = None
        self._active = False
        try:
            engine.close()
        except Exception as exc:
            logging.warning("Recognition engine failed to close cleanly: %s", exc)
        self._engine = None
        self._sink = None

    # ------------------------------------------------------------------
    # Engine callbacks
    # ------------------------------------------------------------------

    def _handle_result(self, batch: ResultBatch) -> None:
        final_chunk = ""
        interim_chunk = ""
        for result in batch.new_results():
            if result.is_final:
                final_chunk += result.transcript + " "
            elif self._profile.supports_interim_results:
                interim_chunk += result.transcript

        self._emit(SessionEvent(SessionEventKind.PARTIAL, text=interim_chunk))
        if final_chunk:
            self._emit(SessionEvent(SessionEventKind.FINAL, text=final_chunk))

    def _handle_end(self) -> None:
        self._active = False
        self._emit(SessionEvent(SessionEventKind.ENDED))

    def _handle_error(self, code: str, message: str) -> None:
        self._active = False
        logging.info("Recognition engine reported %s: %s", code or ENGINE_FAILURE, message)
        self._emit(SessionEvent(SessionEventKind.FAILED, code=code or ENGINE_FAILURE, message=message))

    def _emit(self, event: SessionEvent) -> None:
        if self._sink is not None:
            self._sink(event)
