"""State-machine based dictation orchestration."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from errors import ERROR_MESSAGES, STALE
from inactivity_watchdog import STALE_AFTER_S, InactivityWatchdog
from interfaces import Clipboard, Scheduler
from models import DictationSnapshot, MicState, SessionEvent, SessionEventKind
from recognition_session import RecognitionSession

StateCallback = Callable[[MicState, MicState], None]
ChangeCallback = Callable[[DictationSnapshot], None]


class DictationController:
    """Stopped / Recording / Paused, driven by session events and the UI.

    Every handler reads ``self._state`` at the time it runs; the session
    holds a bound method, never a copy of the state.
    """

    def __init__(
        self,
        session: RecognitionSession,
        scheduler: Scheduler,
        clipboard: Optional[Clipboard] = None,
        stale_after_s: float = STALE_AFTER_S,
        on_state_change: Optional[StateCallback] = None,
        on_change: Optional[ChangeCallback] = None,
    ) -> None:
        self._session = session
        self._clipboard = clipboard
        self._on_state_change = on_state_change
        self._on_change = on_change
        self._watchdog = InactivityWatchdog(
            scheduler,
            lambda: self.handle_event(
                SessionEvent(SessionEventKind.STALE, code=STALE, message=ERROR_MESSAGES[STALE])
            ),
            stale_after_s,
        )

        self._state = MicState.STOPPED
        self._final_text = ""
        self._interim_text = ""

        session.connect(self.handle_event)

    @property
    def state(self) -> MicState:
        return self._state

    @property
    def final_text(self) -> str:
        return self._final_text

    @property
    def interim_text(self) -> str:
        return self._interim_text

    @property
    def snapshot(self) -> DictationSnapshot:
        return DictationSnapshot(self._state, self._final_text, self._interim_text)

    @property
    def watchdog(self) -> InactivityWatchdog:
        return self._watchdog

    # ------------------------------------------------------------------
    # UI operations
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._state == MicState.RECORDING:
            logging.debug("Already recording, start ignored")
            return
        resuming = self._state == MicState.PAUSED
        self._interim_text = ""
        self._transition(MicState.RECORDING)
        self._watchdog.reset()
        logging.info("%s dictation", "Resuming" if resuming else "Starting")
        self._session.start()
        self._notify()

    def stop(self) -> None:
        if self._state == MicState.STOPPED:
            return
        # Transition first: a late Ended from the engine must see STOPPED.
        self._transition(MicState.STOPPED)
        self._watchdog.disarm()
        self._session.stop()
        logging.info("Dictation stopped")
        self._notify()

    def toggle(self) -> None:
        if self._state == MicState.RECORDING:
            self.stop()
        else:
            self.start()

    def clear(self) -> None:
        if self._state != MicState.STOPPED:
            logging.debug("Clear ignored while %s", self._state.value)
            return
        self._final_text = ""
        self._interim_text = ""
        self._notify()

    def copy(self) -> bool:
        if self._clipboard is None:
            logging.warning("No clipboard available, copy ignored")
            return False
        try:
            result = self._clipboard.copy_text(self._final_text)
        except Exception as exc:
            logging.warning("Copy to clipboard failed: %s", exc)
            return False
        if not result.success:
            logging.warning("Copy to clipboard failed: %s", result.reason)
        return result.success

    def set_final_text(self, text: str) -> None:
        """Replace the transcript with a user edit; refused while recording."""
        if self._state == MicState.RECORDING:
            logging.debug("Transcript edit ignored while recording")
            return
        if text == self._final_text:
            return
        self._final_text = text
        self._notify()

    def dispose(self) -> None:
        self.stop()
        self._watchdog.disarm()
        self._session.close()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def handle_event(self, event: SessionEvent) -> None:
        if self._state != MicState.RECORDING:
            logging.debug("Ignoring %s while %s", event.kind.value, self._state.value)
            return

        kind = event.kind
        if kind == SessionEventKind.PARTIAL:
            self._interim_text = event.text
            self._watchdog.reset()
        elif kind == SessionEventKind.FINAL:
            self._final_text += event.text
            self._watchdog.reset()
        elif kind == SessionEventKind.ENDED:
            if self._session.profile.is_mobile:
                logging.info("Recognition ended, pausing")
                self._pause()
            else:
                logging.debug("Recognition ended, restarting")
                self._session.start()
                return
        elif kind == SessionEventKind.FAILED:
            logging.info("Recognition failed (%s), pausing: %s", event.code, event.message)
            self._pause()
        elif kind == SessionEventKind.STALE:
            logging.info(
                "%s after %.1fs without recognition activity, pausing", event.code or STALE, self._watchdog.threshold_s
            )
            self._pause()
        self._notify()

    def _pause(self) -> None:
        self._transition(MicState.PAUSED)
        self._watchdog.disarm()
        # Resume must begin a fresh capture even if the engine died silently.
        self._session.stop()

    def _transition(self, to_state: MicState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        if to_state != MicState.RECORDING:
            self._interim_text = ""
        if self._on_state_change:
            self._on_state_change(from_state, to_state)

    def _notify(self) -> None:
        if self._on_change:
            self._on_change(self.snapshot)
