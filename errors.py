"""Shared error codes, user-facing messages and exception types."""

from __future__ import annotations

CAPABILITY_UNAVAILABLE = "CAPABILITY_UNAVAILABLE"
ENGINE_BUSY = "ENGINE_BUSY"
ENGINE_FAILURE = "ENGINE_FAILURE"
PERMISSION_DENIED = "PERMISSION_DENIED"
NETWORK_ERROR = "NETWORK_ERROR"
AUTH_FAILED = "AUTH_FAILED"
STALE = "STALE"
CLIPBOARD_FAILED = "CLIPBOARD_FAILED"

ERROR_MESSAGES = {
    CAPABILITY_UNAVAILABLE: "Speech recognition is not available on this system.",
    ENGINE_BUSY: "Recognition is already running.",
    ENGINE_FAILURE: "Recognition stopped unexpectedly.",
    PERMISSION_DENIED: "Microphone access was denied.",
    NETWORK_ERROR: "Network failed, please retry.",
    AUTH_FAILED: "API key is invalid.",
    STALE: "No speech detected for a while.",
    CLIPBOARD_FAILED: "Could not copy to the clipboard.",
}


class DictationError(Exception):
    code = ENGINE_FAILURE

    def __init__(self, message: str = "") -> None:
        super().__init__(message or ERROR_MESSAGES[self.code])


class CapabilityUnavailableError(DictationError):
    code = CAPABILITY_UNAVAILABLE


class EngineBusyError(DictationError):
    code = ENGINE_BUSY
