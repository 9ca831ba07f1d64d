"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MicState(str, Enum):
    STOPPED = "STOPPED"
    RECORDING = "RECORDING"
    PAUSED = "PAUSED"


class SessionEventKind(str, Enum):
    PARTIAL = "partial"
    FINAL = "final"
    ENDED = "ended"
    FAILED = "failed"
    STALE = "stale"


@dataclass
class SessionEvent:
    kind: SessionEventKind
    text: str = ""
    code: str = ""
    message: str = ""


@dataclass(frozen=True)
class SpeechResult:
    transcript: str
    is_final: bool = False


@dataclass(frozen=True)
class ResultBatch:
    """One result callback from the engine.

    ``results`` is the engine's whole result list for the current capture;
    only the items from ``result_index`` onwards changed since the previous
    callback.
    """

    results: tuple[SpeechResult, ...]
    result_index: int = 0

    def new_results(self) -> tuple[SpeechResult, ...]:
        return self.results[self.result_index :]


@dataclass(frozen=True)
class PlatformProfile:
    is_mobile: bool
    supports_continuous: bool
    supports_interim_results: bool

    @classmethod
    def for_device(cls, is_mobile: bool) -> "PlatformProfile":
        return cls(
            is_mobile=is_mobile,
            supports_continuous=not is_mobile,
            supports_interim_results=not is_mobile,
        )


@dataclass(frozen=True)
class DictationSnapshot:
    mic_state: MicState
    final_text: str
    interim_text: str

    @property
    def transcript(self) -> str:
        return self.final_text + self.interim_text


@dataclass
class AudioFrame:
    pcm16_bytes: bytes
    sample_rate: int = 16000
    channels: int = 1
    timestamp_ms: int = 0


@dataclass
class CopyResult:
    success: bool
    reason: str
