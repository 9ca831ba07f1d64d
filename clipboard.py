"""Clipboard service for copying the transcript."""

from __future__ import annotations

from errors import CLIPBOARD_FAILED
from models import CopyResult

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore


class PyperclipClipboard:
    def copy_text(self, text: str) -> CopyResult:
        if pyperclip is None:
            return CopyResult(success=False, reason=f"{CLIPBOARD_FAILED}: pyperclip is not installed")
        try:
            pyperclip.copy(text)
        except Exception as exc:
            return CopyResult(success=False, reason=f"{CLIPBOARD_FAILED}: {exc}")
        return CopyResult(success=True, reason="ok")
