from __future__ import annotations

from unittest.mock import MagicMock

import clipboard
from clipboard import PyperclipClipboard
from errors import CLIPBOARD_FAILED


def test_copy_returns_failure_when_dependency_missing(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(clipboard, "pyperclip", None)

    result = PyperclipClipboard().copy_text("hello")

    assert result.success is False
    assert CLIPBOARD_FAILED in result.reason


def test_copy_writes_text(monkeypatch) -> None:  # noqa: ANN001
    fake = MagicMock()
    monkeypatch.setattr(clipboard, "pyperclip", fake)

    result = PyperclipClipboard().copy_text("hello world ")

    assert result.success is True
    fake.copy.assert_called_once_with("hello world ")


def test_copy_failure_is_reported_not_raised(monkeypatch) -> None:  # noqa: ANN001
    fake = MagicMock()
    fake.copy.side_effect = RuntimeError("no copy/paste mechanism")
    monkeypatch.setattr(clipboard, "pyperclip", fake)

    result = PyperclipClipboard().copy_text("hello")

    assert result.success is False
    assert "no copy/paste mechanism" in result.reason
