"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from engine import DEFAULT_MODEL
from platform_profile import PROFILE_AUTO
from recognition_session import DEFAULT_LANGUAGE

DEFAULT_HOTKEY = "Key.f9"
DEFAULT_LOG_LEVEL = "INFO"


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "voice_notes" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def get_api_key(self) -> str:
        value = str(self._read_all().get("api_key", ""))
        return value or os.getenv("DASHSCOPE_API_KEY", "")

    def set_api_key(self, key: str) -> None:
        self._set("api_key", key)

    def get_hotkey(self) -> str:
        return str(self._read_all().get("hotkey", DEFAULT_HOTKEY))

    def set_hotkey(self, hotkey: str) -> None:
        self._set("hotkey", hotkey)

    def get_language(self) -> str:
        return str(self._read_all().get("language", DEFAULT_LANGUAGE))

    def set_language(self, language: str) -> None:
        self._set("language", language)

    def get_model(self) -> str:
        return str(self._read_all().get("model", DEFAULT_MODEL))

    def get_profile(self) -> str:
        return str(self._read_all().get("profile", PROFILE_AUTO))

    def set_profile(self, profile: str) -> None:
        self._set("profile", profile)

    def get_log_level(self) -> str:
        return str(self._read_all().get("log_level", DEFAULT_LOG_LEVEL)).upper()

    def _set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logging.warning("Ignoring unreadable config %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
