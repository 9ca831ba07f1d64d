"""Application entrypoint."""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable

from clipboard import PyperclipClipboard
from config import JsonConfigStore
from dictation_controller import DictationController
from engine import create_engine
from errors import ERROR_MESSAGES, CapabilityUnavailableError
from hotkey import GlobalHotkeyAdapter
from models import MicState
from platform_profile import detect_profile
from recognition_session import RecognitionSession
from scheduler import QtScheduler

try:
    from PySide6.QtCore import QObject, QSize, Signal
    from PySide6.QtGui import QAction, QBrush, QColor, QIcon, QPainter, QPixmap
    from PySide6.QtWidgets import QApplication, QInputDialog, QMenu, QMessageBox, QSystemTrayIcon
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

from transcript_window import TranscriptWindow

LOG_LEVEL_ENV_VAR = "VOICE_NOTES_LOG_LEVEL"

ICON_COLORS = {
    MicState.STOPPED: "#888888",  # grey
    MicState.RECORDING: "#FF4444",  # red
    MicState.PAUSED: "#FF8800",  # orange
}

TRAY_TOOLTIPS = {
    MicState.STOPPED: "Voice Notes — Ready",
    MicState.RECORDING: "Voice Notes — Listening...",
    MicState.PAUSED: "Voice Notes — Paused",
}


def _create_icon(color: str, size: int = 22) -> QIcon:
    """Generate a simple circular tray icon with the given color."""
    pixmap = QPixmap(QSize(size, size))
    pixmap.fill(QColor(0, 0, 0, 0))
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(QBrush(QColor(color)))
    painter.setPen(QColor(color))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pixmap)


def configure_logging(level_name: str) -> None:
    level_name = os.getenv(LOG_LEVEL_ENV_VAR, level_name).upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, format="%(asctime)s %(levelname)s %(message)s")


class UIBridge(QObject):
    """Carries callables from worker threads onto the Qt main thread."""

    call_signal = Signal(object)

    def __init__(self) -> None:
        super().__init__()
        self.call_signal.connect(self._run)

    def dispatch(self, fn: Callable[[], None]) -> None:
        self.call_signal.emit(fn)

    def _run(self, fn: Callable[[], None]) -> None:
        fn()


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)
        self.app.aboutToQuit.connect(self._teardown)
        self.config_store = JsonConfigStore()
        configure_logging(self.config_store.get_log_level())

        self.ui = UIBridge()
        self.window = TranscriptWindow()
        self.controller: DictationController | None = None
        self.hotkey = GlobalHotkeyAdapter(hotkey_name=self.config_store.get_hotkey())

        self.tray = QSystemTrayIcon()
        self.tray.setIcon(_create_icon(ICON_COLORS[MicState.STOPPED]))
        self.tray.setToolTip(TRAY_TOOLTIPS[MicState.STOPPED])
        self._setup_menu()

        profile = detect_profile(override=self.config_store.get_profile())
        api_key = self.config_store.get_api_key()
        model = self.config_store.get_model()
        self._capability_error = ""
        try:
            session = RecognitionSession(
                lambda: create_engine(api_key=api_key, model=model, dispatch=self.ui.dispatch),
                profile,
                language=self.config_store.get_language(),
            )
        except CapabilityUnavailableError as exc:
            logging.error("Speech recognition unavailable: %s", exc)
            self._capability_error = f"{ERROR_MESSAGES[exc.code]} ({exc})"
            return

        self.controller = DictationController(
            session,
            QtScheduler(self.ui),
            clipboard=PyperclipClipboard(),
            on_state_change=self._on_state_change,
            on_change=self.window.show_snapshot,
        )
        self.window.start_requested.connect(self.controller.start)
        self.window.stop_requested.connect(self.controller.stop)
        self.window.clear_requested.connect(self.controller.clear)
        self.window.copy_requested.connect(self._copy)
        self.window.text_edited.connect(self.controller.set_final_text)
        self.window.show_snapshot(self.controller.snapshot)

    def _setup_menu(self) -> None:
        menu = QMenu()

        show_action = QAction("Show Transcript", menu)
        show_action.triggered.connect(self._show_window)
        menu.addAction(show_action)

        api_action = QAction("Set API Key", menu)
        api_action.triggered.connect(self._set_api_key)
        menu.addAction(api_action)

        hotkey_action = QAction("Set Hotkey", menu)
        hotkey_action.triggered.connect(self._set_hotkey)
        menu.addAction(hotkey_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

        self.tray.setContextMenu(menu)

    def _show_window(self) -> None:
        self.window.show()
        self.window.raise_()
        self.window.activateWindow()

    def _set_api_key(self) -> None:
        value, ok = QInputDialog.getText(None, "API Key", "DashScope API Key")
        if not ok:
            return
        self.config_store.set_api_key(value)
        QMessageBox.information(None, "Saved", "API Key saved. Restart app to apply.")

    def _set_hotkey(self) -> None:
        value, ok = QInputDialog.getText(
            None, "Hotkey", "Use pynput key format, e.g. Key.f9"
        )
        if not ok or not value:
            return
        self.config_store.set_hotkey(value)
        QMessageBox.information(None, "Saved", "Hotkey saved. Restart app to apply.")

    def _copy(self) -> None:
        if self.controller is not None and self.controller.copy():
            self.tray.showMessage("Voice Notes", "Transcript copied", QSystemTrayIcon.Information, 1500)

    def _on_state_change(self, from_state: MicState, to_state: MicState) -> None:
        self.tray.setIcon(_create_icon(ICON_COLORS[to_state]))
        self.tray.setToolTip(TRAY_TOOLTIPS[to_state])

    def _on_hotkey_toggle(self) -> None:
        # pynput thread; the controller only runs on the Qt thread.
        if self.controller is not None:
            self.ui.dispatch(self.controller.toggle)

    def run(self) -> int:
        self.tray.show()
        self._show_window()
        if self._capability_error:
            self.window.show_notice(self._capability_error)
            QMessageBox.critical(self.window, "Voice Notes", self._capability_error)
            return 1
        try:
            self.hotkey.start(on_toggle=self._on_hotkey_toggle)
        except Exception as exc:
            logging.warning("Hotkey disabled: %s", exc)
        return self.app.exec()

    def quit(self) -> None:
        self.app.quit()

    def _teardown(self) -> None:
        self.hotkey.stop()
        if self.controller is not None:
            self.controller.dispose()


def main() -> int:
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
