"""Main window: status line, live transcript and the dictation buttons."""

from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from models import DictationSnapshot, MicState

STATUS_TEXT = {
    MicState.STOPPED: "Click Start to dictate",
    MicState.RECORDING: "🎙️ Listening…",
    MicState.PAUSED: "Paused. Press Resume to continue",
}

STATUS_STYLE = {
    MicState.STOPPED: "color: #9ca3af;",
    MicState.RECORDING: "color: #ef4444; font-weight: bold;",
    MicState.PAUSED: "color: #f59e0b;",
}


class TranscriptWindow(QWidget):
    start_requested = Signal()
    stop_requested = Signal()
    clear_requested = Signal()
    copy_requested = Signal()
    text_edited = Signal(str)

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Voice Notes")
        self.resize(640, 420)

        self._status = QLabel("")
        self._editor = QPlainTextEdit()
        self._editor.setPlaceholderText("Your speech will appear here...")
        self._editor.textChanged.connect(self._on_text_changed)

        self._start_button = QPushButton("Start")
        self._stop_button = QPushButton("Stop")
        self._clear_button = QPushButton("Clear")
        self._copy_button = QPushButton("Copy")
        self._start_button.clicked.connect(self.start_requested)
        self._stop_button.clicked.connect(self.stop_requested)
        self._clear_button.clicked.connect(self.clear_requested)
        self._copy_button.clicked.connect(self.copy_requested)

        buttons = QHBoxLayout()
        for button in (self._start_button, self._stop_button, self._clear_button, self._copy_button):
            buttons.addWidget(button)
        buttons.addStretch(1)

        layout = QVBoxLayout()
        layout.addLayout(buttons)
        layout.addWidget(self._status)
        layout.addWidget(self._editor, 1)
        self.setLayout(layout)

        self._rendering = False

    def show_snapshot(self, snapshot: DictationSnapshot) -> None:
        state = snapshot.mic_state
        recording = state == MicState.RECORDING

        self._status.setText(STATUS_TEXT[state])
        self._status.setStyleSheet(STATUS_STYLE[state])
        self._start_button.setText("Resume" if state == MicState.PAUSED else "Start")
        self._start_button.setEnabled(not recording)
        self._stop_button.setEnabled(state != MicState.STOPPED)
        self._clear_button.setEnabled(state == MicState.STOPPED)
        self._editor.setReadOnly(recording)

        if self._editor.toPlainText() != snapshot.transcript:
            self._rendering = True
            try:
                self._editor.setPlainText(snapshot.transcript)
                self._editor.moveCursor(QTextCursor.MoveOperation.End)
            finally:
                self._rendering = False

    def show_notice(self, text: str) -> None:
        self._status.setText(f"⚠️ {text}")
        self._status.setStyleSheet("color: #FF6B6B;")
        for button in (self._start_button, self._stop_button, self._clear_button, self._copy_button):
            button.setEnabled(False)
        self._editor.setReadOnly(True)

    def _on_text_changed(self) -> None:
        if self._rendering or self._editor.isReadOnly():
            return
        self.text_edited.emit(self._editor.toPlainText())
