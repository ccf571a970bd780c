from __future__ import annotations

from PySide6.QtGui import QFont, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit


class LogPanel(QPlainTextEdit):
    """Read-only, append-only view of toolchain output."""

    MAX_BLOCKS = 5000

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("ToolchainLog")
        self.setReadOnly(True)
        self.setUndoRedoEnabled(False)
        self.setMaximumBlockCount(self.MAX_BLOCKS)
        font = QFont("Monospace")
        font.setStyleHint(QFont.TypeWriter)
        self.setFont(font)

    def append(self, text: str) -> None:
        chunk = str(text or "").rstrip("\r\n")
        self.appendPlainText(chunk)
        self.moveCursor(QTextCursor.End)
        self.ensureCursorVisible()

    def text(self) -> str:
        return self.toPlainText()
