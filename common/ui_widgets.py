"""
Qt widgets shared by the admin window and the client window.
"""

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QKeyEvent
from PyQt6.QtWidgets import QPlainTextEdit


class MessageInput(QPlainTextEdit):
    """Multi-line input: Enter submits, Shift+Enter inserts a line break."""

    submitted = pyqtSignal(str)

    def __init__(self, parent=None, visible_lines: int = 3):
        super().__init__(parent)
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)
        line_height = self.fontMetrics().lineSpacing()
        self.setFixedHeight(line_height * visible_lines + 12)

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            if event.modifiers() & Qt.KeyboardModifier.ShiftModifier:
                self.insertPlainText('\n')
            else:
                self.submit()
            return
        super().keyPressEvent(event)

    def submit(self):
        """Emit the current text (if not blank) and clear the field."""
        text = self.toPlainText()
        if not text.strip():
            return
        self.clear()
        self.setFocus()
        self.submitted.emit(text)
