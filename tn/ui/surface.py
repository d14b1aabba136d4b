"""TextSurface over a PySide6 QPlainTextEdit."""

from contextlib import contextmanager

from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QPlainTextEdit

from tn.common.logger import log
from tn.core.surface import TextSurface


class QtSurface(TextSurface):
    """Adapts a QPlainTextEdit to the TextSurface contract.

    Positions handed in and out are indices into the Python string of the
    document.  Qt counts UTF-16 code units instead, so characters outside
    the BMP (most emoji) take two Qt positions; ``_to_qt`` and ``_from_qt``
    translate at every call that touches a QTextCursor.

    Edits go through a private QTextCursor so the editor's own cursor moves
    along with inserted text the same way the user would see it.  Everything
    inside ``edit()`` becomes a single undo step.
    """

    def __init__(self, editor: QPlainTextEdit, notify=None, tab_size=4):
        self.editor = editor
        self.tab_size = tab_size
        self._notify = notify

    def _document(self):
        return self.editor.document()

    def _text(self):
        return self.editor.toPlainText()

    #region === Position translation ===

    def _to_qt(self, position):
        prefix = self._text()[:position]
        return position + sum(1 for c in prefix if ord(c) > 0xFFFF)

    def _from_qt(self, qt_position):
        text = self._text()
        units = 0
        for index, c in enumerate(text):
            if units >= qt_position:
                return index
            units += 2 if ord(c) > 0xFFFF else 1
        return len(text)

    def _cursor_at(self, position):
        cursor = QTextCursor(self._document())
        cursor.setPosition(self._to_qt(position))
        return cursor

    #endregion === Position translation ===

    def size(self):
        return len(self._text())

    def substr(self, begin, end):
        return self._text()[begin:end]

    def line_region(self, position):
        text = self._text()
        begin = text.rfind("\n", 0, position) + 1
        end = text.find("\n", position)
        return begin, len(text) if end == -1 else end

    def find_backward(self, text, position, bound=0):
        found = self._text().rfind(text, bound, position)
        return None if found == -1 else found

    def insert(self, position, text):
        self._cursor_at(position).insertText(text)
        return len(text)

    def erase(self, begin, end):
        if end <= begin:
            return
        cursor = self._cursor_at(begin)
        cursor.setPosition(self._to_qt(end), QTextCursor.MoveMode.KeepAnchor)
        cursor.removeSelectedText()

    def cursor(self):
        return self._from_qt(self.editor.textCursor().position())

    def set_cursor(self, position):
        cursor = self.editor.textCursor()
        cursor.setPosition(self._to_qt(position))
        self.editor.setTextCursor(cursor)

    def selection(self):
        cursor = self.editor.textCursor()
        if not cursor.hasSelection():
            return None
        return self._from_qt(cursor.selectionStart()), self._from_qt(cursor.selectionEnd())

    def notify(self, message):
        if self._notify is not None:
            self._notify(message)
        else:
            log.info(f"Notification: {message}")

    @contextmanager
    def edit(self):
        cursor = QTextCursor(self._document())
        cursor.beginEditBlock()
        try:
            yield self
        finally:
            cursor.endEditBlock()
