"""The text surface the commands read from and write to.

Positions are plain character offsets into the whole text.  Lines are
separated by ``\\n``; a line region never includes its newline.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime


class TextSurface(ABC):
    """Everything the core needs from a host editor."""

    tab_size = 4

    @abstractmethod
    def size(self): ...

    @abstractmethod
    def substr(self, begin, end): ...

    @abstractmethod
    def line_region(self, position):
        """(begin, end) of the line holding ``position``, newline excluded."""

    @abstractmethod
    def find_backward(self, text, position, bound=0):
        """Start of the last occurrence of ``text`` lying inside ``[bound, position)``, or None."""

    @abstractmethod
    def insert(self, position, text):
        """Insert ``text`` at ``position`` and return the number of characters inserted."""

    @abstractmethod
    def erase(self, begin, end): ...

    @abstractmethod
    def cursor(self): ...

    @abstractmethod
    def set_cursor(self, position): ...

    @abstractmethod
    def selection(self):
        """(begin, end) of the active selection, or None when nothing is selected."""

    @abstractmethod
    def notify(self, message): ...

    def column(self, position):
        """Display column of ``position`` with tabs expanded."""
        begin, _ = self.line_region(position)
        return expanded_width(self.substr(begin, position), self.tab_size)

    def column_position(self, position, column):
        """Position on the line of ``position`` that sits at display ``column``, clamped to the line end."""
        begin, end = self.line_region(position)
        current = 0
        for pos, c in enumerate(self.substr(begin, end), begin):
            if current >= column:
                return pos
            current = expanded_width(c, self.tab_size, current)
        return end

    def now(self):
        return datetime.now()

    # Groups a sequence of edits into one user-visible step. Hosts with an undo stack override this.
    @contextmanager
    def edit(self):
        yield self


def expanded_width(text, tab_size, start_column=0):
    column = start_column
    for c in text:
        if c == "\t":
            column += tab_size - column % tab_size
        else:
            column += 1
    return column


class BufferSurface(TextSurface):
    """A TextSurface over a plain string.

    Used by the tests and for scripting against notes files without an
    editor.  ``clock`` can be any zero-argument callable returning a
    datetime; notifications are collected in ``messages``.
    """

    def __init__(self, text="", cursor=0, selection=None, clock=None, tab_size=4):
        self.text = text
        self._cursor = cursor
        self._selection = selection
        self._clock = clock or datetime.now
        self.tab_size = tab_size
        self.messages = []

    def size(self):
        return len(self.text)

    def substr(self, begin, end):
        return self.text[begin:end]

    def line_region(self, position):
        begin = self.text.rfind("\n", 0, position) + 1
        end = self.text.find("\n", position)
        if end == -1:
            end = len(self.text)
        return begin, end

    def find_backward(self, text, position, bound=0):
        found = self.text.rfind(text, bound, position)
        return None if found == -1 else found

    def insert(self, position, text):
        self.text = self.text[:position] + text + self.text[position:]
        if self._cursor >= position:
            self._cursor += len(text)
        return len(text)

    def erase(self, begin, end):
        if end <= begin:
            return
        self.text = self.text[:begin] + self.text[end:]
        if self._cursor >= end:
            self._cursor -= end - begin
        elif self._cursor > begin:
            self._cursor = begin

    def cursor(self):
        return self._cursor

    def set_cursor(self, position):
        self._cursor = position
        self._selection = None

    def selection(self):
        if self._selection is None or self._selection[0] == self._selection[1]:
            return None
        return tuple(sorted(self._selection))

    def now(self):
        return self._clock()

    def notify(self, message):
        self.messages.append(message)
