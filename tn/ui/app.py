import sys
from pathlib import Path
from PySide6.QtGui import QAction, QFont, QFontDatabase, QKeySequence
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
)
from tn.common.logger import log
from tn.core.config import load_settings
from tn.core.summary import SummaryMode, show_summary
from tn.core.toggle import insert, toggle
from tn.ui.surface import QtSurface

# How long notifications stay in the status bar, in ms.
_NOTIFY_TIMEOUT = 10000


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Plain text notes editor hosting the time commands. Everything the commands touch goes through self.surface.
class NotesWindow(QMainWindow):

    def __init__(self, settings, path=None):
        super().__init__()
        self.settings = settings
        self.path = None

        self.editor = QPlainTextEdit()
        font = QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.editor.setFont(font)
        self.editor.setTabStopDistance(settings.tab_size * self.editor.fontMetrics().horizontalAdvance(" "))
        self.setCentralWidget(self.editor)

        self.surface = QtSurface(self.editor, notify=self._notify, tab_size=settings.tab_size)

        self._build_menus()
        self.statusBar()
        self.resize(720, 540)

        if path is not None:
            self._open(Path(path))
        self._update_title()

    # ------------------------------------------------------------------ #
    #  Menus                                                               #
    # ------------------------------------------------------------------ #

    def _add_action(self, menu, text, shortcut, slot):
        action = QAction(text, self)
        action.setShortcut(QKeySequence(shortcut))
        action.triggered.connect(slot)
        menu.addAction(action)
        return action

    def _build_menus(self):
        file_menu = self.menuBar().addMenu("&File")
        self._add_action(file_menu, "&Open...", "Ctrl+O", self._on_open)
        self._add_action(file_menu, "&Save", "Ctrl+S", self._on_save)
        self._add_action(file_menu, "Save &As...", "Ctrl+Shift+S", self._on_save_as)

        time_menu = self.menuBar().addMenu("&Time")
        self._add_action(time_menu, "&Toggle Clock", "Ctrl+T", self._on_toggle)
        self._add_action(time_menu, "&Insert Time", "Ctrl+Shift+I", self._on_insert)
        self._add_action(time_menu, "&Summary", "Ctrl+Shift+T", self._on_summary)
        self._add_action(time_menu, "Summary of &All Above", "Ctrl+Alt+T", self._on_summary_all)

    # ------------------------------------------------------------------ #
    #  Time commands                                                       #
    # ------------------------------------------------------------------ #

    # Commands never take the window down; anything unexpected is logged and shown in the status bar.
    def _run_command(self, name, command, *args):
        try:
            command(self.surface, self.settings, *args)
        except Exception as e:
            log.exception(f"Command '{name}' failed")
            self._notify(f"{name} failed: {e}")

    def _on_toggle(self):
        self._run_command("toggle", toggle)

    def _on_insert(self):
        self._run_command("insert", insert)

    def _on_summary(self):
        self._run_command("summary", show_summary, SummaryMode.SINGLE)

    def _on_summary_all(self):
        self._run_command("summary", show_summary, SummaryMode.ALL)

    def _notify(self, message):
        self.statusBar().showMessage(message, _NOTIFY_TIMEOUT)

    # ------------------------------------------------------------------ #
    #  Files                                                               #
    # ------------------------------------------------------------------ #

    def _update_title(self):
        name = self.path.name if self.path is not None else "untitled"
        self.setWindowTitle(f"{name} - TimeNotes")

    def _open(self, path):
        try:
            text = path.read_text(encoding="utf-8") if path.exists() else ""
        except (OSError, UnicodeDecodeError) as e:
            log.warning(f"Could not open '{path}'", exc_info=True)
            QMessageBox.warning(self, "Open Error", f"Failed to open {path}:\n{e}")
            return
        self.editor.setPlainText(text)
        self.editor.document().setModified(False)
        self.path = path
        self._update_title()
        log.info(f"Opened '{path}'")

    def _save(self):
        if self.path is None:
            return self._on_save_as()
        try:
            self.path.write_text(self.editor.toPlainText(), encoding="utf-8")
        except OSError as e:
            log.warning(f"Could not save '{self.path}'", exc_info=True)
            QMessageBox.warning(self, "Save Error", f"Failed to save {self.path}:\n{e}")
            return False
        self.editor.document().setModified(False)
        self._notify(f"saved {self.path}")
        log.info(f"Saved '{self.path}'")
        return True

    def _on_open(self):
        filename, _ = QFileDialog.getOpenFileName(self, "Open notes", "", "Text files (*.txt *.md);;All files (*)")
        if filename:
            self._open(Path(filename))

    def _on_save(self):
        self._save()

    def _on_save_as(self):
        filename, _ = QFileDialog.getSaveFileName(self, "Save notes", "", "Text files (*.txt *.md);;All files (*)")
        if not filename:
            return False
        self.path = Path(filename)
        self._update_title()
        return self._save()

    def closeEvent(self, event):
        if self.editor.document().isModified():
            answer = QMessageBox.question(
                self, "Unsaved Changes", "Save changes before closing?",
                QMessageBox.StandardButton.Save | QMessageBox.StandardButton.Discard | QMessageBox.StandardButton.Cancel,
            )
            if answer == QMessageBox.StandardButton.Cancel or (answer == QMessageBox.StandardButton.Save and not self._save()):
                event.ignore()
                return
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv=None):
    argv = list(sys.argv if argv is None else argv)
    app = QApplication(argv)
    window = NotesWindow(load_settings(), path=argv[1] if len(argv) > 1 else None)
    window.show()
    sys.exit(app.exec())
