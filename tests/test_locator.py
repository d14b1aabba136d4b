"""Tests for finding annotations and reading them back.

Covers: tn.core.locator, tn.core.surface
"""

import unittest

from tn.core.config import Settings
from tn.core.errors import MarkerNotFound
from tn.core.locator import (
    extract_logical_line,
    extract_prefix,
    find_preceding_marker,
    locate_annotation,
    logical_line_end,
    require_preceding_marker,
)
from tn.core.surface import BufferSurface


# ──────────────────────────────────────────────────────────────────────────
# surface.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestBufferSurface(unittest.TestCase):

    def test_line_region(self):
        """Line regions exclude the newline."""
        surface = BufferSurface("ab\ncd\n")
        self.assertEqual(surface.line_region(0), (0, 2))
        self.assertEqual(surface.line_region(2), (0, 2))
        self.assertEqual(surface.line_region(3), (3, 5))
        self.assertEqual(surface.line_region(6), (6, 6))

    def test_columns_expand_tabs(self):
        """Tabs advance to the next tab stop."""
        surface = BufferSurface("\tab\tc", tab_size=4)
        self.assertEqual(surface.column(1), 4)
        self.assertEqual(surface.column(4), 8)
        self.assertEqual(surface.column_position(0, 4), 1)
        self.assertEqual(surface.column_position(0, 6), 3)
        self.assertEqual(surface.column_position(0, 50), 5)

    def test_find_backward_respects_bounds(self):
        """Matches must lie fully inside [bound, position)."""
        surface = BufferSurface("time: a time: b")
        self.assertEqual(surface.find_backward("time:", 15), 8)
        self.assertEqual(surface.find_backward("time:", 12), 0)
        self.assertIsNone(surface.find_backward("time:", 15, bound=9))
        self.assertIsNone(surface.find_backward("time:", 4))

    def test_edits_shift_cursor(self):
        """Inserting before or at the cursor moves it along, erasing pulls it back."""
        surface = BufferSurface("abcdef", cursor=3)
        surface.insert(3, "XY")
        self.assertEqual(surface.cursor(), 5)
        surface.insert(5, "")
        surface.erase(0, 2)
        self.assertEqual(surface.cursor(), 3)
        surface.erase(1, 10)
        self.assertEqual(surface.cursor(), 1)
        self.assertEqual(surface.text, "c")

    def test_empty_selection_is_none(self):
        self.assertIsNone(BufferSurface("abc", selection=(1, 1)).selection())
        self.assertEqual(BufferSurface("abc", selection=(2, 0)).selection(), (0, 2))


# ──────────────────────────────────────────────────────────────────────────
# locator.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestFindMarker(unittest.TestCase):

    def setUp(self):
        self.settings = Settings()

    def test_from_line_end_sees_marker_after_cursor(self):
        """Searching from the line end finds a marker to the right of the cursor."""
        surface = BufferSurface("task one time: 1:00-2:00")
        self.assertEqual(find_preceding_marker(surface, 0, self.settings), 9)

    def test_exact_position_skips_marker_at_position(self):
        """Searching from a marker's own position never finds it again."""
        surface = BufferSurface("time: 1:00-2:00\ntime: 3:00-4:00")
        self.assertEqual(find_preceding_marker(surface, 16, self.settings, from_line_end=False), 0)
        self.assertIsNone(find_preceding_marker(surface, 0, self.settings, from_line_end=False))

    def test_nearest_preceding_line(self):
        """The nearest marker above the cursor line wins."""
        surface = BufferSurface("time: 1:00-2:00\ntime: 3:00-4:00\nnotes")
        self.assertEqual(find_preceding_marker(surface, surface.size(), self.settings), 16)

    def test_not_found(self):
        surface = BufferSurface("nothing here")
        self.assertIsNone(find_preceding_marker(surface, 5, self.settings))
        with self.assertRaises(MarkerNotFound):
            require_preceding_marker(surface, 5, self.settings)

    def test_custom_marker(self):
        surface = BufferSurface("worked @ 1:00-2:00")
        self.assertEqual(find_preceding_marker(surface, 0, Settings(marker="@")), 7)


class TestPrefix(unittest.TestCase):

    def test_marker_at_line_start(self):
        """The marker turns into spaces of the same width."""
        surface = BufferSurface("notes\ntime: 1:00-")
        self.assertEqual(extract_prefix(surface, 6, Settings()), " " * 5)

    def test_indentation_kept(self):
        """Leading tabs and spaces survive as they are."""
        surface = BufferSurface("\t  time: 1:00-")
        self.assertEqual(extract_prefix(surface, 3, Settings()), "\t  " + " " * 5)

    def test_text_before_marker_is_kept(self):
        """Text before the marker is repeated as it is."""
        surface = BufferSurface("- fix bug time: 1:00-")
        self.assertEqual(extract_prefix(surface, 10, Settings()), "- fix bug " + " " * 5)

    def test_comment_leader_kept(self):
        surface = BufferSurface("# time: 1:00-2:00")
        self.assertEqual(extract_prefix(surface, 2, Settings()), "#" + " " * 6)

    def test_comment_continuation_reads_back(self):
        """Continuation lines repeating the comment leader only yield their tokens."""
        surface = BufferSurface("# time: 1:00-2:00 \\\n#       3:00-4:00")
        annotation = locate_annotation(surface, 0, Settings())
        line = extract_logical_line(surface, annotation.start, annotation.prefix, Settings())
        self.assertEqual(line, "1:00-2:00 3:00-4:00")

    def test_locate_annotation(self):
        surface = BufferSurface("  time: 1:00-2:00")
        annotation = locate_annotation(surface, 0, Settings())
        self.assertEqual(annotation.marker_position, 2)
        self.assertEqual(annotation.start, 7)
        self.assertEqual(annotation.prefix, " " * 7)


class TestLogicalLine(unittest.TestCase):

    def setUp(self):
        self.settings = Settings()
        self.prefix = " " * 5

    def test_single_line(self):
        """Redundant whitespace is normalized to single spaces."""
        surface = BufferSurface("time:  1:00-2:00    3:00-4:00   \nnext")
        self.assertEqual(extract_logical_line(surface, 5, self.prefix, self.settings), "1:00-2:00 3:00-4:00")
        self.assertEqual(logical_line_end(surface, 5, self.prefix, self.settings), 29)

    def test_continuation_lines_are_joined(self):
        """Lines ending with the continuation marker pull in the next line."""
        text = "time: 1:00-2:00 \\\n      3:00-4:00\\\n      5:00-\nafter"
        surface = BufferSurface(text)
        self.assertEqual(extract_logical_line(surface, 5, self.prefix, self.settings), "1:00-2:00 3:00-4:00 5:00-")
        self.assertEqual(logical_line_end(surface, 5, self.prefix, self.settings), text.index("\nafter"))

    def test_continuation_without_prefix(self):
        """Continuation lines do not need the prefix."""
        surface = BufferSurface("time: 1:00-2:00 \\\n3:00-4:00")
        self.assertEqual(extract_logical_line(surface, 5, self.prefix, self.settings), "1:00-2:00 3:00-4:00")

    def test_continuation_at_end_of_text(self):
        """A dangling continuation marker on the last line is just dropped."""
        surface = BufferSurface("time: 1:00-2:00 \\")
        self.assertEqual(extract_logical_line(surface, 5, self.prefix, self.settings), "1:00-2:00")
        self.assertEqual(logical_line_end(surface, 5, self.prefix, self.settings), 17)

    def test_continuation_onto_blank_line(self):
        """The end of a logical line can be an empty continuation line."""
        surface = BufferSurface("time: 1:00-2:00 \\\n   \nnext")
        self.assertEqual(extract_logical_line(surface, 5, self.prefix, self.settings), "1:00-2:00")
        self.assertEqual(logical_line_end(surface, 5, self.prefix, self.settings), 18)

    def test_continuation_on_every_line(self):
        """A continuation marker on every line runs to the end of the text and stops."""
        surface = BufferSurface("time: 1:00-1:10 \\\n" * 50)
        line = extract_logical_line(surface, 5, self.prefix, self.settings)
        self.assertEqual(line.count("1:00-1:10"), 50)

    def test_empty_annotation(self):
        surface = BufferSurface("time:")
        self.assertEqual(extract_logical_line(surface, 5, self.prefix, self.settings), "")
        self.assertEqual(logical_line_end(surface, 5, self.prefix, self.settings), 5)


if __name__ == "__main__":
    unittest.main()
