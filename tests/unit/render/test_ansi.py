"""Tests for escape-aware width measurement and clipping."""

from __future__ import annotations

import unittest

from vfm.render.ansi import clip_ansi_line, display_width, fit_ansi_line, truncate_middle


class AnsiWidthTests(unittest.TestCase):
    def test_escapes_take_no_columns(self) -> None:
        self.assertEqual(display_width("\033[1;34mabc\033[0m"), 3)

    def test_wide_and_tab_characters(self) -> None:
        self.assertEqual(display_width("日本"), 4)
        self.assertEqual(display_width("ab\tc"), 9)

    def test_clip_keeps_leading_escapes_and_expands_tabs(self) -> None:
        self.assertEqual(clip_ansi_line("\033[31mhello\033[0m", 3), "\033[31mhel")
        self.assertEqual(clip_ansi_line("a\tb", 4), "a   ")
        self.assertEqual(clip_ansi_line("abc", 0), "")

    def test_clip_never_splits_a_wide_character(self) -> None:
        self.assertEqual(clip_ansi_line("日本", 3), "日")

    def test_fit_pads_to_width(self) -> None:
        self.assertEqual(fit_ansi_line("ab", 4), "ab  ")
        self.assertEqual(fit_ansi_line("abcdef", 4), "abcd")

    def test_truncate_middle(self) -> None:
        self.assertEqual(truncate_middle("short", 10), "short")
        self.assertEqual(truncate_middle("abcdefghij", 5), "ab…ij")
        self.assertEqual(truncate_middle("abc", 1), "a")
        self.assertEqual(truncate_middle("abc", 0), "")


if __name__ == "__main__":
    unittest.main()
