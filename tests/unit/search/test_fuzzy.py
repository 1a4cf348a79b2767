"""Tests for fuzzy label ranking used by the open-with picker."""

from __future__ import annotations

import unittest

from vfm.search import fuzzy_match_labels, fuzzy_score, substring_index


class FuzzyTests(unittest.TestCase):
    def test_empty_query_keeps_input_order(self) -> None:
        labels = ["vim", "less", "gimp"]
        self.assertEqual([label for _, label, _ in fuzzy_match_labels("", labels)], labels)

    def test_substring_hits_rank_by_position(self) -> None:
        labels = ["xgimp", "gimp", "inkscape"]

        ranked = [label for _, label, _ in fuzzy_match_labels("gimp", labels)]

        self.assertEqual(ranked, ["gimp", "xgimp"])

    def test_subsequence_fallback(self) -> None:
        ranked = fuzzy_match_labels("lbo", ["libreoffice", "vim"])

        self.assertEqual([label for _, label, _ in ranked], ["libreoffice"])

    def test_scores(self) -> None:
        self.assertIsNone(fuzzy_score("zz", "abc"))
        self.assertEqual(substring_index("CAT", "concatenate"), 3)
        self.assertIsNone(substring_index("dog", "concatenate"))

    def test_limit(self) -> None:
        self.assertEqual(len(fuzzy_match_labels("a", ["a1", "a2", "a3"], limit=2)), 2)


if __name__ == "__main__":
    unittest.main()
