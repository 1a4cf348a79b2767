"""Tests for case-insensitive pattern compilation and filtering."""

from __future__ import annotations

import unittest

from vfm.search import CompileError, Matcher, compile_matcher, filter_candidates


class CompileMatcherTests(unittest.TestCase):
    def test_malformed_pattern_is_a_compile_error(self) -> None:
        result = compile_matcher("[")

        self.assertIsInstance(result, CompileError)
        self.assertEqual(result.pattern, "[")
        self.assertIn("invalid pattern", result.describe())

    def test_matching_ignores_case(self) -> None:
        matcher = compile_matcher("readme")

        self.assertIsInstance(matcher, Matcher)
        self.assertTrue(matcher.matches("README.md"))
        self.assertFalse(matcher.matches("setup.py"))

    def test_empty_pattern_matches_everything(self) -> None:
        self.assertTrue(compile_matcher("").matches("anything"))


class FilterCandidatesTests(unittest.TestCase):
    def test_filter_preserves_original_order(self) -> None:
        candidates = ["zeta.py", "alpha.txt", "beta.py", "gamma.md"]

        self.assertEqual(filter_candidates(compile_matcher(r"\.py$"), candidates), ["zeta.py", "beta.py"])

    def test_compile_error_matches_nothing(self) -> None:
        self.assertEqual(filter_candidates(compile_matcher("("), ["a", "b"]), [])

    def test_key_may_return_several_texts(self) -> None:
        rows = [("home", "/home/me"), ("etc", "/etc")]

        matched = filter_candidates(compile_matcher("me$"), rows, key=lambda row: row)

        self.assertEqual(matched, [("home", "/home/me")])


if __name__ == "__main__":
    unittest.main()
