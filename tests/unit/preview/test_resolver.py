"""Tests for preview classification and bounded reads."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from vfm.errors import NOT_FOUND
from vfm.file_model import entry_from_path
from vfm.preview import (
    MATCH,
    MISMATCH,
    BinaryPreview,
    DirectoryPreview,
    ImagePreview,
    TextPreview,
    UnreadablePreview,
    check_extension,
    normalize_extension,
    resolve,
)


def _resolve(path: Path, **kwargs):
    entry = entry_from_path(path)
    assert entry is not None
    return resolve(entry, **kwargs)


class ResolveTextTests(unittest.TestCase):
    def test_text_file_lines_are_returned(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "notes.md"
            path.write_text("one\n\ttwo\nthree\n", encoding="utf-8")

            preview = _resolve(path)

            self.assertIsInstance(preview, TextPreview)
            self.assertEqual(preview.lines, ("one", "    two", "three"))
            self.assertFalse(preview.truncated)

    def test_line_cap_marks_truncated(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "long.txt"
            path.write_text("".join(f"line {idx}\n" for idx in range(50)), encoding="utf-8")

            preview = _resolve(path, max_lines=10)

            self.assertEqual(len(preview.lines), 10)
            self.assertTrue(preview.truncated)

    def test_byte_cap_marks_truncated_without_splitting_characters(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "wide.txt"
            path.write_text("é" * 10_000, encoding="utf-8")

            preview = _resolve(path, max_bytes=4_097)

            self.assertIsInstance(preview, TextPreview)
            self.assertTrue(preview.truncated)
            self.assertEqual(preview.lines[0], "é" * 2_048)

    def test_control_sequences_are_sanitized(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "escape.txt"
            path.write_text("safe\x1b[2Jtext\n", encoding="utf-8")

            preview = _resolve(path)

            self.assertNotIn("\x1b", preview.lines[0])

    def test_empty_file_is_empty_text(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty"
            path.write_bytes(b"")

            preview = _resolve(path)

            self.assertEqual(preview, TextPreview(path=path, lines=(), truncated=False))


class ResolveOtherKindsTests(unittest.TestCase):
    def test_nul_bytes_mean_binary(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "blob.dat"
            path.write_bytes(b"abc\x00def")

            preview = _resolve(path)

            self.assertIsInstance(preview, BinaryPreview)
            self.assertEqual(preview.size_bytes, 7)

    def test_known_binary_signature_is_named(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "archive.bin"
            path.write_bytes(b"PK\x03\x04" + b"\x00" * 20)

            preview = _resolve(path)

            self.assertEqual(preview.guessed_type, "application/zip")

    def test_directory_reports_entry_count(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "sub").mkdir()
            (root / "sub" / "a").write_text("", encoding="utf-8")
            (root / "sub" / "b").write_text("", encoding="utf-8")

            preview = _resolve(root / "sub")

            self.assertEqual(preview, DirectoryPreview(path=root / "sub", entry_count=2))

    def test_broken_symlink_is_unreadable_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            link = Path(tmp) / "dangling"
            link.symlink_to(Path(tmp) / "nowhere")

            preview = _resolve(link)

            self.assertIsInstance(preview, UnreadablePreview)
            self.assertEqual(preview.kind, NOT_FOUND)
            self.assertEqual(preview.reason, "broken symlink")

    def test_entry_deleted_after_listing_is_unreadable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "short-lived.txt"
            path.write_text("x", encoding="utf-8")
            entry = entry_from_path(path)
            path.unlink()

            preview = resolve(entry)

            self.assertIsInstance(preview, UnreadablePreview)
            self.assertEqual(preview.kind, NOT_FOUND)

    def test_fifo_is_never_opened(self) -> None:
        if not hasattr(os, "mkfifo"):
            self.skipTest("mkfifo unavailable")
        with tempfile.TemporaryDirectory() as tmp:
            fifo = Path(tmp) / "pipe"
            os.mkfifo(fifo)

            preview = _resolve(fifo)

            self.assertEqual(preview.guessed_type, "inode/fifo")


class ResolveImageTests(unittest.TestCase):
    def test_png_reports_dimensions(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "pixel.png"
            Image.new("RGB", (3, 2), color=(255, 0, 0)).save(path, "PNG")

            preview = _resolve(path)

            self.assertIsInstance(preview, ImagePreview)
            self.assertEqual(preview.format, "PNG")
            self.assertEqual(preview.dimensions, "3x2")
            self.assertIsNone(preview.mismatch)

    def test_mismatch_check_flags_wrong_extension(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "photo.jpg"
            Image.new("RGB", (4, 4)).save(path, "PNG")

            preview = _resolve(path, check_mismatch=True)

            self.assertEqual(preview.mismatch.status, MISMATCH)
            self.assertIn("png", preview.mismatch.describe())

    def test_text_starting_with_bm_is_not_an_image(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "BMW.txt"
            path.write_text("BMW notes\n", encoding="utf-8")

            preview = _resolve(path)

            self.assertIsInstance(preview, TextPreview)


class ExtensionTests(unittest.TestCase):
    def test_aliases_normalize(self) -> None:
        self.assertEqual(normalize_extension(".JPEG"), "jpg")
        self.assertEqual(normalize_extension("tiff"), "tif")

    def test_matching_alias_is_a_match(self) -> None:
        self.assertEqual(check_extension(Path("a.jpeg"), "jpg").status, MATCH)


if __name__ == "__main__":
    unittest.main()
