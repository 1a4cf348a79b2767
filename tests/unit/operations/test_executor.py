"""Tests for create, rename, delete, and paste on a temporary tree."""

from __future__ import annotations

import errno
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from vfm.errors import ALREADY_EXISTS, CROSS_BOUNDARY_MOVE_FAILED, INVALID_NAME, INVALID_TARGET, NOT_FOUND
from vfm.file_model import entry_from_path
from vfm.operations import (
    COPY,
    CUT,
    copy_mark,
    copy_path_to_clipboard_text,
    create_dir,
    create_file,
    cut,
    delete,
    paste,
    rename,
)


class CreateAndRenameTests(unittest.TestCase):
    def test_create_then_delete_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)

            outcome = create_file(root, "notes.txt")
            self.assertTrue(outcome.ok)
            self.assertTrue((root / "notes.txt").is_file())

            result = delete([outcome.path])
            self.assertTrue(result.ok)
            self.assertEqual(list(root.iterdir()), [])
            self.assertIn(root, result.refresh_dirs)

    def test_create_never_overwrites(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "keep.txt").write_text("precious", encoding="utf-8")

            outcome = create_file(root, "keep.txt")
            dir_outcome = create_dir(root, "keep.txt")

            self.assertEqual(outcome.failure.kind, ALREADY_EXISTS)
            self.assertEqual(dir_outcome.failure.kind, ALREADY_EXISTS)
            self.assertEqual((root / "keep.txt").read_text(encoding="utf-8"), "precious")

    def test_invalid_names_are_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ("", "   ", ".", "..", "a/b"):
                with self.subTest(name=name):
                    self.assertEqual(create_file(root, name).failure.kind, INVALID_NAME)
            self.assertEqual(list(root.iterdir()), [])

    def test_create_dir_strips_whitespace(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            outcome = create_dir(root, "  build  ")
            self.assertTrue(outcome.ok)
            self.assertTrue((root / "build").is_dir())

    def test_rename_refuses_to_replace_sibling(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_text("a", encoding="utf-8")
            (root / "b.txt").write_text("b", encoding="utf-8")

            outcome = rename(root / "a.txt", "b.txt")

            self.assertEqual(outcome.failure.kind, ALREADY_EXISTS)
            self.assertEqual((root / "b.txt").read_text(encoding="utf-8"), "b")

    def test_rename_moves_within_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "old.txt").write_text("x", encoding="utf-8")

            outcome = rename(root / "old.txt", "new.txt")

            self.assertTrue(outcome.ok)
            self.assertEqual(outcome.destination, root / "new.txt")
            self.assertFalse((root / "old.txt").exists())

    def test_rename_missing_source_is_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            outcome = rename(Path(tmp) / "ghost", "other")
            self.assertEqual(outcome.failure.kind, NOT_FOUND)


class DeleteTests(unittest.TestCase):
    def test_partial_delete_reports_not_found_and_keeps_going(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            present = root / "present.txt"
            present.write_text("x", encoding="utf-8")
            tree = root / "tree"
            (tree / "nested").mkdir(parents=True)
            (tree / "nested" / "leaf").write_text("x", encoding="utf-8")
            missing = root / "missing.txt"

            result = delete([missing, present, tree])

            self.assertTrue(result.partial)
            self.assertEqual([failure.kind for failure in result.failures], [NOT_FOUND])
            self.assertEqual(result.failures[0].path, missing)
            self.assertFalse(present.exists())
            self.assertFalse(tree.exists())
            self.assertIn("2/3 done", result.summary())

    def test_delete_symlink_leaves_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "real").mkdir()
            (root / "real" / "file").write_text("x", encoding="utf-8")
            (root / "link").symlink_to(root / "real")

            result = delete([root / "link"])

            self.assertTrue(result.ok)
            self.assertTrue((root / "real" / "file").exists())


class PasteTests(unittest.TestCase):
    def test_cut_then_paste_moves_and_clears_clipboard(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "src"
            dest = root / "dest"
            source.mkdir()
            dest.mkdir()
            (source / "a").write_text("a", encoding="utf-8")
            (source / "b").mkdir()

            clipboard = cut([source / "a", source / "b"])
            self.assertEqual(clipboard.mode, CUT)
            result, remaining = paste(clipboard, dest)

            self.assertTrue(result.ok)
            self.assertIsNone(remaining)
            self.assertEqual(sorted(path.name for path in source.iterdir()), [])
            self.assertEqual(sorted(path.name for path in dest.iterdir()), ["a", "b"])
            self.assertEqual(result.refresh_dirs, frozenset({source, dest}))

    def test_cut_collision_is_skipped_and_kept_on_clipboard(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "src").mkdir()
            (root / "dest").mkdir()
            (root / "src" / "same").write_text("new", encoding="utf-8")
            (root / "src" / "other").write_text("other", encoding="utf-8")
            (root / "dest" / "same").write_text("old", encoding="utf-8")

            result, remaining = paste(cut([root / "src" / "same", root / "src" / "other"]), root / "dest")

            self.assertTrue(result.partial)
            self.assertEqual(result.failures[0].kind, ALREADY_EXISTS)
            self.assertEqual((root / "dest" / "same").read_text(encoding="utf-8"), "old")
            self.assertEqual(remaining.source_paths, frozenset({root / "src" / "same"}))
            self.assertTrue((root / "dest" / "other").exists())

    def test_copy_pasted_twice_gives_two_independent_copies(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "src").mkdir()
            (root / "dest").mkdir()
            original = root / "src" / "report.txt"
            original.write_text("data", encoding="utf-8")

            clipboard = copy_mark([original])
            self.assertEqual(clipboard.mode, COPY)
            first, clipboard_after = paste(clipboard, root / "dest")
            second, _ = paste(clipboard_after, root / "dest")

            self.assertTrue(first.ok)
            self.assertTrue(second.ok)
            self.assertIs(clipboard_after, clipboard)
            self.assertEqual(
                sorted(path.name for path in (root / "dest").iterdir()),
                ["report (copy).txt", "report.txt"],
            )
            self.assertTrue(original.exists())

    def test_copy_into_same_directory_picks_copy_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "pkg").mkdir()
            (root / "pkg" / "mod.py").write_text("x = 1\n", encoding="utf-8")
            (root / "pkg (copy)").mkdir()

            result, _ = paste(copy_mark([root / "pkg"]), root)

            self.assertTrue(result.ok)
            self.assertEqual(result.outcomes[0].destination, root / "pkg (copy 2)")
            self.assertEqual((root / "pkg (copy 2)" / "mod.py").read_text(encoding="utf-8"), "x = 1\n")

    def test_directory_cannot_be_pasted_into_itself(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "box" / "inner").mkdir(parents=True)

            result, remaining = paste(cut([root / "box"]), root / "box" / "inner")

            self.assertEqual(result.failures[0].kind, INVALID_TARGET)
            self.assertTrue((root / "box").is_dir())
            self.assertIsNotNone(remaining)

    def test_vanished_source_reports_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            result, remaining = paste(copy_mark([root / "ghost"]), root)

            self.assertEqual(result.failures[0].kind, NOT_FOUND)
            self.assertIsNotNone(remaining)

    def test_cut_across_filesystems_falls_back_to_copy_and_delete(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "src").mkdir()
            (root / "dest").mkdir()
            (root / "src" / "tree").mkdir()
            (root / "src" / "tree" / "leaf.txt").write_text("leaf", encoding="utf-8")
            cross_device = OSError(errno.EXDEV, os.strerror(errno.EXDEV))

            with mock.patch("vfm.operations.executor.os.rename", side_effect=cross_device):
                result, remaining = paste(cut([root / "src" / "tree"]), root / "dest")

            self.assertTrue(result.ok)
            self.assertIsNone(remaining)
            self.assertFalse((root / "src" / "tree").exists())
            self.assertEqual((root / "dest" / "tree" / "leaf.txt").read_text(encoding="utf-8"), "leaf")

    def test_cross_filesystem_move_reports_source_left_behind(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "src").mkdir()
            (root / "dest").mkdir()
            (root / "src" / "file.txt").write_text("x", encoding="utf-8")
            cross_device = OSError(errno.EXDEV, os.strerror(errno.EXDEV))

            with mock.patch("vfm.operations.executor.os.rename", side_effect=cross_device), mock.patch(
                "vfm.operations.executor.os.unlink", side_effect=PermissionError(errno.EACCES, "denied")
            ):
                result, remaining = paste(cut([root / "src" / "file.txt"]), root / "dest")

            self.assertEqual(result.failures[0].kind, CROSS_BOUNDARY_MOVE_FAILED)
            self.assertTrue((root / "dest" / "file.txt").exists())
            self.assertEqual(remaining.source_paths, frozenset({root / "src" / "file.txt"}))


class ClipboardTextTests(unittest.TestCase):
    def test_copy_path_returns_absolute_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "file.txt"
            target.write_text("", encoding="utf-8")
            entry = entry_from_path(target)

            self.assertEqual(copy_path_to_clipboard_text(entry), str(target.absolute()))

    def test_empty_selection_yields_no_clipboard(self) -> None:
        self.assertIsNone(cut([]))
        self.assertIsNone(copy_mark([]))


if __name__ == "__main__":
    unittest.main()
