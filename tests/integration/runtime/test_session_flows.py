"""End-to-end key flows through the runtime loop on real temporary trees.

Each test scripts a key sequence, runs ``run_main_loop`` with in-memory
collaborators, and checks both the filesystem and the last rendered frame.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from vfm.config import AppConfig
from vfm.markers import MarkerStore, load_markers, save_markers
from vfm.render import DEFAULT_THEME
from vfm.render.ansi import ANSI_ESCAPE_RE
from vfm.render.frame import build_frame
from vfm.runtime.loop import RuntimeLoopCallbacks, run_main_loop
from vfm.session import LaunchRequest, Normal, Session, StatusMessage


class _Harness:
    def __init__(self, session: Session, keys: list[str]) -> None:
        self.session = session
        self.keys = list(keys)
        self.frames: list[str] = []
        self.launches: list[LaunchRequest] = []
        self.clipboard: list[str] = []

    def render(self, status: StatusMessage | None) -> None:
        frame = build_frame(self.session, 120, 16, status, DEFAULT_THEME)
        self.frames.append(ANSI_ESCAPE_RE.sub("", frame))

    def read_key(self, _timeout_ms: int | None) -> str:
        return self.keys.pop(0) if self.keys else "q"

    def run(self) -> str:
        run_main_loop(
            self.session,
            RuntimeLoopCallbacks(
                render=self.render,
                read_key=self.read_key,
                terminal_size=lambda: (120, 16),
                launch_shell=lambda _cwd: None,
                launch_program=self._launch,
                copy_to_clipboard=self._copy,
                open_path=lambda _path: None,
            ),
        )
        return self.frames[-1]

    def _launch(self, request: LaunchRequest) -> None:
        self.launches.append(request)

    def _copy(self, text: str) -> bool:
        self.clipboard.append(text)
        return True


def _bottom(frame: str) -> str:
    return frame.split("\r\n")[-1].rstrip()


class SessionFlowTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.left = self.root / "left"
        self.right = self.root / "right"
        self.left.mkdir()
        self.right.mkdir()
        (self.left / "a.txt").write_text("alpha\n", encoding="utf-8")
        (self.left / "b.txt").write_text("beta\n", encoding="utf-8")
        (self.left / "pkg").mkdir()
        (self.left / "pkg" / "mod.py").write_text("x = 1\n", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_mark_two_files_copy_and_paste_into_other_pane(self) -> None:
        session = Session(self.left, self.right)
        keys = ["j", " ", " ", "y", "ESC", "TAB", "p"]

        frame = _Harness(session, keys).run()

        self.assertEqual(sorted(path.name for path in self.right.iterdir()), ["a.txt", "b.txt"])
        self.assertTrue((self.left / "a.txt").exists())
        self.assertIn("2 items done", _bottom(frame))
        self.assertEqual(session.active_index, 1)

    def test_cut_directory_moves_it_and_updates_both_panes(self) -> None:
        session = Session(self.left, self.right)
        keys = ["x", "TAB", "p"]

        frame = _Harness(session, keys).run()

        self.assertFalse((self.left / "pkg").exists())
        self.assertEqual((self.right / "pkg" / "mod.py").read_text(encoding="utf-8"), "x = 1\n")
        self.assertIsNone(session.clipboard)
        self.assertEqual([entry.name for entry in session.panes[0].entries], ["a.txt", "b.txt"])
        self.assertIn("pkg/", frame)

    def test_delete_marked_entries_after_confirmation(self) -> None:
        session = Session(self.left, self.right)
        keys = ["j", " ", " ", "d", "d", "y"]

        frame = _Harness(session, keys).run()

        self.assertEqual([path.name for path in self.left.iterdir()], ["pkg"])
        self.assertEqual(session.active_pane.marked, set())
        self.assertIn("done", _bottom(frame))

    def test_delete_declined_keeps_files(self) -> None:
        session = Session(self.left, self.right)
        keys = ["j", "d", "d", "n"]

        frame = _Harness(session, keys).run()

        self.assertTrue((self.left / "a.txt").exists())
        self.assertEqual(_bottom(frame), "delete cancelled")

    def test_create_directory_then_file_inside_it(self) -> None:
        session = Session(self.left, self.right)
        keys = ["a", "d", *"new", "ENTER", "l", "a", *"notes.md", "ENTER"]

        _Harness(session, keys).run()

        self.assertTrue((self.left / "new" / "notes.md").is_file())
        self.assertEqual(session.active_pane.current_directory, self.left / "new")
        self.assertEqual(session.selected_entry().name, "notes.md")

    def test_rename_keeps_cursor_on_renamed_entry(self) -> None:
        session = Session(self.left, self.right)
        keys = ["j", "r", *["BACKSPACE"] * 5, *"z.txt", "ENTER"]

        _Harness(session, keys).run()

        self.assertTrue((self.left / "z.txt").exists())
        self.assertEqual(session.selected_entry().name, "z.txt")

    def test_filter_then_escape_restores_listing(self) -> None:
        session = Session(self.left, self.right)
        harness = _Harness(session, ["/", *"^b", "ENTER"])

        harness.run()
        self.assertEqual([entry.name for entry in session.active_pane.entries], ["b.txt"])

        _Harness(session, ["ESC"]).run()
        self.assertEqual(len(session.active_pane.entries), 3)

    def test_copy_path_goes_to_os_clipboard(self) -> None:
        session = Session(self.left, self.right)
        harness = _Harness(session, ["j", "y", "p"])

        harness.run()

        self.assertEqual(harness.clipboard, [str(self.left / "a.txt")])

    def test_open_with_quick_slot_launches_program(self) -> None:
        session = Session(self.left, self.right, config=AppConfig(quick_slots={"1": "vim"}))
        harness = _Harness(session, ["j", "O", "1"])

        harness.run()

        self.assertEqual(
            harness.launches,
            [LaunchRequest(program="vim", args=(str(self.left / "a.txt"),), cwd=self.left)],
        )
        self.assertEqual(session.mode, Normal())

    def test_markers_persist_across_sessions(self) -> None:
        markers_file = self.root / "markers.json"
        with mock.patch("vfm.markers.persistence.MARKERS_PATH", markers_file):
            first = Session(self.left, self.right, markers=MarkerStore(persist=save_markers))
            _Harness(first, ["l", "m", *"pkg", "ENTER"]).run()

            stored, warning = load_markers()
            self.assertIsNone(warning)
            second = Session(self.right, self.right, markers=MarkerStore(stored, persist=save_markers))
            _Harness(second, ["'", *"pkg", "ENTER"]).run()

        self.assertEqual(json.loads(markers_file.read_text(encoding="utf-8")), [{"name": "pkg", "path": str(self.left / "pkg")}])
        self.assertEqual(second.active_pane.current_directory, self.left / "pkg")


if __name__ == "__main__":
    unittest.main()
