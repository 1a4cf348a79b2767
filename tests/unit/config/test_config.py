"""Tests for config discovery, loading, and per-section fallback."""

from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from vfm import config
from vfm.render.icons import Icons
from vfm.render.theme import DEFAULT_COLORS


class ConfigPathTests(unittest.TestCase):
    def test_explicit_path_wins_over_environment(self) -> None:
        with mock.patch.dict(os.environ, {config.CONFIG_ENV_VAR: "/env/config.json"}):
            self.assertEqual(config.config_path(Path("/cli/config.json")), Path("/cli/config.json"))
            self.assertEqual(config.config_path(), Path("/env/config.json"))

    def test_legacy_dotfile_used_when_only_it_exists(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            default_path = Path(tmp) / "vfm" / "config.json"
            legacy_path = Path(tmp) / ".vfm.json"
            legacy_path.write_text("{}", encoding="utf-8")
            env = {key: value for key, value in os.environ.items() if key != config.CONFIG_ENV_VAR}
            with mock.patch.dict(os.environ, env, clear=True), mock.patch.object(
                config, "CONFIG_PATH", default_path
            ), mock.patch.object(config, "DEFAULT_CONFIG_PATH", default_path), mock.patch.object(
                config, "LEGACY_CONFIG_PATH", legacy_path
            ):
                self.assertEqual(config.config_path(), legacy_path)


class LoadConfigTests(unittest.TestCase):
    def test_missing_and_malformed_files_load_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            broken = Path(tmp) / "broken.json"
            broken.write_text("{oops", encoding="utf-8")
            listing = Path(tmp) / "list.json"
            listing.write_text("[1, 2]", encoding="utf-8")

            self.assertEqual(config.load_config(Path(tmp) / "missing.json"), {})
            self.assertEqual(config.load_config(broken), {})
            self.assertEqual(config.load_config(listing), {})

    def test_explicit_missing_file_is_an_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(config.ConfigError):
                config.load_explicit_config(Path(tmp) / "nope.json")

    def test_explicit_file_is_loaded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"show_hidden": False}), encoding="utf-8")

            self.assertEqual(config.load_explicit_config(path), {"show_hidden": False})


class ResolveConfigTests(unittest.TestCase):
    def test_empty_config_is_all_defaults(self) -> None:
        resolved, warnings = config.resolve_config({})

        self.assertEqual(warnings, [])
        self.assertEqual(resolved.colors, DEFAULT_COLORS)
        self.assertTrue(resolved.show_hidden)
        self.assertFalse(resolved.metadata_bar.enabled)
        self.assertEqual(resolved.quick_slots, {})

    def test_valid_sections_are_applied(self) -> None:
        resolved, warnings = config.resolve_config(
            {
                "theme": {"accent": "#ff8800", "folder": "42"},
                "metadata_bar": {"enabled": True, "show_dates": False},
                "check_mismatch": True,
                "show_hidden": False,
                "preview": {"max_lines": 40},
                "open_with": {"quick": {"1": "gimp", "2": " less "}},
                "keys": {"normal": {"quit": ["Q"]}},
            }
        )

        self.assertEqual(warnings, [])
        self.assertEqual(resolved.colors["accent"], "#ff8800")
        self.assertTrue(resolved.metadata_bar.enabled)
        self.assertFalse(resolved.metadata_bar.show_dates)
        self.assertTrue(resolved.check_mismatch)
        self.assertFalse(resolved.show_hidden)
        self.assertEqual(resolved.preview.max_lines, 40)
        self.assertEqual(resolved.quick_slots, {"1": "gimp", "2": "less"})
        self.assertEqual(resolved.keymap.action_for("normal", "Q"), "quit")
        self.assertIn("38;2;255;136;0", resolved.theme.accent)

    def test_invalid_section_falls_back_as_a_whole(self) -> None:
        with self.assertLogs("vfm.config", level="WARNING"):
            resolved, warnings = config.resolve_config(
                {
                    "theme": {"accent": "not-a-color", "folder": "red"},
                    "preview": {"max_lines": -1},
                    "open_with": {"quick": {"x": "vim"}},
                    "show_hidden": "yes",
                    "keys": {"normal": {"quit": "bogus-key"}},
                }
            )

        self.assertEqual(len(warnings), 5)
        self.assertEqual(resolved.colors, DEFAULT_COLORS)
        self.assertEqual(resolved.preview, config.PreviewConfig())
        self.assertEqual(resolved.quick_slots, {})
        self.assertTrue(resolved.show_hidden)
        self.assertEqual(resolved.keymap.action_for("normal", "q"), "quit")

    def test_icons_section(self) -> None:
        resolved, warnings = config.resolve_config({"icons": {"folder": "D", "file": "F", "created": "C"}})

        self.assertEqual(warnings, [])
        self.assertEqual(resolved.icons, Icons(folder="D", file="F", created="C"))

        with self.assertLogs("vfm.config", level="WARNING"):
            resolved, warnings = config.resolve_config({"icons": {"folder": 1, "file": "F"}})
        self.assertEqual(resolved.icons, Icons())
        self.assertEqual(warnings, ["icons: icon folder must be a string; using defaults"])


if __name__ == "__main__":
    unittest.main()
