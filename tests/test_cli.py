"""CLI reference output and config handling."""

from __future__ import annotations

import io
import json
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import blockvim
from blockvim import cli
from blockvim.help import KEYBINDING_SECTIONS, format_help_lines


class CliTests(unittest.TestCase):
    def run_cli(self, *argv: str) -> str:
        stdout = io.StringIO()
        with mock.patch("sys.stdout", stdout):
            cli.main(list(argv))
        return stdout.getvalue()

    def test_keys_prints_every_help_section(self) -> None:
        output = self.run_cli("--keys")
        for title, rows in KEYBINDING_SECTIONS:
            self.assertIn(title.upper(), output)
            for keys, description in rows:
                self.assertIn(description, output)

    def test_leader_merges_user_tree_from_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(
                json.dumps(
                    {
                        "leader_enabled": True,
                        "leader": {"g": {"name": "+go", "keys": {"m": {"name": "main", "command": "focus_main_panel"}}}},
                    }
                ),
                encoding="utf-8",
            )
            output = self.run_cli("--leader", "--config", str(path))

        lines = output.splitlines()
        self.assertEqual(lines[0], "leader SPC (enabled)")
        self.assertIn("  g  +go", lines)
        self.assertIn("    m  main (focus_main_panel)", lines)
        self.assertIn("  b  +block", lines)

    def test_leader_without_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("blockvim.config.CONFIG_PATH", Path(tmp) / "missing.json"):
                output = self.run_cli("--leader")
        self.assertTrue(output.startswith("leader SPC (disabled)\n"))

    def test_missing_explicit_config_exits(self) -> None:
        with self.assertRaises(SystemExit):
            self.run_cli("--keys", "--config", "/nonexistent/blockvim.json")

    def test_no_options_prints_usage(self) -> None:
        self.assertIn("usage: blockvim", self.run_cli())


class PackageEntrypointTests(unittest.TestCase):
    def test_package_import_leaves_cli_unloaded(self) -> None:
        root = Path(__file__).resolve().parents[1]
        code = "import sys, blockvim; print('blockvim.cli' in sys.modules)"
        result = subprocess.run(
            [sys.executable, "-c", code],
            cwd=root,
            check=True,
            capture_output=True,
            text=True,
        )
        self.assertEqual(result.stdout.strip(), "False")

    def test_package_main_delegates_to_cli(self) -> None:
        with mock.patch("blockvim.cli.main", return_value=0) as cli_main:
            self.assertEqual(blockvim.main(["--keys"]), 0)
        cli_main.assert_called_once_with(["--keys"])


class HelpFormattingTests(unittest.TestCase):
    def test_rows_are_aligned(self) -> None:
        lines = format_help_lines([("One", (("a", "first"), ("long key", "second")))])
        self.assertEqual(lines, ["ONE", "  a         first", "  long key  second"])


if __name__ == "__main__":
    unittest.main()
