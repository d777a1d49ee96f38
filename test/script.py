"""
Console script tests (thicket.__main__).

Scope
- Validate environment-driven configuration, exit codes and completion mode.

Conventions
- Test method names follow CamelCase per project convention.
- The command tree root is passed through THICKET_ROOT.
"""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

from thicket.__main__ import main


class TestMain(TestCase):
    """Behavioral tests for main()."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.addCleanup(self.directory.cleanup)
        root = Path(self.directory.name)
        (root / "ok.py").write_text(
            'ARGUMENTS = ["--name:who to greet"]\n'
            "def main(context):\n"
            "    print('hello', context.args['name'])\n",
            encoding="utf-8",
        )
        (root / "code.py").write_text("def main(context):\n    return 9\n", encoding="utf-8")
        (root / "interrupt.py").write_text("def main(context):\n    raise KeyboardInterrupt\n", encoding="utf-8")
        patcher = patch.dict(os.environ, {"THICKET_ROOT": str(root), "THICKET_PROG": "tk", "NO_COLOR": "1"})
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as context:
                main(argv)
        return context.exception.code, stdout.getvalue(), stderr.getvalue()

    def testSuccess(self):
        code, stdout, _ = self.run_main("ok", "--name", "world")
        self.assertEqual(code, 0)
        self.assertIn("hello world", stdout)

    def testEntryCodeBecomesExitStatus(self):
        self.assertEqual(self.run_main("code")[0], 9)

    def testFaultExitsWithOne(self):
        code, _, stderr = self.run_main("ok")
        self.assertEqual(code, 1)
        self.assertIn("[ tk — 11113 | Missing Required Arguments ]", stderr)

    def testListingExitsWithZero(self):
        code, stdout, _ = self.run_main()
        self.assertEqual(code, 0)
        self.assertIn("usage: tk <command>", stdout)

    def testKeyboardInterrupt(self):
        self.assertEqual(self.run_main("interrupt")[0], 130)

    def testCompletionMode(self):
        code, stdout, _ = self.run_main("--complete", "o")
        self.assertEqual(code, 0)
        self.assertEqual(stdout.splitlines(), ["ok"])
        code, stdout, _ = self.run_main("--complete", "ok", "--")
        self.assertEqual(stdout.splitlines(), ["--help", "--name"])


if __name__ == "__main__":
    unittest.main()
