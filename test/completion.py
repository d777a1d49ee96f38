"""
Completion tests (candidates for the word being typed).

Scope
- Validate command-name candidates inside groups.
- Validate flag candidates on leaves, skipping used flags and their values.
- Validate that forwarded tokens and faults yield no candidates.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import TestCase

from thicket.completion import complete


class TestComplete(TestCase):
    """Behavioral tests for complete()."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.addCleanup(self.directory.cleanup)
        self.root = Path(self.directory.name)
        (self.root / "k8s").mkdir()
        (self.root / "k8s" / "pods.py").write_text("def main(context): pass\n", encoding="utf-8")
        (self.root / "k8s" / "ports.py").write_text("def main(context): pass\n", encoding="utf-8")
        (self.root / "deploy.py").write_text(
            'ARGUMENTS = ["--env:target", "--force:[o,b]skip checks", "--tag:[o]image tag"]\n'
            "def main(context): pass\n",
            encoding="utf-8",
        )
        (self.root / "broken.py").write_text("ARGUMENTS = ['nope']\ndef main(context): pass\n", encoding="utf-8")

    def testTopLevelCommands(self):
        self.assertEqual(complete(self.root, [""]), ["broken", "deploy", "k8s"])
        self.assertEqual(complete(self.root, []), ["broken", "deploy", "k8s"])

    def testPrefixFiltersChildren(self):
        self.assertEqual(complete(self.root, ["k8s", "po"]), ["pods", "ports"])
        self.assertEqual(complete(self.root, ["k8s", "pod"]), ["pods"])

    def testLeafFlags(self):
        self.assertEqual(complete(self.root, ["deploy", "--"]), ["--env", "--force", "--help", "--tag"])

    def testUsedFlagsAndTheirValuesAreSkipped(self):
        self.assertEqual(complete(self.root, ["deploy", "--env", "--force", "--"]), ["--help", "--tag"])
        self.assertEqual(complete(self.root, ["deploy", "--tag", "--env", "--"]), ["--force", "--help"])

    def testNothingAfterSeparator(self):
        self.assertEqual(complete(self.root, ["deploy", "--", ""]), [])

    def testFaultsYieldNothing(self):
        self.assertEqual(complete(self.root, ["nope", ""]), [])
        self.assertEqual(complete(self.root, ["broken", "--"]), [])
        self.assertEqual(complete(self.root / "missing", [""]), [])


if __name__ == "__main__":
    unittest.main()
