"""
Argument binding tests (scan, forwarding, faults, warnings).

Scope
- Validate value and boolean binding, forwarding after "--".
- Validate fail-fast faults (unknown flag, missing value) and their payloads.
- Validate batched required-flag reporting and the --help signal.
- Validate last-wins duplicates with a warning.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (parse_all, bind, split, present).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from thicket import Binding, bind, parse_all, present, split
from thicket.faults import (
    DuplicatedFlagWarning,
    FaultCode,
    HelpRequested,
    MissingFlagValueError,
    MissingRequiredArgsError,
    UnknownFlagError,
)

SPECS = parse_all(["--one:required val", "--two:[b,o] optional bool"])


class TestSplit(TestCase):
    """Splitting at the first separator."""

    def testWithoutSeparator(self):
        parsed = split(["--one", "v"])
        self.assertEqual(parsed.leading, ("--one", "v"))
        self.assertEqual(parsed.forwarded, ())

    def testOnlyFirstSeparatorCounts(self):
        parsed = split(["--one", "v", "--", "a", "--", "--b"])
        self.assertEqual(parsed.leading, ("--one", "v"))
        self.assertEqual(parsed.forwarded, ("a", "--", "--b"))


class TestBind(TestCase):
    """Behavioral tests for bind()."""

    def testValueAndBooleanFlags(self):
        binding = bind(SPECS, ["--one", "hello", "--two"])
        self.assertEqual(dict(binding), {"one": "hello", "two": present})
        self.assertIs(binding["two"], present)
        self.assertEqual(binding.forwarded, ())

    def testAbsentOptionalFlagIsNotBound(self):
        binding = bind(SPECS, ["--one", "hello"])
        self.assertEqual(dict(binding), {"one": "hello"})
        self.assertNotIn("two", binding)

    def testFlagOrderDoesNotMatter(self):
        self.assertEqual(bind(SPECS, ["--two", "--one", "x"]), bind(SPECS, ["--one", "x", "--two"]))

    def testForwardedTokensAreVerbatim(self):
        binding = bind(SPECS, ["--one", "v", "--", "get", "pods", "--bogus"])
        self.assertEqual(dict(binding), {"one": "v"})
        self.assertEqual(binding.forwarded, ("get", "pods", "--bogus"))

    def testMissingRequiredFlag(self):
        with self.assertRaises(MissingRequiredArgsError) as context:
            bind(SPECS, ["--two"])
        self.assertEqual(context.exception.options["missing"], ("one",))
        self.assertEqual(context.exception.options["code"], FaultCode.MISSING_REQUIRED_ARGS)

    def testMissingRequiredFlagsAreReportedTogetherInOrder(self):
        specs = parse_all(["--b:second", "--a:first", "--c:[o]optional"])
        with self.assertRaises(MissingRequiredArgsError) as context:
            bind(specs, [])
        self.assertEqual(context.exception.options["missing"], ("b", "a"))
        self.assertIn("'--b', '--a'", context.exception.message)

    def testValueFlagAtEndHasNoValue(self):
        with self.assertRaises(MissingFlagValueError) as context:
            bind(SPECS, ["--one"])
        self.assertEqual(context.exception.options["input"], "--one")
        self.assertEqual(context.exception.options["index"], 1)

    def testValueFlagFollowedByFlagHasNoValue(self):
        with self.assertRaises(MissingFlagValueError):
            bind(SPECS, ["--one", "--two"])

    def testValueMayStartWithSingleDash(self):
        self.assertEqual(bind(SPECS, ["--one", "-5"])["one"], "-5")

    def testValueFlagBeforeSeparatorHasNoValue(self):
        with self.assertRaises(MissingFlagValueError):
            bind(SPECS, ["--one", "--", "x"])

    def testUnknownFlagFailsBeforeRequiredCheck(self):
        with self.assertRaises(UnknownFlagError) as context:
            bind(SPECS, ["--bogus", "x"])
        self.assertEqual(context.exception.options["input"], "--bogus")
        self.assertEqual(context.exception.options["index"], 1)

    def testUnknownFlagSuggestsCloseMatch(self):
        with self.assertRaises(UnknownFlagError) as context:
            bind(SPECS, ["--one", "v", "--tow"])
        self.assertIn("--two", context.exception.options["suggestions"])
        self.assertEqual(context.exception.options["index"], 3)
        self.assertIn("third position", context.exception.message)

    def testStrayValueIsUnknown(self):
        with self.assertRaises(UnknownFlagError):
            bind(SPECS, ["--one", "v", "extra"])

    def testHelpTerminatesScanAndSkipsRequiredCheck(self):
        with self.assertRaises(HelpRequested) as context:
            bind(SPECS, ["--two", "--help", "--bogus"])
        self.assertEqual(dict(context.exception.binding), {"two": present})

    def testHelpInPlaceOfValueRequestsHelp(self):
        with self.assertRaises(HelpRequested) as context:
            bind(SPECS, ["--two", "--one", "--help"])
        self.assertEqual(dict(context.exception.binding), {"two": present})

    def testDuplicateFlagKeepsLastValueAndWarns(self):
        with self.assertWarns(DuplicatedFlagWarning):
            binding = bind(SPECS, ["--one", "a", "--one", "b"])
        self.assertEqual(binding["one"], "b")

    def testBindingIsReadOnly(self):
        binding = bind(SPECS, ["--one", "a"])
        self.assertIsInstance(binding, Binding)
        with self.assertRaises(TypeError):
            binding["one"] = "b"  # type: ignore[index]


class TestPresent(TestCase):
    """The presence marker bound for boolean flags."""

    def testPresentIsTruthySingleton(self):
        self.assertTrue(present)
        self.assertIs(type(present)(), present)
        self.assertEqual(repr(present), "(present)")


if __name__ == "__main__":
    unittest.main()
