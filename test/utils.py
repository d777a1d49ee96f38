"""
Tests for the shared utilities and the presence marker.

This module verifies:
- Unset sentinel semantics and coalesce().
- Ordinal labels used by position-first fault messages.
- Introspectable records: typename, read-only mirrors, repr.
- The `present` marker: singleton, truthy, stable representation.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console

from thicket.marks import present
from thicket.utils import Introspectable, Unset, UnsetType, coalesce, ordinal, rename


class UtilsTest(TestCase):
    """
    Test suite for thicket.utils.
    """

    def testUnsetIsFalsySingleton(self) -> None:
        """
        Unset is falsy and UnsetType() always returns it.
        """
        self.assertFalse(Unset)
        self.assertIs(UnsetType(), Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetIsFinal(self) -> None:
        """
        UnsetType cannot be subclassed.
        """
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCoalesceOnlyReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", []):
            self.assertIs(coalesce(value, "x"), value)

    def testOrdinals(self) -> None:
        self.assertEqual([ordinal(n) for n in (1, 2, 3, 10)], ["first", "second", "third", "tenth"])
        self.assertEqual([ordinal(n) for n in (11, 12, 13, 21, 22, 23, 111)], ["11th", "12th", "13th", "21st", "22nd", "23rd", "111th"])

    def testRename(self) -> None:
        @rename("renamed")
        def function():
            pass
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testIntrospectableRecord(self) -> None:
        """
        Listed names become read-only properties; containers are frozen.
        """
        class SampleRecord(metaclass=Introspectable):
            __introspectable__ = ("name", "items")

            def __init__(self, name, items):
                self._name = name
                self._items = items

        record = SampleRecord("a", [1, 2])
        self.assertEqual(SampleRecord.__typename__, "sample-record")
        self.assertEqual(record.items, (1, 2))
        self.assertEqual(repr(record), "sample-record(name='a', items=(1, 2))")
        with self.assertRaises(AttributeError):
            record.name = "b"

    def testIntrospectableDisplaysEveryMirrorByDefault(self) -> None:
        """
        Without __displayable__ the repr lists every introspectable name.
        """
        self.assertIs(Introspectable.__displayable__, Unset)

        class Pair(metaclass=Introspectable):
            __introspectable__ = ("left", "right")

            def __init__(self, left, right):
                self._left = left
                self._right = right

        self.assertEqual(repr(Pair(1, 2)), "pair(left=1, right=2)")


class PresentTest(TestCase):
    """
    Test suite for the `present` marker bound for boolean flags.
    """

    def testSingleton(self) -> None:
        self.assertIs(type(present)(), present)

    def testTruthyAndRepr(self) -> None:
        self.assertTrue(present)
        self.assertEqual(repr(present), "(present)")

    def testRichRendering(self) -> None:
        stream = io.StringIO()
        Console(file=stream, color_system=None).print(present)
        self.assertEqual(stream.getvalue(), "(present)\n")


if __name__ == "__main__":
    unittest.main()
