"""
Tests for the shared helpers.

This module verifies:
- The Unset sentinel: singleton identity, falsy semantics, copying and pickling, finality.
- coalesce() replacing only Unset.
- mirror() exposing private state through read-only, copying properties.
- ordinal() suffixes, teens included.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from argopt.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the exported instance on every call.
        """
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsely(self) -> None:
        self.assertFalse(Unset)

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values.
        """
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712
        self.assertNotEqual(Unset, "")

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnionInIsinstance(self) -> None:
        """
        'str | Unset' builds a union usable with isinstance().
        """
        self.assertTrue(isinstance("x", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalseyValues(self) -> None:
        for value in (None, 0, "", [], False):
            self.assertIs(coalesce(value, "fallback"), value)


class MirrorTest(TestCase):

    def setUp(self) -> None:
        class Holder:
            items = mirror("items")
            names = mirror("names")

            def __init__(self):
                self._items = ["a", "b"]
                self._names = ("x", "y")

        self.holder = Holder()

    def testReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.holder.items = []

    def testListsAreCopied(self) -> None:
        items = self.holder.items
        items.append("c")
        self.assertEqual(self.holder.items, ["a", "b"])

    def testTuplesAreShared(self) -> None:
        self.assertIs(self.holder.names, self.holder._names)

    def testPropertyName(self) -> None:
        self.assertEqual(type(self.holder).items.fget.__name__, "items")


class OrdinalTest(TestCase):

    def testSuffixes(self) -> None:
        expected = {
            1: "1st", 2: "2nd", 3: "3rd", 4: "4th", 10: "10th",
            11: "11th", 12: "12th", 13: "13th", 21: "21st", 22: "22nd",
            23: "23rd", 101: "101st", 111: "111th", 112: "112th", 113: "113th",
        }
        for number, text in expected.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), text)

    def testRejectsNonIntegers(self) -> None:
        for value in ("1", 1.0, True):
            with self.subTest(value=value):
                with self.assertRaises(TypeError):
                    ordinal(value)


if __name__ == '__main__':
    unittest.main()
