"""
Tests for the utils module (Unset sentinel and helpers).

Scope
- Unset: singleton identity, falsy semantics, copy/pickle identity, finality.
- coalesce(): only Unset is replaced.
- mirror(): read-only, detached views of private fields.
- pluralize(): plural forms keep casing.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from argmap.utils import *


class UnsetTest(TestCase):
    """Semantic guarantees of the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, "")

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPicklePreserveIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnionWithTypes(self):
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testFinalClass(self):
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """coalesce(), mirror() and pluralize()."""

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")

    def testMirror(self):
        class Holder:
            items = mirror("items")
            state = mirror("state")

            def __init__(self):
                self._items = ("a", ["b"])
                self._state = Unset

        holder = Holder()
        view = holder.items
        view[1].append("c")
        self.assertEqual(holder._items, ("a", ["b"]))
        self.assertIsNone(holder.state)
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testMirrorRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            mirror(1)

    def testPluralize(self):
        self.assertEqual(pluralize("argument"), "arguments")
        self.assertEqual(pluralize("Argument"), "Arguments")
        self.assertEqual(pluralize("alias"), "aliases")
        self.assertEqual(pluralize("entry"), "entries")
        self.assertEqual(pluralize("key"), "keys")
        self.assertEqual(pluralize("KEY"), "KEYS")
        self.assertEqual(pluralize(""), "")


if __name__ == "__main__":
    unittest.main()
