"""
Utils and namespace tests (sentinel, helpers, value sinks).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from argbind import Namespace
from argbind.utils import Unset, UnsetType, coalesce, rename, mirror, pluralize, quantify, enumerate_words


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalesceKeepsFalseyValues(self):
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(None, "x"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class TestHelpers(TestCase):
    """Behavioral tests for naming and message helpers."""

    def testRenameCallable(self):
        def f():
            pass

        self.assertEqual(rename(f, "g").__name__, "g")

        @rename("h")
        def k():
            pass

        self.assertEqual(k.__qualname__, "h")

    def testRenameRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorHandsOutCopies(self):
        class Holder:
            _values = ("a", "b")
            values = mirror("values")

        holder = Holder()
        holder.values.append("c")
        self.assertEqual(holder.values, ["a", "b"])

    def testPluralize(self):
        self.assertEqual(pluralize("argument"), "arguments")
        self.assertEqual(pluralize("entry"), "entries")
        self.assertEqual(pluralize("required flag"), "required flags")
        self.assertEqual(pluralize("MATCH"), "MATCHES")

    def testQuantify(self):
        self.assertEqual(quantify(1, "argument"), "1 argument")
        self.assertEqual(quantify(2, "argument"), "2 arguments")

    def testEnumerateWords(self):
        self.assertEqual(enumerate_words([]), "")
        self.assertEqual(enumerate_words(["a"]), "a")
        self.assertEqual(enumerate_words(["a", "b"]), "a and b")
        self.assertEqual(enumerate_words(["val1", "val2", "val3"], "or"), "val1, val2 or val3")


class TestNamespace(TestCase):
    """Behavioral tests for the default sink."""

    def testAttributes(self):
        ns = Namespace(verbose=True)
        self.assertTrue(ns.verbose)
        self.assertIn("verbose", ns)
        self.assertNotIn("quiet", ns)

    def testEquality(self):
        self.assertEqual(Namespace(a=1), Namespace(a=1))
        self.assertNotEqual(Namespace(a=1), Namespace(a=2))
        self.assertNotEqual(Namespace(a=1), {"a": 1})

    def testRepr(self):
        self.assertEqual(repr(Namespace(a=1, b="x")), "namespace(a=1, b='x')")


if __name__ == "__main__":
    unittest.main()
