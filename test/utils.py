"""
Utility helpers tests (Unset sentinel, coalesce, rename, mirror, nest).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from confargs.utils import Unset, UnsetType, coalesce, rename, mirror, nest


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testUnsetIsFalsey(self):
        self.assertFalse(Unset)

    def testUnsetRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce()."""

    def testCoalesceReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testCoalescePreservesFalseyValues(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "x"), "")

    def testCoalesceDefaultsToNone(self):
        self.assertIsNone(coalesce(Unset))


class TestRename(TestCase):
    """Behavioral tests for rename()."""

    def testRenameInPlace(self):
        def func():
            pass

        self.assertIs(rename(func, "other"), func)
        self.assertEqual(func.__name__, "other")
        self.assertEqual(func.__qualname__, "other")

    def testRenameAsDecorator(self):
        @rename("renamed")
        def func():
            pass

        self.assertEqual(func.__name__, "renamed")

    def testRenameRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(42, "name")

    def testRenameRejectsWrongArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """Behavioral tests for mirror()."""

    def testMirrorReturnsCopiesOfContainers(self):
        class Holder:
            values = mirror("values")

            def __init__(self):
                self._values = ["a", "b"]

        holder = Holder()
        holder.values.append("c")
        self.assertEqual(holder.values, ["a", "b"])

    def testMirrorIsReadOnly(self):
        class Holder:
            name = mirror("name")

            def __init__(self):
                self._name = "x"

        with self.assertRaises(AttributeError):
            Holder().name = "y"

    def testMirrorRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestNest(TestCase):
    """Behavioral tests for nest()."""

    def testNestSplitsCompoundKeys(self):
        self.assertEqual(nest({"key": 1, "compound:key": 2}), {"key": 1, "compound": {"key": 2}})

    def testNestDeepKeys(self):
        self.assertEqual(nest({"a:b:c": 1, "a:d": 2}), {"a": {"b": {"c": 1}, "d": 2}})

    def testNestKeepsNonStringKeys(self):
        self.assertEqual(nest({1: "x"}), {1: "x"})

    def testNestCustomSeparator(self):
        self.assertEqual(nest({"a.b": 1}, sep="."), {"a": {"b": 1}})


if __name__ == "__main__":
    unittest.main()
