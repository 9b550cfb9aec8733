"""
Switch grammar tests (shortify, longify, prefix_long, is_option, next_arg).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from confargs.faults import InvalidSwitchFormatError
from confargs.grammar import is_option, next_arg, shortify, longify, prefix_long


class TestShortify(TestCase):
    """Behavioral tests for shortify()."""

    def testShortifyKeepsShort(self):
        self.assertEqual(shortify("-o"), "-o")

    def testShortifyAddsDash(self):
        self.assertEqual(shortify("o"), "-o")

    def testShortifyPassesNone(self):
        self.assertIsNone(shortify(None))

    def testShortifyRejectsLongNames(self):
        with self.assertRaises(InvalidSwitchFormatError):
            shortify("-long")
        with self.assertRaises(InvalidSwitchFormatError):
            shortify("ab")

    def testShortifyRejectsEmpty(self):
        with self.assertRaises(InvalidSwitchFormatError):
            shortify("")

    def testShortifyRejectsDoubleDash(self):
        with self.assertRaises(InvalidSwitchFormatError):
            shortify("--")

    def testShortifyFaultCarriesSwitch(self):
        with self.assertRaises(InvalidSwitchFormatError) as context:
            shortify("xy")
        self.assertEqual(context.exception.options["switch"], "-xy")
        self.assertEqual(context.exception.message, "invalid short switch: -xy")


class TestLongify(TestCase):
    """Behavioral tests for longify()."""

    def testLongifyKeepsLong(self):
        self.assertEqual(longify("--opt"), "--opt")

    def testLongifyAddsDashes(self):
        self.assertEqual(longify("opt"), "--opt")

    def testLongifyNested(self):
        self.assertEqual(longify("nest:opt"), "--nest:opt")

    def testLongifyAllowsInnerDashes(self):
        self.assertEqual(longify("dry-run"), "--dry-run")

    def testLongifyPassesNone(self):
        self.assertIsNone(longify(None))

    def testLongifyRejectsShort(self):
        with self.assertRaises(InvalidSwitchFormatError):
            longify("-o")

    def testLongifyRejectsEmpty(self):
        with self.assertRaises(InvalidSwitchFormatError):
            longify("")

    def testLongifyRejectsWhitespace(self):
        with self.assertRaises(InvalidSwitchFormatError):
            longify("two words")

    def testLongifyRejectsEmptySegment(self):
        with self.assertRaises(InvalidSwitchFormatError):
            longify("nest::opt")


class TestPrefixLong(TestCase):
    """Behavioral tests for prefix_long()."""

    def testPrefixLong(self):
        self.assertEqual(prefix_long("--opt", "no-"), "--no-opt")

    def testPrefixLongNested(self):
        self.assertEqual(prefix_long("--nested:opt", "no-"), "--nested:no-opt")

    def testPrefixLongWithoutDashes(self):
        self.assertEqual(prefix_long("opt", "[no-]"), "--[no-]opt")


class TestTokens(TestCase):
    """Behavioral tests for is_option() and next_arg()."""

    def testIsOption(self):
        self.assertTrue(is_option("-o"))
        self.assertTrue(is_option("--opt"))
        self.assertTrue(is_option("--"))
        self.assertFalse(is_option("-"))
        self.assertFalse(is_option("value"))
        self.assertFalse(is_option(1))
        self.assertFalse(is_option(None))

    def testNextArgShiftsArgument(self):
        argv = ["value", "--opt"]
        self.assertEqual(next_arg(argv), "value")
        self.assertEqual(argv, ["--opt"])

    def testNextArgLeavesOption(self):
        argv = ["--opt", "value"]
        self.assertIsNone(next_arg(argv))
        self.assertEqual(argv, ["--opt", "value"])

    def testNextArgDefault(self):
        sentinel = object()
        self.assertIs(next_arg([], sentinel), sentinel)


if __name__ == "__main__":
    unittest.main()
