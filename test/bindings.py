"""
Value binding tests (boolean, string and sequence variants, binder dispatch).

Conventions
- Test method names follow CamelCase per project convention.
- Bindings are built over SimpleNamespace targets.
"""
import unittest
from collections.abc import Sequence
from types import SimpleNamespace
from unittest import TestCase

from cmdbind.bindings import (
    BoolBinding,
    StringBinding,
    SequenceBinding,
    binder,
    binding,
    parse_bool,
)


class TestBoolBinding(TestCase):

    def testDefaultRendersFalse(self):
        target = SimpleNamespace()
        value = binding(target, "long", bool)
        self.assertEqual(str(value), "false")
        self.assertIs(target.long, False)

    def testSetTrueLiterals(self):
        for literal in ("true", "1", "t", "T", "TRUE", "True"):
            with self.subTest(literal=literal):
                value = binding(SimpleNamespace(), "long", bool)
                value.set(literal)
                self.assertEqual(str(value), "true")

    def testRejectedLiteralKeepsValue(self):
        target = SimpleNamespace()
        value = binding(target, "long", bool)
        value.set("true")
        with self.assertRaises(ValueError):
            value.set("banana")
        self.assertIs(target.long, True)
        self.assertEqual(str(value), "true")

    def testDefaultLiteral(self):
        value = binding(SimpleNamespace(), "long", bool, "true")
        self.assertEqual(str(value), "true")

    def testInvalidDefaultRaises(self):
        with self.assertRaises(ValueError):
            binding(SimpleNamespace(), "long", bool, "maybe")

    def testIsBoolean(self):
        self.assertTrue(BoolBinding.boolean)
        self.assertFalse(StringBinding.boolean)

    def testParseBool(self):
        self.assertIs(parse_bool("F"), False)
        with self.assertRaises(ValueError):
            parse_bool("yes")


class TestStringBinding(TestCase):

    def testDefaultIsApplied(self):
        target = SimpleNamespace()
        value = binding(target, "name", str, "John")
        self.assertEqual(str(value), "John")
        self.assertEqual(target.name, "John")

    def testSetStoresVerbatim(self):
        target = SimpleNamespace()
        value = binding(target, "name", str)
        value.set("  spaced  ")
        self.assertEqual(target.name, "  spaced  ")

    def testResetRestoresDefault(self):
        target = SimpleNamespace()
        value = binding(target, "name", str, "John")
        value.set("Jane")
        value.reset()
        self.assertEqual(target.name, "John")


class TestSequenceBinding(TestCase):

    def testSetAllStoresList(self):
        target = SimpleNamespace()
        value = binding(target, "files", list[str])
        value.set_all(["a.txt", "b.txt"])
        self.assertEqual(target.files, ["a.txt", "b.txt"])
        self.assertEqual(str(value), "a.txt b.txt")

    def testSetAllReplacesPreviousList(self):
        target = SimpleNamespace()
        value = binding(target, "files", list[str])
        value.set_all(["a.txt"])
        value.set_all(["b.txt"])
        self.assertEqual(target.files, ["b.txt"])

    def testSetAllIsAtomic(self):
        target = SimpleNamespace()
        value = binding(target, "flags", list[bool])
        value.set_all(["true"])
        with self.assertRaises(ValueError):
            value.set_all(["false", "nope", "true"])
        self.assertEqual(target.flags, [True])

    def testSingleSetRaises(self):
        value = binding(SimpleNamespace(), "files", list[str])
        with self.assertRaises(TypeError):
            value.set("a.txt")

    def testZeroIsEmptyList(self):
        target = SimpleNamespace()
        binding(target, "files", list[str])
        self.assertEqual(target.files, [])


class TestBinder(TestCase):

    def testScalarKinds(self):
        self.assertIs(binder(bool), BoolBinding)
        self.assertIs(binder(str), StringBinding)

    def testSequenceKinds(self):
        for kind in (list[str], list[bool], Sequence[str]):
            with self.subTest(kind=kind):
                self.assertIsInstance(binding(SimpleNamespace(), "values", kind), SequenceBinding)

    def testUnsupportedKindsRaise(self):
        for kind in (int, float, dict[str, str], list[int], list[list[str]]):
            with self.subTest(kind=kind):
                with self.assertRaises(TypeError):
                    binder(kind)


if __name__ == "__main__":
    unittest.main()
