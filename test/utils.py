"""
Utility tests (Unset sentinel, coalesce, mirrored properties).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from cmdbind.faults import CommandFailure
from cmdbind.utils import IntrospectiveType, Unset, UnsetType, coalesce


class TestUnset(TestCase):

    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalesceOnlyReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")

    def testFaultMessageMayBeUnset(self):
        self.assertEqual(str(CommandFailure(Unset)), "command failure")
        self.assertEqual(str(CommandFailure("boom")), "boom")


class TestIntrospectiveType(TestCase):

    def testMirroredContainersAreCopies(self):
        class Holder(metaclass=IntrospectiveType):
            __introspectable__ = ("items",)

            def __init__(self):
                self._items = ["a"]

        holder = Holder()
        holder.items.append("b")
        self.assertEqual(holder.items, ["a"])
        self.assertEqual(Holder.__typename__, "holder")
        self.assertEqual(repr(holder), "holder(items=['a'])")


if __name__ == "__main__":
    unittest.main()
