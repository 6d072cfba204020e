"""
Flag set tests (token shapes, terminators, faults and help).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from types import SimpleNamespace
from unittest import TestCase

from cmdbind.faults import (
    HelpRequested,
    MalformedFlagError,
    UnknownFlagError,
    FlagValueRequiredError,
    InvalidFlagValueError,
)
from cmdbind.bindings import binding
from cmdbind.flags import FlagSet


class TestFlagSetParsing(TestCase):

    def setUp(self):
        self.flags = FlagSet("tool")
        self.long = self.flags.bool("long", False, "List in long format")
        self.name = self.flags.string("name", "John", "Name of a person")

    def testDefaults(self):
        self.assertEqual(self.flags.parse([]), [])
        self.assertIs(self.long.value, False)
        self.assertEqual(self.name.value, "John")

    def testSingleAndDoubleDash(self):
        self.assertEqual(self.flags.parse(["--long", "-name", "Jane", "rest"]), ["rest"])
        self.assertIs(self.long.value, True)
        self.assertEqual(self.name.value, "Jane")

    def testInlineValues(self):
        self.flags.parse(["-long=false", "--name=Jane"])
        self.assertIs(self.long.value, False)
        self.assertEqual(self.name.value, "Jane")

    def testDoubleDashIsConsumed(self):
        self.assertEqual(self.flags.parse(["--", "-long"]), ["-long"])
        self.assertIs(self.long.value, False)

    def testSingleDashStops(self):
        self.assertEqual(self.flags.parse(["-", "-long"]), ["-", "-long"])

    def testNonFlagStops(self):
        self.assertEqual(self.flags.parse(["file", "-long"]), ["file", "-long"])
        self.assertIs(self.long.value, False)

    def testParseStartsFromDefaults(self):
        self.flags.parse(["-long", "-name", "Jane"])
        self.flags.parse([])
        self.assertIs(self.long.value, False)
        self.assertEqual(self.name.value, "John")

    def testParsedAndRemaining(self):
        self.assertFalse(self.flags.parsed)
        self.flags.parse(["-long", "a", "b"])
        self.assertTrue(self.flags.parsed)
        self.assertEqual(self.flags.remaining, ["a", "b"])


class TestFlagSetFaults(TestCase):

    def setUp(self):
        self.flags = FlagSet("tool")
        self.flags.bool("long", False, "List in long format")
        self.flags.string("name", "", "Name of a person")

    def testMalformedFlagRaises(self):
        for token in ("---long", "-=x"):
            with self.subTest(token=token):
                with self.assertRaises(MalformedFlagError):
                    self.flags.parse([token])

    def testUnknownFlagRaisesWithSuggestions(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.flags.parse(["-lon"])
        self.assertIn("long", context.exception.options["suggestions"])
        self.assertIn("first position", str(context.exception))

    def testMissingValueRaises(self):
        with self.assertRaises(FlagValueRequiredError):
            self.flags.parse(["-long", "-name"])

    def testInvalidBooleanRaises(self):
        with self.assertRaises(InvalidFlagValueError) as context:
            self.flags.parse(["-long=maybe"])
        self.assertEqual(context.exception.options["index"], 1)

    def testHelpRequested(self):
        for token in ("-h", "-help", "--help"):
            with self.subTest(token=token):
                with self.assertRaises(HelpRequested):
                    self.flags.parse([token])

    def testDefinedHelpFlagIsNotIntercepted(self):
        help = self.flags.bool("help", False, "Custom help")
        self.flags.parse(["-help"])
        self.assertIs(help.value, True)


class TestFlagSetRegistration(TestCase):

    def testDuplicateNameRaises(self):
        flags = FlagSet("tool")
        flags.bool("long")
        with self.assertRaises(ValueError):
            flags.string("long")

    def testMalformedNameRaises(self):
        with self.assertRaises(ValueError):
            FlagSet("tool").bool("-long")

    def testSequenceBindingRaises(self):
        with self.assertRaises(TypeError):
            FlagSet("tool").var(binding(SimpleNamespace(), "files", list[str]), "files")

    def testTargetBoundFlag(self):
        program = SimpleNamespace(quiet=True)
        flags = FlagSet("tool")
        flags.bool("quiet", False, "Suppress status messages", target=program, field="quiet")
        self.assertIs(program.quiet, False)
        flags.parse(["-quiet"])
        self.assertIs(program.quiet, True)

    def testRenderedDefaults(self):
        flags = FlagSet("tool")
        flags.bool("long", True)
        flags.string("name", "John")
        self.assertEqual(flags["long"].default, "true")
        self.assertEqual(flags["name"].default, "John")
        self.assertEqual([flag.name for flag in flags], ["long", "name"])


if __name__ == "__main__":
    unittest.main()
