"""
Field name translation tests.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from cmdbind.names import translate


class TestTranslate(TestCase):

    def testDocumentedExamples(self):
        examples = {
            "FooBar": "foo-bar",
            "Lol": "lol",
            "FOO": "foo",
            "FirstNameLOLCat": "first-name-lol-cat",
            "FooBar_baz_CATz_LOLCaT": "foo-bar-baz-catz-lol-ca-t",
            "Plan9From800Outer_space": "plan9-from800-outer-space",
        }
        for name, expected in examples.items():
            with self.subTest(name=name):
                self.assertEqual(translate(name), expected)

    def testSingleWords(self):
        self.assertEqual(translate("Long"), "long")
        self.assertEqual(translate("Dir"), "dir")

    def testSnakeCase(self):
        self.assertEqual(translate("first_name"), "first-name")

    def testSeparatorRunsCollapse(self):
        self.assertEqual(translate("Foo__Bar"), "foo-bar")

    def testDegenerateInputs(self):
        self.assertEqual(translate(""), "")
        self.assertEqual(translate("123"), "123")

    def testNonStringRaises(self):
        with self.assertRaises(TypeError):
            translate(42)


if __name__ == "__main__":
    unittest.main()
