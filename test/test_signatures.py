"""
Signature grammar tests.

Scope
- parse(): required/optional/variadic forms, caching, and every malformed case.
- render(): re-serialization of parsed parameters.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from helmsman import MalformedSignatureError
from helmsman.signatures import Parameter, parse, render


class TestParse(TestCase):

    def testEmptySignature(self):
        self.assertEqual(parse(""), ())
        self.assertEqual(parse("   "), ())

    def testRequiredAndOptional(self):
        self.assertEqual(
            parse("<a> [<b>]"),
            (Parameter("a", True, False), Parameter("b", False, False)),
        )

    def testTrailingEllipsisMarksPrecedingVariadic(self):
        self.assertEqual(
            parse("<a> [<b>] ..."),
            (Parameter("a", True, False), Parameter("b", False, True)),
        )

    def testGluedEllipsis(self):
        self.assertEqual(parse("<a> [<b>]..."), parse("<a> [<b>] ..."))

    def testRequiredVariadic(self):
        self.assertEqual(parse("<files> ..."), (Parameter("files", True, True),))

    def testHyphenatedAndUnicodeNames(self):
        self.assertEqual(parse("<dry-run> [<café>]")[0].name, "dry-run")
        self.assertEqual(parse("<dry-run> [<café>]")[1].name, "café")

    def testParsedSignaturesAreCached(self):
        self.assertIs(parse("<person> [<greeting>]"), parse("<person> [<greeting>]"))

    def testRequiredAfterOptionalRejected(self):
        with self.assertRaises(MalformedSignatureError):
            parse("[<a>] <b>")

    def testMultipleEllipsisRejected(self):
        with self.assertRaises(MalformedSignatureError):
            parse("<a> ... ...")
        with self.assertRaises(MalformedSignatureError):
            parse("<a>... ...")

    def testEllipsisNotTrailingRejected(self):
        with self.assertRaises(MalformedSignatureError):
            parse("<a> ... [<b>]")

    def testEllipsisWithoutParameterRejected(self):
        with self.assertRaises(MalformedSignatureError):
            parse("...")

    def testUnbalancedDelimitersRejected(self):
        for signature in ("<a", "a>", "[<a>", "<a>]", "[<a]>"):
            with self.subTest(signature=signature):
                with self.assertRaises(MalformedSignatureError) as context:
                    parse(signature)
                self.assertEqual(context.exception.signature, signature)

    def testInvalidTokensRejected(self):
        for signature in ("a", "<1a>", "<>", "<a b>", "[a]"):
            with self.subTest(signature=signature):
                with self.assertRaises(MalformedSignatureError):
                    parse(signature)

    def testDuplicateNamesRejected(self):
        with self.assertRaises(MalformedSignatureError):
            parse("<a> [<a>]")

    def testMalformedSignatureIsValueError(self):
        with self.assertRaises(ValueError):
            parse("[<a>] <b>")

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            parse(["<a>"])


class TestRender(TestCase):

    def testRoundTripModuloWhitespace(self):
        for signature in ("", "<a>", "<a> [<b>]", "<a> [<b>] ...", "  <a>   [<b>]  ...", "[<rest>] ...", "<x> <y> ..."):
            with self.subTest(signature=signature):
                self.assertEqual(render(parse(signature)), " ".join(signature.split()))

    def testGluedEllipsisRendersSpaced(self):
        self.assertEqual(render(parse("<a> [<b>]...")), "<a> [<b>] ...")


if __name__ == "__main__":
    unittest.main()
