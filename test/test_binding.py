"""
Positional binding tests.

Scope
- bind(): greedy left-to-right assignment, variadic tails, absent optionals.
- ArgumentCountError context (minimum, maximum, expected, got).

Conventions
- Test method names follow CamelCase per project convention.
"""
import sys
import unittest
from unittest import TestCase

from helmsman import ArgumentCountError, BoundArguments, bind
from helmsman.signatures import parse


class TestBind(TestCase):

    def testCountPolicyWithoutVariadic(self):
        for required in range(3):
            for optional in range(3):
                signature = " ".join(
                    ["<r%d>" % index for index in range(required)] +
                    ["[<o%d>]" % index for index in range(optional)]
                )
                parameters = parse(signature)
                for count in range(6):
                    tokens = ["t%d" % index for index in range(count)]
                    with self.subTest(signature=signature, count=count):
                        if required <= count <= required + optional:
                            self.assertEqual(len(bind(parameters, tokens)), count)
                        else:
                            with self.assertRaises(ArgumentCountError):
                                bind(parameters, tokens)

    def testOptionalVariadicScenario(self):
        parameters = parse("<a> [<b>] ...")
        with self.assertRaises(ArgumentCountError):
            bind(parameters, [])
        self.assertEqual(dict(bind(parameters, ["x"])), {"a": "x", "b": []})
        self.assertEqual(dict(bind(parameters, ["x", "y", "z"])), {"a": "x", "b": ["y", "z"]})

    def testRequiredVariadicNeedsOneToken(self):
        parameters = parse("<a> <b> ...")
        with self.assertRaises(ArgumentCountError) as context:
            bind(parameters, ["x"])
        self.assertEqual(context.exception.options["minimum"], 2)
        self.assertIsNone(context.exception.options["maximum"])
        self.assertEqual(context.exception.options["expected"].stop, sys.maxsize)
        self.assertEqual(context.exception.options["got"], 1)
        self.assertEqual(dict(bind(parameters, ["x", "y"])), {"a": "x", "b": ["y"]})

    def testAbsentOptionalIsNotPresent(self):
        arguments = bind(parse("<a> [<b>]"), ["x"])
        self.assertNotIn("b", arguments)
        self.assertIsNone(arguments.get("b"))

    def testOptionalVariadicAfterUnfilledOptional(self):
        arguments = bind(parse("<a> [<b>] [<c>] ..."), ["x"])
        self.assertEqual(dict(arguments), {"a": "x", "c": []})

    def testTooManyTokensContext(self):
        with self.assertRaises(ArgumentCountError) as context:
            bind(parse("<a> [<b>]"), ["x", "y", "z"])
        self.assertEqual(context.exception.options["expected"], range(1, 3))
        self.assertEqual(context.exception.options["maximum"], 2)
        self.assertEqual(context.exception.options["got"], 3)
        self.assertIn("expected 1 to 2 arguments, got 3", str(context.exception))

    def testEmptySignatureRejectsTokens(self):
        self.assertEqual(len(bind((), [])), 0)
        with self.assertRaises(ArgumentCountError):
            bind((), ["stray"])

    def testBoundArgumentsAreReadOnly(self):
        arguments = bind(parse("<a>"), ["x"])
        self.assertIsInstance(arguments, BoundArguments)
        with self.assertRaises(TypeError):
            arguments["a"] = "y"  # type: ignore[index]

    def testTokensKeepTheirOrder(self):
        arguments = bind(parse("<first> <second> [<rest>] ..."), ["1", "2", "3", "4"])
        self.assertEqual((arguments["first"], arguments["second"], arguments["rest"]), ("1", "2", ["3", "4"]))


if __name__ == "__main__":
    unittest.main()
