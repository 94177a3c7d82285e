"""
Fault rendering tests.

Scope
- CommandException options, codes, replace() and describe().
- rich rendering: header, hint, colorless and fancy output, __main__ overrides.
- trigger() contract.

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from helmsman import (
    ArgumentCountError,
    CommandException,
    FaultCode,
    UnrecognizedOptionError,
    trigger,
)


def capture():
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestCommandException(TestCase):

    def testOptionsAreReadOnly(self):
        fault = UnrecognizedOptionError("unrecognized option -z", token="-z")
        self.assertEqual(fault.options["token"], "-z")
        with self.assertRaises(TypeError):
            fault.options["token"] = "-y"  # type: ignore[index]

    def testCodes(self):
        self.assertIs(UnrecognizedOptionError("x").code, FaultCode.UNRECOGNIZED_OPTION)
        self.assertIs(ArgumentCountError("x").code, FaultCode.ARGUMENT_COUNT)
        self.assertIsNone(CommandException("x").code)
        self.assertEqual(ArgumentCountError("x", code=FaultCode.UNKNOWN_COMMAND).code, FaultCode.UNKNOWN_COMMAND)

    def testReplaceMergesOptions(self):
        fault = UnrecognizedOptionError("unrecognized option -z", token="-z")
        replaced = fault.replace(prog="app")
        self.assertIsInstance(replaced, UnrecognizedOptionError)
        self.assertEqual(replaced.options["prog"], "app")
        self.assertEqual(replaced.options["token"], "-z")
        self.assertNotIn("prog", fault.options)
        self.assertEqual(str(replaced), "unrecognized option -z")

    def testDescribe(self):
        self.assertEqual(ArgumentCountError("expected 1 argument, got 0").describe(), "error: expected 1 argument, got 0")
        self.assertEqual(
            UnrecognizedOptionError("unrecognized option --cout", hint="did you mean --count?").describe(),
            "error: unrecognized option --cout\n  → did you mean --count?",
        )

    def testNormalizeUsesHostCodes(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_COMMAND: "E-ROUTE"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "E-ROUTE")
            self.assertEqual(FaultCode.ARGUMENT_COUNT.normalize(), "11301")


class TestRendering(TestCase):

    def testPlainHeaderMessageAndHint(self):
        console = capture()
        fault = UnrecognizedOptionError(
            "unrecognized option -z",
            title="unrecognized option",
            hint="did you mean -a?",
        )
        trigger(fault, prog="app", colorful=False, console=console)
        output = console.file.getvalue()
        self.assertIn("[ app — 11201 | Unrecognized Option ]", output)
        self.assertIn("unrecognized option -z", output)
        self.assertIn("→ did you mean -a?", output)

    def testFancyWrapsInPanel(self):
        console = capture()
        trigger(ArgumentCountError("expected 1 argument, got 0", title="wrong argument count"),
                prog="app", colorful=True, fancy=True, console=console)
        output = console.file.getvalue()
        self.assertIn("Wrong Argument Count", output)
        self.assertIn("╭", output)

    def testHostStylesAreMerged(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__styles__", {"code": "bold red"}, create=True):
            fault = ArgumentCountError("x", colorful=True, prog="app")
            self.assertIsNotNone(fault.__rich__())

    def testTriggerRequiresFaultProtocol(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()
