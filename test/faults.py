"""
Faults module tests (codes, options, rendering, trigger).

Scope
- Validate the message contract: str(error) is exactly the message.
- Validate option merging (__replace__) and trigger() raising/printing.
- Validate rich rendering (plain and fancy) and host hooks in __main__.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering goes to an in-memory rich Console patched over the module console.
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console, Group
from rich.panel import Panel

from argbind.faults import (
    FaultCode,
    ParseError,
    UnknownOptionError,
    MissingArgumentError,
    InvalidChoiceError,
    trigger,
    getdoc,
)


def _console():
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestParseError(TestCase):
    """Behavioral tests for ParseError and its subclasses."""

    def testMessageIsTheText(self):
        error = MissingArgumentError("expected argument for flag `-v'")
        self.assertEqual(str(error), "expected argument for flag `-v'")
        self.assertIsInstance(error, ParseError)

    def testDefaultCodePerKind(self):
        self.assertIs(UnknownOptionError("x").code, FaultCode.UNKNOWN_OPTION)
        self.assertIs(InvalidChoiceError("x").code, FaultCode.INVALID_CHOICE)

    def testOptionsAreReadOnly(self):
        error = UnknownOptionError("x", input="--x")
        with self.assertRaises(TypeError):
            error.options["input"] = "--y"

    def testLeftoversDefaultToEmpty(self):
        self.assertEqual(UnknownOptionError("x").leftovers, [])

    def testReplaceMergesOptions(self):
        error = UnknownOptionError("unknown flag `--x'", input="--x")
        replaced = error.__replace__(leftovers=["--x", "y"])
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertEqual(str(replaced), "unknown flag `--x'")
        self.assertEqual(replaced.options["input"], "--x")
        self.assertEqual(replaced.leftovers, ["--x", "y"])

    def testRenderPlain(self):
        console = _console()
        error = UnknownOptionError("unknown flag `--x'", prog="tool", hint="did you mean '--y'?")
        self.assertIsInstance(error.__rich__(), Group)
        console.print(error)
        output = console.file.getvalue()
        self.assertIn("tool", output)
        self.assertIn("11112", output)
        self.assertIn("Unknown Option", output)
        self.assertIn("unknown flag `--x'", output)
        self.assertIn("did you mean '--y'?", output)

    def testRenderFancy(self):
        self.assertIsInstance(UnknownOptionError("x", fancy=True).__rich__(), Panel)

    def testFancyPanelSpansTheConsole(self):
        console = _console()
        panel = UnknownOptionError("unknown flag `--x'", fancy=True, prog="tool").__rich__()
        self.assertIsNone(panel.width)
        console.print(panel)
        self.assertIn("unknown flag `--x'", console.file.getvalue())

    def testRenderWithoutColors(self):
        console = Console(file=io.StringIO(), width=200, force_terminal=True)
        console.print(UnknownOptionError("unknown flag `--x'", colorful=False))
        self.assertNotIn("\x1b[1", console.file.getvalue())


class TestTrigger(TestCase):
    """Behavioral tests for trigger() and getdoc()."""

    def testTriggerRaisesMergedFault(self):
        with self.assertRaises(UnknownOptionError) as context:
            trigger(UnknownOptionError("unknown flag `--x'"), leftovers=["--x"])
        self.assertEqual(context.exception.leftovers, ["--x"])

    def testTriggerPrintsWhenAsked(self):
        console = _console()
        with mock.patch("argbind.faults.console", console):
            with self.assertRaises(UnknownOptionError):
                trigger(UnknownOptionError("unknown flag `--x'"), print=True)
        self.assertIn("unknown flag `--x'", console.file.getvalue())

    def testTriggerIsQuietByDefault(self):
        console = _console()
        with mock.patch("argbind.faults.console", console):
            with self.assertRaises(UnknownOptionError):
                trigger(UnknownOptionError("unknown flag `--x'"))
        self.assertEqual(console.file.getvalue(), "")

    def testTriggerRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))

    def testGetdocFromMain(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__docs__", {FaultCode.UNKNOWN_OPTION: "check the spelling"}, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_OPTION), "check the spelling")
            self.assertIsNone(getdoc(FaultCode.INVALID_VALUE))

    def testGetdocRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(11112)

    def testNormalizeFromMain(self):
        main = sys.modules["__main__"]
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11112")
        with mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_OPTION: "E-UNK"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNK")


if __name__ == "__main__":
    unittest.main()
