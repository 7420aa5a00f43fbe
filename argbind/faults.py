"""
Argbind faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing parse
  errors. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- ParseError: base type that carries message + options (leftovers, code, hint,
  runtime flags) and knows how to render itself with rich.
- trigger(): central entry point to surface a fault (optionally printed to
  stderr, always raised).
- getdoc(): optional description lookup for a code from the host application.

Message contract
- The exception text (str(error)) is exactly the message, e.g.
  "expected argument for flag `-v'". Titles, codes and hints only show up in
  the rendered form.

Integration
- The parser builds a fault, then calls trigger(fault, leftovers=..., **runtime)
  which merges the options (__replace__), prints the fault when asked to
  (PRINT_ERRORS) and raises it.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND, COMMAND_REQUIRED
    - options and flags (1111x/1112x)
      • UNKNOWN_OPTION, AMBIGUOUS_OPTION, MISSING_ARGUMENT, INVALID_CHOICE,
        MISSING_REQUIRED_OPTION
    - positionals (1112x)
      • MISSING_REQUIRED_POSITIONAL
    - values (1113x)
      • INVALID_VALUE

    codes are normalized to a string via normalize() so hosts can remap them
    (e.g., to shorter labels) without touching the numeric ids.
    """
    # --- routing errors ---
    UNKNOWN_COMMAND             = 11101
    COMMAND_REQUIRED            = 11103

    # --- option/flag errors ---
    UNKNOWN_OPTION              = 11112
    AMBIGUOUS_OPTION            = 11113
    MISSING_ARGUMENT            = 11117
    INVALID_CHOICE              = 11124
    MISSING_REQUIRED_OPTION     = 11127

    # --- positional errors ---
    MISSING_REQUIRED_POSITIONAL = 11125

    # --- value errors ---
    INVALID_VALUE               = 11131

    def normalize(self):
        """
        Label shown for this code: __main__.__codes__[self] when the host
        defines it, else the numeric value.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParseError(Exception):
    """
    Base class of every error raised while parsing an argument vector.

    Options (read-only mapping)
    - leftovers: tokens handed back to the caller with the error.
    - code, title, hint: rendering metadata (defaults per subclass).
    - prog, fancy, colorful, print: runtime flags of the raising parser.
    """
    __code__ = Unset
    __title__ = "parse error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def leftovers(self):
        return list(self.options.get("leftovers", ()))

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        main = __import__("__main__")

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
            "docs": "dim #8A8AA0",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog") or "argbind"), styler("prog-name"))

        code = self.code
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code else "?", styler("code")),
            " | ",
            text(self.options.get("title", type(self).__title__).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            renders.append(text(docs, styler("docs")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if self.options.get("print"):
            console.print(self)
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(ParseError):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class AmbiguousOptionError(ParseError):
    __code__ = FaultCode.AMBIGUOUS_OPTION
    __title__ = "ambiguous option"


class MissingArgumentError(ParseError):
    __code__ = FaultCode.MISSING_ARGUMENT
    __title__ = "missing argument"


class InvalidValueError(ParseError):
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"


class InvalidChoiceError(ParseError):
    __code__ = FaultCode.INVALID_CHOICE
    __title__ = "invalid choice"


class MissingRequiredOptionError(ParseError):
    __code__ = FaultCode.MISSING_REQUIRED_OPTION
    __title__ = "missing required option"


class MissingRequiredPositionalError(ParseError):
    __code__ = FaultCode.MISSING_REQUIRED_POSITIONAL
    __title__ = "missing required argument"


class UnknownCommandError(ParseError):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class CommandRequiredError(ParseError):
    __code__ = FaultCode.COMMAND_REQUIRED
    __title__ = "command required"


def trigger(fault, /, **options):
    """
    Merge options into fault (__replace__), then let it print and raise
    itself (__trigger__).

    The parser passes leftovers, prog, print, fancy, colorful and docs; any
    other option is kept on the fault for the renderer.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    Documentation of a code from __main__.__docs__, None when the host has none.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "UnknownOptionError",
    "AmbiguousOptionError",
    "MissingArgumentError",
    "InvalidValueError",
    "InvalidChoiceError",
    "MissingRequiredOptionError",
    "MissingRequiredPositionalError",
    "UnknownCommandError",
    "CommandRequiredError",
    "trigger",
    "getdoc",
)
