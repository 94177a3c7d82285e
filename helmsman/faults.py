"""
Helmsman faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- CommandException: base type for user-input errors; carries message + options
  and knows how to render itself (rich) in a short, lowercased, actionable way.
- MalformedSignatureError: developer error raised while declaring commands.
- trigger(): central entry point to print any fault with runtime options.

Taxonomy
- developer errors abort setup (signature strings, descriptor metadata) and are
  plain ValueError/TypeError subclasses; they are never caught per invocation.
- user-input errors (CommandException subclasses) are caught once per parse
  cycle by the application and turned into a usage message + exit code.

Integration
- parsers raise CommandException subclasses with context options
  (title, code, hint, token, name, value, ...).
- the application merges runtime options (prog, colorful, fancy) via
  fault.replace(...) and prints it with trigger().
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - routing (111xx)
      • UNKNOWN_COMMAND
    - options (112xx)
      • UNRECOGNIZED_OPTION, MISSING_OPTION_VALUE, INVALID_OPTION_VALUE,
        OPTION_GROUP_MISUSE
    - positionals (113xx)
      • ARGUMENT_COUNT

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- routing errors ---
    UNKNOWN_COMMAND      = 11101

    # --- option errors ---
    UNRECOGNIZED_OPTION  = 11201
    MISSING_OPTION_VALUE = 11202
    INVALID_OPTION_VALUE = 11203
    OPTION_GROUP_MISUSE  = 11204

    # --- positional errors ---
    ARGUMENT_COUNT       = 11301

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class MalformedSignatureError(ValueError):
    """
    A developer-authored signature string is invalid.

    Raised while a command is declared, never while a user invocation is
    parsed; it should abort application setup.
    """

    def __init__(self, message, /, signature=Unset):
        super().__init__(message)
        self.signature = signature


class CommandException(Exception):
    __faultcode__ = None

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message or "")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
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

        prog = text(getattr(main, "__prog__", self.options.get("prog", "")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize() if self.code else "", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    @property
    def code(self):
        return self.options.get("code", type(self).__faultcode__)

    def __trigger__(self):
        (self.options.get("console") or console).print(self)

    def replace(self, **overrides):
        """
        return a copy of this fault with runtime options merged in.
        """
        return type(self)(self.message, **{**self.options, **overrides})

    def __replace__(self, **overrides):
        return self.replace(**overrides)

    def describe(self):
        """
        plain one-line description used in Failure messages.
        """
        description = "error: %s" % self.message
        if hint := self.options.get("hint"):
            description += "\n  → %s" % hint
        return description


class UnknownCommandError(CommandException):
    __faultcode__ = FaultCode.UNKNOWN_COMMAND


class UnrecognizedOptionError(CommandException):
    __faultcode__ = FaultCode.UNRECOGNIZED_OPTION


class MissingOptionValueError(CommandException):
    __faultcode__ = FaultCode.MISSING_OPTION_VALUE


class InvalidOptionValueError(CommandException):
    __faultcode__ = FaultCode.INVALID_OPTION_VALUE


class OptionGroupError(CommandException):
    __faultcode__ = FaultCode.OPTION_GROUP_MISUSE


class ArgumentCountError(CommandException):
    __faultcode__ = FaultCode.ARGUMENT_COUNT


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and replace methods (see CommandException).
    - options are merged into the fault via replace(**options) before printing.

    typical options
    - prog, colorful, fancy, console, and any other context the renderer may
      want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "replace") or
        not callable(fault.replace)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and replace methods")
    fault.replace(**options).__trigger__()


__all__ = (
    "FaultCode",
    "MalformedSignatureError",
    "CommandException",
    "UnknownCommandError",
    "UnrecognizedOptionError",
    "MissingOptionValueError",
    "InvalidOptionValueError",
    "OptionGroupError",
    "ArgumentCountError",
    "trigger",
)
