"""
Helmsman application layer.

Scope
- CLI: the root command group. It installs the help and version commands,
  the root "-h/--help" flag and the global "-h"/"-v" shortcuts, and owns the
  runtime configuration (colorful, fancy, consoles).
- CLI.parse(tokens): route, strip options, bind positionals. It returns an
  Invocation, or a Failure carrying the usage text and the caught fault.
  User-input faults never escape parse(); developer errors do.
- CLI.go(tokens): parse, print any failure to stderr and return an exit
  code; otherwise execute the command and return its result as exit code.
- invoke(cli, prompt): run go() with argv, a shell-like string or an
  iterable of tokens.

The package never calls sys.exit; the caller decides what to do with the
returned code:

    >>> raise SystemExit(invoke(app))
"""
import difflib
import logging
import shlex
import sys
from collections.abc import Iterable
from typing import NamedTuple

from rich.console import Console
from rich.text import Text

from . import faults
from .arguments import Flag
from .binding import BoundArguments, bind
from .commands import Command, CommandGroup
from .faults import CommandException, UnknownCommandError, trigger
from .options import BoundOptions
from .routing import CommandPath, GroupPath, Route, route
from .usage import listing, usage
from .utils import *

logger = logging.getLogger(__name__)


class Invocation(NamedTuple):
    command: Command
    path: CommandPath
    arguments: BoundArguments
    options: BoundOptions
    route: Route


class Failure(NamedTuple):
    message: str
    code: int = 1
    fault: CommandException | None = None
    path: GroupPath | None = None


def _styled(text, colorful):
    text = Text(text)
    if colorful:
        text.highlight_regex(r"(?m)^(Usage|Groups|Commands|Options):", "bold")
    return text


class HelpCommand(Command):
    """
    Prints usage of a command or the listing of a group.

    Its tokens are routed again from the group path it was reached on:
    "app help db migrate" shows the usage of "app db migrate", "app db" (by
    fallback) shows the listing of "app db", and "app db help migrate" shows
    the usage of "app db migrate". Tokens that do not resolve print the
    listing of the deepest group reached and an unknown-command fault.
    """

    def __init__(self, name="help", /, shortcut="-h", descr="show help for a command or group", hidden=False):
        super().__init__(
            name,
            "[<command>] ...",
            shortcut=shortcut,
            descr=descr,
            fail_on_unrecognized=False,
            hidden=hidden,
        )

    def execute(self, invocation, /):
        application = invocation.path.root
        target = route(invocation.route.path, invocation.arguments.get("command") or [])

        if not target.fallback:
            application.print(usage(target.path.appending(target.command)))
            return 0

        application.print(listing(target.path))
        if not target.residual:
            return 0

        application.fault(UnknownCommandError(
            f"unknown command {target.residual[0]!r}",
            title="unknown command",
            hint=application.suggest(target.path, target.residual[0]),
            token=target.residual[0],
        ))
        return 1


class VersionCommand(Command):
    """
    Prints "<name> version <version>".
    """

    def __init__(self, name="version", /, shortcut="-v", descr="show version", hidden=False):
        super().__init__(name, shortcut=shortcut, descr=descr, hidden=hidden)

    def execute(self, invocation, /):
        application = invocation.path.root
        application.print(f"{application.name} version {application.version or 'unknown'}")
        return 0


class CLI(CommandGroup):
    """
    Root of a command-line application.

    Parameters
    - name: program name, first word of every usage line.
    - *children: commands and groups.
    - version: version string printed by the version command.
    - descr: description shown in the root listing.
    - default: command run when nothing routes (the help command otherwise).
    - help_command / version_command: replacements for the built-in commands;
      None disables them.
    - shared: options visible to every command.
    - help_flag: add a shared "-h/--help" flag redirecting to help. Commands
      declaring "-h" or "--help" themselves need help_flag=False.
    - colorful / fancy: rendering of help and faults.
    - console / error_console: rich consoles for regular and fault output.
    """

    __introspectable__ = CommandGroup.__introspectable__ + (
        "version",
        "colorful",
        "fancy",
    )

    def __init__(
            self,
            name,
            *children,
            version=Unset,
            descr=Unset,
            default=Unset,
            help_command=Unset,
            version_command=Unset,
            shared=(),
            help_flag=True,
            colorful=True,
            fancy=False,
            console=Unset,
            error_console=Unset
    ):
        if not isinstance(version, str | Unset):
            raise TypeError("cli 'version' must be a string")
        elif isinstance(version, str) and not (version := version.strip()):
            raise ValueError("cli 'version' cannot be empty")

        for label, object in (("help_command", help_command), ("version_command", version_command)):
            if object is not Unset and object is not None and not isinstance(object, Command):
                raise TypeError(f"cli {label!r} must be a command or None")

        self._help = HelpCommand() if help_command is Unset else help_command
        self._versioner = VersionCommand() if version_command is Unset else version_command
        self._help_flag = Flag("-h", "--help", descr="show help") if help_flag else None

        installed = [command for command in (self._help, self._versioner) if command is not None]
        shared = tuple(shared) + ((self._help_flag,) if self._help_flag else ())

        super().__init__(
            name,
            *children,
            *installed,
            shared=shared,
            default=coalesce(default, self._help) or Unset,
            descr=descr,
        )

        self._version = coalesce(version)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._console = coalesce(console, Console(highlight=False))
        self._error_console = coalesce(error_console, faults.console)

    @property
    def help_command(self):
        return self._help

    @property
    def version_command(self):
        return self._versioner

    @property
    def shortcuts(self):
        """
        global shortcuts recognized before any other routing step.
        """
        return {
            command.shortcut: command
            for command in (self._help, self._versioner)
            if command is not None and command.shortcut
        }

    @property
    def builtins(self):
        """
        help and version commands by name, routable below the root too
        ("app db help migrate") unless a child of that group takes the name.
        """
        return {
            command.name: command
            for command in (self._help, self._versioner)
            if command is not None
        }

    @property
    def console(self):
        return self._console

    def print(self, text, /):
        self._console.print(_styled(text, self._colorful))

    def fault(self, fault, /):
        trigger(fault, prog=self.name, colorful=self._colorful, fancy=self._fancy, console=self._error_console)

    def suggest(self, path, token, /):
        """
        hint naming close child names of the group at path, if any.
        """
        names = [name for child in path.group.children for name in (child.name, child.shortcut) if name]
        if matches := difflib.get_close_matches(token, names, n=3):
            return "did you mean %s?" % " or ".join(matches)
        return f"run '{path.joined()} help' to list commands" if self._help else Unset

    def parse(self, tokens, /):
        """
        Resolve tokens into an Invocation, or a Failure for user-input errors.
        """
        tokens = list(tokens)
        resolved = route(self, tokens)

        if resolved.command is None:
            fault = UnknownCommandError(
                f"unknown command {resolved.residual[0]!r}" if resolved.residual else "no command given",
                title="unknown command",
                hint=self.suggest(resolved.path, resolved.residual[0]) if resolved.residual else Unset,
            )
            return Failure(listing(resolved.path) + "\n\n" + fault.describe(), 1, fault, resolved.path)

        path = resolved.path.appending(resolved.command)
        command = resolved.command

        registry = path.registry()
        try:
            options, residual, _ = registry.parse(
                resolved.residual,
                fail_on_unrecognized=command.fail_on_unrecognized,
                check=False,
            )

            if self._help_flag and options.get(self._help_flag) and command is not self._help and self._help:
                logger.debug("help flag redirects %s to %s", path.joined(), self._help.name)
                target = [] if resolved.fallback else [command.name]
                redirected = Route(self._help, resolved.path, target)
                path = resolved.path.appending(self._help)
                return Invocation(self._help, path, BoundArguments({"command": target}), options, redirected)

            registry.check(options)
            arguments = bind(command.parameters, residual)
        except CommandException as fault:
            logger.debug("parse of %r failed: %s", tokens, fault)
            return Failure(usage(path) + "\n\n" + fault.describe(), 1, fault, path)

        return Invocation(command, path, arguments, options, resolved)

    def go(self, tokens=Unset, /):
        """
        Parse and execute; returns the exit code.

        Failures print the usage of the resolved command and the fault to
        the error console. Exceptions raised by command callbacks propagate.
        """
        result = self.parse(sys.argv[1:] if tokens is Unset else tokens)

        if isinstance(result, Failure):
            if isinstance(result.path, CommandPath):
                self._error_console.print(_styled(usage(result.path), self._colorful))
            elif result.path is not None:
                self._error_console.print(_styled(listing(result.path), self._colorful))
            self.fault(result.fault)
            return result.code

        match outcome := result.command.execute(result):
            case None:
                return 0
            case int():
                return outcome
            case _:
                return 0


def invoke(cli, prompt=Unset, /):
    """
    Run cli.go() with a prompt.

    Prompt
    - Unset: read tokens from sys.argv[1:].
    - str: shell-like string; split with shlex.split.
    - Iterable[str]: pre-tokenized sequence.

    Returns the exit code.
    """
    if not hasattr(cli, "go") or not callable(cli.go):
        raise TypeError("invoke() first argument must implement a go method")

    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() prompt must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() prompt must be a string or an iterable of strings")

    return cli.go(tokens)


__all__ = (
    "Invocation",
    "Failure",
    "HelpCommand",
    "VersionCommand",
    "CLI",
    "invoke",
)
