r"""
Helmsman commands and command groups.

Overview
- Command: one routable leaf. It declares a name, an optional shortcut, a
  positional signature ("<person> [<greeting>] ..."), its own options and
  option groups, and the callback run with the bound values.
- CommandGroup: a named node holding commands and nested groups. It may
  declare shared options (visible to every command below it) and a default
  command used when routing stops at this group.
- command(...): decorator building a Command from a function; the name comes
  from the function name (underscores become dashes) and the description
  from its docstring.

Validation (raised while declaring, never while parsing)
- names match r"[^\W\d_](-?[^\W_]+)*"; shortcuts are non-empty and contain
  no whitespace.
- signatures must be well formed (MalformedSignatureError).
- option names are unique within a command; option groups only reference the
  command's own options.
- child names and shortcuts are unique within a group.
- a child attached to a group must not reuse a name of the group's shared
  options anywhere below it. Groups are checked against their own ancestors
  when they are attached, so a child added to an already attached group is
  checked against that group only.

Quick example:
    >>> from helmsman import CommandGroup, Flag, command
    >>> @command("<person> [<greeting>]", options=[Flag("-l", "--loudly")])
    ... def greet(arguments, options):
    ...     '''Greet someone.'''
    >>> CommandGroup("people", greet)
"""
import inspect
import logging
import re

from rich.text import Text

from . import signatures
from .arguments import ArgumentType, Flag, Key, OptionGroup
from .options import OptionRegistry
from .utils import *

logger = logging.getLogger(__name__)

NAME = r"[^\W\d_](-?[^\W_]+)*"


def _process_strings(cls, metadata, /):
    """
    Validate and normalize name, shortcut and descr.

    Errors
    - TypeError: when a value is not str (or Text for descr) or Unset.
    - ValueError: when a string is empty after trimming or malformed.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(NAME, name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid command name, got {name!r}")
    metadata["name"] = name

    if not isinstance(shortcut := metadata["shortcut"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'shortcut' must be a string")
    elif isinstance(shortcut, str) and (not (shortcut := shortcut.strip()) or re.search(r"\s", shortcut)):
        raise ValueError(f"{cls.__typename__} 'shortcut' must be a non-empty word")
    metadata["shortcut"] = coalesce(shortcut)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _process_options(cls, metadata, name, /):
    options = tuple(metadata[name])
    for option in options:
        if not isinstance(option, Flag | Key):
            raise TypeError(f"{cls.__typename__} {name!r} must contain flags or keys")
    metadata[name] = options


def _process_visibility(node, inherited, /):
    """
    Reject option names claimed twice by the options visible to any command
    below node: its own options plus every shared option on the way down.
    """
    if isinstance(node, Command):
        try:
            OptionRegistry(node.options + inherited)
        except ValueError as exception:
            raise ValueError(f"command {node.name!r}: {exception}") from None
        return
    try:
        OptionRegistry(node.shared + inherited)
    except ValueError as exception:
        raise ValueError(f"command group {node.name!r}: {exception}") from None
    for child in node._children:
        _process_visibility(child, node.shared + inherited)


class Command(metaclass=ArgumentType):
    """
    Routable leaf command.

    Parameters
    - name: command name as typed by users ("migrate").
    - signature: positional signature string, parsed once here.
    - shortcut: alternative token routing to this command ("m").
    - options: Flag/Key descriptors owned by the command.
    - groups: OptionGroup restrictions over those options.
    - descr: short description shown in usage and listings.
    - callback: callable(arguments, options) run by execute().
    - fail_on_unrecognized: when False, unknown option tokens are passed
      through to the positional stream instead of failing.
    - hidden: suppress the command from group listings.
    """

    __introspectable__ = (
        "name",
        "signature",
        "shortcut",
        "options",
        "groups",
        "descr",
        "fail_on_unrecognized",
        "hidden",
    )

    def __init__(
            self,
            name,
            signature="",
            /,
            shortcut=Unset,
            options=(),
            groups=(),
            descr=Unset,
            callback=Unset,
            fail_on_unrecognized=True,
            hidden=False
    ):
        metadata = {
            "name": name,
            "shortcut": shortcut,
            "descr": descr,
            "options": options,
            "groups": groups,
        }
        _process_strings(type(self), metadata)
        _process_options(type(self), metadata, "options")

        if not isinstance(signature, str):
            raise TypeError(f"{type(self).__typename__} 'signature' must be a string")
        self._parameters = signatures.parse(signature)
        self._signature = signatures.render(self._parameters)

        # Rejects duplicate option names within the command.
        OptionRegistry(metadata["options"])

        for group in (groups := tuple(metadata["groups"])):
            if not isinstance(group, OptionGroup):
                raise TypeError(f"{type(self).__typename__} 'groups' must contain option groups")
            if any(option not in metadata["options"] for option in group.options):
                raise ValueError(f"{type(self).__typename__} option groups must reference the command's own options")
        metadata["groups"] = groups

        if callback is not Unset and not callable(callback):
            raise TypeError(f"{type(self).__typename__} 'callback' must be callable")

        for key, object in metadata.items():
            setattr(self, "_" + key, object)
        self._callback = callback
        self._fail_on_unrecognized = bool(fail_on_unrecognized)
        self._hidden = bool(hidden)

    parameters = mirror("parameters")
    callback = mirror("callback")

    def execute(self, invocation, /):
        """
        Run the callback with the bound arguments and options.

        Returns whatever the callback returns (None when there is no callback).
        """
        if self._callback is Unset:
            return None
        logger.debug("executing %s", self._name)
        return self._callback(invocation.arguments, invocation.options)

    def matches(self, token, /):
        return token == self._name or (self._shortcut is not None and token == self._shortcut)


def command(signature="", /, **metadata):
    """
    Build a Command from a function.

    Forms
    - @command("<person>", options=[...])
    - @command  (no signature)

    The name defaults to the function name with underscores turned into
    dashes and the description to the function docstring.
    """
    if callable(signature):
        return command()(signature)
    if not isinstance(signature, str):
        raise TypeError("@command() signature must be a string")

    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        options = dict(metadata)
        name = options.pop("name", callback.__name__.replace("_", "-"))
        if (descr := options.pop("descr", Unset)) is Unset and (doc := inspect.getdoc(callback)):
            descr = doc
        return Command(name, signature, callback=callback, descr=descr, **options)

    return wrapper


class CommandGroup(metaclass=ArgumentType):
    """
    Named node of the command tree.

    Children are commands or nested groups; each name and shortcut is unique
    within the group. Shared options are visible to every command below the
    group. The default command, when set, runs when routing stops here;
    otherwise the nearest ancestor's default applies.
    """

    __introspectable__ = (
        "name",
        "shortcut",
        "children",
        "shared",
        "default",
        "descr",
        "hidden",
    )

    def __init__(self, name, *children, shortcut=Unset, shared=(), default=Unset, descr=Unset, hidden=False):
        metadata = {
            "name": name,
            "shortcut": shortcut,
            "descr": descr,
            "shared": shared,
        }
        _process_strings(type(self), metadata)
        _process_options(type(self), metadata, "shared")
        OptionRegistry(metadata["shared"])

        if default is not Unset and not isinstance(default, Command):
            raise TypeError(f"{type(self).__typename__} 'default' must be a command")

        for key, object in metadata.items():
            setattr(self, "_" + key, object)
        self._default = coalesce(default)
        self._hidden = bool(hidden)
        self._children = []
        self.add(*children)

    @property
    def commands(self):
        return tuple(child for child in self._children if isinstance(child, Command))

    @property
    def groups(self):
        return tuple(child for child in self._children if isinstance(child, CommandGroup))

    def matches(self, token, /):
        return token == self._name or (self._shortcut is not None and token == self._shortcut)

    def add(self, *children):
        """
        Attach commands or groups; returns the last one attached.
        """
        child = None
        for child in children:
            if not isinstance(child, Command | CommandGroup):
                raise TypeError(f"{type(self).__typename__} children must be commands or groups")
            for token in filter(None, (child.name, child.shortcut)):
                if any(other.matches(token) for other in self._children):
                    raise ValueError(f"{type(self).__typename__} {self._name!r} already has a child named {token!r}")
            _process_visibility(child, self.shared)
            self._children.append(child)
        return child

    def find(self, token, /):
        """
        child group or command matching token by name or shortcut, or None.
        """
        for child in self._children:
            if child.matches(token):
                return child
        return None

    def command(self, signature="", /, **metadata):
        """
        Decorator building a Command (see command()) and attaching it here.
        """
        if callable(signature):
            return self.add(command()(signature))

        @rename("command")
        def wrapper(callback, /):
            return self.add(command(signature, **metadata)(callback))

        return wrapper


__all__ = (
    "Command",
    "CommandGroup",
    "command",
)
