r"""
Helmsman option descriptors.

Overview
- Descriptors
  • Flag: named, presence-only switch, e.g. -l/--loudly.
  • Key[_T]: named, value-bearing option, e.g. -m/--message <value>.
  • OptionGroup: a restriction ("at-most-one", "at-least-one", "exactly-one")
    over options declared on the same command.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    selected fields via read-only properties declared in __introspectable__.

Metadata (sanitized on construction)
- Shared (Flag/Key)
  • names: one or more of "-x" or "--long-name"; duplicates rejected.
  • descr: Unset | str | Text (short help), non-empty when provided.
  • hidden: bool (suppresses from usage listings).
- Key only
  • type: the value type; str, int, float, bool, enum.Enum subclasses, types
    implementing __convert__, or any callable converter.
  • metavar: Unset | str (label in usage).
  • choices: Iterable (duplicates rejected unless a Set).
  • default: any value; bound when the key is not given (None by default).

Descriptors are immutable once built and compared by identity; the same
instance may be shared by several groups and commands.

Quick example:
    >>> from helmsman.arguments import Flag, Key, OptionGroup
    >>> loudly = Flag("-l", "--loudly", descr="shout the greeting")
    >>> count = Key("-c", "--count", type=int, default=1)
    >>> OptionGroup(loudly, Flag("-q", "--quietly"))
"""
import builtins
import functools
import operator
import re
from collections.abc import Iterable, Set

from rich.text import Text

from .utils import *

NAME = r"-[^\W\d_]|--[^\W\d_](-?[^\W_]+)*"

RESTRICTIONS = ("at-most-one", "at-least-one", "exactly-one")


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable, sealed types.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<=[a-z])(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag(names=frozenset({'-l', '--loudly'}), descr=None, hidden=False)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate names and descr shared by Flag and Key.

    Raises
    - TypeError: when names are missing, not strings, or descr is not a string.
    - ValueError: when a name is malformed or duplicated, or descr is blank.

    Notes
    - Name format regex: r"-[^\W\d_]|--[^\W\d_](-?[^\W_]+)*"
      - short: a single dash and a single letter ("-l").
      - long: two dashes and hyphen-separated segments ("--dry-run").
    - This function mutates the provided metadata dict in place.
    """
    names = set()
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(NAME, name):
            raise ValueError(f"{cls.__typename__} names must look like '-x' or '--long-name', got {name!r}")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.add(name)

    metadata["names"] = names

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

    metadata["descr"] = coalesce(descr)


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate metavar, type and choices of value-bearing options.
    """
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    # Trust the converter; only require callability.
    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be iterable")
    if not isinstance(choices, Set):
        sanitized = []
        for choice in choices:
            if choice in sanitized:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
            sanitized.append(choice)
        choices = tuple(sanitized)
    metadata["choices"] = choices

    # Either show a metavar or enumerate choices, not both.
    if metadata["metavar"] and metadata["choices"]:
        raise TypeError(f"{cls.__typename__} cannot have both 'metavar' and 'choices'")


class Flag(metaclass=ArgumentType):
    """
    Named, presence-only option.

    A flag is False unless one of its names appears in the token stream;
    repeating it keeps it True.
    """

    __introspectable__ = (
        "names",
        "descr",
        "hidden",
    )

    def __init__(self, *names, descr=Unset, hidden=False):
        metadata = {
            "names": names,
            "descr": descr,
            "hidden": bool(hidden),
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __init_subclass__(cls, **options):
        raise TypeError(f"type {cls.__base__.__name__!r} is not an acceptable base type")


class Key[_T](metaclass=ArgumentType):
    """
    Named, value-bearing option.

    Key[_T] declares how a named option (e.g. -m/--message) is recognized,
    converted and rendered in usage listings. Its value is taken inline
    ("--message=hi", "-mhi") or from the next token ("-m hi"); when the key
    is given more than once the last value wins.

    Highlights
    - Generic over the payload type _T (conversion provided via 'type').
    - choices restricts converted values to an enumerated set; enum types
      restrict themselves.
    - default is bound when the key is absent (None unless given).

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "names",
        "type",
        "metavar",
        "choices",
        "default",
        "descr",
        "hidden",
    )

    def __init__(
            self,
            *names,
            type=str,
            metavar=Unset,
            choices=(),
            default=None,
            descr=Unset,
            hidden=False
    ):
        metadata = {
            "names": names,
            "type": type,
            "metavar": metavar,
            "choices": choices,
            "default": default,
            "descr": descr,
            "hidden": bool(hidden),
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __init_subclass__(cls, **options):
        raise TypeError(f"type {cls.__base__.__name__!r} is not an acceptable base type")


class OptionGroup(metaclass=ArgumentType):
    """
    Restriction over a set of options declared on the same command.

    Restrictions
    - "at-most-one":  the options are mutually exclusive.
    - "at-least-one": one or more of them must be given.
    - "exactly-one":  one and only one of them must be given.
    """

    __introspectable__ = (
        "options",
        "restriction",
    )

    def __init__(self, *options, restriction="at-most-one"):
        if len(options) < 2:
            raise TypeError(f"{type(self).__typename__} must contain at least two options")
        for option in options:
            if not isinstance(option, Flag | Key):
                raise TypeError(f"{type(self).__typename__} members must be flags or keys")
        if len(set(map(id, options))) != len(options):
            raise ValueError(f"{type(self).__typename__} cannot contain duplicates")
        if restriction not in RESTRICTIONS:
            raise ValueError(f"{type(self).__typename__} 'restriction' must be one of {", ".join(RESTRICTIONS)}")

        self._options = options
        self._restriction = restriction

    def allows(self, count, /):
        """
        whether count given members satisfy the restriction.
        """
        match self._restriction:
            case "at-most-one":
                return count <= 1
            case "at-least-one":
                return count >= 1
            case "exactly-one":
                return count == 1


__all__ = (
    "RESTRICTIONS",
    "ArgumentType",
    "Flag",
    "Key",
    "OptionGroup",
)
