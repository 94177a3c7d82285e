"""
Helmsman utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the descriptor, parsing and rendering layers.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the higher-level arguments/commands layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) as an
    immutable view (tuple, frozenset, mapping proxy) for container values.

- pluralize(text) / quantify(count, text)
  • Best-effort English pluralization for fault messages ("2 arguments").

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> quantify(2, "argument")
    '2 arguments'
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Wrap container values into their immutable counterparts.

    - Sequence (non-string) → tuple
    - Mapping               → MappingProxyType
    - Set                   → frozenset
    - anything else         → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" from the instance and returns an
    immutable view for container types, so descriptors shared between
    commands and groups cannot be mutated through the public API.

    Example
    - Given self._names, declare names = mirror("names") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Best-effort English pluralizer for fault messages and labels.

    Only the last word of a phrase is pluralized; casing is preserved.

    Examples
    - pluralize("argument")       -> "arguments"
    - pluralize("command option") -> "command options"
    - pluralize("entry")          -> "entries"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    if not (match := re.search(r'(\S+)(\s*)$', text)):
        return text

    head = text[:match.start(1)]
    last = match.group(1)
    trail = match.group(2)
    lower = last.lower()

    irregulars = {
        "alias": "aliases",
        "child": "children",
        "person": "people",
        "index": "indices",
    }
    if lower in irregulars:
        plural = irregulars[lower]
    elif lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


def quantify(count, text, /):
    """
    Render "<count> <text>" with the noun pluralized when count != 1.
    """
    return "%d %s" % (count, text if count == 1 else pluralize(text))


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "quantify",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
