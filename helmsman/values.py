"""
Helmsman value conversion (raw token -> typed value).

Overview
- convert(type, token): turn one raw string into the value a Key declares.
  • str is the identity; int and float use their constructors.
  • bool accepts a small, case-insensitive vocabulary (see BOOLEANS).
  • any class exposing a __convert__(token) classmethod (SupportsConvert) is
    trusted to convert itself and to raise ValueError on bad input.
  • enum.Enum subclasses are restricted choices: the token is converted with
    the type of the members' values, then looked up by value.
  • any other callable is used as a plain converter.
- describe(type): the value signature shown in usage listings.

Failures always surface as ValueError; the option layer turns them into
user-facing faults that name the option and the offending token.
"""
import builtins
import enum
import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

BOOLEANS = {
    "y": True,
    "yes": True,
    "t": True,
    "true": True,
    "n": False,
    "no": False,
    "f": False,
    "false": False,
}


@runtime_checkable
class SupportsConvert(Protocol):
    """
    Capability of a type that can build itself from a raw token.
    """

    @classmethod
    def __convert__(cls, token, /): ...


def _boolean(token):
    try:
        return BOOLEANS[token.lower()]
    except KeyError:
        raise ValueError(f"{token!r} is not a boolean (expected one of {", ".join(BOOLEANS)})") from None


def _enumerated(type, token):
    if not (members := list(type)):
        raise ValueError(f"{type.__name__} has no members")
    value = convert(builtins.type(members[0].value), token)
    try:
        return type(value)
    except ValueError:
        raise ValueError(f"{token!r} is not one of {describe(type)}") from None


def convert(type, token, /):
    """
    Convert token with type's conversion capability.

    Raises
    - ValueError: when the token cannot be represented by the type.
    - TypeError: when type offers no conversion capability at all.
    """
    if not isinstance(token, str):
        raise TypeError("convert() token must be a string")

    match type:
        case _ if type is str:
            return token
        case _ if type is bool:
            return _boolean(token)
        case _ if isinstance(type, SupportsConvert):
            return type.__convert__(token)
        case enum.EnumType() if issubclass(type, enum.Enum):
            return _enumerated(type, token)
        case _ if callable(type):
            try:
                return type(token)
            except (ValueError, TypeError) as exception:
                logger.debug("converter %r rejected %r: %s", type, token, exception)
                raise ValueError(f"{token!r} is not a valid {getattr(type, "__name__", "value")}") from None
        case _:
            raise TypeError(f"{type!r} cannot convert raw tokens")


def describe(type, /):
    """
    value signature for usage listings: <value>, or {a,b,c} for enums.
    """
    if isinstance(type, enum.EnumType) and issubclass(type, enum.Enum):
        return "{%s}" % ",".join(str(member.value) for member in type)
    return "<value>"


__all__ = (
    "BOOLEANS",
    "SupportsConvert",
    "convert",
    "describe",
)
