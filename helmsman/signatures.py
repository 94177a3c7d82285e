r"""
Helmsman signature grammar.

A signature is the positional half of a command declaration, written as a
whitespace-separated string:

    <person> [<greeting>] ...

Grammar
- <name>    required parameter
- [<name>]  optional parameter
- ...       trailing marker; the preceding parameter becomes variadic and
            collects every remaining positional token into a list. It may also
            be glued to the last parameter ("[<rest>]...").

Names match r"[^\W\d]\w*(-\w+)*" (unicode letters allowed, no leading digit).

Validation (MalformedSignatureError, raised while commands are declared)
- a required parameter follows an optional one
- more than one "..." marker, or a marker that is not trailing
- a "..." marker with no parameter before it
- unbalanced "<", ">", "[" or "]"
- any other token, or a duplicated parameter name

Parsed signatures are immutable tuples and cached per string.
"""
import functools
import logging
import re
from typing import NamedTuple

from .faults import MalformedSignatureError

logger = logging.getLogger(__name__)

NAME = r"[^\W\d]\w*(?:-\w+)*"

_REQUIRED = re.compile(rf"<({NAME})>")
_OPTIONAL = re.compile(rf"\[<({NAME})>\]")

ELLIPSIS = "..."


class Parameter(NamedTuple):
    name: str
    required: bool = True
    variadic: bool = False

    def __str__(self):
        token = f"<{self.name}>" if self.required else f"[<{self.name}>]"
        return f"{token} {ELLIPSIS}" if self.variadic else token


def _balanced(token):
    depth = {"<": 0, "[": 0}
    for char in token:
        match char:
            case "<" | "[":
                depth[char] += 1
            case ">":
                depth["<"] -= 1
            case "]":
                depth["["] -= 1
        if any(count < 0 for count in depth.values()):
            return False
    return not any(depth.values())


def _parameter(token, signature):
    if match := _REQUIRED.fullmatch(token):
        return Parameter(match.group(1), required=True)
    if match := _OPTIONAL.fullmatch(token):
        return Parameter(match.group(1), required=False)
    if not _balanced(token):
        raise MalformedSignatureError(f"unbalanced delimiters in {token!r}", signature=signature)
    raise MalformedSignatureError(f"invalid signature token {token!r}", signature=signature)


@functools.cache
def parse(signature, /):
    """
    Parse a signature string into an immutable tuple of Parameter.

    Examples
    - parse("")                  -> ()
    - parse("<a> [<b>]")         -> (Parameter("a", True, False), Parameter("b", False, False))
    - parse("<a> [<b>] ...")     -> (..., Parameter("b", False, True))
    """
    if not isinstance(signature, str):
        raise TypeError("signature must be a string")

    parameters = []
    variadic = False

    for token in signature.split():
        if variadic:
            if token == ELLIPSIS or token.endswith(ELLIPSIS):
                raise MalformedSignatureError("signature cannot contain more than one '...'", signature=signature)
            raise MalformedSignatureError("'...' must be the last token of a signature", signature=signature)

        if token == ELLIPSIS:
            if not parameters:
                raise MalformedSignatureError("'...' must follow a parameter", signature=signature)
            parameters[-1] = parameters[-1]._replace(variadic=True)
            variadic = True
            continue

        if glued := token.endswith(ELLIPSIS):
            token = token.removesuffix(ELLIPSIS)
            if ELLIPSIS in token:
                raise MalformedSignatureError("signature cannot contain more than one '...'", signature=signature)

        parameter = _parameter(token, signature)

        if parameter.required and parameters and not parameters[-1].required:
            raise MalformedSignatureError(
                f"required parameter {parameter.name!r} cannot follow an optional one", signature=signature
            )
        if any(parameter.name == other.name for other in parameters):
            raise MalformedSignatureError(f"duplicate parameter name {parameter.name!r}", signature=signature)

        if glued:
            parameter = parameter._replace(variadic=True)
            variadic = True
        parameters.append(parameter)

    logger.debug("parsed signature %r into %d parameter(s)", signature, len(parameters))
    return tuple(parameters)


def render(parameters, /):
    """
    serialize parameters back into signature syntax ("<a> [<b>] ...").
    """
    return " ".join(map(str, parameters))


__all__ = (
    "Parameter",
    "parse",
    "render",
)
