"""
Helmsman positional binding.

bind(parameters, tokens) walks the parameters once, left to right:
- one token per non-variadic parameter, required and optional alike;
- a trailing variadic parameter absorbs every remaining token into a list
  (none at all when it is optional, which binds []);
- optional parameters left without a token are absent from the result.

There is no backtracking: slots are always filled before the variadic tail.
"""
import logging
import sys
from collections.abc import Mapping
from types import MappingProxyType

from .faults import ArgumentCountError
from .utils import *

logger = logging.getLogger(__name__)


class BoundArguments(Mapping):
    """
    Read-only mapping of parameter name to a value or a list of values.

    Absent optional parameters are not members: arguments.get("name") is None.
    """

    def __init__(self, values=(), /):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, name):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "BoundArguments(%s)" % ", ".join("%s=%r" % item for item in self._values.items())


def _bounds(parameters):
    minimum = sum(parameter.required for parameter in parameters)
    if parameters and parameters[-1].variadic:
        return minimum, None
    return minimum, len(parameters)


def bind(parameters, tokens, /):
    """
    Bind positional tokens to parameters.

    Raises
    - ArgumentCountError: with options minimum, maximum (None when
      unbounded), expected (a range; sys.maxsize stops an open range) and got.
    """
    tokens = list(tokens)
    minimum, maximum = _bounds(parameters)

    if len(tokens) < minimum or (maximum is not None and len(tokens) > maximum):
        expected = range(minimum, sys.maxsize if maximum is None else maximum + 1)
        if maximum is None:
            wanted = "at least %s" % quantify(minimum, "argument")
        elif minimum == maximum:
            wanted = quantify(minimum, "argument")
        else:
            wanted = "%d to %s" % (minimum, quantify(maximum, "argument"))
        raise ArgumentCountError(
            f"expected {wanted}, got {len(tokens)}",
            title="wrong argument count",
            minimum=minimum,
            maximum=maximum,
            expected=expected,
            got=len(tokens),
        )

    values = {}
    index = 0
    for parameter in parameters:
        if parameter.variadic:
            values[parameter.name] = tokens[index:]
            break
        if index >= len(tokens):
            continue
        values[parameter.name] = tokens[index]
        index += 1

    logger.debug("bound %d token(s) to %s", len(tokens), list(values))
    return BoundArguments(values)


__all__ = (
    "BoundArguments",
    "bind",
)
