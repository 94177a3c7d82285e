"""
Helmsman option registry: recognition, cascading and conversion of option
tokens.

Scope
- OptionRegistry indexes every name of the descriptors visible to one
  command (its own plus the shared options of its group path) and strips the
  option tokens out of a raw token stream.
- BoundOptions is the per-invocation result: a read-only mapping once the
  parse pass completes.

Token rules
- "--" ends option parsing; every later token is positional.
- "-" alone is positional.
- "--name" is an exact match; "--name=value" is the inline form of a key.
- "-x" is an exact match.
- "-xyz": when "-x" is a key the tail is its inline value ("-mHello");
  otherwise every char is a short name ("-am" is "-a -m"). Within a cascade a
  key takes the rest of the token, or the next token when it is last. A
  single unknown char makes the whole token unrecognized.
- a key with no inline value consumes the next token, whatever it looks like.
- flags are idempotent; keys are last-wins.
"""
import difflib
import logging
from collections.abc import Mapping

from .arguments import Flag, Key
from .faults import (
    InvalidOptionValueError,
    MissingOptionValueError,
    OptionGroupError,
    UnrecognizedOptionError,
)
from .utils import *
from .values import convert

logger = logging.getLogger(__name__)


class BoundOptions(Mapping):
    """
    Option values of one invocation.

    Keys may be any alias ("-l", "--loudly"), the bare long or short name
    ("loudly", "l") or the descriptor itself. Flags default to False and keys
    to their declared default. Once frozen, writes raise TypeError.
    """

    def __init__(self, descriptors=(), /):
        self._descriptors = tuple(descriptors)
        self._aliases = {name: descriptor for descriptor in self._descriptors for name in descriptor.names}
        self._values = {
            descriptor: False if isinstance(descriptor, Flag) else descriptor.default
            for descriptor in self._descriptors
        }
        self._given = []
        self._frozen = False

    def _resolve(self, key):
        if isinstance(key, Flag | Key):
            if key in self._values:
                return key
            raise KeyError(key)
        if isinstance(key, str):
            for name in (key, "--" + key, "-" + key) if not key.startswith("-") else (key,):
                if name in self._aliases:
                    return self._aliases[name]
        raise KeyError(key)

    def __getitem__(self, key):
        return self._values[self._resolve(key)]

    def __setitem__(self, key, value):
        if self._frozen:
            raise TypeError("bound options are frozen")
        descriptor = self._resolve(key)
        self._values[descriptor] = value
        if descriptor not in self._given:
            self._given.append(descriptor)

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "BoundOptions(%s)" % ", ".join(
            "%s=%r" % (max(descriptor.names, key=len), value) for descriptor, value in self._values.items()
        )

    @property
    def given(self):
        """
        descriptors explicitly present in the token stream, in first-seen order.
        """
        return tuple(self._given)

    @property
    def frozen(self):
        return self._frozen

    def freeze(self):
        self._frozen = True
        return self


class OptionRegistry:
    """
    Index of the options visible to one command.

    Parameters
    - descriptors: Flag/Key instances; the same instance may appear more than
      once (shared options reached through several levels) and is kept once.
    - groups: OptionGroup restrictions checked after each parse pass.

    Raises
    - ValueError: when two different descriptors claim the same name.
    """

    def __init__(self, descriptors=(), /, groups=()):
        self._descriptors = []
        self._names = {}
        for descriptor in descriptors:
            if not isinstance(descriptor, Flag | Key):
                raise TypeError("option registry accepts only flags and keys")
            if descriptor in self._descriptors:
                continue
            for name in descriptor.names:
                if name in self._names:
                    raise ValueError(f"option name {name!r} is declared more than once")
                self._names[name] = descriptor
            self._descriptors.append(descriptor)
        self._groups = tuple(groups)

    descriptors = mirror("descriptors")
    groups = mirror("groups")

    def __contains__(self, name):
        return name in self._names

    def lookup(self, name, /):
        """
        descriptor declaring name, or None.
        """
        return self._names.get(name)

    def parse(self, tokens, /, fail_on_unrecognized=True, check=True):
        """
        Strip and convert option tokens.

        With check=False the OptionGroup restrictions are left to the caller
        (see check()).

        Returns
        - (BoundOptions, residual, unrecognized): frozen options, positional
          tokens in their original order, and the unknown option tokens (which
          are also left in the residual when fail_on_unrecognized is False).

        Raises
        - UnrecognizedOptionError, MissingOptionValueError,
          InvalidOptionValueError, OptionGroupError.
        """
        options = BoundOptions(self._descriptors)
        residual = []
        unrecognized = []
        tokens = list(tokens)
        index = 0

        def take(token):
            nonlocal index
            if index >= len(tokens):
                raise MissingOptionValueError(
                    f"option {token} requires a value",
                    title="missing value",
                    hint=f"pass a value after {token}",
                    token=token,
                    name=token,
                )
            value = tokens[index]
            index += 1
            return value

        def unknown(token):
            if fail_on_unrecognized:
                raise UnrecognizedOptionError(
                    f"unrecognized option {token}",
                    title="unrecognized option",
                    hint=self.suggest(token),
                    token=token,
                )
            logger.debug("passing unrecognized option %r through", token)
            unrecognized.append(token)
            residual.append(token)

        while index < len(tokens):
            token = tokens[index]
            index += 1

            if token == "--":
                residual.extend(tokens[index:])
                break

            if token == "-" or not token.startswith("-"):
                residual.append(token)
                continue

            if token.startswith("--"):
                name, separator, inline = token.partition("=")
                if (descriptor := self._names.get(name)) is None:
                    unknown(token)
                elif isinstance(descriptor, Flag):
                    if separator:
                        raise InvalidOptionValueError(
                            f"flag {name} does not take a value",
                            title="invalid value",
                            hint=f"use {name} without '='",
                            name=name,
                            value=inline,
                            token=token,
                        )
                    options[descriptor] = True
                else:
                    options[descriptor] = self._convert(
                        descriptor, name, inline if separator else take(name)
                    )
                continue

            if len(token) == 2:
                if (descriptor := self._names.get(token)) is None:
                    unknown(token)
                elif isinstance(descriptor, Flag):
                    options[descriptor] = True
                else:
                    options[descriptor] = self._convert(descriptor, token, take(token))
                continue

            if isinstance(head := self._names.get(token[:2]), Key):
                options[head] = self._convert(head, token[:2], token[2:])
                continue

            # Resolution stops at the first key; the rest of the token is its value.
            cascade = []
            for char in token[1:]:
                cascade.append(("-" + char, descriptor := self._names.get("-" + char)))
                if descriptor is None or isinstance(descriptor, Key):
                    break
            if any(descriptor is None for _, descriptor in cascade):
                unknown(token)
                continue

            for position, (name, descriptor) in enumerate(cascade):
                if isinstance(descriptor, Flag):
                    options[descriptor] = True
                    continue
                rest = token[position + 2:]
                options[descriptor] = self._convert(descriptor, name, rest or take(name))
                break

        if check:
            self.check(options)
        logger.debug(
            "recognized %d option(s), %d residual token(s), %d unrecognized",
            len(options.given), len(residual), len(unrecognized),
        )
        return options.freeze(), residual, unrecognized

    def check(self, options, /):
        """
        Verify every OptionGroup restriction against the given options.
        """
        for group in self._groups:
            given = [option for option in group.options if option in options.given]
            if group.allows(len(given)):
                continue
            names = ", ".join(max(option.names, key=len) for option in group.options)
            match group.restriction:
                case "at-most-one":
                    message = f"options {names} are mutually exclusive"
                case "at-least-one":
                    message = f"one or more of {names} is required"
                case _:
                    message = f"exactly one of {names} is required"
            raise OptionGroupError(
                message,
                title="option group misuse",
                restriction=group.restriction,
                given=tuple(max(option.names, key=len) for option in given),
            )

    def suggest(self, token, /):
        """
        hint text with close matches for an unknown option token, if any.
        """
        name = token.partition("=")[0]
        if matches := difflib.get_close_matches(name, list(self._names), n=3, cutoff=0.6):
            return "did you mean %s?" % " or ".join(matches)
        return Unset

    @staticmethod
    def _convert(descriptor, name, token):
        try:
            value = convert(descriptor.type, token)
        except ValueError as exception:
            raise InvalidOptionValueError(
                f"invalid value {token!r} for option {name}",
                title="invalid value",
                hint=str(exception) or Unset,
                name=name,
                value=token,
            ) from exception
        if descriptor.choices and value not in descriptor.choices:
            raise InvalidOptionValueError(
                f"invalid value {token!r} for option {name}",
                title="invalid value",
                hint="choose from %s" % ", ".join(map(str, descriptor.choices)),
                name=name,
                value=token,
            )
        logger.debug("option %s bound to %r", name, value)
        return value


__all__ = (
    "BoundOptions",
    "OptionRegistry",
)
