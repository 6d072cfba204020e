"""
Flag sets: named, typed, optional options parsed from the head of a token list.

Token forms (single and double dash are equivalent)
- -name / --name            boolean flags become true; other flags take the next token
- -name=value / --name=value inline value (booleans accept any boolean literal)
- --                        consumed; ends flag parsing
- -  or any non-dash token  ends flag parsing (not consumed)

Parsing stops with a fault on the first malformed, unknown or rejected flag.
-h, -help and --help raise HelpRequested unless the set defines them.

Quick example:
    >>> flags = FlagSet("ls")
    >>> long = flags.bool("long", False, "List in long format")
    >>> flags.parse(["-long", "/tmp"])
    ['/tmp']
    >>> long.value
    True
"""
import difflib
import os.path
import sys
from collections.abc import Iterable
from types import SimpleNamespace

from .bindings import Binding, BoolBinding, StringBinding, SequenceBinding
from .faults import *
from .utils import *


class Flag(metaclass=IntrospectiveType):
    """
    one registered flag: its name, description, binding and rendered default.
    """
    __introspectable__ = ("name", "descr", "value", "default")

    def __init__(self, name, descr, value, /):
        self._name = name
        self._descr = descr
        self._value = value
        self._default = str(value)


class FlagSet(metaclass=IntrospectiveType):
    """
    ordered collection of flags with Go-style command-line semantics.

    state
    - parsed: whether parse() ran at least once.
    - remaining: tokens left after the last parse (first non-flag onward).
    """
    __introspectable__ = ("name", "parsed", "remaining")
    __displayable__ = ("name", "parsed")

    def __init__(self, name=Unset, /):
        name = coalesce(name, os.path.basename(sys.argv[0]))
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        self._name = name
        self._flags = {}
        self._parsed = False
        self._remaining = []

    def __iter__(self):
        return iter(self._flags.values())

    def __len__(self):
        return len(self._flags)

    def __contains__(self, name):
        return name in self._flags

    def __getitem__(self, name):
        return self._flags[name]

    def lookup(self, name, /):
        return self._flags.get(name)

    def var(self, value, name, descr="", /):
        """
        register `value` (a scalar binding) under `name`.

        raises TypeError for non-bindings and sequence bindings, ValueError for
        malformed or already registered names.
        """
        if not isinstance(value, Binding):
            raise TypeError(f"{type(self).__typename__} flag value must be a binding")
        if isinstance(value, SequenceBinding):
            raise TypeError(f"{type(self).__typename__} flag {name!r} cannot hold a sequence binding")
        if not isinstance(name, str) or not isinstance(descr, str):
            raise TypeError(f"{type(self).__typename__} flag name and description must be strings")
        if not name or name.startswith("-") or "=" in name:
            raise ValueError(f"{type(self).__typename__} flag name {name!r} is malformed")
        if name in self._flags:
            raise ValueError(f"{type(self).__typename__} {self._name!r} flag {name!r} is already in use")
        self._flags[name] = flag = Flag(name, descr, value)
        return flag

    def _define(self, factory, name, default, descr, target, field):
        if (target is Unset) != (field is Unset):
            raise TypeError(f"{type(self).__typename__} 'target' and 'field' must be given together")
        if target is Unset:
            target, field = SimpleNamespace(), "value"
        value = factory(target, field, default)
        self.var(value, name, descr)
        return value

    def bool(self, name, default=False, descr="", /, *, target=Unset, field=Unset):
        """
        define a boolean flag, optionally stored on getattr/setattr(target, field).

        returns the binding; read the parsed value from binding.value.
        """
        return self._define(BoolBinding, name, "true" if default else "", descr, target, field)

    def string(self, name, default="", descr="", /, *, target=Unset, field=Unset):
        """
        define a string flag, optionally stored on getattr/setattr(target, field).
        """
        return self._define(StringBinding, name, default, descr, target, field)

    def parse(self, tokens, /):
        """
        consume leading flag tokens and return the remaining tokens.

        every registered flag is reset to its default first, so each call
        starts from scratch.

        raises
        - MalformedFlagError: '---name', '-=value' and similar shapes.
        - UnknownFlagError: the name is not registered (suggestions attached).
        - FlagValueRequiredError: a non-boolean flag is the last token.
        - InvalidFlagValueError: the binding rejected the value.
        - HelpRequested: -h/-help/--help without a matching flag.
        """
        if not isinstance(tokens, Iterable) or isinstance(tokens, str):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")

        self._parsed = True
        for flag in self:
            flag.value.reset()

        index = 0
        while index < len(tokens):
            token = tokens[index]
            if len(token) < 2 or not token.startswith("-"):
                break
            if token == "--":
                index += 1
                break

            position = index + 1
            input = token[2:] if token.startswith("--") else token[1:]
            if not input or input[0] in "-=":
                raise MalformedFlagError(
                    "bad flag syntax %r at %s position" % (token, ordinal(position)),
                    token=token,
                    index=position,
                )

            name, assigned, value = input.partition("=")
            try:
                flag = self._flags[name]
            except KeyError:
                if name in ("h", "help"):
                    raise HelpRequested(name) from None
                raise UnknownFlagError(
                    "unknown flag %r at %s position" % ("-" + name, ordinal(position)),
                    token=token,
                    index=position,
                    suggestions=difflib.get_close_matches(name, self._flags.keys(), 5),
                ) from None
            index += 1

            if not assigned:
                if flag.value.boolean:
                    value = "true"
                elif index < len(tokens):
                    value = tokens[index]
                    index += 1
                else:
                    raise FlagValueRequiredError(
                        "flag %r at %s position needs a value" % ("-" + name, ordinal(position)),
                        token=token,
                        index=position,
                        flag=flag,
                    )

            try:
                flag.value.set(value)
            except ValueError as error:
                raise InvalidFlagValueError(
                    "invalid value %r for flag %r at %s position: %s" % (value, "-" + name, ordinal(position), error),
                    token=token,
                    index=position,
                    flag=flag,
                ) from None

        self._remaining = tokens[index:]
        return list(self._remaining)


__all__ = (
    "Flag",
    "FlagSet",
)
