"""
Typed value bindings over descriptor fields.

A binding is a small settable wrapper over one storage location, written as a
(target, field) pair: reading goes through getattr(target, field) and writing
through setattr(target, field, value). The set of variants is closed:

- BoolBinding: boolean literals (1 t T TRUE true True / 0 f F FALSE false False).
- StringBinding: any text, stored verbatim.
- SequenceBinding: a list of booleans or strings, set all at once via set_all().

binder(kind) maps a storage kind (bool, str, list[str], list[bool]) to the
matching factory and refuses anything else with TypeError; that refusal is a
registration error and surfaces while a command is being built, never while
arguments are parsed.

Quick example:
    >>> from types import SimpleNamespace
    >>> target = SimpleNamespace()
    >>> name = binding(target, "name", str, "John")
    >>> str(name), target.name
    ('John', 'John')
"""
import functools
import typing
from collections.abc import Sequence, MutableSequence, Iterable
from types import SimpleNamespace

from .utils import *

_TRUTHS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSITIES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(text, /):
    """
    parse a boolean literal; raises ValueError for anything else.
    """
    if text in _TRUTHS:
        return True
    if text in _FALSITIES:
        return False
    raise ValueError("invalid boolean literal %r" % text)


class Binding(metaclass=IntrospectiveType):
    """
    base class of the binding variants (not instantiable by itself).

    contract
    - construction stores the zero value of the variant into the location and,
      when a non-empty default literal is given, applies it through set().
    - set(text) raises ValueError and leaves the stored value untouched when
      the text is rejected.
    - reset() restores the construction-time state (zero value + default).
    - str(binding) renders the current value as text.
    """
    __introspectable__ = ("target", "field", "default")
    __displayable__ = ("field", "default", "value")

    # presence-only flags (-name without a value) are only allowed for booleans
    boolean = False

    def __init__(self, target, field, /, default=""):
        if type(self) is Binding:
            raise TypeError("binding is abstract, use one of its variants")
        if not isinstance(field, str):
            raise TypeError(f"{type(self).__typename__} 'field' must be a string")
        if not isinstance(default, str):
            raise TypeError(f"{type(self).__typename__} 'default' must be a string")
        self._target = target
        self._field = field
        self._default = default
        self.reset()

    @property
    def value(self):
        return getattr(self._target, self._field)

    def _store(self, value):
        setattr(self._target, self._field, value)

    @staticmethod
    def zero():
        raise NotImplementedError

    @classmethod
    def render(cls, value, /):
        return str(value)

    def reset(self):
        self._store(self.zero())
        if not self._default:
            return
        try:
            self.set(self._default)
        except ValueError as error:
            raise ValueError(
                f"{type(self).__typename__} default {self._default!r} for field {self._field!r} is invalid: {error}"
            ) from None

    def set(self, text, /):
        raise NotImplementedError

    def __str__(self):
        return self.render(self.value)


class BoolBinding(Binding):
    boolean = True

    @staticmethod
    def zero():
        return False

    @classmethod
    def render(cls, value, /):
        return "true" if value else "false"

    def set(self, text, /):
        if not isinstance(text, str):
            raise TypeError(f"{type(self).__typename__} value must be a string")
        self._store(parse_bool(text))


class StringBinding(Binding):

    @staticmethod
    def zero():
        return ""

    def set(self, text, /):
        if not isinstance(text, str):
            raise TypeError(f"{type(self).__typename__} value must be a string")
        self._store(text)


class SequenceBinding(Binding):
    """
    list-valued binding; each element goes through a scalar element binding.

    set_all() builds the whole list before storing it, so a rejected element
    leaves the previous list in place.
    """
    __introspectable__ = ("element",)
    __displayable__ = ("field", "element", "value")

    def __init__(self, target, field, /, default="", *, element):
        if not isinstance(element, type) or not issubclass(element, BoolBinding | StringBinding):
            raise TypeError(f"{type(self).__typename__} 'element' must be a scalar binding type")
        self._element = element
        super().__init__(target, field, default)

    @staticmethod
    def zero():
        return []

    def render(self, value, /):
        return " ".join(map(self._element.render, value))

    def set(self, text, /):
        raise TypeError(f"{type(self).__typename__} cannot be set from a single value, use set_all()")

    def set_all(self, texts, /):
        if not isinstance(texts, Iterable) or isinstance(texts, str):
            raise TypeError(f"{type(self).__typename__} values must be an iterable of strings")
        holder = SimpleNamespace()
        values = []
        for index, text in enumerate(texts):
            element = self._element(holder, "value")
            try:
                element.set(text)
            except ValueError as error:
                raise ValueError("invalid element %r at index %d: %s" % (text, index, error)) from None
            values.append(element.value)
        self._store(values)


@functools.cache
def binder(kind, /):
    """
    return the binding factory for a storage kind.

    supported kinds
    - bool, str
    - list[bool], list[str] (Sequence[...] and MutableSequence[...] are accepted too)

    raises TypeError for any other kind, including nested sequences.
    """
    if kind is bool:
        return BoolBinding
    if kind is str:
        return StringBinding
    if typing.get_origin(kind) in (list, Sequence, MutableSequence):
        element = typing.get_args(kind)
        if element == (bool,):
            return functools.partial(SequenceBinding, element=BoolBinding)
        if element == (str,):
            return functools.partial(SequenceBinding, element=StringBinding)
        raise TypeError("unsupported sequence element kind in %r" % (kind,))
    raise TypeError("unsupported storage kind %r" % (kind,))


def binding(target, field, kind, default="", /):
    """
    build the binding for `kind` over getattr/setattr(target, field).
    """
    return binder(kind)(target, field, default)


__all__ = (
    "Binding",
    "BoolBinding",
    "StringBinding",
    "SequenceBinding",
    "parse_bool",
    "binder",
    "binding",
)
