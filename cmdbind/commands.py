"""
cmdbind command layer: build commands from descriptors and run them.

What this module provides
- Argument: one positional parameter (name, description, optional, binding).
- Command: built once from a handler and its descriptor class.
  • Every public field of the descriptor becomes a flag, a positional
    parameter or the single variadic slot, depending on its annotation.
  • parse() binds a token list into one descriptor instance; run() parses
    and calls the handler with that instance (and the command itself).
- command(...): create a Command or a decorator that produces one.

Descriptors
    from typing import Annotated

    class LsOptions:
        Long: Annotated[bool, "List in long format"]
        Dir: Annotated[str, '?"." Directory to list']

    @command("ls", "List files")
    def ls(values: LsOptions, command):
        command.log(values.Dir)

Field classification
- '!' / '?'       required / optional positional parameter.
- sequence kind   the variadic slot ('!' makes it required), always.
- anything else   a flag named after the translated field name.

Registration errors (unsupported kinds, a second variadic field, a required
positional after an optional one, non-class descriptors) are TypeError and
surface from Command(...) itself; parse errors are CommandException faults.
"""
import inspect
import typing
from inspect import Parameter
from typing import Annotated, ClassVar

from rich.console import Console

from .bindings import binder
from .faults import *
from .flags import FlagSet
from .names import translate
from .tags import Marker, parse_tag
from .usage import arguments_string, command_usage
from .utils import *

console = Console()


class Argument(metaclass=IntrospectiveType):
    """
    a positional parameter; the value is owned by exactly one command.
    """
    __introspectable__ = ("name", "descr", "optional", "value")

    def __init__(self, name, descr, optional, value, /):
        self._name = name
        self._descr = descr
        self._optional = optional
        self._value = value


def _arity(handler):
    """
    number of positional parameters the handler accepts (0, 1 or 2).
    """
    try:
        parameters = inspect.signature(handler).parameters.values()
    except ValueError:
        raise TypeError("command 'handler' signature cannot be inspected") from None
    arity = 0
    for parameter in parameters:
        match parameter.kind:
            case Parameter.POSITIONAL_ONLY | Parameter.POSITIONAL_OR_KEYWORD:
                arity += 1
            case Parameter.VAR_POSITIONAL:
                arity = 2
            case Parameter.KEYWORD_ONLY if parameter.default is Parameter.empty:
                raise TypeError("command 'handler' cannot have required keyword-only parameters")
    if arity > 2:
        raise TypeError("command 'handler' must take at most two positional parameters")
    return arity


def _descriptor(handler):
    """
    the descriptor class named by the annotation of the first parameter.
    """
    first = next(iter(inspect.signature(handler).parameters.values()))
    if first.kind is Parameter.VAR_POSITIONAL:
        raise TypeError("command 'handler' needs an explicit 'options' descriptor")
    try:
        hints = typing.get_type_hints(handler)
    except NameError as error:
        raise TypeError(f"command 'handler' annotations cannot be resolved: {error}") from None
    try:
        return hints[first.name]
    except KeyError:
        raise TypeError(
            f"command 'handler' first parameter {first.name!r} must be annotated with a descriptor class"
        ) from None


def _fields(descriptor):
    """
    yield (field, kind, tag) for every public field of a descriptor class.
    """
    for field, hint in typing.get_type_hints(descriptor, include_extras=True).items():
        if field.startswith("_") or typing.get_origin(hint) is ClassVar:
            continue
        tag = ""
        if typing.get_origin(hint) is Annotated:
            tag = next((entry for entry in hint.__metadata__ if isinstance(entry, str)), "")
            hint = hint.__origin__
        yield field, hint, tag


class Command(metaclass=IntrospectiveType):
    """
    A named, runnable command whose inputs are declared by a descriptor class.

    Parameters
    - name: str
      Command name used for dispatch and in usage text.
    - descr: str
      One-line description shown by help.
    - handler: Callable
      handler(), handler(values) or handler(values, command). values is the
      descriptor instance populated by parse().
    - options: type (keyword-only)
      Descriptor class; defaults to the annotation of the handler's first
      parameter.

    Raises
    - TypeError: invalid handler, descriptor or field layout (see module docs).
    - ValueError: invalid default literal or a flag name used twice.
    """
    __introspectable__ = (
        "name",
        "descr",
        "options",
        "count",
        "arguments",
        "variadic",
        "program",
        "values",
    )
    __displayable__ = ("name", "descr", "options", "arguments", "variadic")

    def __init__(self, name, descr="", handler=Unset, /, *, options=Unset):
        if not isinstance(name, str) or not name:
            raise TypeError(f"{type(self).__typename__} 'name' must be a non-empty string")
        if not isinstance(descr, str):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")
        if not callable(handler):
            raise TypeError(f"{type(self).__typename__} 'handler' must be callable")

        self._name = name
        self._descr = descr
        self._handler = handler
        self._arity = _arity(handler)
        self._options = FlagSet(name)
        self._arguments = []
        self._variadic = None
        self._program = None
        self._values = None

        if options is Unset:
            if not self._arity:
                options = None
            else:
                options = _descriptor(handler)
        elif not self._arity:
            raise TypeError(f"{type(self).__typename__} 'handler' must accept the populated options")

        if options is not None:
            if not isinstance(options, type) or options.__module__ == "builtins":
                raise TypeError(f"{type(self).__typename__} 'options' must be a record class, got {options!r}")
            self._values = options.__new__(options)
            for field, kind, tag in _fields(options):
                self._process_field(field, kind, tag)

        self._count = len(self._options)

    def _process_field(self, field, kind, tag):
        name = translate(field)
        default, descr, marker = parse_tag(tag)
        try:
            factory = binder(kind)
        except TypeError as error:
            raise TypeError(f"{type(self).__typename__} {self._name!r} field {field!r}: {error}") from None

        if typing.get_origin(kind) is not None:
            if self._variadic is not None:
                raise TypeError(
                    f"{type(self).__typename__} {self._name!r} has more than one variadic field "
                    f"({self._variadic.name!r} and {name!r})"
                )
            if default:
                raise TypeError(f"{type(self).__typename__} {self._name!r} variadic field {field!r} cannot have a default")
            value = factory(self._values, field)
            self._variadic = Argument(name, descr, marker is not Marker.REQUIRED, value)
            return

        value = factory(self._values, field, default)
        match marker:
            case Marker.REQUIRED:
                if any(argument.optional for argument in self._arguments):
                    raise TypeError(
                        f"{type(self).__typename__} {self._name!r} required argument {name!r} "
                        f"cannot follow an optional one"
                    )
                self._arguments.append(Argument(name, descr, False, value))
            case Marker.OPTIONAL:
                self._arguments.append(Argument(name, descr, True, value))
            case _:
                self._options.var(value, name, descr)

    @property
    def quiet(self):
        return self._program is not None and self._program.quiet

    def parse(self, tokens=(), /):
        """
        bind tokens into the descriptor instance and return it.

        flags come first (see FlagSet.parse), then positional parameters in
        declaration order, then every remaining token goes to the variadic
        slot. Without a variadic slot surplus tokens are ignored.

        raises
        - any flag fault of FlagSet.parse, or HelpRequested.
        - InvalidArgumentError: a positional binding rejected its token.
        - MissingArgumentError: a required positional (or a required variadic
          slot) got no token.
        """
        for argument in self._arguments:
            argument.value.reset()
        if self._variadic is not None:
            self._variadic.value.reset()

        tokens = list(tokens)
        remaining = self._options.parse(tokens)
        offset = len(tokens) - len(remaining)

        for index, (argument, token) in enumerate(zip(self._arguments, remaining), offset + 1):
            try:
                argument.value.set(token)
            except ValueError as error:
                raise InvalidArgumentError(
                    "invalid value %r for argument <%s> at %s position: %s" % (
                        token, argument.name, ordinal(index), error
                    ),
                    token=token,
                    index=index,
                    argument=argument.name,
                ) from None

        for index, argument in enumerate(self._arguments[len(remaining):], len(remaining) + offset + 1):
            if not argument.optional:
                raise MissingArgumentError(
                    "missing argument <%s> at %s position" % (argument.name, ordinal(index)),
                    index=index,
                    argument=argument.name,
                )

        if (variadic := self._variadic) is not None:
            surplus = remaining[len(self._arguments):]
            index = offset + len(self._arguments) + 1
            if not surplus and not variadic.optional:
                raise MissingArgumentError(
                    "missing argument <%s> at %s position" % (variadic.name, ordinal(index)),
                    index=index,
                    argument=variadic.name,
                )
            try:
                variadic.value.set_all(surplus)
            except ValueError as error:
                raise InvalidArgumentError(
                    "invalid value for argument <%s...> from %s position: %s" % (
                        variadic.name, ordinal(index), error
                    ),
                    index=index,
                    argument=variadic.name,
                ) from None

        return self._values

    def run(self, program=None, tokens=(), /):
        """
        Parse tokens and call the handler, with `program` as this command's
        program for the duration of the call.

        Behavior
        - -h/-help prints usage instead of running the handler.
        - parse faults go through trigger(): raised, or printed followed by
          exit(1) when the program asks for it.
        - the previous program reference is restored afterwards, so a command
          can be shared between programs.
        """
        previous, self._program = self._program, program
        try:
            try:
                self.parse(tokens)
            except HelpRequested:
                self.usage()
                return
            except CommandException as fault:
                self.trigger(fault)
                return
            match self._arity:
                case 0:
                    self._handler()
                case 1:
                    self._handler(self._values)
                case _:
                    self._handler(self._values, self)
        finally:
            self._program = previous

    def trigger(self, fault, /, **options):
        program = self._program
        if program is None:
            route = self._name
            see = f"{self._name} -help"
        else:
            route = f"{program.name} {self._name}"
            see = f"{route} -help" if self._options.parsed else f"{program.name} -help"

        hint = f"see '{see}'"
        if suggestions := fault.options.get("suggestions"):
            hint = f"did you mean '-{suggestions[0]}'? {hint}"

        context = {"route": route, "hint": hint}
        if program is not None:
            context |= {
                "exit": program.exit_on_error,
                "console": program.stderr,
                "colorful": program.colorful,
                "fancy": program.fancy,
            }
        trigger(fault, **(context | options))

    def fail(self, *objects):
        """
        report a handler-level failure (CommandFailure) and stop.

        with a terminating program this prints the message and exits(1);
        otherwise CommandFailure is raised.
        """
        self.trigger(CommandFailure(" ".join(map(str, objects)) or Unset))

    def log(self, *objects):
        """
        print a status line on stdout unless the program is quiet.
        """
        if self.quiet:
            return
        self._stdout().print(*objects, markup=False, highlight=False)

    def logf(self, format, /, *args):
        if self.quiet:
            return
        self._stdout().print(format % args, markup=False, highlight=False)

    def _stdout(self):
        return self._program.stdout if self._program is not None else console

    def usage(self):
        command_usage(self)

    def synopsis(self):
        """
        name followed by the positional parameters, e.g. 'ls [<dir>]'.
        """
        return self._name + arguments_string(self)


def command(name, descr="", handler=Unset, /, **options):
    """
    Create a Command, or return a decorator that builds one later.

    Forms
    - command("ls", "List files", handler) -> Command
    - @command("ls", "List files") decorating the handler -> Command
    """
    @rename("command")
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@command() must be applied to a callable")
        return Command(name, descr, handler, **options)

    return wrapper(handler) if handler is not Unset else wrapper


__all__ = (
    "Argument",
    "Command",
    "command",
)
