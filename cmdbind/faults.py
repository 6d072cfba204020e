"""
cmdbind faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues,
  grouped by domain so messages and log searches stay predictable.
- CommandException: base type that carries a message plus context options and
  knows how to render itself with rich (plain or coloured, lines or panel).
- HelpRequested: control signal raised when -h/-help is asked for and the
  flag set does not define it; callers render usage and stop.
- trigger(): central entry point to surface a fault, either by raising it or
  by printing it and terminating the process.

Taxonomy
- registration errors (unsupported field kinds, two variadic fields, bad
  descriptors) are programmer errors; they are plain TypeError/ValueError and
  never pass through here.
- parse errors: MalformedFlagError, UnknownFlagError, FlagValueRequiredError,
  InvalidFlagValueError, InvalidArgumentError, MissingArgumentError.
- lookup errors: NoCommandError, UnknownCommandError.
- handler errors: CommandFailure (see Command.fail()).

UX goals
- Position-first messages: every parse message names the offending token and
  its ordinal position.
- Short titles, one-sentence bodies and a single hint pointing at -help.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (1110x): NO_COMMAND, UNKNOWN_COMMAND
    - flags (1111x): MALFORMED_FLAG, UNKNOWN_FLAG, FLAG_VALUE_REQUIRED, INVALID_FLAG_VALUE
    - positionals (1112x): INVALID_ARGUMENT, MISSING_ARGUMENT
    - handlers (1113x): COMMAND_FAILURE
    """
    # --- routing errors ---
    NO_COMMAND           = 11100
    UNKNOWN_COMMAND      = 11101

    # --- flag errors ---
    MALFORMED_FLAG       = 11111
    UNKNOWN_FLAG         = 11112
    FLAG_VALUE_REQUIRED  = 11117
    INVALID_FLAG_VALUE   = 11118

    # --- positional errors ---
    INVALID_ARGUMENT     = 11121
    MISSING_ARGUMENT     = 11125

    # --- handler errors ---
    COMMAND_FAILURE      = 11131


class CommandException(Exception):
    """
    base of every user-facing fault.

    options (all optional, merged in by trigger())
    - route: "<program> <command>" label shown in the header.
    - hint: one-line next step (usually a pointer to -help).
    - exit: when True, __trigger__ prints and exits(1); otherwise it raises.
    - console: rich Console used for printing (stderr by default).
    - colorful / fancy: coloured output / panel chrome.
    - any fault-specific context (token, index, argument, suggestions, ...).
    """
    code = Unset
    title = "command error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message or self.title

    def __rich__(self):
        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })
        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        parts = ["[ "]
        if route := self.options.get("route"):
            parts += [text(route, styler("prog-name")), " — "]
        if self.code is not Unset:
            parts += [text(str(self.code.value), styler("code")), " | "]
        parts += [text(self.title.title(), styler("error-title")), " ]"]

        header = Text.assemble(*parts)
        message = text(str(self), styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("exit", False):
            raise self from None
        self.options.get("console", console).print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedFlagError(CommandException):
    code = FaultCode.MALFORMED_FLAG
    title = "malformed flag"


class UnknownFlagError(CommandException):
    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"


class FlagValueRequiredError(CommandException):
    code = FaultCode.FLAG_VALUE_REQUIRED
    title = "flag value required"


class InvalidFlagValueError(CommandException):
    code = FaultCode.INVALID_FLAG_VALUE
    title = "invalid flag value"


class InvalidArgumentError(CommandException):
    code = FaultCode.INVALID_ARGUMENT
    title = "invalid argument"


class MissingArgumentError(CommandException):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"


class NoCommandError(CommandException):
    code = FaultCode.NO_COMMAND
    title = "no command"


class UnknownCommandError(CommandException):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"


class CommandFailure(CommandException):
    code = FaultCode.COMMAND_FAILURE
    title = "command failure"


class HelpRequested(Exception):
    """
    -h/-help/--help was given and the flag set does not define it.
    """


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - with exit=True the fault is printed on its console and the process exits
      with status 1; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "MalformedFlagError",
    "UnknownFlagError",
    "FlagValueRequiredError",
    "InvalidFlagValueError",
    "InvalidArgumentError",
    "MissingArgumentError",
    "NoCommandError",
    "UnknownCommandError",
    "CommandFailure",
    "HelpRequested",
    "trigger",
)
