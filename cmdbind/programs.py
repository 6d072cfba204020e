"""
cmdbind program layer: a named set of commands behind one entry point.

A Program is the explicit configuration object of a command-line tool: its
name, its global flags, its command registry, the default command and the
error policy. Nothing here is process-wide; build one Program at start-up and
call main().

    program = Program("example")
    program.options.bool("quiet", False, "Suppress status messages", target=program, field="quiet")

    @program.command("version", "Show version")
    def version():
        print("example v1.2.3")

    if __name__ == "__main__":
        program.main()

Dispatch
- global flags are parsed first; the next token names the command. A program
  with a default command and no registered commands skips global flags.
- 'help [<command>]' is always available, even when not registered.
- without a command name the default command (if any) runs; a program with no
  commands at all hands every remaining token to its default command.
- lookup faults are raised, or printed followed by exit(1) when
  exit_on_error is set (the default).
"""
import difflib
import os.path
import shlex
import sys
from collections.abc import Iterable
from typing import Annotated

from rich.console import Console

from .commands import Command
from .faults import *
from .flags import FlagSet
from .names import translate
from .usage import program_usage
from .utils import *


class _HelpOptions:
    command: Annotated[str, "? Command to describe"]


def _help(values: _HelpOptions, command):
    program = command.program
    if values.command == "help":
        program.stderr.print("Usage: help <command>", markup=False, highlight=False)
    elif (target := program.commands.get(values.command)) is not None:
        target.run(program, ["-h"])
    elif not values.command:
        program.usage()
    else:
        command.trigger(
            UnknownCommandError(
                "unknown command %r" % values.command,
                token=values.command,
                suggestions=difflib.get_close_matches(values.command, program.names(), 3),
            ),
            hint=f"see '{program.name} help'",
        )


def _tokens(prompt):
    """
    normalize a prompt into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string split with shlex.split.
    - Iterable[str]: items taken as they are.
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if all(isinstance(token, str) for token in tokens):
            return tokens
    raise TypeError("main() argument must be a string or an iterable of strings")


class Program(metaclass=IntrospectiveType):
    """
    A command-line program: global flags plus a registry of commands.

    Parameters
    - name: str
      Program name used in usage text and fault headers (defaults to the
      basename of sys.argv[0]).
    - options: FlagSet (keyword-only)
      Global flags parsed before the command name.
    - default: Command | None
      Command run when no command name is given.
    - usage: Callable[[Program], None]
      Renders program usage (defaults to cmdbind.usage.program_usage).
    - exit_on_error: bool
      When True faults are printed on stderr and the process exits with 1;
      otherwise they are raised.
    - quiet: bool
      Silences Command.log()/logf(); usually bound to a '-quiet' flag.
    - colorful / fancy: bool
      Coloured output / panel chrome for usage and faults.
    - stdout / stderr: rich Console
      Output streams (injectable for tests).

    default, exit_on_error, quiet, colorful, fancy, stdout and stderr are
    plain attributes and may be changed after construction.
    """
    __introspectable__ = ("name", "options", "commands")
    __displayable__ = ("name", "commands", "default", "exit_on_error", "quiet")

    def __init__(
        self,
        name=Unset,
        /,
        *,
        options=Unset,
        default=None,
        usage=Unset,
        exit_on_error=True,
        quiet=False,
        colorful=False,
        fancy=False,
        stdout=Unset,
        stderr=Unset,
    ):
        name = coalesce(name, os.path.basename(sys.argv[0]))
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        options = coalesce(options, FlagSet(name))
        if not isinstance(options, FlagSet):
            raise TypeError(f"{type(self).__typename__} 'options' must be a flag set")
        if default is not None and not isinstance(default, Command):
            raise TypeError(f"{type(self).__typename__} 'default' must be a command")
        usage = coalesce(usage, program_usage)
        if not callable(usage):
            raise TypeError(f"{type(self).__typename__} 'usage' must be callable")

        self._name = name
        self._options = options
        self._commands = {}
        self._usage = usage
        self.default = default
        self.exit_on_error = exit_on_error
        self.quiet = quiet
        self.colorful = colorful
        self.fancy = fancy
        self.stdout = coalesce(stdout, Console())
        self.stderr = coalesce(stderr, Console(stderr=True))
        self._help = Command("help", "Show help", _help)

    def add_command(self, command, /):
        """
        register a command; a command with the same name is replaced.
        """
        if not isinstance(command, Command):
            raise TypeError("add_command() argument must be a command")
        self._commands[command.name] = command
        return command

    def command(self, name, descr="", /, **options):
        """
        decorator: build a Command from the handler and register it.
        """
        @rename("command")
        def wrapper(handler, /):
            return self.add_command(Command(name, descr, handler, **options))

        return wrapper

    def names(self):
        return sorted(self._commands)

    def usage(self):
        self._usage(self)

    def trigger(self, fault, /, **options):
        hint = f"see '{self._name} help'"
        if suggestions := fault.options.get("suggestions"):
            hint = f"did you mean '{suggestions[0]}'? {hint}"
        trigger(fault, **({
            "route": self._name,
            "hint": hint,
            "exit": self.exit_on_error,
            "console": self.stderr,
            "colorful": self.colorful,
            "fancy": self.fancy,
        } | options))

    def parse(self, tokens=(), /):
        """
        parse global flags and resolve the command to run.

        returns (command, tokens left for the command), or (None, []) when
        help was printed instead. A program with no registered commands hands
        every token, flags included, to its default command.
        """
        if not self._commands and self.default is not None:
            return self.default, list(tokens)
        try:
            remaining = self._options.parse(tokens)
        except HelpRequested:
            self.usage()
            return None, []
        except CommandException as fault:
            hint = f"see '{self._name} -help'"
            if suggestions := fault.options.get("suggestions"):
                hint = f"did you mean '-{suggestions[0]}'? {hint}"
            self.trigger(fault, hint=hint)
            return None, []

        if not remaining or not self._commands:
            if self.default is not None:
                return self.default, remaining
            if self.exit_on_error:
                self.usage()
            self.trigger(NoCommandError("no command specified"))
            return None, remaining

        name, *remaining = remaining
        if (command := self._commands.get(name)) is not None:
            return command, remaining
        if name == "help":
            return self._help, remaining
        self.trigger(UnknownCommandError(
            "unknown command %r" % name,
            token=name,
            suggestions=difflib.get_close_matches(name, self.names(), 3),
        ))
        return None, remaining

    def main(self, prompt=Unset, /):
        """
        Run the program and return the command that ran (None otherwise).

        prompt is sys.argv[1:] when omitted, a shell-like string, or an
        iterable of strings.
        """
        command, tokens = self.parse(_tokens(prompt))
        if command is not None:
            command.run(self, tokens)
        return command

    __invoke__ = main


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for programs, commands or plain callables.

    - Program: program.main(prompt).
    - Command: run as the default command of a throwaway program.
    - callable: wrapped into a Command named after it, then as above.
    """
    if isinstance(object, Program):
        return object.main(prompt)
    if isinstance(object, Command):
        return Program(default=object).main(prompt)
    if callable(object):
        return invoke(Command(translate(object.__name__), "", object), prompt)
    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must be a program, a command or a callable")


__all__ = (
    "Program",
    "invoke",
)
