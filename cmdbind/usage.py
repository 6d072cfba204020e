"""
Usage rendering for commands and programs.

Everything here is presentation: it reads a command's flag set and positional
arguments (or a program's options and command registry) and prints aligned
help text through rich. Layout follows the classic form:

    List files
    Usage: example ls [options] [<dir>]
    Options:
      -long     List in long format
    Arguments:
      <dir>     Directory to list (default: ".")

Palette keys: usage-label, program-name, command-name, section-label,
flag-name, argument-name, description, default.
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .bindings import BoolBinding, StringBinding
from .tags import quote
from .utils import *

stderr = Console(stderr=True)

_STYLES = {
    "usage-label": "bold #00E6FF",
    "program-name": "bold #FF4D94",
    "command-name": "bold #36C5F0",
    "section-label": "bold #FFFFFF",
    "flag-name": "bold #22C55E",
    "argument-name": "bold #FFD600",
    "description": "#9CA3AF",
    "default": "italic #A3A3A3",
    "panel-title": "bold #FF4D94",
}


def _styler(colorful):
    styles = defaultdict(str, _STYLES)

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def arguments_string(command, /):
    """
    render the positional part of a synopsis: ' <a> [<b>] <files>...'.
    """
    parts = []
    for argument in command.arguments:
        parts.append((" [<%s>]" if argument.optional else " <%s>") % argument.name)
    if (variadic := command.variadic) is not None:
        parts.append((" [<%s>...]" if variadic.optional else " <%s>...") % variadic.name)
    return "".join(parts)


def _grid():
    table = Table.grid(padding=(0, 3))
    table.add_column(no_wrap=True)
    table.add_column()
    return table


def options_table(options, /, styler=_styler(False)):
    """
    one row per flag: boolean flags show '-name' (or '-name=true' when they
    default to true), string flags show the quoted default.
    """
    table = _grid()
    for flag in options:
        name = Text("  -" + flag.name, styler("flag-name"))
        if isinstance(flag.value, BoolBinding):
            if flag.default != "false":
                name.append("=true")
        elif isinstance(flag.value, StringBinding):
            name.append(" " + quote(flag.default), styler("default"))
        else:
            name.append(" " + flag.default, styler("default"))
        table.add_row(name, Text(flag.descr, styler("description")))
    return table


def _arguments_table(command, styler):
    table = _grid()
    for argument in command.arguments:
        descr = Text(argument.descr, styler("description"))
        if default := str(argument.value):
            if isinstance(argument.value, StringBinding):
                default = quote(default)
            descr.append(" (default: %s)" % default, styler("default"))
        table.add_row(Text("  <%s>" % argument.name, styler("argument-name")), descr)
    if (variadic := command.variadic) is not None:
        table.add_row(
            Text("  <%s>..." % variadic.name, styler("argument-name")),
            Text(variadic.descr, styler("description")),
        )
    return table


def _emit(renders, console, title, fancy, styler):
    if fancy:
        console.print(Panel(Group(*renders), title=Text(title, styler("panel-title")), title_align="left"))
    else:
        console.print(Group(*renders))


def command_usage(command, /, console=Unset):
    """
    print a command's description, synopsis, options and arguments.

    the command's current program (if any) provides the console, the program
    name used in the synopsis and the colorful/fancy settings.
    """
    program = command.program
    console = coalesce(console, program.stderr if program is not None else stderr)
    styler = _styler(program is not None and program.colorful)

    renders = []
    if command.descr:
        renders.append(Text(command.descr, styler("description")))

    usage = Text()
    usage.append("Usage:", styler("usage-label")).append(" ")
    if program is not None:
        usage.append(program.name, styler("program-name")).append(" ")
    usage.append(command.name, styler("command-name"))
    if command.count:
        usage.append(" [options]")
    usage.append(arguments_string(command))
    renders.append(usage)

    if command.count:
        renders.append(Text("Options:", styler("section-label")))
        renders.append(options_table(command.options, styler))

    if command.arguments or command.variadic is not None:
        renders.append(Text("Arguments:", styler("section-label")))
        renders.append(_arguments_table(command, styler))

    _emit(renders, console, command.name, program is not None and program.fancy, styler)


def program_usage(program, /, console=Unset):
    """
    print the program synopsis, its global options and the sorted command list.
    """
    console = coalesce(console, program.stderr)
    styler = _styler(program.colorful)

    usage = Text()
    usage.append("Usage:", styler("usage-label")).append(" ")
    usage.append(program.name, styler("program-name"))
    if len(program.options):
        usage.append(" [options]")
    if program.commands:
        usage.append(" <command>")
    renders = [usage]

    if len(program.options):
        renders.append(Text("Options:", styler("section-label")))
        renders.append(options_table(program.options, styler))

    if commands := program.commands:
        renders.append(Text("Commands:", styler("section-label")))
        table = _grid()
        for name in program.names():
            command = commands[name]
            table.add_row(
                Text("  " + command.synopsis(), styler("command-name")),
                Text(command.descr, styler("description")),
            )
        table.add_row(
            Text("  help <cmd>", styler("command-name")),
            Text("More information about a command", styler("description")),
        )
        renders.append(table)

    _emit(renders, console, program.name, program.fancy, styler)


__all__ = (
    "arguments_string",
    "options_table",
    "command_usage",
    "program_usage",
)
