import os
from typing import Annotated

from cmdbind import *

program = Program("example")
program.options.bool("quiet", False, "Suppress status messages", target=program, field="quiet")


@program.command("version", "Show version")
def version():
    print("cmdbind example v1.2.3")


class FooOptions:
    FooBar: Annotated[bool, "Bar the foo with some bar"]
    FirstName: Annotated[str, '="John" Name of a cool person']
    Dir: Annotated[str, '?"." Directory to list']
    File: Annotated[list[str], "! Some files"]


@program.command("foo", "Example command")
def foo(values: FooOptions, command):
    command.logf("foo command run with values=%r", vars(values))


class LsOptions:
    Long: Annotated[bool, "List in long format"]
    Dir: Annotated[str, '?"." Directory to list']


@program.command("ls", "List files")
def ls(values: LsOptions, command):
    try:
        entries = sorted(os.scandir(values.Dir), key=lambda entry: entry.name)
    except OSError as error:
        command.fail(error)
        return

    for entry in entries:
        if not values.Long:
            print(entry.name)
        elif entry.is_dir():
            print("%10d     %s/" % (entry.stat().st_size, entry.name))
        elif entry.stat().st_size > 1024:
            print("%10d kB  %s" % (entry.stat().st_size // 1024, entry.name))
        else:
            print("%10d B   %s" % (entry.stat().st_size, entry.name))


if __name__ == '__main__':
    program.main()
