from textwrap import dedent

import pytest

from argtree import (
    Argument,
    Boolean,
    Command,
    Integer,
    MissingArgumentError,
    UnknownArgumentError,
    format_error,
    format_help,
    format_usage,
    help_print,
    parse,
)


def test_format_usage(utility):
    actual = format_usage(utility, progname="utility")
    assert actual == "usage: utility {start|stop} [-rv] [-i <interval>] [--float <weight>] <server>"


def test_format_usage_path(utility):
    actual = format_usage(utility, ["start"], progname="utility")
    assert actual == "usage: utility start [-rv] [-i <interval>] [--float <weight>] <server>"


def test_format_usage_bad_path(utility):
    with pytest.raises(KeyError):
        format_usage(utility, ["restart"], progname="utility")


def test_format_usage_many_commands():
    cmd = Command(commands={"a": Command(), "b": Command(), "c": Command()})
    assert format_usage(cmd, progname="prog") == "usage: prog <command>"


def test_format_usage_argument_forms():
    cmd = Command(
        arguments=[
            Argument("dry", long="-dry-run", type=Boolean()),
            Argument("force", long="-force", type=Boolean(), required=True),
            Argument("interval", short="i", long="-interval", type=Integer()),
            Argument("x", short="x", nargs="list"),
            Argument("files", nargs="nonempty_list"),
            Argument("dir", default="."),
        ]
    )
    assert format_usage(cmd, progname="prog") == (
        "usage: prog [--dry-run] --force [-i <interval>] [--interval <interval>] [-x <x>...] <files>... [<dir>]"
    )


def test_format_usage_prefix():
    cmd = Command(arguments=[Argument("verbose", short="v", type=Boolean())])
    assert format_usage(cmd, progname="prog", prefixes="+-") == "usage: prog [+v]"


def test_format_help(utility):
    actual = format_help(utility, progname="utility")
    expected = dedent(
        """\
        usage: utility {start|stop} [-rv] [-i <interval>] [--float <weight>] <server>

        Subcommands:
          start   verifies configuration and starts server
          stop    stops running server

        Optional arguments:
          -r      recursive
          -v      increase verbosity level
          -i      interval set, int >= 1
          --float floating-point long form argument, float, [3.14]
          server  server to start
        """
    )
    assert actual == expected


def test_format_help_inherited_arguments():
    cmd = Command(
        arguments=[Argument("verbose", short="v", type=Boolean(), help="chatty")],
        commands={"start": Command(arguments=[Argument("port", short="p", type=Integer(min=1, max=65535))])},
    )
    actual = format_help(cmd, ["start"], progname="prog")
    expected = dedent(
        """\
        usage: prog start [-v] [-p <port>]

        Optional arguments:
          -v chatty
          -p 1 <= int <= 65535
        """
    )
    assert actual == expected


def test_format_help_names_joined():
    cmd = Command(arguments=[Argument("interval", short="i", long="-interval", default=5, help="seconds")])
    actual = format_help(cmd, progname="prog")
    assert actual.endswith("  -i, --interval seconds, [5]\n")


def test_format_help_handler_docstring():
    def start(args):
        """Start the server.

        Loads configuration first.
        """

    cmd = Command(commands={"start": Command(handler=start)})
    actual = format_help(cmd, progname="prog")
    assert "  start Start the server.\n" in actual


def test_format_help_empty():
    assert format_help(Command(), progname="prog") == "usage: prog\n"


def test_format_error_message_only():
    with pytest.raises(UnknownArgumentError) as e:
        parse(["--bad"], Command(), progname="prog")
    assert format_error(e.value) == "prog: unrecognised argument: --bad\n"


def test_format_error_with_help():
    cmd = Command(
        commands={"start": Command(arguments=[Argument("server")], handler=lambda args: None)},
    )
    with pytest.raises(MissingArgumentError) as e:
        parse(["start"], cmd, progname="prog")
    actual = format_error(e.value, cmd)
    expected = dedent(
        """\
        prog start: required argument missing: server
        usage: prog start <server>

        Optional arguments:
          server
        """
    )
    assert actual == expected


def test_help_print(utility, console):
    with console.capture() as capture:
        help_print(utility, progname="utility", console=console)
    actual = capture.get()

    assert actual.startswith("usage: utility {start|stop}")
    assert "Commands" in actual
    assert "verifies configuration and starts server" in actual
    assert "Arguments" in actual
    assert "interval set, int >= 1" in actual


def test_help_print_description(console):
    def start(args):
        """Start the server."""

    cmd = Command(commands={"start": Command(handler=start)})
    with console.capture() as capture:
        help_print(cmd, ["start"], progname="prog", console=console)
    actual = capture.get()

    assert actual == "usage: prog start\n\nStart the server.\n"


def test_format_help_without_prefixes():
    cmd = Command(arguments=[Argument("dir", help="target"), Argument("verbose", short="v", type=Boolean())])
    assert format_usage(cmd, progname="prog", prefixes=()) == "usage: prog [v] <dir>"
    assert format_help(cmd, progname="prog", prefixes=()) == dedent(
        """\
        usage: prog [v] <dir>

        Optional arguments:
          dir target
          v
        """
    )
