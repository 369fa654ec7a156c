"""Usage and help text, generated from a validated command tree.

Example output:

.. code-block:: text

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

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from attrs import define, field

from argtree.argument import Argument
from argtree.command import Command
from argtree.exceptions import ArgtreeError
from argtree.types import String
from argtree.utils import UNSET
from argtree.validate import validate

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "HelpEntry",
    "format_error",
    "format_help",
    "format_usage",
    "help_print",
]

# Name column never grows wider than this.
_MAX_NAME_WIDTH = 24


@define(kw_only=True)
class HelpEntry:
    """Container for help table entry data."""

    name: str
    description: str = ""
    required: bool = False


@define(kw_only=True)
class _Usage:
    """Pieces of the usage line, collected in one pass over the visible arguments."""

    prefix: str
    flags: str = ""
    options: list[str] = field(factory=list)
    positionals: list[str] = field(factory=list)
    entries: list[HelpEntry] = field(factory=list)


def _format_nargs(argument: Argument) -> str:
    return "..." if argument.nargs in ("list", "nonempty_list", "all") else ""


def _format_value(argument: Argument, extra: str = "", required: bool = False) -> str:
    text = f"{extra}<{argument.name}>{_format_nargs(argument)}"
    return text if required else f"[{text}]"


def _describe(argument: Argument) -> str:
    parts = [argument.help or ""]
    if argument.type != String() and (type_description := argument.type.describe()):
        parts.append(f", {type_description}")
    if argument.default is not UNSET:
        parts.append(f", [{argument.default!r}]")
    return "".join(parts).lstrip(", ")


def _collect(arguments: Iterable[Argument], prefix: str) -> _Usage:
    usage = _Usage(prefix=prefix)
    for argument in arguments:
        description = _describe(argument)
        if argument.is_positional:
            usage.positionals.append(_format_value(argument, required=argument.is_required))
            usage.entries.append(HelpEntry(name=argument.name, description=description, required=argument.is_required))
            continue

        names, options = [], []
        if argument.short is not None:
            names.append(prefix + argument.short)
            if argument.takes_value:
                options.append(_format_value(argument, prefix + argument.short + " "))
            else:
                usage.flags += argument.short
        if argument.long is not None:
            long_name = prefix + argument.long
            names.append(long_name)
            if argument.takes_value:
                options.append(_format_value(argument, long_name + " "))
            elif argument.required:
                options.append(long_name)
            else:
                options.append(f"[{long_name}]")
        usage.options.extend(options)
        usage.entries.append(
            HelpEntry(name=", ".join(names), description=description, required=bool(argument.required))
        )
    return usage


def _usage_line(progname: str, path: Sequence[str], command: Command, usage: _Usage) -> str:
    parts = [progname, *path]
    if command.commands:
        if len(command.commands) < 3:
            parts.append("{" + "|".join(command.commands) + "}")
        else:
            parts.append("<command>")
    if usage.flags:
        parts.append(f"[{usage.prefix}{usage.flags}]")
    parts.extend(usage.options)
    parts.extend(usage.positionals)
    return "usage: " + " ".join(parts)


def _resolve(command: Any, path: Sequence[str], progname: str | None, prefixes: Iterable[str]):
    prefixes = tuple(prefixes)
    progname, root = validate(command, progname=progname, prefixes=prefixes)
    target, arguments = root.walk(path)
    # Without prefixes every token is positional; options are shown bare.
    return progname, target, _collect(arguments, prefixes[0] if prefixes else "")


def format_usage(
    command: Any,
    path: Sequence[str] = (),
    *,
    progname: str | None = None,
    prefixes: Iterable[str] = ("-",),
) -> str:
    """Single ``usage:`` line for the command reached by ``path``.

    Raises
    ------
    KeyError
        If a component of ``path`` is not a sub-command.
    """
    progname, target, usage = _resolve(command, path, progname, prefixes)
    return _usage_line(progname, path, target, usage)


def format_help(
    command: Any,
    path: Sequence[str] = (),
    *,
    progname: str | None = None,
    prefixes: Iterable[str] = ("-",),
) -> str:
    """Full plain-text help for the command reached by ``path``.

    Every argument visible at that point is listed, including those inherited
    from parent commands.

    Parameters
    ----------
    command: Command | Mapping | tuple[str, Command]
        Root command, in any form accepted by :func:`~argtree.validate`.
    path: Sequence[str]
        Sub-command names leading to the command to describe.
    progname: str | None
        Program name shown in the usage line.
    prefixes: Iterable[str]
        Option prefixes; the first one is used for display.

    Raises
    ------
    KeyError
        If a component of ``path`` is not a sub-command.
    """
    progname, target, usage = _resolve(command, path, progname, prefixes)
    lines = [_usage_line(progname, path, target, usage)]

    width = min(_MAX_NAME_WIDTH, max((len(x.name) for x in usage.entries), default=0))
    if target.commands:
        command_width = max(width, *(len(x) for x in target.commands))
        lines.append("")
        lines.append("Subcommands:")
        for name, sub in target.commands.items():
            lines.append(f"  {name:<{command_width}} {sub.description}".rstrip())
    if usage.entries:
        lines.append("")
        lines.append("Optional arguments:")
        for entry in usage.entries:
            lines.append(f"  {entry.name:<{width}} {entry.description}".rstrip())
    return "\n".join(lines) + "\n"


def format_error(
    error: ArgtreeError,
    command: Any = None,
    *,
    progname: str | None = None,
    prefixes: Iterable[str] = ("-",),
) -> str:
    """Render ``error``; if ``command`` is given, append help for the command path where parsing stopped."""
    text = f"{error}\n"
    if command is None:
        return text
    if progname is None and error.command_path:
        progname = error.command_path[0]
    return text + format_help(command, error.command_path[1:], progname=progname, prefixes=prefixes)


def help_print(
    command: Any,
    path: Sequence[str] = (),
    *,
    progname: str | None = None,
    prefixes: Iterable[str] = ("-",),
    console: "Console | None" = None,
) -> None:
    """Print help for the command reached by ``path`` using rich panels.

    Parameters
    ----------
    console: ~rich.console.Console
        Console to print to. Defaults to a new stdout console.
    """
    from rich.console import Console, Group
    from rich.text import Text

    progname, target, usage = _resolve(command, path, progname, prefixes)
    console = console or Console()

    renderables: list[Any] = [Text(_usage_line(progname, path, target, usage))]
    if target.description:
        renderables.append(Text(""))
        renderables.append(Text(target.description))
    if target.commands:
        renderables.append(
            _panel("Commands", [HelpEntry(name=k, description=v.description) for k, v in target.commands.items()])
        )
    if usage.entries:
        renderables.append(_panel("Arguments", usage.entries))
    console.print(Group(*renderables))


def _panel(title: str, entries: Sequence[HelpEntry]):
    from rich import box
    from rich.panel import Panel
    from rich.table import Table

    table = Table.grid(padding=(0, 2))
    show_asterisk = any(x.required for x in entries)
    if show_asterisk:
        table.add_column(style="red bold", width=1)
    table.add_column(style="cyan", no_wrap=True, max_width=_MAX_NAME_WIDTH)
    table.add_column(overflow="fold")
    for entry in entries:
        row = [entry.name, entry.description]
        if show_asterisk:
            row.insert(0, "*" if entry.required else "")
        table.add_row(*row)
    return Panel(table, title=title, title_align="left", box=box.ROUNDED, expand=True)
