import inspect
import logging
import shlex
import sys
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from argtree.exceptions import ArgtreeError
from argtree.help import help_print
from argtree.parser import Parser, ParserOptions, ParseResult

if TYPE_CHECKING:
    from rich.console import Console
    from rich.panel import Panel

logger = logging.getLogger(__name__)


def normalize_tokens(tokens: None | str | Iterable[str]) -> list[str]:
    if tokens is None:
        tokens = sys.argv[1:]  # Remove the executable
    elif isinstance(tokens, str):
        tokens = shlex.split(tokens)
    else:
        tokens = list(tokens)
    return tokens


def error_panel(error: ArgtreeError, style: str = "red") -> "Panel":
    """Wrap ``error`` in a :class:`~rich.panel.Panel` titled with the command path where parsing stopped.

    .. code-block:: text

        ╭─ Error: prog start ──────────────────────╮
        │ required argument missing: server        │
        ╰──────────────────────────────────────────╯
    """
    from rich import box
    from rich.panel import Panel
    from rich.text import Text

    title = "Error"
    if error.command_path:
        title += ": " + " ".join(error.command_path)
    body = error.msg if error.msg is not None else error.describe()
    return Panel(
        Text(body, "default"),
        title=title,
        style=style,
        box=box.ROUNDED,
        expand=True,
        title_align="left",
    )


def _run_maybe_async_handler(handler: Callable, args: dict[str, Any]) -> Any:
    if not inspect.iscoroutinefunction(handler):
        return handler(args)

    import asyncio

    return asyncio.run(handler(args))


def run(
    command: Any,
    tokens: None | str | Iterable[str] = None,
    *,
    progname: str | None = None,
    prefixes: Iterable[str] = ("-",),
    console: "Console | None" = None,
    error_console: "Console | None" = None,
    print_error: bool | None = None,
    exit_on_error: bool | None = None,
    help_on_error: bool | None = None,
) -> Any:
    """Parse a command line and invoke the handler of the selected command.

    Parameters
    ----------
    command: Command | Mapping | tuple[str, Command]
        Root command, in any form accepted by :func:`~argtree.validate`.
    tokens: None | str | Iterable[str]
        Either a string, or a list of strings.
        Defaults to ``sys.argv[1:]``.
    progname: str | None
        Program name for diagnostics. Defaults to the basename of ``sys.argv[0]``.
    prefixes: Iterable[str]
        Option-introducing characters.
    console: ~rich.console.Console
        Console to print help to (``help_on_error``).
        Defaults to the error console.
    error_console: ~rich.console.Console
        Console to print error messages to. Defaults to a new stderr console.
    print_error: bool | None
        Print a rich-formatted error on error.
        If :obj:`None`, defaults to :obj:`True`.
    exit_on_error: bool | None
        If there is an error parsing the CLI tokens invoke ``sys.exit(1)``.
        Otherwise, continue to raise the exception.
        If :obj:`None`, defaults to :obj:`True`.
    help_on_error: bool | None
        Prints the help-page of the command where parsing stopped before printing an error.
        If :obj:`None`, defaults to :obj:`False`.

    Returns
    -------
    return_value: Any
        The value the handler returns.
        If the selected command has no handler, the parse result itself.
    """
    tokens = normalize_tokens(tokens)
    parser = Parser(command, ParserOptions(prefixes=tuple(prefixes), progname=progname))

    try:
        result: ParseResult = parser.parse(tokens)
    except ArgtreeError as e:
        if error_console is None:
            from rich.console import Console

            error_console = Console(stderr=True)
        if help_on_error if help_on_error is not None else False:
            help_print(
                (parser.progname, parser.root),
                e.command_path[1:],
                prefixes=parser.options.prefixes,
                console=console or error_console,
            )
        if print_error if print_error is not None else True:
            error_console.print(error_panel(e))
        if exit_on_error if exit_on_error is not None else True:
            sys.exit(1)
        raise

    if isinstance(result, tuple):
        args, (name, selected) = result
    else:
        args, name, selected = result, parser.progname, parser.root

    if selected.handler is None:
        return result
    logger.debug("Dispatching to the handler of %r.", name)
    return _run_maybe_async_handler(selected.handler, args)
