import inspect
from collections.abc import Callable, Iterable, Mapping
from functools import lru_cache
from typing import Any, NamedTuple, Optional, cast

from attrs import field

from argtree.argument import Argument
from argtree.utils import frozen, to_tuple_converter

__all__ = [
    "Command",
    "CommandMatch",
]


@lru_cache(maxsize=16)
def docstring_parse(doc: str):
    """Addon to :func:`docstring_parser.parse` that supports multi-line `short_description`."""
    import docstring_parser

    cleaned_doc = inspect.cleandoc(doc)
    short_description_and_maybe_remainder = cleaned_doc.split("\n\n", 1)

    # Place multi-line summary into a single line.
    short = short_description_and_maybe_remainder[0].replace("\n", " ")
    if len(short_description_and_maybe_remainder) == 1:
        cleaned_doc = short
    else:
        cleaned_doc = short + "\n\n" + short_description_and_maybe_remainder[1]

    return docstring_parser.parse(cleaned_doc)


@frozen
class Command:
    """A node of the command tree: arguments, sub-commands, and an optional handler.

    The root node describes the program itself.

    .. code-block:: python

        from argtree import Argument, Boolean, Command

        cmd = Command(
            arguments=[Argument("force", short="f", type=Boolean())],
            commands={
                "start": Command(handler=start),
                "stop": Command(handler=stop),
            },
        )
    """

    arguments: tuple[Argument, ...] = field(
        default=(),
        converter=lambda x: cast(tuple[Argument, ...], to_tuple_converter(x)),
    )
    """Accepted arguments. Positional order is significant."""

    commands: Mapping[str, "Command"] = field(factory=dict, converter=dict, hash=False)
    """Sub-commands by name."""

    handler: Optional[Callable[[dict[str, Any]], Any]] = field(default=None, kw_only=True)
    """Called with the parse result when this command is the one selected."""

    help: str | None = field(default=None, kw_only=True)

    @property
    def description(self) -> str:
        """One line summary: ``help``, or the handler's docstring short description."""
        if self.help is not None:
            return self.help
        if self.handler is not None and self.handler.__doc__:
            return docstring_parse(self.handler.__doc__).short_description or ""
        return ""

    def walk(self, path: Iterable[str]) -> tuple["Command", list[Argument]]:
        """Descend along ``path``, collecting every argument visible at its end.

        Raises
        ------
        KeyError
            If a path component is not a sub-command.
        """
        command, visible = self, list(self.arguments)
        for name in path:
            command = command.commands[name]
            visible.extend(command.arguments)
        return command, visible


class CommandMatch(NamedTuple):
    """Sub-command selected by a parse."""

    name: str
    """Name of the last sub-command on the command line."""

    command: Command
    """Its descriptor; ``command.handler`` is what a dispatcher should run."""
