import logging
from collections import deque
from collections.abc import Iterable
from typing import Any, Union

from attrs import define, field

from argtree._convert import convert
from argtree._nargs import Consumption, consume
from argtree.argument import AppendConst, Argument, StoreConst
from argtree.command import Command, CommandMatch
from argtree.exceptions import MissingArgumentError, UnknownArgumentError
from argtree.utils import UNSET, frozen, is_number
from argtree.validate import validate

logger = logging.getLogger(__name__)

__all__ = [
    "ParseResult",
    "Parser",
    "ParserOptions",
    "ParserState",
    "parse",
]

ParseResult = Union[dict[str, Any], tuple[dict[str, Any], CommandMatch]]


@frozen(kw_only=True)
class ParserOptions:
    """Settings shared by every parse of a :class:`Parser`."""

    prefixes: tuple[str, ...] = field(default=("-",), converter=tuple)
    """Characters that introduce an option. Each must be a single character."""

    progname: str | None = None
    """Program name for diagnostics. Defaults to the basename of ``sys.argv[0]``."""


@define
class ParserState:
    """Mutable bookkeeping for a single parse; never shared between parses."""

    prefixes: frozenset[str]

    args: dict[str, Any] = field(factory=dict)
    """Result being accumulated."""

    command_path: list[str] = field(factory=list)
    """Program name, then every sub-command selected so far."""

    current: Command = field(factory=Command)

    pending: deque[Argument] = field(factory=deque)
    """Positionals not matched yet, in match order."""

    short: dict[str, Argument] = field(factory=dict)
    long: dict[str, Argument] = field(factory=dict)

    options: list[Argument] = field(factory=list)
    """Every option registered so far, in registration order."""

    no_digits: bool = True
    """No known option can be confused with a negative number."""

    def enter(self, name: str, command: Command) -> None:
        """Make ``command`` the current scope; its options stay visible for the rest of the parse."""
        self.command_path.append(name)
        self.current = command
        for argument in command.arguments:
            self.register(argument)

    def register(self, argument: Argument) -> None:
        if argument.is_positional:
            self.pending.append(argument)
            return

        if argument.short is not None:
            self.short[argument.short] = argument
        if argument.long is not None:
            self.long[argument.long] = argument
        self.options.append(argument)

        if self.no_digits and "-" in self.prefixes:
            if (argument.short is not None and "0" <= argument.short <= "9") or (
                argument.long is not None and is_number(argument.long)
            ):
                logger.debug("Option %r looks like a number; negative numbers are now options.", argument.name)
                self.no_digits = False


def _abbreviated(name: str, short: dict[str, Argument]) -> list[str] | None:
    """Split ``name`` into individual short flags, if it is a valid flag bundle.

    Every character must be a known short option, and all but the last must not take a value.
    """
    for i, flag in enumerate(name):
        option = short.get(flag)
        if option is None:
            return None
        if i < len(name) - 1 and option.takes_value:
            return None
    return list(name)


@define
class Parser:
    """Matches token lists against a validated command tree.

    The tree is validated once, on construction; :meth:`parse` may then be
    called any number of times, including concurrently.

    .. code-block:: python

        from argtree import Argument, Command, Parser

        parser = Parser(Command(arguments=[Argument("dir")]))
        parser.parse(["/tmp"])  # {"dir": "/tmp"}
    """

    _command: Any = field(alias="command")
    options: ParserOptions = field(factory=ParserOptions)

    progname: str = field(init=False)
    root: Command = field(init=False)

    def __attrs_post_init__(self):
        self.progname, self.root = validate(
            self._command,
            progname=self.options.progname,
            prefixes=self.options.prefixes,
        )

    def parse(self, tokens: Iterable[str]) -> ParseResult:
        """Interpret ``tokens`` (already split, program name excluded).

        Raises
        ------
        UnknownArgumentError
            A token matches no sub-command, option, or pending positional.
        MissingArgumentError
            A required argument, or a required sub-command, was not supplied.
        InvalidArgumentError
            A value failed conversion or a constraint, or too few values were given.

        Returns
        -------
        dict | tuple[dict, CommandMatch]
            The argument map if no sub-command was selected; otherwise the
            argument map and the last selected sub-command.
        """
        state = ParserState(prefixes=frozenset(self.options.prefixes))
        state.enter(self.progname, self.root)
        stream = deque(tokens)

        while stream:
            token = stream.popleft()
            if token[:1] in state.prefixes:
                self._parse_option(token, stream, state)
                continue

            subcommand = state.current.commands.get(token)
            if subcommand is None:
                self._parse_positional(token, stream, state)
            else:
                logger.debug("Descending into command %r.", token)
                state.enter(token, subcommand)

        return self._finalize(state)

    def _parse_option(self, token: str, stream: deque[str], state: ParserState) -> None:
        prefix, name = token[0], token[1:]

        # Long form first, even when ``name`` is also a short flag.
        option = state.long.get(name)
        if option is not None:
            self._match(option, stream, state)
            return

        flag = name[:1]
        if flag and flag in state.short:
            if len(name) > 1:
                expanded = _abbreviated(name, state.short)
                if expanded is None:
                    # "-ivalue": the rest of the token is the value.
                    stream.appendleft(name[1:])
                else:
                    logger.debug("Expanding %r into %r.", token, expanded)
                    stream.extendleft(reversed([prefix + x for x in expanded]))
                    return
            self._match(state.short[flag], stream, state)
            return

        if prefix == "-" and state.no_digits and is_number(token):
            logger.debug("Treating %r as a negative number.", token)
            self._parse_positional(token, stream, state)
            return

        raise UnknownArgumentError(command_path=state.command_path, token=token)

    def _parse_positional(self, token: str, stream: deque[str], state: ParserState) -> None:
        if not state.pending:
            raise UnknownArgumentError(command_path=state.command_path, token=token)
        argument = state.pending.popleft()
        stream.appendleft(token)
        self._match(argument, stream, state)

    def _match(self, argument: Argument, stream: deque[str], state: ParserState) -> None:
        consumption = consume(argument, stream, state)
        _apply_action(argument, consumption, state)

    def _finalize(self, state: ParserState) -> ParseResult:
        current = state.current
        if current.commands and current.handler is None:
            raise MissingArgumentError(command_path=state.command_path, choices=current.commands)

        args = state.args
        for argument in (*state.pending, *state.options):
            if argument.name in args:
                continue
            if argument.is_required:
                raise MissingArgumentError(command_path=state.command_path, argument=argument)
            if argument.default is not UNSET:
                args[argument.name] = argument.default

        if len(state.command_path) == 1:
            return args
        return args, CommandMatch(state.command_path[-1], current)


def _extension(value: Any, consumed: bool) -> list[Any]:
    """Items an ``"extend"`` action adds to its list.

    An empty fallback string or bytes value, i.e. the type default of ``nargs="maybe"``
    given no token, adds nothing.
    """
    if isinstance(value, list):
        return value
    if not consumed and isinstance(value, str | bytes) and not value:
        return []
    return [value]


def _apply_action(argument: Argument, consumption: Consumption, state: ParserState) -> None:
    value = consumption.value
    if consumption.type is not None:
        value = convert(consumption.type, value, argument=argument, command_path=state.command_path)

    args, name = state.args, argument.name
    match argument.action:
        case "store":
            args[name] = value
        case StoreConst(value=const):
            args[name] = const
        case "append":
            args[name] = [*args.get(name, []), value]
        case AppendConst(value=const):
            args[name] = [*args.get(name, []), const]
        case "extend":
            args[name] = [*args.get(name, []), *_extension(value, consumed=consumption.type is not None)]
        case "count":
            args[name] = args.get(name, 0) + 1


def parse(
    tokens: Iterable[str],
    command: Any,
    *,
    prefixes: Iterable[str] = ("-",),
    progname: str | None = None,
) -> ParseResult:
    """Validate ``command`` and parse ``tokens`` against it.

    Prefer constructing a :class:`Parser` once when parsing repeatedly.

    Parameters
    ----------
    tokens: Iterable[str]
        Command line tokens, without the program name.
    command: Command | Mapping | tuple[str, Command]
        Command tree, in any form accepted by :func:`~argtree.validate`.
    prefixes: Iterable[str]
        Option-introducing characters.
    progname: str | None
        Program name for diagnostics.
    """
    return Parser(command, ParserOptions(prefixes=tuple(prefixes), progname=progname)).parse(tokens)
