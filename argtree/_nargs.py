"""Decides how many of the upcoming tokens an argument claims."""

from collections import deque
from typing import TYPE_CHECKING, Any, NamedTuple

from argtree.argument import AppendConst, Argument, MaybeConst, StoreConst
from argtree.exceptions import InvalidArgumentError, MissingArgumentError
from argtree.types import ArgType, Boolean, ListOf, default_for
from argtree.utils import UNSET, is_number

if TYPE_CHECKING:
    from argtree.parser import ParserState


class Consumption(NamedTuple):
    """What an argument took from the token stream."""

    value: Any
    """Raw token, list of raw tokens, or an already final value."""

    type: ArgType | None
    """Type to convert ``value`` with; :obj:`None` if ``value`` is final."""


def is_boundary(token: str, state: "ParserState") -> bool:
    """Whether ``token`` starts a new option rather than being a value.

    A prefixed token is still a value if it reads as a number and no known
    option could be mistaken for one.
    """
    if token[:1] not in state.prefixes:
        return False
    return not (state.no_digits and is_number(token))


def split_to_option(tokens: deque[str], state: "ParserState", limit: int = -1) -> list[str]:
    """Pop tokens up to the next option boundary, or at most ``limit`` of them (``-1`` for no limit)."""
    consumed = []
    while tokens and len(consumed) != limit and not is_boundary(tokens[0], state):
        consumed.append(tokens.popleft())
    return consumed


def consume(argument: Argument, tokens: deque[str], state: "ParserState") -> Consumption:
    """Take the tokens belonging to ``argument`` from the front of ``tokens``.

    For a positional, the front token is the one that matched it.

    Raises
    ------
    InvalidArgumentError
        Too few tokens for an exact ``nargs`` count, or none for ``"nonempty_list"``.
    MissingArgumentError
        A single-value option is followed by another option, or by nothing.
    """
    match argument.action:
        case StoreConst() | AppendConst() | "count":
            return Consumption(UNSET, None)

    match argument.nargs:
        case int(count):
            consumed = split_to_option(tokens, state, count)
            if len(consumed) < count:
                raise InvalidArgumentError(command_path=state.command_path, argument=argument, value=consumed)
            return Consumption(consumed, ListOf(argument.type))
        case "all":
            consumed = list(tokens)
            tokens.clear()
            return Consumption(consumed, ListOf(argument.type))
        case "nonempty_list":
            consumed = split_to_option(tokens, state)
            if not consumed:
                raise InvalidArgumentError(
                    command_path=state.command_path,
                    argument=argument,
                    value=tokens[0] if tokens else "",
                )
            return Consumption(consumed, ListOf(argument.type))
        case "list":
            return Consumption(split_to_option(tokens, state), ListOf(argument.type))

    if isinstance(argument.type, Boolean):
        # Only an explicit literal is taken; anything else leaves the stream alone.
        if tokens and tokens[0] in ("true", "false"):
            return Consumption(tokens.popleft() == "true", None)
        return Consumption(True, None)

    match argument.nargs:
        case "maybe":
            consumed = split_to_option(tokens, state, 1)
            if consumed:
                return Consumption(consumed[0], argument.type)
            default = argument.default if argument.default is not UNSET else default_for(argument.type)
            return Consumption(default, None)
        case MaybeConst(value=const):
            consumed = split_to_option(tokens, state, 1)
            if consumed:
                return Consumption(consumed[0], argument.type)
            return Consumption(const, None)

    if not tokens or (argument.is_optional and is_boundary(tokens[0], state)):
        raise MissingArgumentError(command_path=state.command_path, argument=argument)
    return Consumption(tokens.popleft(), argument.type)
