"""Checks a declared command tree once, and brings it into canonical form.

The parser relies on everything checked here and does not re-check it.
"""

import re
import sys
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any

import attrs

from argtree.argument import ACTIONS, NARGS, AppendConst, Argument, MaybeConst, StoreConst
from argtree.command import Command
from argtree.exceptions import InvalidCommandError, InvalidOptionError
from argtree.types import ArgType, Atom, Boolean, Bytes, Custom, Float, Integer, ListOf, String, is_type
from argtree.utils import is_class_and_subclass

__all__ = [
    "validate",
]

_COMMAND_FIELDS = frozenset(x.name for x in attrs.fields(Command))
_ARGUMENT_FIELDS = tuple(x.name for x in attrs.fields(Argument))

_TYPE_SHORTHANDS: dict[Any, Callable[[], ArgType]] = {
    bool: Boolean,
    int: Integer,
    float: Float,
    str: String,
    bytes: Bytes,
    "boolean": Boolean,
    "int": Integer,
    "float": Float,
    "string": String,
    "binary": Bytes,
}


def _default_progname() -> str:
    return Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "argtree"


def validate(
    command: Any,
    *,
    progname: str | None = None,
    prefixes: Iterable[str] = ("-",),
) -> tuple[str, Command]:
    """Validate a command tree and return its canonical form.

    Validation is pure and idempotent: feeding the result back in yields an equal tree.

    Parameters
    ----------
    command: Command | Mapping | tuple[str, Command]
        Root command. Mappings use the :class:`~argtree.Command` and
        :class:`~argtree.Argument` field names as keys, e.g.
        ``{"arguments": [{"name": "dir"}], "commands": {"start": {}}}``.
        A ``(progname, command)`` pair, as returned by this function, is accepted too.
    progname: str | None
        Program name. Overrides the name of a ``(progname, command)`` pair;
        defaults to the basename of ``sys.argv[0]``.
    prefixes: Iterable[str]
        Option-introducing characters; sub-command names must not start with one.

    Raises
    ------
    InvalidCommandError
        A command is malformed.
    InvalidOptionError
        An argument is malformed, or its short/long form is already taken on the command path.

    Returns
    -------
    tuple[str, Command]
        Program name and the canonical root command.
    """
    prefixes = tuple(prefixes)
    if isinstance(command, tuple) and len(command) == 2 and isinstance(command[0], str):
        if progname is None:
            progname = command[0]
        command = command[1]
    if progname is None:
        progname = _default_progname()

    for prefix in prefixes:
        if not isinstance(prefix, str) or len(prefix) != 1:
            raise InvalidCommandError(
                command_path=(progname,),
                field_name="prefixes",
                reason="prefixes must be single characters",
            )
    if not isinstance(progname, str):
        raise InvalidCommandError(field_name="commands", reason="program name must be a string")

    return progname, _validate_command([progname], command, prefixes, {}, {})


def _validate_command(
    path: list[str],
    command: Any,
    prefixes: tuple[str, ...],
    shorts: dict[str, str],
    longs: dict[str, str],
) -> Command:
    if isinstance(command, Command):
        fields = {name: getattr(command, name) for name in _COMMAND_FIELDS}
    elif isinstance(command, Mapping):
        for key in command:
            if key not in _COMMAND_FIELDS:
                raise InvalidCommandError(command_path=path, field_name=str(key), reason="unrecognised field")
        fields = dict(command)
    else:
        raise InvalidCommandError(command_path=path, field_name="commands", reason="command description must be a map")

    help_ = fields.get("help")
    if help_ is not None and not isinstance(help_, str):
        raise InvalidCommandError(command_path=path, field_name="help", reason="help must be a string")

    handler = fields.get("handler")
    if handler is not None and not callable(handler):
        raise InvalidCommandError(
            command_path=path,
            field_name="handler",
            reason="handler must be a function accepting single map argument",
        )

    subcommands = fields.get("commands") or {}
    if not isinstance(subcommands, Mapping):
        raise InvalidCommandError(command_path=path, field_name="commands", reason="sub-commands must be a map")

    raw_arguments = fields.get("arguments") or ()
    if isinstance(raw_arguments, str | bytes | Mapping) or not isinstance(raw_arguments, Iterable):
        raise InvalidCommandError(command_path=path, field_name="arguments", reason="arguments must be a list")
    arguments = tuple(_validate_argument(path, x) for x in raw_arguments)

    # Options accumulate while descending, so they must be unique along the whole path.
    shorts, longs = dict(shorts), dict(longs)
    for argument in arguments:
        if argument.short is not None:
            if argument.short in shorts:
                raise InvalidOptionError(
                    command_path=path,
                    name=argument.name,
                    reason=f"short conflicting with {shorts[argument.short]}",
                )
            shorts[argument.short] = argument.name
        if argument.long is not None:
            if argument.long in longs:
                raise InvalidOptionError(
                    command_path=path,
                    name=argument.name,
                    reason=f"long conflicting with {longs[argument.long]}",
                )
            longs[argument.long] = argument.name

    children = {}
    for name, child in subcommands.items():
        if not isinstance(name, str) or not name or name[0] in prefixes:
            raise InvalidCommandError(
                command_path=[*path, str(name)],
                field_name="commands",
                reason="command name must be a string, not starting with optional prefix",
            )
        children[name] = _validate_command([*path, name], child, prefixes, shorts, longs)

    return Command(arguments, children, handler=handler, help=help_)


def _validate_argument(path: list[str], argument: Any) -> Argument:
    if isinstance(argument, Argument):
        fields = attrs.asdict(argument, recurse=False)
    elif isinstance(argument, Mapping) and "name" in argument:
        for key in argument:
            if key not in _ARGUMENT_FIELDS:
                raise InvalidOptionError(command_path=path, name=str(key), reason="unrecognised field")
        fields = dict(argument)
    else:
        raise InvalidOptionError(
            command_path=path,
            field_name="name",
            reason="argument must be a map, and specify 'name'",
        )

    name = fields["name"]
    if not isinstance(name, str) or not name:
        raise InvalidOptionError(command_path=path, name=str(name), field_name="name", reason="must be a string")

    def check(field_name, ok, reason):
        if not ok:
            raise InvalidOptionError(command_path=path, name=name, field_name=field_name, reason=reason)

    help_ = fields.get("help")
    check("help", help_ is None or isinstance(help_, str), "must be a string")
    long = fields.get("long")
    check("long", long is None or (isinstance(long, str) and long != ""), "must be a string")
    short = fields.get("short")
    check("short", short is None or (isinstance(short, str) and len(short) == 1), "must be character")
    required = fields.get("required")
    check("required", required is None or isinstance(required, bool), "must be boolean")

    fields["action"] = _validate_action(fields.get("action", "store"), check)
    fields["nargs"] = _validate_nargs(fields.get("nargs"), check)
    fields["type"] = _validate_type(fields.get("type", String()), check)

    return Argument(**fields)


def _validate_action(action: Any, check) -> Any:
    if isinstance(action, StoreConst | AppendConst):
        return action
    if isinstance(action, tuple) and len(action) == 2 and action[0] in ("store", "append"):
        return StoreConst(action[1]) if action[0] == "store" else AppendConst(action[1])
    check("action", isinstance(action, str) and action in ACTIONS, "unsupported")
    return action


def _validate_nargs(nargs: Any, check) -> Any:
    if nargs is None or isinstance(nargs, MaybeConst):
        return nargs
    if isinstance(nargs, tuple) and len(nargs) == 2 and nargs[0] == "maybe":
        return MaybeConst(nargs[1])
    if isinstance(nargs, int) and not isinstance(nargs, bool):
        check("nargs", nargs >= 1, "unsupported")
        return nargs
    check("nargs", isinstance(nargs, str) and nargs in NARGS, "unsupported")
    return nargs


def _is_real(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _validate_type(type_: Any, check) -> ArgType:
    if not is_type(type_):
        if is_class_and_subclass(type_, Enum):
            return Atom(symbols=type_)
        try:
            shorthand = _TYPE_SHORTHANDS.get(type_)
        except TypeError:  # unhashable
            shorthand = None
        if shorthand is not None:
            return shorthand()
        check("type", callable(type_) and not isinstance(type_, str), "unsupported")
        return Custom(type_)

    match type_:
        case ListOf():
            check("type", False, "unsupported")
        case Integer():
            for bound in (type_.min, type_.max):
                check("type", bound is None or (isinstance(bound, int) and not isinstance(bound, bool)), "invalid validator")
        case Float():
            for bound in (type_.min, type_.max):
                check("type", bound is None or _is_real(bound), "invalid validator")
        case String() | Bytes():
            allowed = str if isinstance(type_, String) else str | bytes
            check("type", type_.pattern is None or isinstance(type_.pattern, allowed), "invalid pattern")
            check("type", isinstance(type_.flags, int), "invalid pattern flags")
            if type_.pattern is not None:
                try:
                    re.compile(type_.pattern, type_.flags)
                except re.error as e:
                    check("type", False, f"invalid pattern: {e}")
        case Atom():
            check("type", type_.unsafe or type_.symbols is not None, "safe atom requires a symbol table")
        case Custom():
            check("type", callable(type_.converter), "converter must be callable")
    return type_
