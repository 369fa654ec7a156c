import sys
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

if sys.version_info < (3, 11):  # pragma: no cover
    from typing_extensions import assert_never
else:  # pragma: no cover
    from typing import assert_never

from argtree.exceptions import InvalidArgumentError
from argtree.types import ArgType, Atom, Boolean, Bytes, Custom, Float, Integer, ListOf, String
from argtree.utils import is_class_and_subclass, is_integer, is_number
from argtree.validators import Number, Pattern

if TYPE_CHECKING:
    from argtree.argument import Argument


def _bool(s: str) -> bool:
    if s == "true":
        return True
    elif s == "false":
        return False
    else:
        # Only the exact literals; a boolean option never guesses.
        raise ValueError('Must be "true" or "false".')


def _int(s: str) -> int:
    digits = s.lower().lstrip("+-")
    if digits.startswith("0x"):
        return int(s, 16)
    elif digits.startswith("0o"):
        return int(s, 8)
    elif digits.startswith("0b"):
        return int(s, 2)
    elif is_integer(s):
        return int(s)
    raise ValueError


def _float(s: str) -> float:
    if is_number(s):
        return float(s)
    raise ValueError


def _bytes(s: str) -> bytes:
    # Undecodable command line bytes arrive as lone surrogates; restore them.
    return s.encode("utf8", "surrogateescape")


def _atom(type_: Atom, s: str) -> Any:
    if type_.unsafe:
        return sys.intern(s)
    if is_class_and_subclass(type_.symbols, Enum):
        try:
            return type_.symbols[s]  # pyright: ignore[reportIndexIssue, reportOptionalSubscript]
        except KeyError:
            raise ValueError from None
    if type_.symbols is not None and s in type_.symbols:  # pyright: ignore[reportOperatorIssue]
        return sys.intern(s)
    raise ValueError


def _validate(validator, type_: ArgType, value: Any, token: Any, argument: "Argument", command_path: Sequence[str]):
    try:
        validator(type_, value)
    except (AssertionError, ValueError, TypeError) as e:
        raise InvalidArgumentError(
            command_path=command_path,
            argument=argument,
            value=token,
            reason=str(e),
        ) from e


def convert(
    type_: ArgType,
    value: str | Sequence[str],
    *,
    argument: "Argument",
    command_path: Sequence[str] = (),
) -> Any:
    """Convert raw token(s) into a value of ``type_``, enforcing its constraints.

    Parameters
    ----------
    type_: ArgType
        Declared type of ``argument``.
    value: str | Sequence[str]
        A single token, or a sequence of tokens when ``type_`` is a :class:`~argtree.ListOf`.
    argument: Argument
        Argument being converted; only used for error reporting.
    command_path: Sequence[str]
        Commands selected so far; only used for error reporting.

    Raises
    ------
    InvalidArgumentError
        The token is not a valid literal of the type, or violates a bound or pattern.
        Bound violations report the converted value.

    Returns
    -------
    Any
        Converted value; a :class:`list` for :class:`~argtree.ListOf`.
    """
    if isinstance(type_, ListOf):
        return [convert(type_.inner, token, argument=argument, command_path=command_path) for token in value]

    assert isinstance(value, str)
    try:
        match type_:
            case Boolean():
                return _bool(value)
            case Integer():
                out = _int(value)
                _validate(Number(gte=type_.min, lte=type_.max), type_, out, out, argument, command_path)
                return out
            case Float():
                out = _float(value)
                _validate(Number(gte=type_.min, lte=type_.max), type_, out, out, argument, command_path)
                return out
            case String():
                if type_.pattern is not None:
                    _validate(Pattern(regex=type_.pattern, flags=type_.flags), type_, value, value, argument, command_path)
                return value
            case Bytes():
                out = _bytes(value)
                if type_.pattern is not None:
                    _validate(Pattern(regex=type_.pattern, flags=type_.flags), type_, out, value, argument, command_path)
                return out
            case Atom():
                return _atom(type_, value)
            case Custom():
                return type_.converter(value)
            case _:  # pragma: no cover
                assert_never(type_)
    except (AssertionError, LookupError, ValueError, TypeError) as e:
        raise InvalidArgumentError(
            command_path=command_path,
            argument=argument,
            value=value,
            reason=str(e),
        ) from e
