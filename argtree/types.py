"""Closed set of value types an :class:`~argtree.Argument` can declare.

Each type is a small frozen value object carrying its own constraint payload.
Conversion itself lives in :func:`argtree.convert`, which matches exhaustively
over :data:`ArgType`.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any, Union

from attrs import field

from argtree.utils import frozen, is_class_and_subclass

__all__ = [
    "ArgType",
    "Atom",
    "Boolean",
    "Bytes",
    "Custom",
    "Float",
    "Integer",
    "ListOf",
    "String",
]


def _describe_bounds(name: str, minimum, maximum) -> str:
    if minimum is None and maximum is None:
        return name
    elif maximum is None:
        return f"{name} >= {minimum}"
    elif minimum is None:
        return f"{name} <= {maximum}"
    return f"{minimum} <= {name} <= {maximum}"


def _symbols_converter(value):
    if value is None or is_class_and_subclass(value, Enum):
        return value
    if isinstance(value, str):
        return frozenset((value,))
    return frozenset(value)


@frozen
class Boolean:
    """Literal ``true`` or ``false``.

    A boolean option with no explicit value acts as a flag and stores :obj:`True`.
    """

    def describe(self) -> str:
        return ""


@frozen(kw_only=True)
class Integer:
    """Integer, optionally bounded by an inclusive ``min``/``max``."""

    min: int | None = None
    max: int | None = None

    def describe(self) -> str:
        return _describe_bounds("int", self.min, self.max)


@frozen(kw_only=True)
class Float:
    """Floating point number, optionally bounded by an inclusive ``min``/``max``.

    Integer literals are accepted and widened.
    """

    min: int | float | None = None
    max: int | float | None = None

    def describe(self) -> str:
        return _describe_bounds("float", self.min, self.max)


@frozen
class String:
    """Text, passed through unchanged.

    If ``pattern`` is set, the value must contain a match for it (see :func:`re.search`);
    ``flags`` are handed to the regular expression engine as-is.
    """

    pattern: str | None = None
    flags: int = 0

    def describe(self) -> str:
        return "string" if self.pattern is None else f"string re: {self.pattern}"


@frozen
class Bytes:
    """Like :class:`String`, but produces UTF-8 encoded :class:`bytes`."""

    pattern: str | bytes | None = None
    flags: int = 0

    def describe(self) -> str:
        if self.pattern is None:
            return "binary"
        pattern = self.pattern.decode("utf8", "replace") if isinstance(self.pattern, bytes) else self.pattern
        return f"binary re: {pattern}"


@frozen
class Atom:
    """Symbol looked up in, or interned into, a symbol table.

    In the default *safe* mode the value must already be one of ``symbols``:
    either an iterable of names (the interned name is produced) or an
    :class:`~enum.Enum` subclass (the member with that name is produced).
    With ``unsafe=True`` any value is accepted and interned with :func:`sys.intern`.
    """

    symbols: Union[None, type[Enum], frozenset[str]] = field(default=None, converter=_symbols_converter)
    unsafe: bool = False

    def names(self) -> tuple[str, ...]:
        if self.symbols is None:
            return ()
        if is_class_and_subclass(self.symbols, Enum):
            return tuple(self.symbols.__members__)  # pyright: ignore[reportAttributeAccessIssue]
        return tuple(sorted(self.symbols))  # pyright: ignore[reportArgumentType]

    def describe(self) -> str:
        if self.unsafe or not self.names():
            return "atom"
        return f"atom, one of {'|'.join(self.names())}"


@frozen
class Custom:
    """User supplied conversion function from the raw token to a value.

    The converter signals a bad token by raising :class:`ValueError`, :class:`TypeError`,
    :class:`LookupError` or :class:`AssertionError`.
    """

    converter: Callable[[str], Any]

    def describe(self) -> str:
        return ""


@frozen
class ListOf:
    """Applies ``inner`` to every token consumed by a multi-token ``nargs``."""

    inner: "ScalarType"

    def describe(self) -> str:
        return self.inner.describe()


ScalarType = Boolean | Integer | Float | String | Bytes | Atom | Custom
ArgType = Boolean | Integer | Float | String | Bytes | Atom | Custom | ListOf


def default_for(type_: Any) -> Any:
    """Value produced by ``nargs="maybe"`` when neither a token nor a default is available."""
    if isinstance(type_, Boolean):
        return True
    elif isinstance(type_, Integer):
        return 0
    elif isinstance(type_, Float):
        return 0.0
    elif isinstance(type_, String):
        return ""
    elif isinstance(type_, Bytes):
        return b""
    return None


def is_type(value: Any) -> bool:
    return isinstance(value, Boolean | Integer | Float | String | Bytes | Atom | Custom | ListOf)
