from typing import Any, Literal, Union

from attrs import field

from argtree.types import ArgType, Boolean, String
from argtree.utils import UNSET, frozen

__all__ = [
    "Action",
    "AppendConst",
    "Argument",
    "MaybeConst",
    "Nargs",
    "StoreConst",
]


@frozen
class StoreConst:
    """Action that stores ``value`` without consuming a token."""

    value: Any


@frozen
class AppendConst:
    """Action that appends ``value`` without consuming a token."""

    value: Any


@frozen
class MaybeConst:
    """``nargs`` that consumes one token if available, otherwise produces ``value``."""

    value: Any


Action = Union[Literal["store", "append", "count", "extend"], StoreConst, AppendConst]
Nargs = Union[None, int, Literal["maybe", "list", "nonempty_list", "all"], MaybeConst]

ACTIONS = frozenset({"store", "append", "count", "extend"})
NARGS = frozenset({"maybe", "list", "nonempty_list", "all"})


@frozen
class Argument:
    """Declaration of a single command line argument.

    Example usage:

    .. code-block:: python

        from argtree import Argument, Boolean, Integer

        recursive = Argument("recursive", short="r", type=Boolean())
        interval = Argument("interval", short="i", long="-interval", type=Integer(min=1))
        target = Argument("target", nargs="nonempty_list")

    Arguments with a ``short`` or ``long`` form are *optional* (``-r``, ``--interval 5``);
    all others are *positional* and are matched in declaration order.
    """

    name: str
    """Key of the value in the parse result.

    Several arguments may share a name; they then write to the same destination.
    """

    short: str | None = field(default=None, kw_only=True)
    """Single character, matched after a prefix: ``short="v"`` matches ``-v``."""

    long: str | None = field(default=None, kw_only=True)
    """Text matched after exactly one prefix character.

    ``long="-verbose"`` matches ``--verbose``; ``long="verbose"`` matches ``-verbose``.
    A long form is always tried before short forms and flag bundles.
    """

    required: bool | None = field(default=None, kw_only=True)
    default: Any = field(default=UNSET, kw_only=True)
    type: ArgType = field(factory=String, kw_only=True)
    action: Action = field(default="store", kw_only=True)
    nargs: Nargs = field(default=None, kw_only=True)
    help: str | None = field(default=None, kw_only=True)

    @property
    def is_optional(self) -> bool:
        return self.short is not None or self.long is not None

    @property
    def is_positional(self) -> bool:
        return not self.is_optional

    @property
    def is_required(self) -> bool:
        """Whether a missing value is an error.

        Unless ``required`` is set explicitly, positionals without a default are required,
        and optionals never are.
        """
        if self.required is not None:
            return self.required
        return self.is_positional and self.default is UNSET

    @property
    def takes_value(self) -> bool:
        """Whether the option must be followed by a value, and so cannot act as a flag."""
        match self.nargs:
            case None:
                pass
            case "maybe" | MaybeConst():
                return False
            case _:
                return True

        match self.action:
            case "store" | "append":
                return not isinstance(self.type, Boolean)
            case _:
                return False
