"""To prevent circular dependencies, this module should never import anything else from argtree."""

import functools
import inspect
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Literal

# https://threeofwands.com/attra-iv-zero-overhead-frozen-attrs-classes/
if TYPE_CHECKING:
    from attrs import frozen
else:
    from attrs import define

    frozen = functools.partial(define, unsafe_hash=True)


_INTEGER_RE = re.compile(r"[+-]?\d+")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")


class SentinelMeta(type):
    def __repr__(cls) -> str:
        return f"<{cls.__name__}>"

    def __bool__(cls) -> Literal[False]:
        return False


class Sentinel(metaclass=SentinelMeta):
    def __new__(cls):
        raise ValueError("Sentinel objects are not intended to be instantiated. Subclass instead.")


class UNSET(Sentinel):
    """Special sentinel value indicating that no data was provided. **Do not instantiate**."""


def is_iterable(obj) -> bool:
    if isinstance(obj, list | tuple | set | dict):  # Fast path for common types
        return True
    return not isinstance(obj, str | bytes) and isinstance(obj, Iterable)


def is_class_and_subclass(hint, target_class) -> bool:
    """Safely check if a type is both a class and a subclass of target_class.

    Parameters
    ----------
    hint : Any
        The type to check.
    target_class : type
        The target class to check subclass relationship against.

    Returns
    -------
    bool
        True if hint is a class and is a subclass of target_class, False otherwise.
    """
    try:
        return inspect.isclass(hint) and issubclass(hint, target_class)
    except TypeError:
        # issubclass() raises TypeError for non-class arguments like Union types
        return False


def to_tuple_converter(value: None | Any | Iterable[Any]) -> tuple[Any, ...]:
    """Convert a single element or an iterable of elements into a tuple.

    Intended to be used in an ``attrs.Field``. If :obj:`None` is provided, returns an empty tuple.
    If a single element is provided, returns a tuple containing just that element.
    If an iterable is provided, converts it into a tuple.

    Parameters
    ----------
    value: Any | Iterable[Any] | None
        An element, an iterable of elements, or None.

    Returns
    -------
    tuple[Any, ...]: A tuple containing the elements.
    """
    if value is None:
        return ()
    elif is_iterable(value):
        return tuple(value)
    else:
        return (value,)


def is_integer(token: str) -> bool:
    """Whether ``token`` is a plain, optionally signed, decimal integer literal."""
    return _INTEGER_RE.fullmatch(token) is not None


def is_number(token: str) -> bool:
    """Checks if a token can be read as a number.

    Integer literals (``"-5"``) and decimal/scientific floats (``"-2.5"``, ``"1e3"``) qualify.
    Special float spellings like ``"inf"`` or ``"nan"`` and underscored digits do not;
    on a command line they are far more likely to be option names or words.

    Parameters
    ----------
    token: str
        String to interpret.

    Returns
    -------
    bool
        Whether or not the ``token`` is number-like.
    """
    return _NUMBER_RE.fullmatch(token) is not None


def format_path(command_path: Iterable[str]) -> str:
    """Render a command path as an error-message prefix, e.g. ``"prog start: "``."""
    command_path = tuple(command_path)
    if not command_path:
        return ""
    return " ".join(command_path) + ": "
