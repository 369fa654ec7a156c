import re
from typing import Any

from argtree.utils import frozen


@frozen(kw_only=True)
class Pattern:
    """Require a string (or bytes) value to contain a match for a regular expression.

    The search is unanchored, like :func:`re.search`; anchor the expression
    with ``^``/``$`` to match the whole value.
    A :class:`bytes` pattern is searched against the UTF-8 encoding of a string value.
    """

    regex: str | bytes
    """Regular expression to search for."""

    flags: int = 0
    """Flags passed through to :func:`re.search` unchanged."""

    def __call__(self, type_: Any, value: Any):
        if isinstance(self.regex, bytes) and isinstance(value, str):
            value = value.encode("utf8", "surrogateescape")
        elif isinstance(self.regex, str) and isinstance(value, bytes):
            value = value.decode("utf8", "surrogateescape")

        if re.search(self.regex, value, self.flags) is None:
            raise ValueError(f"Must match pattern {self.regex!r}.")
