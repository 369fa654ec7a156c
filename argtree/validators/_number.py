from collections.abc import Sequence
from typing import Any

from argtree.utils import frozen


@frozen(kw_only=True)
class Number:
    """Limit input number to an inclusive value range.

    Example Usage:

    .. code-block:: python

        from argtree import Argument, Command, Integer

        cmd = Command(arguments=[Argument(name="age", type=Integer(min=0, max=150))])

    .. code-block:: console

        $ my-script -1
        my-script: invalid argument -1 for: age. Must be >= 0.

        $ my-script 200
        my-script: invalid argument 200 for: age. Must be <= 150.
    """

    gte: int | float | None = None
    """Input value must be **greater than or equal** this value."""

    lte: int | float | None = None
    """Input value must be **less than or equal** this value."""

    def __call__(self, type_: Any, value: Any):
        if isinstance(value, Sequence):
            if isinstance(value, str):
                raise TypeError
            for v in value:
                self(type_, v)
        else:
            if not isinstance(value, int | float):
                return

            if self.gte is not None and value < self.gte:
                raise ValueError(f"Must be >= {self.gte}.")

            if self.lte is not None and value > self.lte:
                raise ValueError(f"Must be <= {self.lte}.")
