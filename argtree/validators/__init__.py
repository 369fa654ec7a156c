__all__ = [
    "Number",
    "Pattern",
]

from argtree.validators._number import Number
from argtree.validators._pattern import Pattern
