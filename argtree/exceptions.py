from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Optional

from attrs import define, field

from argtree.utils import format_path

if TYPE_CHECKING:
    from argtree.argument import Argument


__all__ = [
    "ArgtreeError",
    "InvalidArgumentError",
    "InvalidCommandError",
    "InvalidOptionError",
    "InvalidSpecError",
    "MissingArgumentError",
    "UnknownArgumentError",
]


@define(kw_only=True)
class ArgtreeError(Exception):
    """Root exception for every argtree failure.

    Errors are raised at the first problem; a parse never produces a partial result.
    """

    msg: str | None = None
    """
    If set, override automatic message generation.
    """

    command_path: tuple[str, ...] = field(default=(), converter=tuple)
    """
    Program name followed by every sub-command selected before the failure.
    """

    def describe(self) -> str:
        """Message body, without the command path prefix."""
        return ""

    def __str__(self):
        body = self.msg if self.msg is not None else self.describe()
        return format_path(self.command_path) + body


@define(kw_only=True)
class InvalidSpecError(ArgtreeError):
    """The declared command tree violates a structural rule.

    Only ever raised while validating, never while parsing tokens.
    """

    field_name: str = ""
    """Offending field of the command or argument."""

    reason: str = ""


@define(kw_only=True)
class InvalidCommandError(InvalidSpecError):
    """A command descriptor is malformed."""

    def describe(self) -> str:
        return f"internal error, invalid field '{self.field_name}': {self.reason}"


@define(kw_only=True)
class InvalidOptionError(InvalidSpecError):
    """An argument descriptor is malformed, or collides with another one."""

    name: str = ""
    """Name of the argument (or the unrecognised field)."""

    def describe(self) -> str:
        if self.field_name:
            return f"internal error, option {self.name} field '{self.field_name}': {self.reason}"
        return f"internal error, option {self.name}: {self.reason}"


@define(kw_only=True)
class UnknownArgumentError(ArgtreeError):
    """A token matched no sub-command, known option, or pending positional."""

    token: str
    """The token that could not be matched."""

    def describe(self) -> str:
        return f"unrecognised argument: {self.token}"


@define(kw_only=True)
class MissingArgumentError(ArgtreeError):
    """A required argument was not provided.

    When ``argument`` is :obj:`None`, parsing stopped at a command that needs
    one of its sub-commands to be selected.
    """

    argument: Optional["Argument"] = None

    choices: Sequence[str] = field(default=(), converter=tuple)
    """Sub-commands that could have been selected."""

    def describe(self) -> str:
        if self.argument is not None:
            return f"required argument missing: {self.argument.name}"
        if self.choices:
            return f"required argument missing: command (one of {', '.join(self.choices)})"
        return "required argument missing: command"


@define(kw_only=True)
class InvalidArgumentError(ArgtreeError):
    """A token failed conversion, a constraint, or a token-count requirement."""

    argument: "Argument"

    value: Any = None
    """Offending raw token (or converted value, for range violations)."""

    reason: str = ""
    """Extra detail, e.g. from a bound check or a custom converter."""

    def describe(self) -> str:
        if isinstance(self.value, list | tuple):
            value = " ".join(str(x) for x in self.value)
        else:
            value = self.value
        message = f"invalid argument {value} for: {self.argument.name}"
        if self.reason:
            message += f". {self.reason}"
        return message
