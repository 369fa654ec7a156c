__version__ = "0.1.0"

__all__ = [
    "AppendConst",
    "ArgtreeError",
    "Argument",
    "Atom",
    "Boolean",
    "Bytes",
    "Command",
    "CommandMatch",
    "Custom",
    "Float",
    "Integer",
    "InvalidArgumentError",
    "InvalidCommandError",
    "InvalidOptionError",
    "InvalidSpecError",
    "ListOf",
    "MaybeConst",
    "MissingArgumentError",
    "Parser",
    "ParserOptions",
    "StoreConst",
    "String",
    "UNSET",
    "UnknownArgumentError",
    "convert",
    "format_error",
    "format_help",
    "format_usage",
    "help_print",
    "parse",
    "run",
    "validate",
    "validators",
]

from argtree import validators
from argtree._convert import convert
from argtree._run import run
from argtree.argument import AppendConst, Argument, MaybeConst, StoreConst
from argtree.command import Command, CommandMatch
from argtree.exceptions import (
    ArgtreeError,
    InvalidArgumentError,
    InvalidCommandError,
    InvalidOptionError,
    InvalidSpecError,
    MissingArgumentError,
    UnknownArgumentError,
)
from argtree.help import format_error, format_help, format_usage, help_print
from argtree.parser import Parser, ParserOptions, parse
from argtree.types import Atom, Boolean, Bytes, Custom, Float, Integer, ListOf, String
from argtree.utils import UNSET
from argtree.validate import validate
