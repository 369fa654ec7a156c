import pytest
from rich.console import Console

from argtree import Argument, Boolean, Command, Float, Integer, Parser, ParserOptions


@pytest.fixture
def console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def utility():
    """Small command tree modelled on a typical service control tool."""
    return Command(
        arguments=[
            Argument("recursive", short="r", type=Boolean(), help="recursive"),
            Argument("verbose", short="v", action="count", help="increase verbosity level"),
            Argument("interval", short="i", type=Integer(min=1), help="interval set"),
            Argument("weight", long="-float", type=Float(), default=3.14, help="floating-point long form argument"),
            Argument("server", help="server to start"),
        ],
        commands={
            "start": Command(help="verifies configuration and starts server"),
            "stop": Command(help="stops running server"),
        },
    )


@pytest.fixture
def assert_parse():
    """Parse ``tokens`` against ``command`` with program name ``prog`` and compare."""

    def inner(command, tokens, expected, **kwargs):
        if isinstance(tokens, str):
            tokens = tokens.split()
        parser = Parser(command, ParserOptions(progname="prog", **kwargs))
        assert parser.parse(tokens) == expected

    return inner


@pytest.fixture
def parse_error():
    """Parse ``tokens`` against ``command`` and return the raised error."""

    def inner(error_type, command, tokens, **kwargs):
        if isinstance(tokens, str):
            tokens = tokens.split()
        parser = Parser(command, ParserOptions(progname="prog", **kwargs))
        with pytest.raises(error_type) as e:
            parser.parse(tokens)
        return e.value

    return inner
