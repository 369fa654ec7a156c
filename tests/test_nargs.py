import pytest

from argtree import (
    Argument,
    Boolean,
    Command,
    Integer,
    InvalidArgumentError,
    MaybeConst,
)


def test_nargs_count(assert_parse):
    cmd = Command(arguments=[Argument("point", short="p", type=Integer(), nargs=2)])
    assert_parse(cmd, "-p 1 2", {"point": [1, 2]})
    assert_parse(cmd, "-p -1 -2", {"point": [-1, -2]})


@pytest.mark.parametrize("tokens", ["-p 1", "-p 1 -v", "-p"])
def test_nargs_count_too_few(parse_error, tokens):
    cmd = Command(
        arguments=[
            Argument("point", short="p", type=Integer(), nargs=2),
            Argument("verbose", short="v", type=Boolean()),
        ]
    )
    error = parse_error(InvalidArgumentError, cmd, tokens)
    assert error.argument.name == "point"


def test_nargs_count_leaves_rest(assert_parse):
    cmd = Command(arguments=[Argument("point", short="p", nargs=2), Argument("rest")])
    assert_parse(cmd, "-p a b c", {"point": ["a", "b"], "rest": "c"})


def test_nargs_list(assert_parse):
    cmd = Command(
        arguments=[
            Argument("x", short="x", nargs="list"),
            Argument("other", long="-other", type=Boolean()),
        ]
    )
    assert_parse(cmd, ["-x", "1", "2", "--other"], {"x": ["1", "2"], "other": True})
    assert_parse(cmd, ["-x"], {"x": []})


def test_nargs_nonempty_list(assert_parse, parse_error):
    cmd = Command(
        arguments=[
            Argument("x", short="x", nargs="nonempty_list"),
            Argument("v", short="v", type=Boolean()),
        ]
    )
    assert_parse(cmd, "-x a", {"x": ["a"]})
    parse_error(InvalidArgumentError, cmd, "-x")
    error = parse_error(InvalidArgumentError, cmd, "-x -v")
    assert error.value == "-v"


def test_nargs_all(assert_parse):
    cmd = Command(
        arguments=[
            Argument("x", short="x", nargs="all"),
            Argument("b", short="b", type=Boolean()),
        ]
    )
    assert_parse(cmd, "-x a -b --c", {"x": ["a", "-b", "--c"]})


def test_nargs_all_positional(assert_parse):
    cmd = Command(arguments=[Argument("program"), Argument("argv", nargs="all")])
    assert_parse(cmd, "ls x -l -a", {"program": "ls", "argv": ["x", "-l", "-a"]})


@pytest.mark.parametrize(
    "tokens, expected",
    [
        ("-l", {"level": 0}),
        ("-l 3", {"level": 3}),
        ("-l -v", {"level": 0, "v": True}),
    ],
)
def test_nargs_maybe(assert_parse, tokens, expected):
    cmd = Command(
        arguments=[
            Argument("level", short="l", type=Integer(), nargs="maybe"),
            Argument("v", short="v", type=Boolean()),
        ]
    )
    assert_parse(cmd, tokens, expected)


def test_nargs_maybe_default(assert_parse):
    cmd = Command(arguments=[Argument("level", short="l", type=Integer(), nargs="maybe", default=7)])
    assert_parse(cmd, "-l", {"level": 7})
    assert_parse(cmd, [], {"level": 7})


def test_nargs_maybe_string(assert_parse):
    cmd = Command(arguments=[Argument("name", short="n", nargs="maybe")])
    assert_parse(cmd, "-n", {"name": ""})


def test_nargs_maybe_const(assert_parse):
    cmd = Command(arguments=[Argument("color", short="c", nargs=MaybeConst("auto"))])
    assert_parse(cmd, "-c", {"color": "auto"})
    assert_parse(cmd, "-c never", {"color": "never"})


def test_nargs_maybe_const_not_converted(assert_parse):
    cmd = Command(arguments=[Argument("jobs", short="j", type=Integer(), nargs=MaybeConst("auto"))])
    assert_parse(cmd, "-j", {"jobs": "auto"})
    assert_parse(cmd, "-j 4", {"jobs": 4})


def test_nargs_maybe_in_bundle(assert_parse):
    """An option with an optional value can lead a flag bundle."""
    cmd = Command(
        arguments=[
            Argument("level", short="l", type=Integer(), nargs="maybe"),
            Argument("v", short="v", type=Boolean()),
        ]
    )
    assert_parse(cmd, "-lv", {"level": 0, "v": True})


def test_nargs_list_converts_each(parse_error):
    cmd = Command(arguments=[Argument("n", short="n", type=Integer(), nargs="list")])
    error = parse_error(InvalidArgumentError, cmd, "-n 1 x 3")
    assert error.value == "x"
