from argtree import (
    Argument,
    ArgtreeError,
    InvalidArgumentError,
    InvalidCommandError,
    InvalidOptionError,
    MissingArgumentError,
    UnknownArgumentError,
)


def test_exception_msg_override():
    error = UnknownArgumentError(token="-x", msg="custom message", command_path=["prog"])
    assert str(error) == "prog: custom message"


def test_exception_no_path():
    assert str(UnknownArgumentError(token="-x")) == "unrecognised argument: -x"


def test_exception_hierarchy():
    for cls in (InvalidCommandError, InvalidOptionError, UnknownArgumentError, MissingArgumentError):
        assert issubclass(cls, ArgtreeError)


def test_missing_command_without_choices():
    error = MissingArgumentError(command_path=("prog",))
    assert str(error) == "prog: required argument missing: command"


def test_invalid_argument_list_value():
    error = InvalidArgumentError(command_path=("prog",), argument=Argument("point"), value=["1", "x"])
    assert str(error) == "prog: invalid argument 1 x for: point"


def test_invalid_argument_reason():
    error = InvalidArgumentError(
        command_path=("prog", "start"),
        argument=Argument("port"),
        value=0,
        reason="Must be >= 1.",
    )
    assert str(error) == "prog start: invalid argument 0 for: port. Must be >= 1."


def test_invalid_option_message():
    error = InvalidOptionError(command_path=("prog",), name="verbose", field_name="nargs", reason="unsupported")
    assert str(error) == "prog: internal error, option verbose field 'nargs': unsupported"


def test_invalid_command_message():
    error = InvalidCommandError(command_path=("prog",), field_name="help", reason="help must be a string")
    assert str(error) == "prog: internal error, invalid field 'help': help must be a string"
