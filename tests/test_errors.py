import pytest

from fotogallery.errors import FatalError


def test_message_includes_cause():
    err = FatalError("Failed to build index", ValueError("bad slug"))
    assert str(err) == "Failed to build index (bad slug)"


def test_cause_is_kept_and_chained():
    cause = OSError("disk full")
    err = FatalError("Failed to write", cause)
    assert err.cause is cause
    assert err.__cause__ is cause
    assert err.message == "Failed to write"


def test_without_cause_is_plain_message():
    err = FatalError("Directory argument not found", None)
    assert str(err) == "Directory argument not found"
    assert err.cause is None


def test_can_be_raised_and_caught():
    err = FatalError("Failed to listen the port", RuntimeError("in use"))
    with pytest.raises(FatalError) as info:
        raise err
    assert info.value is err
    assert str(info.value) == "Failed to listen the port (in use)"
    assert info.value.message == "Failed to listen the port"
    assert isinstance(info.value.cause, RuntimeError)