import pytest

from gintonic import mode as mode_module
from gintonic.mode import (
    DEBUG_MODE,
    RELEASE_MODE,
    TEST_MODE,
    is_debugging,
    mode,
    set_mode,
)


@pytest.fixture(autouse=True)
def restore_mode():
    previous = mode()
    yield
    set_mode(previous)


def test_empty_value_under_test_runner_selects_test_mode(monkeypatch):
    monkeypatch.setenv("PYTEST_CURRENT_TEST", "tests/test_mode.py::x")
    set_mode("")
    assert mode() == TEST_MODE


def test_empty_value_outside_test_runner_selects_debug_mode(monkeypatch):
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)
    set_mode("")
    assert mode() == DEBUG_MODE
    assert is_debugging() is True


def test_none_behaves_like_empty(monkeypatch):
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)
    set_mode(None)
    assert mode() == DEBUG_MODE


@pytest.mark.parametrize("value", [DEBUG_MODE, RELEASE_MODE, TEST_MODE])
def test_explicit_modes(value):
    set_mode(value)
    assert mode() == value
    assert is_debugging() is (value == DEBUG_MODE)


@pytest.mark.parametrize(
    ("name", "expected"),
    [("debug", DEBUG_MODE), ("release", RELEASE_MODE), ("test", TEST_MODE)],
)
def test_mode_names_are_accepted_literally(name, expected):
    set_mode(name)
    assert mode() == expected
    assert mode() == name
    assert mode_module.ENV_GIN_MODE == "GIN_MODE"


def test_unknown_mode_raises_and_keeps_previous():
    set_mode(RELEASE_MODE)
    with pytest.raises(ValueError, match="unknown"):
        set_mode("unknown")
    assert mode() == RELEASE_MODE