"""Run mode of the framework: debug, release or test."""

from __future__ import annotations

import os

ENV_GIN_MODE = "GIN_MODE"

DEBUG_MODE = "debug"
RELEASE_MODE = "release"
TEST_MODE = "test"

_MODES = (DEBUG_MODE, RELEASE_MODE, TEST_MODE)

# Set by the test runner while a test is executing.
_TEST_RUNNER_ENV = "PYTEST_CURRENT_TEST"

_current_mode = DEBUG_MODE


def set_mode(value: str | None) -> None:
    """Set the run mode; an empty value picks test mode under a test runner, else debug."""
    global _current_mode
    if not value:
        value = TEST_MODE if os.environ.get(_TEST_RUNNER_ENV) else DEBUG_MODE
    if value not in _MODES:
        raise ValueError(
            f"gin mode unknown: {value} (available mode: debug release test)"
        )
    _current_mode = value


def mode() -> str:
    """Return the current run mode."""
    return _current_mode


def is_debugging() -> bool:
    """Return True when running in debug mode."""
    return _current_mode == DEBUG_MODE


set_mode(os.environ.get(ENV_GIN_MODE, ""))