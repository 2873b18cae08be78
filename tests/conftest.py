# topmark:header:start
#
#   project      : YamlBridge
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the YamlBridge test suite.

This file sets up global fixtures and the logging configuration for test runs.

Notes:
    Tests that resolve descriptors should pass the `cache` fixture to
    `marshal` / `unmarshal` (``cache=cache``) so they never depend on, or leak into,
    the process-wide `yamlbridge.default_cache`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar, cast

import pytest

from yamlbridge.config.logging import TRACE_LEVEL
from yamlbridge.constants import LOG_LEVEL_ENV_VAR
from yamlbridge.fields import FieldCache

F = TypeVar("F", bound=Callable[..., object])

DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.concurrency`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_concurrency: DecoratorType[Any] = as_typed_mark(pytest.mark.concurrency)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.mark.parametrize(*args, **kwargs))


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_yamlbridge_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure the runtime log level is not forced via env during tests.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)


@pytest.fixture
def cache() -> FieldCache:
    """Return a fresh, isolated descriptor cache."""
    return FieldCache()


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Log YamlBridge at TRACE during tests.

    The package logger keeps propagating to the root logger so that `caplog` sees
    its records.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.getLogger("yamlbridge").setLevel(TRACE_LEVEL)
