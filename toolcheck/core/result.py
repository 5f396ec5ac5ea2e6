"""Result type — ``Ok(value)`` or ``Err(cause)``, chained instead of raised.

Checks never raise across module boundaries: a missing executable, a
non-zero exit or an unparsable version all travel as ``Err`` and are
resolved by ``get_or_else`` at the edge.

    spawn(...).map(parse).on_failure(log).get_or_else(fallback)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success variant holding a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        try:
            return Ok(fn(self.value))
        except Exception as e:
            return Err(e)

    def and_then(self, fn: Callable[[T], Result[U]]) -> Result[U]:
        try:
            return fn(self.value)
        except Exception as e:
            return Err(e)

    def map_err(self, fn: Callable[[Exception], Exception]) -> Result[T]:
        return self

    def get_or_else(self, default: T) -> T:
        return self.value

    def get_or_raise(self) -> T:
        return self.value

    def on_success(self, fn: Callable[[T], Any]) -> Result[T]:
        fn(self.value)
        return self

    def on_failure(self, fn: Callable[[Exception], Any]) -> Result[T]:
        return self


@dataclass(frozen=True)
class Err(Generic[T]):
    """Failure variant holding the exception that caused it."""

    cause: Exception

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        return self  # type: ignore[return-value]

    def and_then(self, fn: Callable[[T], Result[U]]) -> Result[U]:
        return self  # type: ignore[return-value]

    def map_err(self, fn: Callable[[Exception], Exception]) -> Result[T]:
        try:
            return Err(fn(self.cause))
        except Exception as e:
            return Err(e)

    def get_or_else(self, default: T) -> T:
        return default

    def get_or_raise(self) -> T:
        raise self.cause

    def on_success(self, fn: Callable[[T], Any]) -> Result[T]:
        return self

    def on_failure(self, fn: Callable[[Exception], Any]) -> Result[T]:
        fn(self.cause)
        return self


Result = Union[Ok[T], Err[T]]


def run_catching(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """Call ``fn`` and wrap its return value, or the exception it raised."""
    try:
        return Ok(fn(*args, **kwargs))
    except Exception as e:
        return Err(e)
