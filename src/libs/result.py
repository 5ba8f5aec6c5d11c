"""
Result container

Ok/err return type shared by every use case. A use case never raises for
an expected failure; it returns ``Return.err(...)`` and the caller
branches on ``is_ok()`` / ``is_err()``.
"""

from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class Result(Generic[T]):
    __slots__ = ("_value", "_error")

    def __init__(self, value: Optional[T] = None, error: Any = None):
        self._value = value
        self._error = error

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        if self._error is not None:
            raise ValueError(f"Result is an error: {self._error!r}")
        return self._value

    @property
    def error(self) -> Any:
        if self._error is None:
            raise ValueError("Result is ok and has no error")
        return self._error

    def __repr__(self) -> str:
        if self.is_ok():
            return f"Ok({self._value!r})"
        return f"Err({self._error!r})"


class Return:
    @staticmethod
    def ok(value: T = None) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Any) -> Result[Any]:
        if error is None:
            raise ValueError("Return.err requires an error")
        return Result(error=error)
