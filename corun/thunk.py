from collections.abc import Callable
from collections.abc import Generator
from functools import wraps
from threading import Lock
from typing import Any
from typing import Self


class AlreadyContinued(Exception):
    """The continuation has already been called."""


class OperationError(Exception):
    """An operation reported an error that isn't an exception."""

    def __init__(self, error: Any):
        super().__init__(error)
        self.error = error


def as_exception(error: Any, /) -> BaseException:
    """Make a continuation's error something that can be raised."""
    return error if isinstance(error, BaseException) else OperationError(error)


class Continuation[T]:
    """A single-use ``(error, value)`` callback.

    An ``error`` of ``None`` means the operation succeeded with ``value``.
    """

    def __init__(self, fn: Callable[[Any, T | None], None], /):
        self.__fn = fn
        self.__lock = Lock()
        self.__called = False

    def __repr__(self):
        return f"<{type(self).__name__} of {self.__fn!r}>"

    @property
    def called(self) -> bool:
        return self.__called

    def __call__(self, error: Any = None, value: T | None = None):
        with self.__lock:
            if self.__called:
                raise AlreadyContinued
            self.__called = True
        self.__fn(error, value)


class Thunk[T]:
    """A callback-style awaitable.

    Calling it with a continuation starts the operation, which must
    eventually call the continuation exactly once.
    """

    def __init__(self, fn: Callable[[Continuation[T]], Any], /):
        self.__fn = fn

    def __repr__(self):
        return f"<{type(self).__name__} of {self.__fn!r}>"

    def __call__(self, continuation: Continuation[T], /) -> None:
        self.__fn(continuation)

    def __await__(self) -> Generator[Self, T, T]:
        return (yield self)


def thunkify[T](fn: Callable[..., Any], /) -> Callable[..., Thunk[T]]:
    """Adapt a function that takes a trailing continuation argument.

    The returned function captures its arguments and returns a thunk
    that calls ``fn(*args, continuation, **kwargs)`` when it is started.
    """

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Thunk[T]:
        return Thunk(lambda continuation: fn(*args, continuation, **kwargs))

    return wrapper
