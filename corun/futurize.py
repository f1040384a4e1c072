from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Generator
from concurrent.futures import Future
from functools import wraps
from itertools import count
from typing import Any

from .thread import Thread
from .thunk import Continuation
from .thunk import as_exception

_spawned = count(1).__next__


def resolved[T](value: T, /) -> Future[T]:
    """Create a future that has already succeeded with ``value``."""
    future = Future[T]()
    future.set_result(value)
    return future


def rejected(error: BaseException, /) -> Future[Any]:
    """Create a future that has already failed with ``error``."""
    future = Future[Any]()
    future.set_exception(error)
    return future


def futurize[T](fn: Callable[..., Any], /) -> Callable[..., Future[T]]:
    """Adapt a function that takes a trailing continuation to return a future."""

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Future[T]:
        future = Future[T]()

        def settle(error: Any, value: T | None):
            if error is not None:
                future.set_exception(as_exception(error))
            else:
                future.set_result(value)

        continuation = Continuation(settle)
        try:
            fn(*args, continuation, **kwargs)
        except Exception as exception:
            if continuation.called:
                raise
            continuation(exception, None)
        return future

    return wrapper


def spawn[T](fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> Future[T]:
    """Run a blocking function in its own thread and return its future."""
    thread = Thread(
        target=fn,
        name=f"corun-spawn-{_spawned()}",
        args=args,
        kwargs=kwargs,
    )
    thread.start()
    return thread.future


class Wait[T](Awaitable[T]):
    """Make a future awaitable from an ``async def`` computation."""

    def __init__(self, future: Future[T], /):
        self.__future = future

    def __repr__(self):
        return f"<{type(self).__name__} {self.__future!r}>"

    def __await__(self) -> Generator[Future[T], T, T]:
        return (yield self.__future)


def wait[T](future: Future[T], /) -> Wait[T]:
    return Wait(future)
