from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from .driver import Driver
from .futurize import resolved
from .resumption import SendResumption
from .resumption import ThrowResumption


class FutureDriver[R](Driver[R]):
    """Drive a computation that suspends on futures.

    The outcome of the computation is given to ``future``.
    Values other than futures are given back to the computation as-is.
    """

    def __init__(self, factory: Callable[[], Any], /, *, name: str | None = None):
        super().__init__(factory, name=name)
        self.future = Future[R]()
        self.future.set_running_or_notify_cancel()

    def _wait(self, awaitable: Any, /):
        future = awaitable if isinstance(awaitable, Future) else resolved(awaitable)
        future.add_done_callback(self.__done)

    def __done(self, future: Future[Any]):
        try:
            value = future.result()
        except BaseException as exception:
            self._settle(ThrowResumption(exception=exception))
        else:
            self._settle(SendResumption(value=value))

    def _succeeded(self, value: R, /):
        self.future.set_result(value)

    def _errored(self, exception: BaseException, /):
        self.future.set_exception(exception)


def run_future_style[R](
    factory: Callable[..., Any], /, *args: Any, **kwargs: Any
) -> Future[R]:
    """Run a computation driven by futures.

    The returned future succeeds with the computation's return value,
    or fails with the first error that escapes it.
    """
    driver = FutureDriver[R](
        lambda: factory(*args, **kwargs),
        name=getattr(factory, "__qualname__", None),
    )
    driver.start()
    return driver.future
