from collections.abc import Callable
from typing import Any

from .driver import Driver
from .resumption import SendResumption
from .resumption import ThrowResumption
from .thunk import Continuation
from .thunk import as_exception


class CallbackDriver(Driver[Any]):
    """Drive a computation that suspends on callback-style awaitables.

    Nothing is reported when the computation finishes, successfully or not.
    """

    def _wait(self, awaitable: Any, /):
        if not callable(awaitable):
            self._settle(
                ThrowResumption(
                    exception=TypeError(
                        f"Cannot wait on {awaitable!r}: not a callback-style awaitable"
                    )
                )
            )
            return

        continuation = Continuation(self.__continue)
        try:
            awaitable(continuation)
        except Exception as exception:
            # Once the continuation has been called, a failure is stale.
            if not continuation.called:
                continuation(exception, None)

    def __continue(self, error: Any, value: Any):
        if error is not None:
            self._settle(ThrowResumption(exception=as_exception(error)))
        else:
            self._settle(SendResumption(value=value))

    def _succeeded(self, value: Any, /):
        pass

    def _errored(self, exception: BaseException, /):
        pass


def run_callback_style(factory: Callable[..., Any], /, *args: Any, **kwargs: Any):
    """Run a computation driven by continuations.

    Returns as soon as the computation first waits on an operation that
    doesn't complete immediately. Errors that escape the computation are
    dropped.
    """
    CallbackDriver(
        lambda: factory(*args, **kwargs),
        name=getattr(factory, "__qualname__", None),
    ).start()
