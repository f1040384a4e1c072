from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from .event import Event
from .event import random_id
from .step import Step


class Computation[R]:
    """A generator or coroutine that is advanced one suspension at a time.

    Each suspension point yields an awaitable. Whoever drives the computation
    settles that awaitable and then calls ``resume`` with its value or
    ``resume_with_error`` with its exception.
    """

    def __init__(
        self,
        body: Generator[Any, Any, R] | Awaitable[R],
        /,
        *,
        id: str | None = None,
    ):
        if isinstance(body, Generator):
            self.__generator = body
        elif isinstance(body, Awaitable):
            self.__generator = body.__await__()
        else:
            raise TypeError(f"Cannot compute {body!r}: not a generator or awaitable")
        self.id = id or random_id()
        self.__started = False
        self.__done = False

    def __repr__(self):
        state = "done" if self.__done else "pending"
        return f"<{type(self).__name__} {self.id!r} {state}>"

    @property
    def done(self) -> bool:
        return self.__done

    def resume(self, value: Any = None, /) -> Step:
        """Continue from the last suspension point with a value."""
        if not self.__started:
            # Nothing is suspended yet to receive the value.
            value = None
        return self.__advance(self.__generator.send, value)

    def resume_with_error(self, error: BaseException, /) -> Step:
        """Continue from the last suspension point by raising an error there.

        If the computation doesn't handle the error, it is raised from here
        and the computation is finished.
        """
        return self.__advance(self.__generator.throw, error)

    def __advance(self, method: Callable[[Any], Any], arg: Any, /) -> Step:
        if self.__done:
            return Step(None, done=True)

        self.__started = True
        try:
            awaitable = method(arg)
        except StopIteration as stop:
            self.__done = True
            return Step(stop.value, done=True)
        except BaseException:
            self.__done = True
            raise
        return Step(awaitable, done=False)


@dataclass(eq=False, kw_only=True)
class ComputationStarted(Event):
    factory: str


@dataclass(eq=False, kw_only=True)
class ComputationSuspended(Event):
    awaitable: str


@dataclass(eq=False, kw_only=True)
class ComputationResumed(Event):
    value: str


@dataclass(eq=False, kw_only=True)
class ComputationThrew(Event):
    exception: str


@dataclass(eq=False, kw_only=True)
class ComputationCompleted(Event): ...


@dataclass(eq=False, kw_only=True)
class ComputationSucceeded(ComputationCompleted):
    value: str


@dataclass(eq=False, kw_only=True)
class ComputationErrored(ComputationCompleted):
    exception: str
