from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
from contextlib import contextmanager
from contextvars import ContextVar
from threading import Lock
from typing import Any

from .computation import Computation
from .computation import ComputationErrored
from .computation import ComputationResumed
from .computation import ComputationStarted
from .computation import ComputationSucceeded
from .computation import ComputationSuspended
from .computation import ComputationThrew
from .event import Event
from .event import random_id
from .resumption import Resumption
from .resumption import SendResumption
from .resumption import ThrowResumption

type Publisher = Callable[[Event], None]


class Driver[R](ABC):
    """Run a computation to completion, one awaitable at a time.

    Subclasses decide how to wait on the awaitables the computation
    suspends on, and what to do with its outcome. Settling an awaitable
    hands a resumption to ``_settle``, from any thread and possibly
    before ``_wait`` has even returned. Resumptions are processed in a
    loop, so awaitables that settle immediately don't grow the stack.
    """

    __publisher = ContextVar[Publisher | None]("Driver.publisher", default=None)

    @classmethod
    @contextmanager
    def publisher(cls, publisher: Publisher):
        """Publish events from drivers created in this context."""
        token = cls.__publisher.set(publisher)
        try:
            yield
        finally:
            cls.__publisher.reset(token)

    def __init__(self, factory: Callable[[], Any], /, *, name: str | None = None):
        self.id = random_id()
        self.__factory = factory
        self.__name = name or getattr(factory, "__qualname__", repr(factory))
        self.__publish = self.__publisher.get()
        self.__lock = Lock()
        self.__running = False
        self.__finished = False
        self.__pending: Resumption | None = None
        self.__computation: Computation[R]

    def start(self):
        """Create the computation and run it until it first suspends."""
        try:
            self.__computation = Computation(self.__factory(), id=self.id)
        except Exception as exception:
            self.__emit(ComputationErrored(id=self.id, exception=repr(exception)))
            self.__stop()
            self._errored(exception)
            return

        self.__emit(ComputationStarted(id=self.id, factory=self.__name))
        self._settle(SendResumption(value=None))

    @abstractmethod
    def _wait(self, awaitable: Any, /) -> None:
        """Arrange for the awaitable's outcome to be given to ``_settle``."""
        raise NotImplementedError("Subclasses must implement this method.")

    @abstractmethod
    def _succeeded(self, value: R, /) -> None:
        raise NotImplementedError("Subclasses must implement this method.")

    @abstractmethod
    def _errored(self, exception: BaseException, /) -> None:
        raise NotImplementedError("Subclasses must implement this method.")

    def _settle(self, resumption: Resumption, /):
        with self.__lock:
            if self.__finished:
                # The computation is over, so the outcome is stale.
                return
            if self.__pending is not None:
                raise RuntimeError("Computation already has a pending resumption.")
            self.__pending = resumption
            if self.__running:
                # The running loop picks it up once _wait returns.
                return
            self.__running = True
        self.__loop(self.__computation)

    def __loop(self, computation: Computation[R]):
        while True:
            with self.__lock:
                resumption, self.__pending = self.__pending, None
                if resumption is None:
                    self.__running = False
                    return

            match resumption:
                case SendResumption(value=value):
                    self.__emit(ComputationResumed(id=self.id, value=repr(value)))
                case ThrowResumption(exception=exception):
                    self.__emit(
                        ComputationThrew(id=self.id, exception=repr(exception))
                    )

            try:
                step = resumption.apply(computation)
            except BaseException as exception:
                # SystemExit and friends from spawned operations end up here
                # too, and must still settle the computation.
                self.__emit(ComputationErrored(id=self.id, exception=repr(exception)))
                self.__stop()
                self._errored(exception)
                return

            if step.done:
                self.__emit(ComputationSucceeded(id=self.id, value=repr(step.value)))
                self.__stop()
                self._succeeded(step.value)
                return

            self.__emit(ComputationSuspended(id=self.id, awaitable=repr(step.value)))
            self._wait(step.value)

    def __stop(self):
        with self.__lock:
            self.__running = False
            self.__finished = True

    def __emit(self, event: Event):
        if self.__publish is not None:
            self.__publish(event)
