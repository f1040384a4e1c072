from dataclasses import dataclass


@dataclass(frozen=True)
class Step[T]:
    """The outcome of resuming a computation once.

    While ``done`` is false, ``value`` is the awaitable the computation
    is suspended on. Once ``done`` is true, ``value`` is the final result.
    """

    value: T
    done: bool
