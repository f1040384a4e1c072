from dataclasses import dataclass
from typing import Any

from .computation import Computation
from .step import Step


@dataclass(eq=False, kw_only=True)
class Resumption:
    """The settled outcome of the awaitable a computation is suspended on."""

    def apply(self, computation: Computation, /) -> Step:
        raise NotImplementedError("Subclasses must implement this method.")


@dataclass(eq=False, kw_only=True)
class SendResumption(Resumption):
    value: Any

    def apply(self, computation: Computation, /) -> Step:
        return computation.resume(self.value)


@dataclass(eq=False, kw_only=True)
class ThrowResumption(Resumption):
    exception: BaseException

    def apply(self, computation: Computation, /) -> Step:
        return computation.resume_with_error(self.exception)
