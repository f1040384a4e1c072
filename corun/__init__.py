from contextlib import contextmanager

from .callback import run_callback_style as run_callback_style
from .computation import Computation as Computation
from .corun import Corun as Corun
from .future import run_future_style as run_future_style
from .futurize import futurize as futurize
from .futurize import rejected as rejected
from .futurize import resolved as resolved
from .futurize import spawn as spawn
from .futurize import wait as wait
from .step import Step as Step
from .thunk import AlreadyContinued as AlreadyContinued
from .thunk import Continuation as Continuation
from .thunk import OperationError as OperationError
from .thunk import Thunk as Thunk
from .thunk import thunkify as thunkify


@contextmanager
def activate():
    corun = Corun()
    try:
        with corun.activate():
            yield corun
    finally:
        corun.shutdown()
