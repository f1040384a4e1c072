import threading
from time import monotonic

import pytest


@pytest.fixture(autouse=True)
def no_leftover_threads():
    """Fail a test whose threads are still running shortly after it ends.

    Threads that settle a future (spawned operations, delayed continuations)
    do so just before they exit, so they get a moment to finish.
    """
    before = set(threading.enumerate())
    yield
    deadline = monotonic() + 1
    leftover = []
    for thread in set(threading.enumerate()) - before:
        thread.join(timeout=max(0, deadline - monotonic()))
        if thread.is_alive():
            leftover.append(thread.name)

    if leftover:
        pytest.fail(f"Threads left running: {', '.join(sorted(leftover))}")
