from contextvars import ContextVar

import pytest

from .thread import Thread

current = ContextVar[str]("current", default="unset")


@pytest.mark.timeout(2)
def test_thread_runs_in_copied_context():
    token = current.set("caller")
    try:
        thread = Thread(target=current.get)
        thread.start()
        thread.join()
    finally:
        current.reset(token)

    assert thread.future.result(timeout=1) == "caller"


@pytest.mark.timeout(2)
def test_thread_future_holds_exception():
    def failing():
        raise ValueError("in thread")

    thread = Thread(target=failing)
    thread.start()
    thread.join()

    with pytest.raises(ValueError, match="in thread"):
        thread.future.result(timeout=1)
