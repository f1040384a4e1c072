from queue import ShutDown

import dill
import pytest

from .computation import ComputationCompleted
from .computation import ComputationStarted
from .computation import ComputationSucceeded
from .stream import Stream
from .stub.journal import StubJournal


class RecordingJournal(StubJournal):
    def __init__(self):
        super().__init__()
        self.published = []

    def publish(self, computation_id, message, /):
        self.published.append((computation_id, message))
        super().publish(computation_id, message)


@pytest.fixture
def stream():
    stream = Stream(StubJournal())
    yield stream
    stream.shutdown()


@pytest.mark.timeout(2)
def test_subscribers_receive_events_by_type(stream):
    started = stream.subscribe({ComputationStarted})
    completed = stream.subscribe({ComputationCompleted})

    stream.publish(ComputationStarted(id="abc", factory="factory"))
    stream.publish(ComputationSucceeded(id="abc", value="42"))

    event = started.get(timeout=1)
    assert isinstance(event, ComputationStarted)
    assert event.id == "abc"
    assert event.factory == "factory"

    event = completed.get(timeout=1)
    assert isinstance(event, ComputationSucceeded)
    assert event.value == "42"
    assert started.empty()


@pytest.mark.timeout(2)
def test_subscribers_can_follow_one_computation(stream):
    one = stream.subscribe({ComputationCompleted}, id="one")
    every = stream.subscribe({ComputationCompleted})

    stream.publish(ComputationSucceeded(id="two", value="2"))
    stream.publish(ComputationSucceeded(id="one", value="1"))

    assert every.get(timeout=1).id == "two"
    assert every.get(timeout=1).id == "one"
    assert one.get(timeout=1).value == "1"
    assert one.empty()


@pytest.mark.timeout(2)
def test_events_are_keyed_by_computation_id():
    journal = RecordingJournal()
    stream = Stream(journal)
    stream.publish(ComputationStarted(id="abc", factory="factory"))
    stream.shutdown()

    [(computation_id, message)] = journal.published
    assert computation_id == "abc"
    assert dill.loads(message).factory == "factory"


@pytest.mark.timeout(2)
def test_unsubscribe_shuts_down_the_queue(stream):
    events = stream.subscribe({object})
    stream.unsubscribe(events)

    with pytest.raises(ShutDown):
        events.get(timeout=1)


@pytest.mark.timeout(2)
def test_shutdown_stops_subscribers():
    stream = Stream(StubJournal())
    events = stream.subscribe({object})
    stream.shutdown()

    with pytest.raises(ShutDown):
        events.get(timeout=1)


@pytest.mark.timeout(2)
def test_publish_after_shutdown_is_dropped():
    journal = RecordingJournal()
    stream = Stream(journal)
    stream.shutdown()
    stream.publish(ComputationStarted(id="abc", factory="factory"))

    assert journal.published == []
