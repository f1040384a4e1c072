from collections.abc import Iterable
from contextlib import suppress
from queue import Queue
from queue import ShutDown
from threading import Lock
from threading import Thread
from typing import Any

import dill

from .event import Event
from .journal import Journal


class Subscription:
    def __init__(self, types: Iterable[type], id: str | None):
        self.types = tuple(types)
        self.id = id

    def wants(self, computation_id: str) -> bool:
        return self.id is None or self.id == computation_id


class Stream:
    """Fan events out from a journal to local subscriber queues.

    Subscribers choose event types, and optionally a single computation.
    Messages are only deserialized when some subscriber wants their
    computation.
    """

    def __init__(self, journal: Journal):
        self.__journal = journal
        self.__lock = Lock()
        self.__subscriptions: dict[Queue[Any], Subscription] = {}
        self.__closed = False
        self.__listener = Thread(target=self.__listen, name="corun-stream-listener")
        self.__listener.start()

    def __listen(self):
        for computation_id, message in self.__journal.subscribe():
            self.__distribute(computation_id, message)

    def subscribe[T](
        self, types: Iterable[type[T]], *, id: str | None = None
    ) -> Queue[T]:
        queue = Queue[T]()
        with self.__lock:
            self.__subscriptions[queue] = Subscription(types, id)
        return queue

    def unsubscribe(self, queue: Queue) -> None:
        with self.__lock:
            self.__subscriptions.pop(queue, None)
        queue.shutdown(immediate=True)

    def __distribute(self, computation_id: str, message: bytes):
        with self.__lock:
            interested = {
                queue: subscription.types
                for queue, subscription in self.__subscriptions.items()
                if subscription.wants(computation_id)
            }
        if not interested:
            return

        event = dill.loads(message)
        for queue, types in interested.items():
            if isinstance(event, types):
                with suppress(ShutDown):
                    queue.put(event)

    def publish(self, event: Event):
        """Publish an event to all subscribers of the stream.

        Write to the journal so that remote and local subscribers
        see the event. Requires that the event is serializable.
        Events published after shutdown are dropped.
        """
        if self.__closed:
            return
        self.__journal.publish(event.id, dill.dumps(event))

    def shutdown(self):
        self.__closed = True
        self.__journal.shutdown()
        self.__listener.join()
        with self.__lock:
            queues = list(self.__subscriptions)
        for queue in queues:
            queue.shutdown()
