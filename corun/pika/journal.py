from collections.abc import Iterator
from queue import Queue
from queue import ShutDown
from threading import Event
from threading import Lock
from threading import Thread
from typing import cast

from pika import BlockingConnection
from pika import ConnectionParameters
from pika import URLParameters

from corun.journal import Journal

EXCHANGE = "amq.topic"
PREFIX = "corun."


def routing_key(computation_id: str) -> str:
    """Route each computation's events under their own topic."""
    return PREFIX + computation_id


class PikaJournal(Journal):
    """A journal shared through a RabbitMQ topic exchange.

    Messages are published with a ``corun.<computation id>`` routing key.
    A journal listens to every computation unless it is given the ids of
    the computations to bind to.
    """

    @classmethod
    def from_uri(cls, uri: str, /):
        amqp_uri = "amqp:" + uri.removeprefix("pika:").removeprefix("amqp:")
        return cls(URLParameters(amqp_uri))

    def __init__(
        self,
        connection_params: ConnectionParameters | URLParameters,
        /,
        *,
        computation_ids: list[str] | None = None,
    ):
        self.__received = Queue[tuple[str, bytes]]()
        self.__listen_connection = BlockingConnection(connection_params)
        self.__listen_channel = self.__listen_connection.channel()
        self.__queue_name = cast(
            str, self.__listen_channel.queue_declare("", exclusive=True).method.queue
        )
        bindings = [routing_key(id) for id in computation_ids or []] or [PREFIX + "*"]
        for binding in bindings:
            self.__listen_channel.queue_bind(
                self.__queue_name, EXCHANGE, routing_key=binding
            )
        self.__listener = Thread(target=self.__listen, name="corun-journal-listener")
        self.__listener.start()

        self.__publish_lock = Lock()
        self.__publish_connection = BlockingConnection(connection_params)
        self.__publish_channel = self.__publish_connection.channel()
        self.__closing = Lock()
        self.__closed = False

    def __listen(self):
        for method, _, body in self.__listen_channel.consume(
            self.__queue_name, auto_ack=True
        ):
            computation_id = method.routing_key.removeprefix(PREFIX)
            self.__received.put((computation_id, body))

    def subscribe(self) -> Iterator[tuple[str, bytes]]:
        while True:
            try:
                yield self.__received.get()
            except ShutDown:
                return

    def publish(self, computation_id: str, message: bytes, /):
        with self.__publish_lock:
            if self.__closed:
                return
            self.__publish_channel.basic_publish(
                exchange=EXCHANGE,
                routing_key=routing_key(computation_id),
                body=message,
            )

    def shutdown(self):
        with self.__closing:
            with self.__publish_lock:
                if self.__closed:
                    return
                self.__closed = True

            cancelled = Event()

            def cancel():
                self.__listen_channel.cancel()
                cancelled.set()

            # The listen connection belongs to the listener thread.
            self.__listen_connection.add_callback_threadsafe(cancel)
            cancelled.wait()

            self.__listener.join()
            self.__received.shutdown()
            self.__listen_connection.close()
            with self.__publish_lock:
                self.__publish_connection.close()
