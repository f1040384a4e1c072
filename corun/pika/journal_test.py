from itertools import islice
from time import sleep

import pytest
from pika import BlockingConnection
from pika import ConnectionParameters
from pika.exceptions import AMQPConnectionError

from corun.journal_test import BaseJournalTest

from .journal import PikaJournal
from .journal import routing_key


def rabbitmq_available() -> bool:
    try:
        BlockingConnection(ConnectionParameters()).close()
    except AMQPConnectionError:
        return False
    return True


pytestmark = pytest.mark.skipif(
    not rabbitmq_available(), reason="RabbitMQ is not reachable on localhost"
)


class TestPikaJournal(BaseJournalTest):
    @pytest.fixture
    def journal(self):
        journal = PikaJournal(ConnectionParameters())
        yield journal
        journal.shutdown()

    @pytest.mark.timeout(2)
    def test_pending_messages_survive_shutdown(self, journal):
        journal.publish("a1", b"first")
        journal.publish("a1", b"second")
        # Let the broker deliver before the consumer is cancelled.
        sleep(0.2)
        journal.shutdown()

        assert list(journal.subscribe()) == [("a1", b"first"), ("a1", b"second")]

    def test_from_uri(self):
        journal = PikaJournal.from_uri("pika://localhost:5672")
        assert isinstance(journal, PikaJournal)
        journal.shutdown()

    @pytest.mark.timeout(2)
    def test_bound_to_chosen_computations(self, journal):
        watcher = PikaJournal(ConnectionParameters(), computation_ids=["a1"])
        try:
            journal.publish("b2", b"ignored")
            journal.publish("a1", b"watched")
            assert next(watcher.subscribe()) == ("a1", b"watched")
        finally:
            watcher.shutdown()

        assert list(islice(journal.subscribe(), 2)) == [
            ("b2", b"ignored"),
            ("a1", b"watched"),
        ]


def test_routing_key():
    assert routing_key("a1b2") == "corun.a1b2"
