from abc import ABC
from abc import abstractmethod
from collections.abc import Iterator


class Journal(ABC):
    """A transport for serialized computation events.

    Each message is keyed by the id of the computation it describes, so
    transports can route on it and subscribers can tell computations apart
    without deserializing.
    """

    @classmethod
    @abstractmethod
    def from_uri(cls, uri: str, /):
        """Create a journal instance from a URI."""
        raise NotImplementedError("Subclasses must implement this method.")

    @abstractmethod
    def subscribe(self) -> Iterator[tuple[str, bytes]]:
        """Yield ``(computation_id, message)`` pairs until shut down."""
        raise NotImplementedError("Subclasses must implement this method.")

    @abstractmethod
    def publish(self, computation_id: str, message: bytes, /):
        """Record a message about a computation.

        Once the journal is shut down, messages are dropped.
        """
        raise NotImplementedError("Subclasses must implement this method.")

    @abstractmethod
    def shutdown(self):
        """Stop subscribers once they have received pending messages."""
        raise NotImplementedError("Subclasses must implement this method.")
