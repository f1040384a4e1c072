from collections import deque
from collections.abc import Iterator
from threading import Condition

from corun.journal import Journal


class StubJournal(Journal):
    """An in-memory journal, only visible within this process."""

    def __init__(self):
        self.__messages = deque[tuple[str, bytes]]()
        self.__condition = Condition()
        self.__closed = False

    @classmethod
    def from_uri(cls, uri: str, /):
        return cls()

    def subscribe(self) -> Iterator[tuple[str, bytes]]:
        while True:
            with self.__condition:
                while not self.__messages and not self.__closed:
                    self.__condition.wait()
                if not self.__messages:
                    return
                entry = self.__messages.popleft()
            yield entry

    def publish(self, computation_id: str, message: bytes, /):
        with self.__condition:
            if self.__closed:
                return
            self.__messages.append((computation_id, message))
            self.__condition.notify()

    def shutdown(self):
        with self.__condition:
            self.__closed = True
            self.__condition.notify_all()
