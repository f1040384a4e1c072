import os
import tomllib
from collections.abc import Callable
from collections.abc import Iterable
from contextlib import contextmanager
from pathlib import Path
from queue import Queue
from typing import Any

from .driver import Driver
from .future import run_future_style
from .journal import Journal
from .stream import Stream


class Corun:
    def __init__(self, *, journal: Journal | None = None):
        self.__stream = Stream(journal or self.__default_journal())

    def __pyproject(self) -> Path | None:
        for path in [cwd := Path.cwd(), *cwd.parents]:
            candidate = path / "pyproject.toml"
            if candidate.is_file():
                return candidate
        return None

    def __config(self) -> dict:
        if pyproject := self.__pyproject():
            with pyproject.open("rb") as f:
                config = tomllib.load(f)
            return config.get("tool", {}).get("corun", {})
        return {}

    def __default_journal(self) -> Journal:
        journal_uri = os.environ.get("CORUN_JOURNAL")
        if not journal_uri:
            journal_uri = self.__config().get("journal", "stub:")

        if journal_uri.startswith("pika:"):
            from .pika.journal import PikaJournal

            return PikaJournal.from_uri(journal_uri)

        if journal_uri.startswith("stub:"):
            from .stub.journal import StubJournal

            return StubJournal.from_uri(journal_uri)

        raise ValueError(
            f"URI scheme must be 'pika:' or 'stub:', got: {journal_uri}"
        )

    @contextmanager
    def activate(self):
        """Publish events from computations started in this context."""
        with Driver.publisher(self.__stream.publish):
            yield

    def run[R](self, factory: Callable[..., Any], /, *args: Any, **kwargs: Any) -> R:
        """Run a future-style computation and wait for its result."""
        with self.activate():
            future = run_future_style(factory, *args, **kwargs)
        return future.result()

    def subscribe[T](
        self, types: Iterable[type[T]], *, id: str | None = None
    ) -> Queue[T]:
        """Receive events of the given types, from one computation if given."""
        return self.__stream.subscribe(types, id=id)

    def unsubscribe(self, queue: Queue):
        return self.__stream.unsubscribe(queue)

    def shutdown(self):
        """Shut down all components."""
        self.__stream.shutdown()
