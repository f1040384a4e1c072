import secrets
import string
from dataclasses import dataclass
from dataclasses import field
from datetime import UTC
from datetime import datetime

B36_ALPHABET = string.ascii_lowercase + string.digits


def random_id(length: int = 10) -> str:
    return "".join(secrets.choice(B36_ALPHABET) for _ in range(length))


@dataclass(eq=False, kw_only=True)
class Event:
    """Something that happened to the computation identified by ``id``."""

    event_id: str = field(default_factory=random_id, repr=False)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(tz=UTC), repr=False
    )
    id: str
