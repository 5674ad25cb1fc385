"""Subscription record: a subject bound to a callback under a unique sid."""

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional

# (message, reply_to, subject) -> None
MessageCallback = Callable[[Any, Optional[str], str], None]


def new_sid() -> str:
    """Fresh globally-unique subscription id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Subscription:
    """An active registration of `callback` on `subject`."""

    sid: str
    subject: str
    callback: MessageCallback

    def deliver(self, message: Any, reply_to: Optional[str], subject: str) -> None:
        self.callback(message, reply_to, subject)

    def to_dict(self) -> dict:
        """Serialize for logging or test assertions."""
        return {
            "sid": self.sid,
            "subject": self.subject,
            "callback": getattr(self.callback, "__qualname__", repr(self.callback)),
        }
