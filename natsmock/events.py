"""Lifecycle notifications: observer lists for a fixed set of client events."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Union

from natsmock.observability import get_logger

Handler = Callable[[], None]


class ClientEvent(str, Enum):
    CONNECT = "connect"
    DISCONNECT = "disconnect"


EventName = Union[ClientEvent, str]


def _coerce(event: EventName) -> ClientEvent:
    try:
        return ClientEvent(event)
    except ValueError:
        raise ValueError(f"unknown event {event!r}; expected one of {[e.value for e in ClientEvent]}") from None


@dataclass(eq=False)
class _Registration:
    handler: Handler
    once: bool = False


class EventEmitter:
    """Register, unregister and emit handlers for connect/disconnect.

    Handlers take no arguments and run in registration order. Each on()/once()
    call is its own registration; a once() registration is dropped before its
    handler runs.
    """

    def __init__(self) -> None:
        self._registrations: Dict[ClientEvent, List[_Registration]] = {event: [] for event in ClientEvent}
        self._logger = get_logger("natsmock.events")

    def on(self, event: EventName, handler: Handler) -> Handler:
        """Register `handler` for `event`; returns the handler so it can be used as a decorator."""
        self._registrations[_coerce(event)].append(_Registration(handler))
        return handler

    def once(self, event: EventName, handler: Handler) -> Handler:
        self._registrations[_coerce(event)].append(_Registration(handler, once=True))
        return handler

    def off(self, event: EventName, handler: Handler) -> None:
        """Remove the most recent registration of `handler`; unknown handlers are ignored."""
        registrations = self._registrations[_coerce(event)]
        for index in range(len(registrations) - 1, -1, -1):
            if registrations[index].handler == handler:
                del registrations[index]
                return

    def emit(self, event: EventName) -> int:
        """Call every handler for `event`. Returns the number of handlers called."""
        key = _coerce(event)
        registrations = self._registrations[key]
        snapshot = list(registrations)
        self._logger.debug("emit", extra={"event": key.value, "handler_count": len(snapshot)})
        for registration in snapshot:
            if registration.once:
                if registration not in registrations:
                    continue
                registrations.remove(registration)
            registration.handler()
        return len(snapshot)

    def listener_count(self, event: EventName) -> int:
        return len(self._registrations[_coerce(event)])
