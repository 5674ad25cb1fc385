"""In-memory messaging client: subscribe, publish and request/reply without a broker."""

from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from natsmock.events import ClientEvent, EventEmitter, EventName, Handler
from natsmock.observability import get_logger
from natsmock.options import ConnectOptions, RequestOptions, SubscribeOptions, coerce_options
from natsmock.registry import Registry, default_registry
from natsmock.scheduler import Scheduler
from natsmock.server_state import ServerState
from natsmock.subscription import MessageCallback, Subscription, new_sid

ConfigArg = Union[ConnectOptions, Mapping[str, Any], str, None]
OptionsArg = Union[Mapping[str, Any], MessageCallback, None]


def _split_callback(options: Any, callback: Optional[MessageCallback], operation: str):
    """Allow the callback in the options slot, as real clients do."""
    if callback is None and callable(options):
        return None, options
    if callback is None:
        raise TypeError(f"{operation}() requires a callback")
    return options, callback


class Client:
    """Handle bound to one simulated server.

    Clients built with the same url share subscriptions through the registry;
    a different url is a separate namespace. Subscriptions belong to the
    server, not the client, so close() leaves them registered.
    """

    def __init__(
        self,
        config: ConfigArg = None,
        *,
        registry: Optional[Registry] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        if isinstance(config, str):
            config = {"url": config}
        self._config = coerce_options(ConnectOptions, config)
        self._registry = registry if registry is not None else default_registry
        self._scheduler = scheduler if scheduler is not None else self._registry.scheduler
        self._server = self._registry.get_or_create(self._config.url)
        self.events = EventEmitter()
        self._logger = get_logger("natsmock.client")

    @classmethod
    def connect(
        cls,
        config: ConfigArg = None,
        *,
        registry: Optional[Registry] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> "Client":
        """Build a client and schedule its `connect` event. Never fails."""
        client = cls(config, registry=registry, scheduler=scheduler)
        client._schedule(ClientEvent.CONNECT)
        client._logger.info("connect_scheduled", extra={"server": client.server_url})
        return client

    @property
    def server(self) -> ServerState:
        return self._server

    @property
    def server_url(self) -> str:
        return self._server.identifier

    @property
    def subscriptions(self) -> Dict[str, Subscription]:
        """All active subscriptions on the bound server, by sid (a copy)."""
        return self._server.snapshot()

    def subscriptions_for(self, subject: str) -> List[Subscription]:
        return self._server.get_subscriptions(subject)

    def on(self, event: EventName, handler: Handler) -> Handler:
        return self.events.on(event, handler)

    def once(self, event: EventName, handler: Handler) -> Handler:
        return self.events.once(event, handler)

    def off(self, event: EventName, handler: Handler) -> None:
        self.events.off(event, handler)

    def close(self) -> None:
        """Schedule the `disconnect` event."""
        self._schedule(ClientEvent.DISCONNECT)
        self._logger.info("close_scheduled", extra={"server": self.server_url})

    def subscribe(
        self,
        subject: str,
        options: OptionsArg = None,
        callback: Optional[MessageCallback] = None,
    ) -> str:
        """Register `callback(message, reply_to, subject)` on an exact subject; returns the sid."""
        options, callback = _split_callback(options, callback, "subscribe")
        coerce_options(SubscribeOptions, options)
        subscription = Subscription(sid=new_sid(), subject=subject, callback=callback)
        self._server.add(subscription)
        return subscription.sid

    def unsubscribe(self, sid: str) -> None:
        """Remove a subscription; unknown sids are ignored."""
        if self._server.remove(sid) is None:
            self._logger.debug("unsubscribe_unknown_sid", extra={"sid": sid})

    def publish(
        self,
        subject: str,
        message: Any = None,
        reply_to: Optional[str] = None,
        callback: Optional[Callable[[], None]] = None,
    ) -> None:
        """Deliver synchronously to every subscription on `subject`, in registration order.

        An exception raised by a subscriber callback propagates from here and
        the subscribers after it do not receive the message. `callback` is
        accepted for compatibility and never called.
        """
        self._server.dispatch(subject, message, reply_to)

    def request(
        self,
        subject: str,
        message: Any = None,
        options: OptionsArg = None,
        callback: Optional[MessageCallback] = None,
    ) -> str:
        """Publish with an ad hoc reply subject and route replies to `callback`.

        The reply subject is the returned sid. There is no timeout: the reply
        subscription stays registered until unsubscribe(sid).
        """
        options, callback = _split_callback(options, callback, "request")
        coerce_options(RequestOptions, options)
        sid = new_sid()
        self._server.add(Subscription(sid=sid, subject=sid, callback=callback))
        self.publish(subject, message, reply_to=sid)
        return sid

    def _schedule(self, event: ClientEvent) -> None:
        self._scheduler.call_soon(self.events.emit, event)

    def __repr__(self) -> str:
        return f"Client(server={self.server_url!r})"


def connect(
    config: ConfigArg = None,
    *,
    registry: Optional[Registry] = None,
    scheduler: Optional[Scheduler] = None,
) -> Client:
    """Connect to a simulated server; see Client.connect."""
    return Client.connect(config, registry=registry, scheduler=scheduler)
