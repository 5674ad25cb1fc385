"""In-memory stand-in for a subject-based pub/sub client (no broker)."""

from natsmock.client import Client, connect
from natsmock.events import ClientEvent, EventEmitter
from natsmock.options import ConnectOptions, RequestOptions, SubscribeOptions
from natsmock.registry import DEFAULT_SERVER, Registry, default_registry
from natsmock.scheduler import AsyncioScheduler, AutoScheduler, DeferredQueue, Scheduler
from natsmock.server_state import ServerState
from natsmock.subscription import Subscription

__all__ = [
    "Client",
    "connect",
    "ClientEvent",
    "EventEmitter",
    "ConnectOptions",
    "SubscribeOptions",
    "RequestOptions",
    "DEFAULT_SERVER",
    "Registry",
    "default_registry",
    "AsyncioScheduler",
    "AutoScheduler",
    "DeferredQueue",
    "Scheduler",
    "ServerState",
    "Subscription",
]
