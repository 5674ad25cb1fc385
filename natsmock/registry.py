"""In-memory registry of simulated servers, keyed by server identifier."""

from typing import Dict, List, Optional

from natsmock.scheduler import AutoScheduler, DeferredQueue, Scheduler
from natsmock.server_state import ServerState

DEFAULT_SERVER = "__default"


class Registry:
    """One shared ServerState per server identifier.

    Clients connecting with the same identifier share a ServerState; a
    different identifier is an isolated namespace. Entries are never removed;
    build a fresh Registry to start from a clean slate.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None) -> None:
        self._servers: Dict[str, ServerState] = {}
        self.scheduler: Scheduler = scheduler if scheduler is not None else DeferredQueue()

    def get_or_create(self, identifier: Optional[str] = None) -> ServerState:
        """Return the ServerState for `identifier`, creating it on first use."""
        key = DEFAULT_SERVER if identifier is None else identifier
        if key not in self._servers:
            self._servers[key] = ServerState(key)
        return self._servers[key]

    def get(self, identifier: Optional[str] = None) -> Optional[ServerState]:
        """Return the ServerState for `identifier` or None; never creates."""
        return self._servers.get(DEFAULT_SERVER if identifier is None else identifier)

    def server_count(self) -> int:
        return len(self._servers)

    def identifiers(self) -> List[str]:
        return list(self._servers)

    def stats(self) -> Dict[str, Dict[str, int]]:
        """Return { identifier: { subscriptions, subjects, published, delivered } }."""
        return {key: server.stats() for key, server in self._servers.items()}


# Drains on the running asyncio loop; outside a loop call
# default_registry.scheduler.run_pending().
default_registry = Registry(scheduler=AutoScheduler())
