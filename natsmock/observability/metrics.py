"""Per-server traffic metrics: publishes, deliveries, active subscriptions."""

from collections import Counter
from typing import Dict

PUBLISHED = "published"
DELIVERED = "delivered"
SUBSCRIPTIONS = "subscriptions"


class Metrics:
    """Counters (monotonic) and gauges (last value) for one simulated server."""

    def __init__(self) -> None:
        self._counters: Counter = Counter()
        self._gauges: Dict[str, int] = {}

    def increment(self, name: str, value: int = 1) -> None:
        self._counters[name] += value

    def set_gauge(self, name: str, value: int) -> None:
        self._gauges[name] = value

    def get_counter(self, name: str) -> int:
        return self._counters[name]

    def get_gauge(self, name: str) -> int:
        return self._gauges.get(name, 0)

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        """Copy of {"counters": ..., "gauges": ...}; names never touched are omitted."""
        return {
            "counters": {name: count for name, count in self._counters.items() if count},
            "gauges": dict(self._gauges),
        }
