"""Subscription indexes for one server identifier (in-memory only)."""

import threading
from typing import Any, Dict, List, Optional

from natsmock.observability import Metrics, get_logger
from natsmock.observability.metrics import DELIVERED, PUBLISHED, SUBSCRIPTIONS
from natsmock.subscription import Subscription


class ServerState:
    """Subscriptions by sid and by subject for one simulated server.

    Both indexes always describe the same set of subscriptions. The inner
    per-subject dict keeps registration order, which is the dispatch order.
    Callbacks run outside the lock so they may publish or subscribe again.
    """

    def __init__(self, identifier: str) -> None:
        self._identifier = identifier
        self.by_id: Dict[str, Subscription] = {}
        self.by_subject: Dict[str, Dict[str, Subscription]] = {}
        self.metrics = Metrics()
        self._lock = threading.Lock()
        self._logger = get_logger(f"natsmock.server.{identifier}")

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def subscription_count(self) -> int:
        with self._lock:
            return len(self.by_id)

    @property
    def subject_count(self) -> int:
        with self._lock:
            return len(self.by_subject)

    def add(self, subscription: Subscription) -> None:
        """Register a subscription into both indexes."""
        with self._lock:
            self.by_id[subscription.sid] = subscription
            self.by_subject.setdefault(subscription.subject, {})[subscription.sid] = subscription
            self.metrics.set_gauge(SUBSCRIPTIONS, len(self.by_id))
        self._logger.info(
            "subscribed",
            extra={"subject": subscription.subject, "sid": subscription.sid},
        )

    def remove(self, sid: str) -> Optional[Subscription]:
        """Drop a subscription from both indexes. Returns it, or None if unknown."""
        with self._lock:
            subscription = self.by_id.pop(sid, None)
            if subscription is None:
                return None
            subject_subs = self.by_subject.get(subscription.subject)
            if subject_subs is not None:
                subject_subs.pop(sid, None)
                if not subject_subs:
                    del self.by_subject[subscription.subject]
            self.metrics.set_gauge(SUBSCRIPTIONS, len(self.by_id))
        self._logger.info(
            "unsubscribed",
            extra={"subject": subscription.subject, "sid": sid},
        )
        return subscription

    def get(self, sid: str) -> Optional[Subscription]:
        with self._lock:
            return self.by_id.get(sid)

    def get_subscriptions(self, subject: str) -> List[Subscription]:
        """Copy of the subscriptions on `subject`, in registration order."""
        with self._lock:
            return list(self.by_subject.get(subject, {}).values())

    def snapshot(self) -> Dict[str, Subscription]:
        """Copy of the by-sid index."""
        with self._lock:
            return dict(self.by_id)

    def dispatch(self, subject: str, message: Any, reply_to: Optional[str] = None) -> int:
        """Deliver to every subscription active on `subject` at call time.

        Callbacks run synchronously in registration order. An exception from a
        callback is logged and re-raised, and the remaining subscriptions for
        this call receive nothing. Returns the number of callbacks invoked.
        """
        subscriptions = self.get_subscriptions(subject)
        self.metrics.increment(PUBLISHED)
        self._logger.info(
            "published",
            extra={
                "subject": subject,
                "reply_to": reply_to,
                "subscriber_count": len(subscriptions),
            },
        )
        delivered = 0
        for subscription in subscriptions:
            try:
                subscription.deliver(message, reply_to, subject)
            except Exception as e:
                self._logger.exception(
                    "delivery_failed",
                    extra={
                        "subject": subject,
                        "sid": subscription.sid,
                        "error": str(e),
                    },
                )
                raise
            delivered += 1
            self.metrics.increment(DELIVERED)
        return delivered

    def stats(self) -> Dict[str, int]:
        """Subscription, subject and traffic counts for this server."""
        with self._lock:
            subscriptions = len(self.by_id)
            subjects = len(self.by_subject)
        return {
            "subscriptions": subscriptions,
            "subjects": subjects,
            "published": self.metrics.get_counter(PUBLISHED),
            "delivered": self.metrics.get_counter(DELIVERED),
        }

    def __repr__(self) -> str:
        return f"ServerState(identifier={self._identifier!r}, subscriptions={len(self.by_id)})"
