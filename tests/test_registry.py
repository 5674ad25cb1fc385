"""Tests for the server registry and per-server subscription indexes."""

import pytest

from natsmock import DEFAULT_SERVER, DeferredQueue, Registry, ServerState, Subscription


def _noop(message, reply_to, subject):
    pass


class TestRegistry:
    """Test cases for Registry."""

    def test_get_or_create_is_idempotent(self, registry):
        """The same identifier always yields the same ServerState."""
        first = registry.get_or_create("nats://a:4222")
        assert registry.get_or_create("nats://a:4222") is first
        assert isinstance(first, ServerState)

    def test_none_maps_to_default_server(self, registry):
        server = registry.get_or_create()
        assert server.identifier == DEFAULT_SERVER
        assert registry.get_or_create(None) is server
        assert registry.get_or_create(DEFAULT_SERVER) is server

    def test_different_identifiers_are_isolated(self, registry):
        a = registry.get_or_create("a")
        b = registry.get_or_create("b")
        assert a is not b
        assert registry.server_count() == 2
        assert registry.identifiers() == ["a", "b"]

    def test_get_does_not_create(self, registry):
        assert registry.get("missing") is None
        assert registry.server_count() == 0

    def test_separate_registries_do_not_share_state(self):
        assert Registry().get_or_create() is not Registry().get_or_create()

    def test_default_scheduler_is_deferred_queue(self):
        assert isinstance(Registry().scheduler, DeferredQueue)

    def test_stats(self, registry):
        server = registry.get_or_create("a")
        server.add(Subscription(sid="1", subject="foo", callback=_noop))
        server.dispatch("foo", "msg")
        assert registry.stats() == {
            "a": {"subscriptions": 1, "subjects": 1, "published": 1, "delivered": 1}
        }


class TestServerState:
    """Test cases for the two subscription indexes."""

    def test_add_registers_in_both_indexes(self):
        server = ServerState("s")
        sub = Subscription(sid="1", subject="foo", callback=_noop)
        server.add(sub)
        assert server.by_id == {"1": sub}
        assert server.by_subject == {"foo": {"1": sub}}
        assert server.metrics.get_gauge("subscriptions") == 1

    def test_remove_from_both_indexes_and_prune_subject(self):
        server = ServerState("s")
        server.add(Subscription(sid="1", subject="foo", callback=_noop))
        removed = server.remove("1")
        assert removed.sid == "1"
        assert server.by_id == {}
        assert "foo" not in server.by_subject
        assert server.metrics.get_gauge("subscriptions") == 0

    def test_remove_keeps_other_subscriptions_on_subject(self):
        server = ServerState("s")
        server.add(Subscription(sid="1", subject="foo", callback=_noop))
        server.add(Subscription(sid="2", subject="foo", callback=_noop))
        server.remove("1")
        assert list(server.by_subject["foo"]) == ["2"]

    def test_remove_unknown_returns_none(self):
        assert ServerState("s").remove("nope") is None

    def test_get_subscriptions_in_registration_order(self):
        server = ServerState("s")
        for sid in ("c", "a", "b"):
            server.add(Subscription(sid=sid, subject="foo", callback=_noop))
        assert [s.sid for s in server.get_subscriptions("foo")] == ["c", "a", "b"]
        assert server.get_subscriptions("bar") == []

    def test_dispatch_counts(self):
        server = ServerState("s")
        server.add(Subscription(sid="1", subject="foo", callback=_noop))
        server.add(Subscription(sid="2", subject="foo", callback=_noop))
        assert server.dispatch("foo", "m") == 2
        assert server.dispatch("bar", "m") == 0
        assert server.metrics.snapshot() == {
            "counters": {"published": 2, "delivered": 2},
            "gauges": {"subscriptions": 2},
        }

    def test_dispatch_propagates_callback_error(self):
        server = ServerState("s")

        def boom(message, reply_to, subject):
            raise RuntimeError("boom")

        server.add(Subscription(sid="1", subject="foo", callback=boom))
        with pytest.raises(RuntimeError, match="boom"):
            server.dispatch("foo", "m")
        assert server.metrics.get_counter("delivered") == 0

    def test_subscription_to_dict(self):
        sub = Subscription(sid="1", subject="foo", callback=_noop)
        assert sub.to_dict() == {"sid": "1", "subject": "foo", "callback": "_noop"}
