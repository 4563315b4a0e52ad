"""Invalidation Signal tests: revision counter and subscriber fan-out."""

from app.services.invalidation import InvalidationSignal, get_invalidation_signal


def test_emit_increments_revision():
    signal = InvalidationSignal()
    assert signal.emit("users") == 1
    assert signal.emit("users") == 2
    assert signal.revision == 2


def test_subscribers_called_in_order():
    signal = InvalidationSignal()
    seen = []
    signal.subscribe(lambda c, r: seen.append(("a", r)))
    signal.subscribe(lambda c, r: seen.append(("b", r)))
    signal.emit("users")
    assert seen == [("a", 1), ("b", 1)]


def test_unsubscribe_stops_delivery():
    signal = InvalidationSignal()
    seen = []
    unsubscribe = signal.subscribe(lambda c, r: seen.append(r))
    unsubscribe()
    unsubscribe()
    signal.emit("users")
    assert seen == []


def test_failing_subscriber_does_not_block_others():
    signal = InvalidationSignal()
    seen = []

    def broken(collection, revision):
        raise RuntimeError("boom")

    signal.subscribe(broken)
    signal.subscribe(lambda c, r: seen.append(r))
    assert signal.emit("users") == 1
    assert seen == [1]


def test_singleton_is_cached():
    assert get_invalidation_signal() is get_invalidation_signal()
