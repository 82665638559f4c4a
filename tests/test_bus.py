"""Tests for the intent bus."""

from boardsync.bus import EventBus, IntentType


def test_publish_delivers_kwargs():
    bus = EventBus()
    received = []
    bus.subscribe(IntentType.CARD_DELETE, lambda **kw: received.append(kw))

    bus.publish(IntentType.CARD_DELETE, id="42")
    assert received == [{"id": "42"}]


def test_subscribers_run_in_registration_order():
    bus = EventBus()
    order = []
    bus.subscribe(IntentType.CARD_CREATE, lambda **kw: order.append("first"))
    bus.subscribe(IntentType.CARD_CREATE, lambda **kw: order.append("second"))

    bus.publish(IntentType.CARD_CREATE, id="1")
    assert order == ["first", "second"]


def test_nested_publish_is_queued_fifo():
    """An intent published from a callback waits until the current one is fully delivered."""
    bus = EventBus()
    log = []

    def on_reparent(**kw):
        log.append("reparent-1")
        bus.publish(IntentType.CARD_UPDATE, id="1")

    bus.subscribe(IntentType.REPARENT, on_reparent)
    bus.subscribe(IntentType.REPARENT, lambda **kw: log.append("reparent-2"))
    bus.subscribe(IntentType.CARD_UPDATE, lambda **kw: log.append("update"))

    bus.publish(IntentType.REPARENT, card_id="card-1", from_id="col-1", to_id="col-2")
    assert log == ["reparent-1", "reparent-2", "update"]


def test_failing_callback_does_not_block_others(caplog):
    bus = EventBus()
    received = []

    def broken(**kw):
        raise RuntimeError("boom")

    bus.subscribe(IntentType.CONTAINER_DELETE, broken)
    bus.subscribe(IntentType.CONTAINER_DELETE, lambda **kw: received.append(kw))

    bus.publish(IntentType.CONTAINER_DELETE, id="7")
    assert received == [{"id": "7"}]
    assert "container-delete" in caplog.text

    # The bus is still usable afterwards
    bus.publish(IntentType.CONTAINER_DELETE, id="8")
    assert received[-1] == {"id": "8"}


def test_unsubscribe():
    bus = EventBus()
    received = []
    cb = lambda **kw: received.append(kw)  # noqa: E731
    bus.subscribe(IntentType.CARD_UPDATE, cb)
    bus.unsubscribe(IntentType.CARD_UPDATE, cb)

    bus.publish(IntentType.CARD_UPDATE, id="1")
    assert received == []
    assert bus.subscriber_count(IntentType.CARD_UPDATE) == 0


def test_persistence_flag():
    assert not IntentType.REPARENT.is_persistence
    assert all(i.is_persistence for i in IntentType if i is not IntentType.REPARENT)
