from blast.events.bus import EventBus


def test_event_bus_emit_subscribe():
    bus = EventBus()
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe("test", handler)
    bus.emit("test", value=42, msg="hello")

    assert received["value"] == 42
    assert received["msg"] == "hello"


def test_event_bus_subscriber_tracking():
    bus = EventBus()
    calls = []

    def handler(sender, **kwargs):
        calls.append(kwargs)

    assert not bus.has_subscribers("ping")
    bus.subscribe("ping", handler)
    assert bus.has_subscribers("ping")
    bus.unsubscribe("ping", handler)
    assert not bus.has_subscribers("ping")
    bus.emit("ping", value=1)
    assert calls == []


def test_emit_without_subscribers_is_noop():
    bus = EventBus()
    bus.emit("nobody_listens", value=1)
