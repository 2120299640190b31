import gc
import pytest
from enum import Enum, auto
from narratix_engine.core.events import EventBus, Event

class MockEvent(Enum):
    TEST_EVENT = auto()
    OTHER_EVENT = auto()

def test_event_bus_subscribe_publish(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT, avatar="happy.png")

    assert len(received) == 1
    assert received[0].type == MockEvent.TEST_EVENT
    assert received[0]["avatar"] == "happy.png"

def test_handlers_run_in_subscription_order(event_bus):
    order = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("first"), weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("second"), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["first", "second"]

def test_other_event_types_are_not_delivered(event_bus):
    received = []
    event_bus.subscribe(MockEvent.OTHER_EVENT, lambda e: received.append(e), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert received == []

def test_nested_publish_is_queued_in_order(event_bus):
    order = []

    def on_test(event):
        order.append("test-start")
        event_bus.publish(MockEvent.OTHER_EVENT)
        order.append("test-end")

    event_bus.subscribe(MockEvent.TEST_EVENT, on_test)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("test-second"), weak=False)
    event_bus.subscribe(MockEvent.OTHER_EVENT, lambda e: order.append("other"), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["test-start", "test-end", "test-second", "other"]

def test_handler_error_does_not_stop_dispatch(event_bus, caplog):
    received = []

    def broken(event):
        raise RuntimeError("boom")

    event_bus.subscribe(MockEvent.TEST_EVENT, broken)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: received.append("ok"), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert received == ["ok", "ok"]
    assert "Error in event handler" in caplog.text

def test_weak_handler_is_dropped_when_owner_dies(event_bus):
    received = []

    class Listener:
        def on_event(self, event):
            received.append(event)

    listener = Listener()
    event_bus.subscribe(MockEvent.TEST_EVENT, listener.on_event)
    del listener
    gc.collect()

    event_bus.publish(MockEvent.TEST_EVENT)

    assert received == []

def test_event_accessors():
    event = Event(type=MockEvent.TEST_EVENT, data={"count": 3})

    assert event["count"] == 3
    assert event.get("missing", "default") == "default"
