import gc
from enum import Enum, auto

import pytest

from narrative.core.events import DialogueEvent, Event, EventBus


class MockEvent(Enum):
    TEST_EVENT = auto()
    OTHER_EVENT = auto()


def test_event_bus_subscribe_publish(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT, data="test")

    assert len(received) == 1
    assert received[0].type == MockEvent.TEST_EVENT
    assert received[0].data["data"] == "test"
    assert received[0]["data"] == "test"
    assert received[0].get("missing", 5) == 5


def test_event_bus_unsubscribe(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.unsubscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 0


def test_event_priority(event_bus):
    order = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("low"), priority=1, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("high"), priority=10, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("normal"), priority=5, weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["high", "normal", "low"]


def test_event_consumption(event_bus):
    received = []

    def consumer(event):
        received.append("consumer")
        event.consume()

    def later_handler(event):
        received.append("later")

    event_bus.subscribe(MockEvent.TEST_EVENT, consumer, priority=10)
    event_bus.subscribe(MockEvent.TEST_EVENT, later_handler, priority=5)

    event = event_bus.publish(MockEvent.TEST_EVENT)

    assert received == ["consumer"]
    assert event.consumed


def test_one_shot_handler(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler, one_shot=True)
    event_bus.publish(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 1
    assert event_bus.handler_count(MockEvent.TEST_EVENT) == 0


def test_weak_handler_dropped_after_collection(event_bus):
    calls = []

    class Listener:
        def on_event(self, event):
            calls.append(event)

    listener = Listener()
    event_bus.subscribe(MockEvent.TEST_EVENT, listener.on_event)
    event_bus.publish(MockEvent.TEST_EVENT)
    assert len(calls) == 1

    del listener
    gc.collect()
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(calls) == 1
    assert event_bus.handler_count(MockEvent.TEST_EVENT) == 0


def test_handler_exception_does_not_propagate(event_bus, caplog):
    received = []

    def broken(event):
        raise RuntimeError("boom")

    def healthy(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, broken, priority=10)
    event_bus.subscribe(MockEvent.TEST_EVENT, healthy)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 1
    assert "Error in event handler" in caplog.text


def test_publish_during_dispatch_is_queued(event_bus):
    order = []

    def first(event):
        order.append("first-start")
        event_bus.publish(MockEvent.OTHER_EVENT)
        order.append("first-end")

    def second(event):
        order.append("second")

    event_bus.subscribe(MockEvent.TEST_EVENT, first)
    event_bus.subscribe(MockEvent.OTHER_EVENT, second)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["first-start", "first-end", "second"]


def test_clear(event_bus):
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: None, weak=False)
    event_bus.subscribe(DialogueEvent.ENDED, lambda e: None, weak=False)

    event_bus.clear(MockEvent.TEST_EVENT)
    assert event_bus.handler_count(MockEvent.TEST_EVENT) == 0
    assert event_bus.handler_count(DialogueEvent.ENDED) == 1

    event_bus.clear()
    assert event_bus.handler_count(DialogueEvent.ENDED) == 0


def test_event_defaults():
    event = Event(type=MockEvent.TEST_EVENT)
    assert event.data == {}
    assert not event.consumed
    with pytest.raises(KeyError):
        event["missing"]
