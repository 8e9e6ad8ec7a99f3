"""
Tests for the synchronous event bus.
"""

from ainimo.state.event_bus import EventBus, EventType, get_event_bus, reset_event_bus


class TestEventBus:

    def test_emit_reaches_subscribers(self):
        bus = EventBus()
        received = []
        bus.on(EventType.LEVEL_UP, received.append)

        event = bus.emit(EventType.LEVEL_UP, slot="main", level=2)

        assert received == [event]
        assert event.data == {"level": 2}
        assert event.slot == "main"

    def test_subscribe_once(self):
        bus = EventBus()
        handler = lambda event: None
        bus.on(EventType.SAVE_SAVED, handler)
        bus.on(EventType.SAVE_SAVED, handler)
        assert bus.listener_count(EventType.SAVE_SAVED) == 1

        bus.off(EventType.SAVE_SAVED, handler)
        assert bus.listener_count(EventType.SAVE_SAVED) == 0

    def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.on(EventType.ITEM_DROPPED, broken)
        bus.on(EventType.ITEM_DROPPED, received.append)
        bus.emit(EventType.ITEM_DROPPED, item_id="hat_cap")

        assert len(received) == 1

    def test_history(self):
        bus = EventBus(history_limit=3)
        for level in range(5):
            bus.emit(EventType.LEVEL_UP, level=level)
        bus.emit(EventType.SAVE_SAVED)

        assert [e.data.get("level") for e in bus.get_history()] == [3, 4, None]
        assert len(bus.get_history(EventType.LEVEL_UP)) == 2

    def test_clear(self):
        bus = EventBus()
        bus.on(EventType.SAVE_LOADED, lambda event: None)
        bus.emit(EventType.SAVE_LOADED)
        bus.clear()
        assert bus.get_history() == []
        assert bus.listener_count(EventType.SAVE_LOADED) == 0


class TestGlobalBus:

    def test_singleton_and_reset(self):
        bus = get_event_bus()
        assert get_event_bus() is bus
        reset_event_bus()
        assert get_event_bus() is not bus
