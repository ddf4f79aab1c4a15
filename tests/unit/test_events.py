"""Unit tests for the EventBus."""

from __future__ import annotations

import logging

import pytest

from protoforge.service.events import Event, EventBus


@pytest.fixture
def bus() -> EventBus:
    return EventBus(history_size=3)


class TestPublish:
    async def test_sync_and_async_handlers(self, bus: EventBus) -> None:
        seen: list[str] = []

        def on_sync(event: Event) -> None:
            seen.append(f"sync:{event.payload['n']}")

        async def on_async(event: Event) -> None:
            seen.append(f"async:{event.payload['n']}")

        bus.subscribe("t", on_sync)
        bus.subscribe("t", on_async)
        await bus.publish("t", {"n": 1})
        assert seen == ["sync:1", "async:1"]

    async def test_topics_are_separate(self, bus: EventBus) -> None:
        seen: list[Event] = []
        bus.subscribe("a", seen.append)
        await bus.publish("b", {})
        assert seen == []

    async def test_unsubscribe(self, bus: EventBus) -> None:
        seen: list[Event] = []
        unsubscribe = bus.subscribe("t", seen.append)
        assert bus.subscriber_count("t") == 1
        unsubscribe()
        unsubscribe()
        await bus.publish("t", {})
        assert seen == []
        assert bus.subscriber_count("t") == 0

    async def test_failing_handler_is_logged(
        self, bus: EventBus, caplog: pytest.LogCaptureFixture
    ) -> None:
        seen: list[Event] = []

        def boom(event: Event) -> None:
            raise RuntimeError("handler bug")

        bus.subscribe("t", boom)
        bus.subscribe("t", seen.append)
        with caplog.at_level(logging.ERROR, logger="protoforge.events"):
            await bus.publish("t", {})
        assert len(seen) == 1
        assert "Event handler failed" in caplog.text


class TestHistory:
    async def test_bounded(self, bus: EventBus) -> None:
        for n in range(5):
            await bus.publish("t", {"n": n})
        assert [e.payload["n"] for e in bus.history("t")] == [2, 3, 4]

    async def test_drain(self, bus: EventBus) -> None:
        for n in range(3):
            await bus.publish("t", {"n": n})
        assert [e.payload["n"] for e in bus.drain("t", limit=2)] == [0, 1]
        assert [e.payload["n"] for e in bus.drain("t")] == [2]
        assert bus.drain("t") == []

    async def test_buses_are_independent(self) -> None:
        first, second = EventBus(), EventBus()
        await first.publish("t", {})
        assert second.history("t") == []
