import asyncio
import logging

from app.utils.events import EventBus, ATTEMPT_STARTED, MARK_ADDED, register_default_handlers


def test_publish_runs_sync_and_async_handlers():
    bus = EventBus(max_workers=1)
    received = []

    def sync_handler(data):
        received.append(("sync", data["attempt_id"]))

    async def async_handler(data):
        received.append(("async", data["attempt_id"]))

    bus.subscribe(ATTEMPT_STARTED, sync_handler)
    bus.subscribe(ATTEMPT_STARTED, async_handler)
    asyncio.run(bus.publish(ATTEMPT_STARTED, {"attempt_id": 7}))
    bus.shutdown()

    assert sorted(received) == [("async", 7), ("sync", 7)]


def test_handler_failure_is_logged_not_raised(caplog):
    bus = EventBus(max_workers=1)

    def broken(data):
        raise RuntimeError("sink unavailable")

    bus.subscribe(MARK_ADDED, broken)
    with caplog.at_level(logging.ERROR, logger="app.utils.events"):
        asyncio.run(bus.publish(MARK_ADDED, {"answer_id": 1}))
    bus.shutdown()

    assert "sink unavailable" in caplog.text


def test_default_handlers_write_audit_log(caplog):
    bus = EventBus(max_workers=1)
    register_default_handlers(bus)
    with caplog.at_level(logging.INFO, logger="app.audit"):
        asyncio.run(bus.publish(ATTEMPT_STARTED, {"attempt_id": 3}))
    bus.shutdown()

    assert "attempt_started" in caplog.text


def test_unsubscribe_and_reset():
    bus = EventBus(max_workers=1)
    calls = []
    handler = calls.append
    bus.subscribe(MARK_ADDED, handler)
    bus.unsubscribe(MARK_ADDED, handler)
    asyncio.run(bus.publish(MARK_ADDED, {"answer_id": 1}))
    bus.subscribe(MARK_ADDED, handler)
    bus.reset()
    asyncio.run(bus.publish(MARK_ADDED, {"answer_id": 2}))
    bus.shutdown()
    assert calls == []
