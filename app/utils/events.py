from typing import Dict, List, Callable, Any
import asyncio
from concurrent.futures import ThreadPoolExecutor
import logging

logger = logging.getLogger(__name__)

ATTEMPT_STARTED = "attempt_started"
ATTEMPT_FINISHED = "attempt_finished"
ANSWER_SUBMITTED = "answer_submitted"
MARK_ADDED = "mark_added"
MARK_EDITED = "mark_edited"
TOTAL_COMPUTED = "total_computed"
EXAM_STARTED = "exam_started"
ANSWER_DELETED = "answer_deleted"


class EventBus:
    """
    Informational sink for lifecycle events.

    Handlers run after the core write has committed; their failures are
    logged and never reach the caller.
    """

    def __init__(self, max_workers: int = 4):
        self._handlers: Dict[str, List[Callable]] = {}
        self._executor = ThreadPoolExecutor(max_workers=max_workers)

    def subscribe(self, event_type: str, handler: Callable):
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: Callable):
        if event_type in self._handlers:
            self._handlers[event_type].remove(handler)

    def reset(self):
        self._handlers.clear()

    async def publish(self, event_type: str, data: Dict[str, Any]):
        handlers = list(self._handlers.get(event_type, []))
        if not handlers:
            return

        try:
            loop = asyncio.get_running_loop()
            tasks = []
            for handler in handlers:
                if asyncio.iscoroutinefunction(handler):
                    tasks.append(asyncio.ensure_future(handler(data)))
                else:
                    tasks.append(loop.run_in_executor(self._executor, handler, data))

            results = await asyncio.gather(*tasks, return_exceptions=True)
        except Exception as e:
            logger.error(f"Failed to dispatch event {event_type}: {e}")
            return

        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(f"Error in event handler {getattr(handler, '__name__', handler)} for {event_type}: {result}")

    def shutdown(self):
        self._executor.shutdown(wait=False)


audit_logger = logging.getLogger("app.audit")


def log_event(event_type: str):
    def _handler(data: Dict[str, Any]):
        audit_logger.info(f"{event_type}: {data}")
    _handler.__name__ = f"log_{event_type}"
    return _handler


def register_default_handlers(bus: "EventBus"):
    for event_type in (ATTEMPT_STARTED, ATTEMPT_FINISHED, EXAM_STARTED, ANSWER_SUBMITTED, ANSWER_DELETED,
                       MARK_ADDED, MARK_EDITED, TOTAL_COMPUTED):
        bus.subscribe(event_type, log_event(event_type))


event_bus = EventBus()
