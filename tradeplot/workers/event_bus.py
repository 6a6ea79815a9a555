"""
Async event bus between a host trading runtime and chart collectors.

Events:
- "candle": One finished OHLCV bar
- "trade_completed": One executed trade
- "strat_update": Indicator snapshot for the latest candle
- "performance_report": End-of-run summary statistics
"""
import asyncio
import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """Container for an event."""

    name: str
    data: Any
    timestamp: datetime


Handler = Callable[[Event], Union[None, Awaitable[None]]]


class EventBus:
    """
    Async event bus delivering host events to subscribers.

    Supports both sync and async handlers. Events are delivered one at a
    time, and the handlers of one event run in subscription order, so
    subscribers see events exactly in emission order.

    A failing handler is logged and skipped, unless the bus was created
    with raise_errors=True, in which case the error propagates to the
    emitter and later handlers for that event do not run.

    Usage:
        bus = EventBus()
        bus.subscribe("candle", lambda event: collector.record_candle(event.data))

        # Deliver immediately
        await bus.emit_sync("candle", candle)

        # Or queue and process in the background
        asyncio.create_task(bus.run())
        await bus.emit("candle", candle)
    """

    def __init__(self, raise_errors: bool = False) -> None:
        self.raise_errors = raise_errors
        self._subscribers: Dict[str, List[Handler]] = {}
        self._queue: asyncio.Queue[Optional[Event]] = asyncio.Queue()
        self._running = False

    def subscribe(self, event_name: str, handler: Handler) -> None:
        """
        Subscribe to an event.

        Args:
            event_name: Name of the event to subscribe to
            handler: Sync or async function called with the Event
        """
        self._subscribers.setdefault(event_name, []).append(handler)
        logger.debug(f"Subscribed to '{event_name}': {getattr(handler, '__name__', handler)}")

    def unsubscribe(self, event_name: str, handler: Handler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._subscribers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(f"Unsubscribed from '{event_name}': {getattr(handler, '__name__', handler)}")

    def _make_event(self, event_name: str, data: Any) -> Event:
        return Event(name=event_name, data=data, timestamp=datetime.now(timezone.utc))

    async def emit(self, event_name: str, data: Any = None) -> None:
        """Queue an event for the background ``run()`` loop."""
        await self._queue.put(self._make_event(event_name, data))

    async def emit_sync(self, event_name: str, data: Any = None) -> None:
        """Deliver an event and wait for all of its handlers to finish."""
        await self._dispatch(self._make_event(event_name, data))

    async def _dispatch(self, event: Event) -> None:
        handlers = list(self._subscribers.get(event.name, []))
        if not handlers:
            logger.debug(f"No handlers for '{event.name}'")
            return

        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    f"Error in handler '{getattr(handler, '__name__', handler)}' for '{event.name}': {e}"
                )
                if self.raise_errors:
                    raise

    async def run(self) -> None:
        """Process queued events until stop() is called."""
        logger.info("Event bus started")
        self._running = True

        try:
            while self._running:
                event = await self._queue.get()
                try:
                    if event is None:
                        # Poison pill
                        break
                    await self._dispatch(event)
                finally:
                    self._queue.task_done()
        finally:
            self._running = False
            logger.info("Event bus stopped")

    async def join(self) -> None:
        """Wait until every queued event has been processed."""
        await self._queue.join()

    def stop(self) -> None:
        """Stop the run loop after already queued events."""
        self._queue.put_nowait(None)

    @property
    def is_running(self) -> bool:
        return self._running

    def get_subscriber_count(self, event_name: str) -> int:
        """Get the number of subscribers for an event."""
        return len(self._subscribers.get(event_name, []))


_global_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get the global event bus instance."""
    global _global_bus
    if _global_bus is None:
        _global_bus = EventBus()
    return _global_bus


def reset_event_bus() -> None:
    """Reset the global event bus (useful for testing)."""
    global _global_bus
    _global_bus = None
