"""
Host integration for chart collectors.

- EventBus: Async pub/sub carrying host runtime events
- attach_collector: Subscribes a ChartCollector to the bus
- replay_events: Feeds a recorded JSON-lines event log through the bus
"""
from tradeplot.workers.bridge import attach_collector, detach_collector
from tradeplot.workers.event_bus import Event, EventBus, get_event_bus, reset_event_bus
from tradeplot.workers.replay import read_events, replay_events

__all__ = [
    "Event",
    "EventBus",
    "attach_collector",
    "detach_collector",
    "get_event_bus",
    "read_events",
    "replay_events",
    "reset_event_bus",
]
