"""
Connects a ChartCollector to an EventBus.
"""
import logging
from typing import Callable, Dict

from tradeplot.chart.collector import ChartCollector
from tradeplot.workers.event_bus import Event, EventBus

logger = logging.getLogger(__name__)


def attach_collector(bus: EventBus, collector: ChartCollector) -> Dict[str, Callable[[Event], None]]:
    """
    Subscribe the collector's enabled handlers to the bus.

    Streams disabled in the chart configuration get no subscription at all.

    Returns:
        Event name -> subscribed handler, for detach_collector()
    """
    subscribed = {}
    for event_name, record in collector.handlers().items():
        def on_event(event: Event, record=record) -> None:
            record(event.data)

        on_event.__name__ = f"chart_{event_name}"
        bus.subscribe(event_name, on_event)
        subscribed[event_name] = on_event

    logger.debug(f"Chart collector attached to {sorted(subscribed)}")
    return subscribed


def detach_collector(bus: EventBus, subscribed: Dict[str, Callable[[Event], None]]) -> None:
    for event_name, handler in subscribed.items():
        bus.unsubscribe(event_name, handler)
