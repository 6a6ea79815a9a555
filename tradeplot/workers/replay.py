"""
Replays a recorded JSON-lines event log through an EventBus.

Each line is one event:
    {"event": "candle", "data": {"start": "2021-03-04T13:00:00Z", "open": 10, ...}}
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Tuple, Union

from tradeplot.workers.event_bus import EventBus

logger = logging.getLogger(__name__)


def read_events(path: Union[str, Path]) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """
    Yield (event name, data) pairs from a JSON-lines file.

    Blank lines are skipped. A line that is not an event object raises
    ValueError naming the line number.
    """
    events_path = Path(path)
    if not events_path.exists():
        raise FileNotFoundError(f"Event log not found: {path}")

    with open(events_path, "r") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"{events_path}:{line_no}: invalid JSON: {e}") from e
            if not isinstance(record, dict) or "event" not in record:
                raise ValueError(f"{events_path}:{line_no}: expected an object with an 'event' key")
            yield record["event"], record.get("data") or {}


async def replay_events(path: Union[str, Path], bus: EventBus) -> Dict[str, int]:
    """
    Emit every event in the log, in file order.

    On a bus created with raise_errors=True, an event a handler rejects
    stops the replay with ValueError naming its position in the log.

    Returns:
        Count of events per event name
    """
    counts: Dict[str, int] = {}
    for index, (name, data) in enumerate(read_events(path), start=1):
        try:
            await bus.emit_sync(name, data)
        except Exception as e:
            raise ValueError(f"{path}: event {index} ('{name}') rejected: {e!r}") from e
        counts[name] = counts.get(name, 0) + 1

    logger.info(f"Replayed {sum(counts.values())} events from {path}", extra={"counts": counts})
    return counts
