"""
Y-axis allocation for chart series.

Axis numbering depends only on configuration order, so two runs with the
same configuration always produce the same axis ids. The resulting
AxisAllocation is the single source of axis ids for both the series and
the layout.

Numbering:
- 1: price and trade markers (primary pair x / y)
- 2: volume, overlaying axis 1 on the right
- 4+: one hidden overlay axis per indicator, ``axis offset + 3``
"""
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from tradeplot.chart.buffers import Capabilities
from tradeplot.chart.errors import ConfigurationError
from tradeplot.chart.types import AxisSlot
from tradeplot.config import ChartConfig, IndicatorConfig

PRIMARY_AXIS = 1
VOLUME_AXIS = 2
INDICATOR_AXIS_OFFSET = 3
FIRST_INDICATOR_AXIS = PRIMARY_AXIS + INDICATOR_AXIS_OFFSET


@dataclass(frozen=True)
class AxisAllocation:
    """Axis slots assigned to every enabled series."""
    primary: AxisSlot
    volume: Optional[AxisSlot]
    indicators: Tuple[Tuple[IndicatorConfig, AxisSlot], ...]

    def slots(self) -> List[AxisSlot]:
        """All allocated slots, primary first."""
        result = [self.primary]
        if self.volume is not None:
            result.append(self.volume)
        result.extend(slot for _, slot in self.indicators)
        return result


def _preferred_number(indicator: IndicatorConfig) -> Optional[int]:
    offset = indicator.yaxis
    if offset is None:
        return None
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise ConfigurationError(
            f"Indicator '{indicator.name}' has a non-integer yaxis offset: {offset!r}"
        )
    return offset + INDICATOR_AXIS_OFFSET


def allocate_indicator_axes(indicators: List[IndicatorConfig]) -> List[Tuple[IndicatorConfig, AxisSlot]]:
    """
    Give each indicator its own overlay axis, in declared order.

    An indicator keeps ``yaxis + 3`` when that number is free and not below
    the first indicator axis; otherwise it takes the next unused number.
    """
    taken: Set[int] = set()
    next_free = FIRST_INDICATOR_AXIS
    allocated = []

    for indicator in indicators:
        number = _preferred_number(indicator)
        if number is None or number < FIRST_INDICATOR_AXIS or number in taken:
            while next_free in taken:
                next_free += 1
            number = next_free
        taken.add(number)

        allocated.append((
            indicator,
            AxisSlot(
                number=number,
                hidden_title=indicator.name,
                side="right",
                overlaying="y",
                show_tick_labels=False,
            ),
        ))

    return allocated


def allocate_axes(config: ChartConfig, capabilities: Optional[Capabilities] = None) -> AxisAllocation:
    """Allocate axes for the categories enabled in ``capabilities``."""
    if capabilities is None:
        capabilities = Capabilities.from_config(config)
    run = config.run

    primary = AxisSlot(
        number=PRIMARY_AXIS,
        title=f"{run.asset}/{run.currency} {run.exchange}",
    )

    volume = None
    if capabilities.volume:
        volume = AxisSlot(
            number=VOLUME_AXIS,
            title="Volume",
            side="right",
            overlaying="y",
        )

    indicators: List[Tuple[IndicatorConfig, AxisSlot]] = []
    if capabilities.indicators:
        indicators = allocate_indicator_axes(config.plot.data.strategy.indicators)

    return AxisAllocation(primary=primary, volume=volume, indicators=tuple(indicators))
