"""Market-condition providers.

The tick orchestrator never draws random numbers. Providers sit at the
orchestration boundary and produce the ``MarketConditions`` for each tick;
stochastic providers take an explicit ``random.Random`` so runs replay
exactly from a seed.
"""

from __future__ import annotations

import math
import random
from typing import Mapping, Protocol, runtime_checkable

from cmosimulator.engine.channels import Channel
from cmosimulator.engine.state import DEFAULT_COMPETITOR_SPEND, MarketConditions


@runtime_checkable
class MarketConditionsProvider(Protocol):
    """Supplies the market conditions for a given tick."""

    def conditions_for(self, tick: int) -> MarketConditions:
        """Return the conditions to use for tick number ``tick`` (1-based)."""
        ...


class StaticMarketConditions:
    """Returns the same conditions for every tick."""

    def __init__(self, conditions: MarketConditions | None = None):
        self._conditions = conditions or MarketConditions()

    def conditions_for(self, tick: int) -> MarketConditions:
        return self._conditions


class SeasonalMarketConditions:
    """Sinusoidal seasonality with a noisy economic index.

    Seasonality follows ``1 + amplitude * sin(2*pi*tick / period)``. The
    economic index is drawn uniformly from ``economic_range`` and competitor
    spend per channel is jittered by up to ``competitor_jitter`` (relative).

    Args:
        rng: Random source; pass ``random.Random(seed)`` for replayable runs.
        amplitude: Peak deviation of the seasonality index from 1.0.
        period: Ticks per seasonal cycle (4 = quarterly ticks over a year).
        economic_range: Bounds of the uniform economic index draw.
        competitor_spend: Baseline competitor spend per channel.
        competitor_jitter: Maximum relative change applied to competitor spend.
    """

    def __init__(
        self,
        rng: random.Random,
        *,
        amplitude: float = 0.3,
        period: int = 4,
        economic_range: tuple[float, float] = (0.9, 1.1),
        competitor_spend: Mapping[Channel, float] = DEFAULT_COMPETITOR_SPEND,
        competitor_jitter: float = 0.0,
    ):
        if period <= 0:
            raise ValueError(f"period must be > 0, got {period}")
        low, high = economic_range
        if low > high:
            raise ValueError(f"economic_range lower bound exceeds upper: {economic_range}")
        self._rng = rng
        self.amplitude = amplitude
        self.period = period
        self.economic_range = (low, high)
        self.competitor_spend = dict(competitor_spend)
        self.competitor_jitter = competitor_jitter

    def seasonality(self, tick: int) -> float:
        return 1.0 + self.amplitude * math.sin(2 * math.pi * tick / self.period)

    def conditions_for(self, tick: int) -> MarketConditions:
        low, high = self.economic_range
        economic_index = self._rng.uniform(low, high)
        competitor = {
            channel: spend * (1.0 + self._rng.uniform(-self.competitor_jitter, self.competitor_jitter))
            for channel, spend in self.competitor_spend.items()
        }
        return MarketConditions(
            seasonality_index=self.seasonality(tick),
            competitor_spend=competitor,
            economic_index=economic_index,
        )
