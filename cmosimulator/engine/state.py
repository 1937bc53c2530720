"""Immutable inputs and state snapshots for the response engine.

Each tick consumes a ``PlayerInput`` and ``MarketConditions`` and produces a
new ``SimulationState``. Nothing here is updated in place, so a list of
states is a complete, replayable history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from cmosimulator.engine.channels import Channel, zero_vector

DEFAULT_COMPETITOR_SPEND: Mapping[Channel, float] = {
    Channel.TV: 50_000,
    Channel.RADIO: 30_000,
    Channel.PRINT: 20_000,
    Channel.DIGITAL: 80_000,
    Channel.SOCIAL: 40_000,
    Channel.SEO: 20_000,
    Channel.EVENTS: 10_000,
    Channel.PR: 15_000,
}


def _channel_mapping(values: Mapping[Channel | str, float]) -> dict[Channel, float]:
    result = zero_vector()
    for key, value in values.items():
        result[Channel.coerce(key)] = float(value)
    return result


@dataclass(frozen=True)
class MarketConditions:
    """External market state for one tick, supplied by the caller.

    Attributes:
        seasonality_index: Demand multiplier for the period (1.0 = neutral).
        competitor_spend: Competitor spend per channel.
        economic_index: Macro multiplier applied to traffic (1.0 = neutral).
    """

    seasonality_index: float = 1.0
    competitor_spend: Mapping[Channel, float] = field(
        default_factory=lambda: dict(DEFAULT_COMPETITOR_SPEND)
    )
    economic_index: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "competitor_spend", MappingProxyType(dict(self.competitor_spend))
        )


@dataclass(frozen=True)
class Promotion:
    """A price promotion running alongside channel spend."""

    type: str
    discount: float
    duration: int


@dataclass(frozen=True)
class PlayerInput:
    """Channel budgets and promotions chosen for one tick.

    Attributes:
        channel_budgets: Non-negative spend per channel. Missing channels
            are treated as zero spend.
        promotions: Promotions active this tick.
    """

    channel_budgets: Mapping[Channel, float] = field(default_factory=zero_vector)
    promotions: tuple[Promotion, ...] = ()

    def __post_init__(self) -> None:
        # Raises ValueError for unknown channel names.
        object.__setattr__(
            self, "channel_budgets", MappingProxyType(_channel_mapping(self.channel_budgets))
        )
        object.__setattr__(self, "promotions", tuple(self.promotions))

    @classmethod
    def from_budgets(
        cls,
        budgets: Mapping[Channel | str, float],
        promotions: tuple[Promotion, ...] = (),
    ) -> PlayerInput:
        """Build an input from a mapping keyed by Channel or channel name."""
        return cls(channel_budgets=budgets, promotions=tuple(promotions))

    def spend(self, channel: Channel) -> float:
        return self.channel_budgets.get(channel, 0.0)

    @property
    def total_spend(self) -> float:
        return sum(self.channel_budgets.values())

    @property
    def active_channels(self) -> tuple[Channel, ...]:
        """Channels with spend > 0, in enum order."""
        return tuple(c for c in Channel if self.spend(c) > 0)


@dataclass(frozen=True)
class SimulationOutput:
    """Sales outcome of a tick.

    ``total_sales`` always equals ``base_sales + incremental_sales``.
    Channel contributions sum to ``incremental_sales`` up to float rounding.
    """

    total_sales: float
    base_sales: float
    incremental_sales: float
    channel_contributions: Mapping[Channel, float] = field(default_factory=zero_vector)
    channel_roi: Mapping[Channel, float] = field(default_factory=zero_vector)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_sales": self.total_sales,
            "base_sales": self.base_sales,
            "incremental_sales": self.incremental_sales,
            "channel_contributions": {c.value: v for c, v in self.channel_contributions.items()},
            "channel_roi": {c.value: v for c, v in self.channel_roi.items()},
        }


@dataclass(frozen=True)
class SimulationState:
    """Snapshot of the engine after a tick.

    Attributes:
        tick: Number of ticks applied so far (0 for the initial state).
        market_conditions: Conditions used for the most recent tick.
        adstock: Carried-over spend per channel.
        results: Sales outcome of the most recent tick.
    """

    tick: int
    market_conditions: MarketConditions
    adstock: Mapping[Channel, float]
    results: SimulationOutput
