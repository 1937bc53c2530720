"""Multi-tick runner for the marketing response engine.

MarketSimulation drives ``run_simulation_tick`` over a schedule of player
inputs, pulling market conditions from an injected provider and keeping
every intermediate state. The history can be exported as a pandas
DataFrame for analysis or plotting.

Example::

    sim = MarketSimulation(
        provider=SeasonalMarketConditions(random.Random(7)),
        industry="saas",
    )
    sim.run([PlayerInput.from_budgets({"digital": 100_000})] * 4)
    frame = sim.history_frame()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

import pandas as pd

from cmosimulator.engine.channels import DEFAULT_INDUSTRY, Channel, IndustryProfile, get_industry
from cmosimulator.engine.market import MarketConditionsProvider, StaticMarketConditions
from cmosimulator.engine.state import PlayerInput, SimulationState
from cmosimulator.engine.tick import (
    DEFAULT_ENGINE_CONFIG,
    EngineConfig,
    initialize_simulation_state,
    run_simulation_tick,
)

logger = logging.getLogger(__name__)


@dataclass
class MarketSimulationSummary:
    """Totals over a completed run."""

    ticks: int
    total_spend: float
    total_sales: float
    incremental_sales: float
    contributions_by_channel: dict[str, float] = field(default_factory=dict)

    @property
    def overall_roi(self) -> float:
        """Incremental sales per dollar spent, as a percentage."""
        if self.total_spend <= 0:
            return 0.0
        return self.incremental_sales / self.total_spend * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticks": self.ticks,
            "total_spend": self.total_spend,
            "total_sales": self.total_sales,
            "incremental_sales": self.incremental_sales,
            "overall_roi": self.overall_roi,
            "contributions_by_channel": dict(self.contributions_by_channel),
        }


class MarketSimulation:
    """Runs the response engine tick by tick and records the history.

    Args:
        provider: Source of market conditions per tick. Defaults to
            neutral static conditions.
        industry: Industry profile or name used for every tick.
        config: Engine funnel rates and channel tables.
        initial_state: Starting state; defaults to a fresh tick-0 state.
    """

    def __init__(
        self,
        provider: MarketConditionsProvider | None = None,
        *,
        industry: IndustryProfile | str = DEFAULT_INDUSTRY,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        initial_state: SimulationState | None = None,
    ):
        self.provider = provider or StaticMarketConditions()
        self.industry = get_industry(industry)
        self.config = config
        self._states: list[SimulationState] = [initial_state or initialize_simulation_state()]
        self._inputs: list[PlayerInput] = []

    @property
    def state(self) -> SimulationState:
        """The most recent state."""
        return self._states[-1]

    @property
    def states(self) -> list[SimulationState]:
        """Every state from the initial one onward."""
        return list(self._states)

    def step(self, player_input: PlayerInput) -> SimulationState:
        """Apply one tick and return the new state."""
        conditions = self.provider.conditions_for(self.state.tick + 1)
        new_state = run_simulation_tick(
            self.state,
            player_input,
            conditions,
            industry=self.industry,
            config=self.config,
        )
        self._states.append(new_state)
        self._inputs.append(player_input)
        return new_state

    def run(self, inputs: Iterable[PlayerInput]) -> MarketSimulationSummary:
        """Apply one tick per input and summarize the run."""
        for player_input in inputs:
            self.step(player_input)
        summary = self.summary()
        logger.info(
            "Market simulation ran %d ticks: spend=%.0f incremental=%.0f",
            summary.ticks,
            summary.total_spend,
            summary.incremental_sales,
        )
        return summary

    def summary(self) -> MarketSimulationSummary:
        ticked = self._states[1:]
        contributions = {channel.value: 0.0 for channel in Channel}
        for state in ticked:
            for channel, value in state.results.channel_contributions.items():
                contributions[channel.value] += value
        return MarketSimulationSummary(
            ticks=len(ticked),
            total_spend=sum(i.total_spend for i in self._inputs),
            total_sales=sum(s.results.total_sales for s in ticked),
            incremental_sales=sum(s.results.incremental_sales for s in ticked),
            contributions_by_channel=contributions,
        )

    def history_frame(self) -> pd.DataFrame:
        """One row per applied tick with spend, sales, and attribution columns."""
        rows = []
        for player_input, state in zip(self._inputs, self._states[1:]):
            row: dict[str, Any] = {
                "tick": state.tick,
                "seasonality_index": state.market_conditions.seasonality_index,
                "economic_index": state.market_conditions.economic_index,
                "total_spend": player_input.total_spend,
                "base_sales": state.results.base_sales,
                "incremental_sales": state.results.incremental_sales,
                "total_sales": state.results.total_sales,
            }
            for channel in Channel:
                row[f"spend_{channel.value}"] = player_input.spend(channel)
                row[f"adstock_{channel.value}"] = state.adstock[channel]
                row[f"contribution_{channel.value}"] = state.results.channel_contributions[channel]
            rows.append(row)
        return pd.DataFrame(rows)
