"""Tick orchestrator: one period of the marketing response model.

Composes adstock, Hill saturation, and synergy, then turns the adjusted
responses into traffic, leads, conversions, and revenue attributed back to
channels. The function is pure: identical inputs produce identical outputs,
and all randomness (seasonality noise, competitor moves) must arrive through
``MarketConditions``.

Example::

    state = initialize_simulation_state()
    spend = PlayerInput.from_budgets({"tv": 150_000, "digital": 80_000})
    state = run_simulation_tick(state, spend, MarketConditions(seasonality_index=1.1))
    state.results.incremental_sales
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping

from cmosimulator.engine.adstock import adstock_all
from cmosimulator.engine.channels import (
    CHANNEL_PARAMS,
    DEFAULT_INDUSTRY,
    SYNERGY_MATRIX,
    Channel,
    ChannelParams,
    IndustryProfile,
    get_industry,
    zero_vector,
)
from cmosimulator.engine.saturation import hill_transform_all
from cmosimulator.engine.state import (
    MarketConditions,
    PlayerInput,
    SimulationOutput,
    SimulationState,
)
from cmosimulator.engine.synergy import apply_synergy

logger = logging.getLogger(__name__)

INITIAL_BASE_SALES = 100_000.0


@dataclass(frozen=True)
class EngineConfig:
    """Fixed funnel rates and per-channel tables used by every tick.

    Attributes:
        lead_rate: Share of traffic that becomes leads.
        conversion_rate: Share of leads that convert to customers.
        base_sales_fraction: Share of the industry market sold organically
            each tick, before seasonality.
        channel_params: Response-curve parameters per channel.
        synergy_matrix: Directed cross-channel coefficients.
    """

    lead_rate: float = 0.05
    conversion_rate: float = 0.15
    base_sales_fraction: float = 0.01
    channel_params: Mapping[Channel, ChannelParams] = field(default_factory=lambda: CHANNEL_PARAMS)
    synergy_matrix: Mapping[Channel, Mapping[Channel, float]] = field(
        default_factory=lambda: SYNERGY_MATRIX
    )

    def __post_init__(self) -> None:
        missing = set(Channel) - set(self.channel_params)
        if missing:
            raise ValueError(
                f"channel_params missing channels: {sorted(c.value for c in missing)}"
            )


DEFAULT_ENGINE_CONFIG = EngineConfig()


def initialize_simulation_state() -> SimulationState:
    """Tick-0 state: no adstock, neutral market, only organic sales."""
    return SimulationState(
        tick=0,
        market_conditions=MarketConditions(),
        adstock=zero_vector(),
        results=SimulationOutput(
            total_sales=INITIAL_BASE_SALES,
            base_sales=INITIAL_BASE_SALES,
            incremental_sales=0.0,
        ),
    )


def run_simulation_tick(
    previous_state: SimulationState,
    player_input: PlayerInput,
    market_conditions: MarketConditions,
    *,
    industry: IndustryProfile | str = DEFAULT_INDUSTRY,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> SimulationState:
    """Advance the model by one tick.

    Args:
        previous_state: State returned by the previous tick.
        player_input: Channel budgets for this tick.
        market_conditions: Caller-supplied market state for this tick.
        industry: Industry profile or name; sets customer value, market
            size, and seasonality sensitivity.
        config: Funnel rates and channel tables.

    Returns:
        A new SimulationState. ``previous_state`` is not modified.
    """
    profile = get_industry(industry)
    params = config.channel_params
    spends = {channel: player_input.spend(channel) for channel in Channel}

    new_adstock = adstock_all(spends, previous_state.adstock, params)
    saturated = hill_transform_all(new_adstock, params)
    active = player_input.active_channels
    responses = apply_synergy(saturated, active, config.synergy_matrix)

    traffic: dict[Channel, float] = {}
    for channel in Channel:
        traffic[channel] = (
            responses[channel]
            * spends[channel]
            * params[channel].traffic_efficiency
            * market_conditions.economic_index
        )
    total_traffic = sum(traffic.values())

    leads = math.floor(total_traffic * config.lead_rate)
    conversions = math.floor(leads * config.conversion_rate)
    base_revenue = conversions * profile.avg_customer_value
    seasonal_multiplier = market_conditions.seasonality_index * profile.seasonality_factor
    final_revenue = base_revenue * seasonal_multiplier

    contributions: dict[Channel, float] = {}
    roi: dict[Channel, float] = {}
    for channel in Channel:
        if total_traffic > 0:
            contributions[channel] = (traffic[channel] / total_traffic) * final_revenue
        else:
            contributions[channel] = 0.0
        spend = spends[channel]
        roi[channel] = (contributions[channel] / spend) * 100 if spend > 0 else 0.0

    base_sales = (
        profile.base_market_size * config.base_sales_fraction * market_conditions.seasonality_index
    )

    results = SimulationOutput(
        total_sales=base_sales + final_revenue,
        base_sales=base_sales,
        incremental_sales=final_revenue,
        channel_contributions=contributions,
        channel_roi=roi,
    )

    logger.debug(
        "tick %d (%s): active=%s traffic=%.1f leads=%d conversions=%d revenue=%.2f",
        previous_state.tick + 1,
        profile.name,
        [c.value for c in active],
        total_traffic,
        leads,
        conversions,
        final_revenue,
    )

    return SimulationState(
        tick=previous_state.tick + 1,
        market_conditions=market_conditions,
        adstock=new_adstock,
        results=results,
    )
