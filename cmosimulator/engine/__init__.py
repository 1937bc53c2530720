"""Marketing response engine.

Turns per-channel spend into attributed revenue through adstock memory,
Hill saturation, and cross-channel synergy. Every function is a pure
function of its explicit inputs.
"""

from cmosimulator.engine.adstock import adstock, adstock_all
from cmosimulator.engine.channels import (
    CHANNEL_PARAMS,
    DEFAULT_INDUSTRY,
    INDUSTRY_PROFILES,
    SYNERGY_MATRIX,
    Channel,
    ChannelParams,
    IndustryProfile,
    get_industry,
)
from cmosimulator.engine.market import (
    MarketConditionsProvider,
    SeasonalMarketConditions,
    StaticMarketConditions,
)
from cmosimulator.engine.saturation import hill_transform, hill_transform_all
from cmosimulator.engine.simulation import MarketSimulation, MarketSimulationSummary
from cmosimulator.engine.state import (
    DEFAULT_COMPETITOR_SPEND,
    MarketConditions,
    PlayerInput,
    Promotion,
    SimulationOutput,
    SimulationState,
)
from cmosimulator.engine.synergy import apply_synergy, synergy_multiplier
from cmosimulator.engine.tick import (
    DEFAULT_ENGINE_CONFIG,
    EngineConfig,
    initialize_simulation_state,
    run_simulation_tick,
)

__all__ = [
    # Transforms
    "adstock",
    "adstock_all",
    "hill_transform",
    "hill_transform_all",
    "synergy_multiplier",
    "apply_synergy",
    # Configuration
    "Channel",
    "ChannelParams",
    "CHANNEL_PARAMS",
    "SYNERGY_MATRIX",
    "IndustryProfile",
    "INDUSTRY_PROFILES",
    "DEFAULT_INDUSTRY",
    "get_industry",
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    # State
    "MarketConditions",
    "DEFAULT_COMPETITOR_SPEND",
    "PlayerInput",
    "Promotion",
    "SimulationOutput",
    "SimulationState",
    # Orchestration
    "initialize_simulation_state",
    "run_simulation_tick",
    "MarketSimulation",
    "MarketSimulationSummary",
    # Market providers
    "MarketConditionsProvider",
    "StaticMarketConditions",
    "SeasonalMarketConditions",
]
