"""cmo-simulator: marketing response engine and quarterly campaign game.

The engine turns per-channel spend into attributed revenue (adstock,
saturation, synergy). The campaign layer plays four quarters of tactics
and wildcard events and scores the outcome.
"""

import logging

from cmosimulator.campaign import (
    AddTactic,
    ApplyWildcardImpact,
    CampaignConfig,
    CampaignError,
    CampaignMachine,
    CampaignPhase,
    CampaignSnapshot,
    CompleteDebrief,
    CompleteQuarter,
    CompleteStrategySession,
    FailureReason,
    FinalResults,
    KPIs,
    Quarter,
    RemoveTactic,
    RespondToWildcard,
    RestartSimulation,
    SetStrategy,
    SimulationContext,
    StartSimulation,
    Tactic,
    TransitionError,
    TransitionResult,
    TriggerWildcard,
    WildcardEvent,
    calculate_final_results,
    transition,
)
from cmosimulator.engine import (
    Channel,
    ChannelParams,
    EngineConfig,
    MarketConditions,
    MarketSimulation,
    PlayerInput,
    SeasonalMarketConditions,
    SimulationOutput,
    SimulationState,
    StaticMarketConditions,
    adstock,
    hill_transform,
    initialize_simulation_state,
    run_simulation_tick,
    synergy_multiplier,
)
from cmosimulator.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)

# Silent unless the application configures logging.
logging.getLogger("cmosimulator").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Engine
    "Channel",
    "ChannelParams",
    "EngineConfig",
    "MarketConditions",
    "PlayerInput",
    "SimulationOutput",
    "SimulationState",
    "adstock",
    "hill_transform",
    "synergy_multiplier",
    "initialize_simulation_state",
    "run_simulation_tick",
    "MarketSimulation",
    "StaticMarketConditions",
    "SeasonalMarketConditions",
    # Campaign
    "Quarter",
    "KPIs",
    "Tactic",
    "WildcardEvent",
    "SimulationContext",
    "CampaignConfig",
    "CampaignPhase",
    "CampaignSnapshot",
    "CampaignMachine",
    "transition",
    "TransitionResult",
    "FailureReason",
    "CampaignError",
    "TransitionError",
    "FinalResults",
    "calculate_final_results",
    "StartSimulation",
    "SetStrategy",
    "CompleteStrategySession",
    "AddTactic",
    "RemoveTactic",
    "TriggerWildcard",
    "RespondToWildcard",
    "ApplyWildcardImpact",
    "CompleteQuarter",
    "CompleteDebrief",
    "RestartSimulation",
    # Logging
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "enable_json_file_logging",
    "configure_from_env",
    "set_level",
    "set_module_level",
    "disable_logging",
]
