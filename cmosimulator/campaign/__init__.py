"""Quarterly campaign layer.

A state machine that plays four quarters of tactics and wildcard events,
folds their effects into running KPIs, and scores the result.
"""

from cmosimulator.campaign.catalog import (
    TACTIC_LIBRARY,
    WILDCARD_LIBRARY,
    eligible_wildcards,
    get_tactic,
    get_wildcard,
    select_wildcard,
    tactics_by_category,
)
from cmosimulator.campaign.debrief import (
    DEFAULT_SCORING_WEIGHTS,
    GRADE_THRESHOLDS,
    FeedbackRule,
    FinalResults,
    QuarterSummary,
    ScoringWeights,
    calculate_final_results,
    grade_for_score,
    score_breakdown,
)
from cmosimulator.campaign.errors import CampaignError, TransitionError
from cmosimulator.campaign.events import (
    AddTactic,
    ApplyWildcardImpact,
    CampaignEvent,
    CompleteDebrief,
    CompleteQuarter,
    CompleteStrategySession,
    RemoveTactic,
    RespondToWildcard,
    RestartSimulation,
    SetStrategy,
    StartSimulation,
    TriggerWildcard,
)
from cmosimulator.campaign.export import final_results_digest, quarterly_frame
from cmosimulator.campaign.machine import (
    DEFAULT_CAMPAIGN_CONFIG,
    CampaignConfig,
    CampaignMachine,
    CampaignPhase,
    CampaignSnapshot,
    initial_snapshot,
    transition,
)
from cmosimulator.campaign.models import (
    DEFAULT_STARTING_KPIS,
    HiddenImpact,
    Impact,
    KPIs,
    Quarter,
    QuarterData,
    Rarity,
    SimulationContext,
    Strategy,
    Tactic,
    TacticCategory,
    TriggerConditions,
    WildcardChoice,
    WildcardEvent,
    WildcardType,
)
from cmosimulator.campaign.quarter import calculate_quarter_results
from cmosimulator.campaign.results import FailureReason, TransitionFailure, TransitionResult

__all__ = [
    # Model
    "Quarter",
    "KPIs",
    "DEFAULT_STARTING_KPIS",
    "Impact",
    "Tactic",
    "TacticCategory",
    "WildcardType",
    "Rarity",
    "WildcardChoice",
    "HiddenImpact",
    "TriggerConditions",
    "WildcardEvent",
    "QuarterData",
    "Strategy",
    "SimulationContext",
    # Events
    "CampaignEvent",
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
    # Machine
    "CampaignPhase",
    "CampaignConfig",
    "DEFAULT_CAMPAIGN_CONFIG",
    "CampaignSnapshot",
    "CampaignMachine",
    "initial_snapshot",
    "transition",
    "calculate_quarter_results",
    # Results and errors
    "FailureReason",
    "TransitionFailure",
    "TransitionResult",
    "CampaignError",
    "TransitionError",
    # Debrief
    "ScoringWeights",
    "DEFAULT_SCORING_WEIGHTS",
    "GRADE_THRESHOLDS",
    "grade_for_score",
    "score_breakdown",
    "FeedbackRule",
    "QuarterSummary",
    "FinalResults",
    "calculate_final_results",
    # Catalogs
    "TACTIC_LIBRARY",
    "WILDCARD_LIBRARY",
    "get_tactic",
    "get_wildcard",
    "tactics_by_category",
    "eligible_wildcards",
    "select_wildcard",
    # Export
    "final_results_digest",
    "quarterly_frame",
]
