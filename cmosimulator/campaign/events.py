"""Events accepted by the campaign state machine.

The set is closed: ``transition`` handles exactly these types and rejects
anything else with EVENT_NOT_ACCEPTED.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Union

from cmosimulator.campaign.models import Quarter, Tactic, WildcardEvent


@dataclass(frozen=True)
class StartSimulation:
    """Begin a run. ``total_budget`` overrides the configured budget."""

    user_id: str | None = None
    total_budget: float | None = None
    started_at: datetime | None = None


@dataclass(frozen=True)
class SetStrategy:
    """Update strategy fields. Fields left as None are unchanged."""

    target_audience: str | None = None
    brand_positioning: str | None = None
    primary_channels: tuple[str, ...] | str | None = None
    budget_allocation: Mapping[str, float] | None = None


@dataclass(frozen=True)
class CompleteStrategySession:
    pass


@dataclass(frozen=True)
class AddTactic:
    quarter: Quarter
    tactic: Tactic


@dataclass(frozen=True)
class RemoveTactic:
    quarter: Quarter
    tactic_id: str


@dataclass(frozen=True)
class TriggerWildcard:
    quarter: Quarter
    wildcard: WildcardEvent


@dataclass(frozen=True)
class RespondToWildcard:
    wildcard_id: str
    choice_id: str


@dataclass(frozen=True)
class ApplyWildcardImpact:
    wildcard_id: str


@dataclass(frozen=True)
class CompleteQuarter:
    quarter: Quarter


@dataclass(frozen=True)
class CompleteDebrief:
    pass


@dataclass(frozen=True)
class RestartSimulation:
    pass


CampaignEvent = Union[
    StartSimulation,
    SetStrategy,
    CompleteStrategySession,
    AddTactic,
    RemoveTactic,
    TriggerWildcard,
    RespondToWildcard,
    ApplyWildcardImpact,
    CompleteQuarter,
    CompleteDebrief,
    RestartSimulation,
]
