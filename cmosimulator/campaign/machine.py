"""Quarterly campaign state machine.

A run moves through fixed phases::

    idle -> strategy_session -> q1 -> q2 -> q3 -> q4 -> debrief -> completed
    completed -> idle  (RestartSimulation only)

``transition`` is a pure function from ``(snapshot, event)`` to a
TransitionResult. ``CampaignMachine`` wraps it as the single owner of the
current snapshot and keeps the snapshot history.

Budget bookkeeping is a ledger: after every change the quarter's
``budget_spent`` and ``time_spent`` are recomputed from its tactics and
chosen wildcard responses, and ``remaining_budget`` is the total budget
minus the sum over quarters. Adding then removing a tactic therefore
restores the remaining budget exactly.

Example::

    machine = CampaignMachine()
    machine.send(StartSimulation(user_id="p1"))
    machine.send(SetStrategy(target_audience="smb", brand_positioning="value",
                             primary_channels=("digital",)))
    machine.send(CompleteStrategySession()).raise_for_failure()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Sequence

from cmosimulator.campaign.debrief import (
    DEFAULT_SCORING_WEIGHTS,
    GRADE_THRESHOLDS,
    FinalResults,
    ScoringWeights,
    calculate_final_results,
    grade_for_score,
)
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
from cmosimulator.campaign.models import (
    DEFAULT_STARTING_KPIS,
    KPIs,
    Quarter,
    SimulationContext,
    clamp,
)
from cmosimulator.campaign.quarter import calculate_quarter_results
from cmosimulator.campaign.results import FailureReason, TransitionFailure, TransitionResult

logger = logging.getLogger(__name__)


class CampaignPhase(Enum):
    IDLE = "idle"
    STRATEGY_SESSION = "strategy_session"
    Q1 = "q1"
    Q2 = "q2"
    Q3 = "q3"
    Q4 = "q4"
    DEBRIEF = "debrief"
    COMPLETED = "completed"

    @property
    def quarter(self) -> Quarter | None:
        """The quarter this phase plays, or None outside the quarters."""
        return _PHASE_QUARTERS.get(self)

    @classmethod
    def for_quarter(cls, quarter: Quarter) -> CampaignPhase:
        return cls(quarter.value.lower())


_PHASE_QUARTERS = {
    CampaignPhase.Q1: Quarter.Q1,
    CampaignPhase.Q2: Quarter.Q2,
    CampaignPhase.Q3: Quarter.Q3,
    CampaignPhase.Q4: Quarter.Q4,
}


@dataclass(frozen=True)
class CampaignConfig:
    """Starting values and scoring settings for every run.

    Attributes:
        total_budget: Budget for a run unless StartSimulation overrides it.
        initial_kpis: KPI totals at the start of a run.
        initial_morale: Starting team morale, 0-100.
        initial_brand_equity: Starting brand equity, 0-100.
        scoring_weights: Weights of the composite score.
        grade_thresholds: ``(minimum, grade)`` pairs, strictly descending.
        block_overspent_quarters: Reject CompleteQuarter while the remaining
            budget is negative.
    """

    total_budget: float = 2_000_000.0
    initial_kpis: KPIs = DEFAULT_STARTING_KPIS
    initial_morale: float = 75.0
    initial_brand_equity: float = 50.0
    scoring_weights: ScoringWeights = DEFAULT_SCORING_WEIGHTS
    grade_thresholds: Sequence[tuple[float, str]] = GRADE_THRESHOLDS
    block_overspent_quarters: bool = False

    def __post_init__(self) -> None:
        if self.total_budget < 0:
            raise ValueError(f"total_budget must be >= 0, got {self.total_budget}")
        for name in ("initial_morale", "initial_brand_equity"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be in [0, 100], got {value}")
        # Rejects non-monotonic thresholds at construction time.
        grade_for_score(0, self.grade_thresholds)

    def new_context(self, total_budget: float | None = None) -> SimulationContext:
        budget = self.total_budget if total_budget is None else total_budget
        return SimulationContext(
            total_budget=budget,
            remaining_budget=budget,
            kpis=self.initial_kpis,
            morale=self.initial_morale,
            brand_equity=self.initial_brand_equity,
        )


DEFAULT_CAMPAIGN_CONFIG = CampaignConfig()


@dataclass(frozen=True)
class CampaignSnapshot:
    """Phase plus context; the machine's complete observable state."""

    phase: CampaignPhase
    context: SimulationContext = field(default_factory=SimulationContext)

    @property
    def quarter(self) -> Quarter | None:
        return self.phase.quarter

    @property
    def final_results(self) -> FinalResults | None:
        return self.context.final_results


def initial_snapshot(config: CampaignConfig = DEFAULT_CAMPAIGN_CONFIG) -> CampaignSnapshot:
    return CampaignSnapshot(phase=CampaignPhase.IDLE, context=config.new_context())


# ---------------------------------------------------------------------------
# Transition function
# ---------------------------------------------------------------------------


def transition(
    snapshot: CampaignSnapshot,
    event: CampaignEvent,
    config: CampaignConfig = DEFAULT_CAMPAIGN_CONFIG,
) -> TransitionResult:
    """Apply ``event`` to ``snapshot``.

    Args:
        snapshot: Current phase and context.
        event: One of the campaign events.
        config: Starting values and scoring settings.

    Returns:
        A TransitionResult. On rejection its snapshot is ``snapshot``
        itself and ``failure`` names the reason.
    """
    phase = snapshot.phase

    if phase is CampaignPhase.IDLE and isinstance(event, StartSimulation):
        return _start(snapshot, event, config)

    if phase is CampaignPhase.STRATEGY_SESSION:
        if isinstance(event, SetStrategy):
            return _set_strategy(snapshot, event)
        if isinstance(event, CompleteStrategySession):
            return _complete_strategy_session(snapshot, event)

    if phase.quarter is not None:
        if isinstance(event, AddTactic):
            return _add_tactic(snapshot, event)
        if isinstance(event, RemoveTactic):
            return _remove_tactic(snapshot, event)
        if isinstance(event, TriggerWildcard):
            return _trigger_wildcard(snapshot, event)
        if isinstance(event, RespondToWildcard):
            return _respond_to_wildcard(snapshot, event)
        if isinstance(event, ApplyWildcardImpact):
            return _apply_wildcard_impact(snapshot, event)
        if isinstance(event, CompleteQuarter):
            return _complete_quarter(snapshot, event, config)

    if phase is CampaignPhase.DEBRIEF and isinstance(event, CompleteDebrief):
        return _accept(snapshot, event, CampaignPhase.COMPLETED, snapshot.context)

    if phase is CampaignPhase.COMPLETED and isinstance(event, RestartSimulation):
        return _accept(snapshot, event, CampaignPhase.IDLE, config.new_context())

    return _reject(
        snapshot,
        event,
        FailureReason.EVENT_NOT_ACCEPTED,
        f"{type(event).__name__} is not handled in phase '{phase.value}'",
    )


def _accept(
    snapshot: CampaignSnapshot,
    event: CampaignEvent,
    phase: CampaignPhase,
    context: SimulationContext,
) -> TransitionResult:
    return TransitionResult(snapshot=CampaignSnapshot(phase=phase, context=context), event=event)


def _reject(
    snapshot: CampaignSnapshot,
    event: CampaignEvent,
    reason: FailureReason,
    message: str,
) -> TransitionResult:
    return TransitionResult(
        snapshot=snapshot,
        event=event,
        failure=TransitionFailure(reason=reason, message=message),
    )


def _start(
    snapshot: CampaignSnapshot, event: StartSimulation, config: CampaignConfig
) -> TransitionResult:
    if event.total_budget is not None and event.total_budget < 0:
        return _reject(
            snapshot,
            event,
            FailureReason.GUARD_NOT_SATISFIED,
            f"total_budget must be >= 0, got {event.total_budget}",
        )
    context = replace(
        config.new_context(event.total_budget),
        user_id=event.user_id,
        started_at=event.started_at,
    )
    return _accept(snapshot, event, CampaignPhase.STRATEGY_SESSION, context)


def _set_strategy(snapshot: CampaignSnapshot, event: SetStrategy) -> TransitionResult:
    current = snapshot.context.strategy
    changes = {}
    if event.target_audience is not None:
        changes["target_audience"] = event.target_audience
    if event.brand_positioning is not None:
        changes["brand_positioning"] = event.brand_positioning
    if event.primary_channels is not None:
        channels = event.primary_channels
        # A bare name is one channel, not a sequence of letters.
        if isinstance(channels, str):
            channels = (channels,)
        changes["primary_channels"] = tuple(channels)
    if event.budget_allocation is not None:
        changes["budget_allocation"] = dict(event.budget_allocation)
    context = replace(snapshot.context, strategy=replace(current, **changes))
    return _accept(snapshot, event, snapshot.phase, context)


def _complete_strategy_session(
    snapshot: CampaignSnapshot, event: CompleteStrategySession
) -> TransitionResult:
    strategy = snapshot.context.strategy
    if not strategy.is_complete:
        return _reject(
            snapshot,
            event,
            FailureReason.GUARD_NOT_SATISFIED,
            f"strategy incomplete, missing: {', '.join(strategy.missing_fields())}",
        )
    return _accept(snapshot, event, CampaignPhase.Q1, snapshot.context)


def _quarter_mismatch(
    snapshot: CampaignSnapshot, event: CampaignEvent, quarter: Quarter
) -> TransitionResult | None:
    if quarter is not snapshot.quarter:
        return _reject(
            snapshot,
            event,
            FailureReason.GUARD_NOT_SATISFIED,
            f"event targets {quarter.value} but the current quarter is {snapshot.quarter.value}",
        )
    return None


def _add_tactic(snapshot: CampaignSnapshot, event: AddTactic) -> TransitionResult:
    mismatch = _quarter_mismatch(snapshot, event, event.quarter)
    if mismatch is not None:
        return mismatch
    context = snapshot.context
    data = context.quarter(event.quarter)
    data = replace(data, tactics=data.tactics + (event.tactic,)).with_spend_recomputed()
    return _accept(snapshot, event, snapshot.phase, context.with_quarter(data))


def _remove_tactic(snapshot: CampaignSnapshot, event: RemoveTactic) -> TransitionResult:
    mismatch = _quarter_mismatch(snapshot, event, event.quarter)
    if mismatch is not None:
        return mismatch
    context = snapshot.context
    data = context.quarter(event.quarter)
    tactics = list(data.tactics)
    for i, tactic in enumerate(tactics):
        if tactic.id == event.tactic_id:
            del tactics[i]
            break
    else:
        return _reject(
            snapshot,
            event,
            FailureReason.NOT_FOUND,
            f"tactic '{event.tactic_id}' is not in {event.quarter.value}",
        )
    data = replace(data, tactics=tuple(tactics)).with_spend_recomputed()
    return _accept(snapshot, event, snapshot.phase, context.with_quarter(data))


def _trigger_wildcard(snapshot: CampaignSnapshot, event: TriggerWildcard) -> TransitionResult:
    mismatch = _quarter_mismatch(snapshot, event, event.quarter)
    if mismatch is not None:
        return mismatch
    context = snapshot.context
    data = context.quarter(event.quarter)
    if data.wildcard(event.wildcard.id) is not None:
        return _reject(
            snapshot,
            event,
            FailureReason.GUARD_NOT_SATISFIED,
            f"wildcard '{event.wildcard.id}' already triggered in {event.quarter.value}",
        )
    wildcard = replace(
        event.wildcard,
        triggered_in_quarter=event.quarter,
        selected_choice=None,
        impact=None,
        applied=False,
    )
    data = replace(data, wildcard_events=data.wildcard_events + (wildcard,))
    return _accept(snapshot, event, snapshot.phase, context.with_quarter(data))


def _respond_to_wildcard(snapshot: CampaignSnapshot, event: RespondToWildcard) -> TransitionResult:
    context = snapshot.context
    data = context.quarter(snapshot.quarter)
    wildcard = data.wildcard(event.wildcard_id)
    if wildcard is None:
        return _reject(
            snapshot,
            event,
            FailureReason.NOT_FOUND,
            f"wildcard '{event.wildcard_id}' is not in {snapshot.quarter.value}",
        )
    if wildcard.resolved:
        return _reject(
            snapshot,
            event,
            FailureReason.GUARD_NOT_SATISFIED,
            f"wildcard '{event.wildcard_id}' already resolved with '{wildcard.selected_choice}'",
        )
    choice = wildcard.choice(event.choice_id)
    if choice is None:
        return _reject(
            snapshot,
            event,
            FailureReason.NOT_FOUND,
            f"choice '{event.choice_id}' is not offered by wildcard '{event.wildcard_id}'",
        )
    resolved = replace(wildcard, selected_choice=choice.id, impact=choice.impact)
    data = data.replace_wildcard(resolved).with_spend_recomputed()
    return _accept(snapshot, event, snapshot.phase, context.with_quarter(data))


def _apply_wildcard_impact(
    snapshot: CampaignSnapshot, event: ApplyWildcardImpact
) -> TransitionResult:
    context = snapshot.context
    data = context.quarter(snapshot.quarter)
    wildcard = data.wildcard(event.wildcard_id)
    if wildcard is None:
        return _reject(
            snapshot,
            event,
            FailureReason.NOT_FOUND,
            f"wildcard '{event.wildcard_id}' is not in {snapshot.quarter.value}",
        )
    if not wildcard.resolved:
        return _reject(
            snapshot,
            event,
            FailureReason.GUARD_NOT_SATISFIED,
            f"wildcard '{event.wildcard_id}' has no selected choice",
        )
    if wildcard.applied:
        return _reject(
            snapshot,
            event,
            FailureReason.GUARD_NOT_SATISFIED,
            f"wildcard '{event.wildcard_id}' impact already applied",
        )
    # KPI effects are folded by CompleteQuarter; only the hidden scalars move here.
    choice_id = wildcard.selected_choice
    morale = clamp(context.morale + wildcard.morale_delta(choice_id))
    brand_equity = clamp(context.brand_equity + wildcard.brand_equity_delta(choice_id))
    data = data.replace_wildcard(replace(wildcard, applied=True))
    context = replace(context.with_quarter(data), morale=morale, brand_equity=brand_equity)
    return _accept(snapshot, event, snapshot.phase, context)


def _complete_quarter(
    snapshot: CampaignSnapshot, event: CompleteQuarter, config: CampaignConfig
) -> TransitionResult:
    mismatch = _quarter_mismatch(snapshot, event, event.quarter)
    if mismatch is not None:
        return mismatch
    context = snapshot.context
    if config.block_overspent_quarters and context.budget_exceeded:
        return _reject(
            snapshot,
            event,
            FailureReason.GUARD_NOT_SATISFIED,
            f"budget exceeded by {-context.remaining_budget:,.0f}",
        )

    data = context.quarter(event.quarter)
    delta = calculate_quarter_results(data)
    data = replace(data, results=delta, completed=True)
    context = replace(context.with_quarter(data), kpis=context.kpis.fold(delta))

    next_quarter = event.quarter.next
    if next_quarter is not None:
        return _accept(snapshot, event, CampaignPhase.for_quarter(next_quarter), context)

    final_results = calculate_final_results(
        context, config.scoring_weights, config.grade_thresholds
    )
    context = replace(context, final_results=final_results)
    return _accept(snapshot, event, CampaignPhase.DEBRIEF, context)


# ---------------------------------------------------------------------------
# Machine
# ---------------------------------------------------------------------------


class CampaignMachine:
    """Owns the current campaign snapshot and applies events to it.

    Args:
        config: Starting values and scoring settings.

    Example::

        machine = CampaignMachine()
        result = machine.send(StartSimulation(total_budget=1_500_000))
        assert result.accepted
        machine.phase  # CampaignPhase.STRATEGY_SESSION
    """

    def __init__(self, config: CampaignConfig | None = None):
        self.config = config or DEFAULT_CAMPAIGN_CONFIG
        self._history: list[CampaignSnapshot] = [initial_snapshot(self.config)]

    @property
    def snapshot(self) -> CampaignSnapshot:
        return self._history[-1]

    @property
    def phase(self) -> CampaignPhase:
        return self.snapshot.phase

    @property
    def context(self) -> SimulationContext:
        return self.snapshot.context

    @property
    def history(self) -> list[CampaignSnapshot]:
        """Every snapshot the machine has been in, oldest first."""
        return list(self._history)

    def send(self, event: CampaignEvent) -> TransitionResult:
        """Apply one event. Rejections leave the snapshot unchanged."""
        before = self.snapshot.phase
        result = transition(self.snapshot, event, self.config)
        if result.accepted:
            self._history.append(result.snapshot)
            logger.debug(
                "%s accepted: %s -> %s",
                type(event).__name__,
                before.value,
                result.snapshot.phase.value,
            )
        else:
            logger.info(
                "%s rejected in %s: %s",
                type(event).__name__,
                before.value,
                result.failure.message,
            )
        return result

    def send_all(self, events: Iterable[CampaignEvent]) -> list[TransitionResult]:
        """Apply events in order, continuing past rejections."""
        return [self.send(event) for event in events]
