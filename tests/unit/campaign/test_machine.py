"""Tests for the quarterly campaign state machine."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from cmosimulator.campaign import (
    AddTactic,
    ApplyWildcardImpact,
    CampaignConfig,
    CampaignMachine,
    CampaignPhase,
    CompleteDebrief,
    CompleteQuarter,
    CompleteStrategySession,
    FailureReason,
    HiddenImpact,
    Impact,
    KPIs,
    Quarter,
    RemoveTactic,
    RespondToWildcard,
    RestartSimulation,
    SetStrategy,
    StartSimulation,
    Tactic,
    TacticCategory,
    TransitionError,
    TriggerWildcard,
    WildcardChoice,
    WildcardEvent,
    WildcardType,
    initial_snapshot,
    transition,
)


def make_tactic(id: str = "t-1", cost: float = 75_000, revenue: float = 150_000, **impact) -> Tactic:
    return Tactic(
        id=id,
        name=f"Tactic {id}",
        category=TacticCategory.DIGITAL,
        cost=cost,
        time_required=10,
        expected_impact=Impact(revenue=revenue, **impact),
    )


def make_wildcard(
    id: str = "wc-1",
    morale: float = 0.0,
    brand_equity: float = 0.0,
) -> WildcardEvent:
    return WildcardEvent(
        id=id,
        type=WildcardType.CRISIS,
        title="Test crisis",
        choices=(
            WildcardChoice(
                id="respond",
                title="Respond",
                cost=30_000,
                time_required=20,
                impact=Impact(
                    revenue=-10_000,
                    profit=-30_000,
                    customer_satisfaction=5,
                    morale=morale,
                    brand_equity=brand_equity,
                ),
            ),
            WildcardChoice(id="ignore", title="Ignore", impact=Impact(revenue=-50_000)),
        ),
    )


def started_machine(config: CampaignConfig | None = None, **start) -> CampaignMachine:
    machine = CampaignMachine(config)
    machine.send(StartSimulation(**start)).raise_for_failure()
    machine.send(
        SetStrategy(
            target_audience="Small businesses",
            brand_positioning="Affordable and reliable",
            primary_channels=("digital",),
        )
    ).raise_for_failure()
    machine.send(CompleteStrategySession()).raise_for_failure()
    return machine


# =============================================================================
# Phase flow
# =============================================================================


class TestPhaseFlow:
    """Tests for the idle to completed progression."""

    def test_initial_phase_is_idle(self):
        machine = CampaignMachine()
        assert machine.phase is CampaignPhase.IDLE
        assert machine.context.final_results is None

    def test_start_enters_strategy_session(self):
        machine = CampaignMachine()
        started = datetime(2026, 1, 1, tzinfo=timezone.utc)
        result = machine.send(StartSimulation(user_id="u-1", started_at=started))
        assert result.accepted
        assert machine.phase is CampaignPhase.STRATEGY_SESSION
        assert machine.context.user_id == "u-1"
        assert machine.context.started_at == started
        assert machine.context.remaining_budget == 2_000_000

    def test_start_budget_override(self):
        machine = CampaignMachine()
        machine.send(StartSimulation(total_budget=1_000_000))
        assert machine.context.total_budget == 1_000_000
        assert machine.context.remaining_budget == 1_000_000

    def test_full_progression(self):
        machine = started_machine()
        phases = [machine.phase]
        for quarter in Quarter:
            assert machine.context.final_results is None
            machine.send(CompleteQuarter(quarter)).raise_for_failure()
            phases.append(machine.phase)
        assert phases == [
            CampaignPhase.Q1,
            CampaignPhase.Q2,
            CampaignPhase.Q3,
            CampaignPhase.Q4,
            CampaignPhase.DEBRIEF,
        ]
        assert machine.context.final_results is not None

        machine.send(CompleteDebrief()).raise_for_failure()
        assert machine.phase is CampaignPhase.COMPLETED

    def test_restart_resets_context(self):
        machine = started_machine()
        machine.send(AddTactic(Quarter.Q1, make_tactic()))
        for quarter in Quarter:
            machine.send(CompleteQuarter(quarter))
        machine.send(CompleteDebrief())

        result = machine.send(RestartSimulation())
        assert result.accepted
        assert machine.phase is CampaignPhase.IDLE
        assert machine.context == CampaignConfig().new_context()

    def test_restart_only_from_completed(self):
        machine = started_machine()
        result = machine.send(RestartSimulation())
        assert result.reason is FailureReason.EVENT_NOT_ACCEPTED
        assert machine.phase is CampaignPhase.Q1

    def test_events_outside_their_phase_are_rejected(self):
        machine = CampaignMachine()
        result = machine.send(AddTactic(Quarter.Q1, make_tactic()))
        assert not result.accepted
        assert result.reason is FailureReason.EVENT_NOT_ACCEPTED
        assert result.snapshot is machine.snapshot
        assert machine.phase is CampaignPhase.IDLE

    def test_start_twice_is_rejected(self):
        machine = CampaignMachine()
        machine.send(StartSimulation())
        assert machine.send(StartSimulation()).reason is FailureReason.EVENT_NOT_ACCEPTED

    def test_history_grows_only_on_accept(self):
        machine = CampaignMachine()
        machine.send(CompleteDebrief())
        assert len(machine.history) == 1
        machine.send(StartSimulation())
        assert len(machine.history) == 2


# =============================================================================
# Strategy session
# =============================================================================


class TestStrategySession:
    def _machine(self) -> CampaignMachine:
        machine = CampaignMachine()
        machine.send(StartSimulation())
        return machine

    @pytest.mark.parametrize(
        "strategy",
        [
            {},
            {"target_audience": "Gen Z", "brand_positioning": "Premium"},
            {"target_audience": "Gen Z", "primary_channels": ("social",)},
            {"brand_positioning": "Premium", "primary_channels": ("social",)},
            {"target_audience": "Gen Z", "brand_positioning": "Premium", "primary_channels": ()},
        ],
    )
    def test_incomplete_strategy_blocks_completion(self, strategy):
        machine = self._machine()
        machine.send(SetStrategy(**strategy))
        result = machine.send(CompleteStrategySession())
        assert result.reason is FailureReason.GUARD_NOT_SATISFIED
        assert machine.phase is CampaignPhase.STRATEGY_SESSION

    def test_set_strategy_merges_fields(self):
        machine = self._machine()
        machine.send(SetStrategy(target_audience="Gen Z"))
        machine.send(SetStrategy(brand_positioning="Premium", budget_allocation={"digital": 0.6}))
        strategy = machine.context.strategy
        assert strategy.target_audience == "Gen Z"
        assert strategy.brand_positioning == "Premium"
        assert strategy.budget_allocation == {"digital": 0.6}
        assert strategy.missing_fields() == ["primary_channels"]

    def test_single_channel_name_is_one_channel(self):
        machine = self._machine()
        machine.send(
            SetStrategy(target_audience="Gen Z", brand_positioning="Premium", primary_channels="digital")
        ).raise_for_failure()
        assert machine.context.strategy.primary_channels == ("digital",)

    def test_failure_message_names_missing_fields(self):
        machine = self._machine()
        result = machine.send(CompleteStrategySession())
        assert "target_audience" in result.failure.message


# =============================================================================
# Tactics and budget
# =============================================================================


class TestTactics:
    """Tests for tactic bookkeeping and the budget ledger."""

    def test_add_tactic_deducts_budget(self):
        machine = started_machine()
        machine.send(AddTactic(Quarter.Q1, make_tactic(cost=75_000)))
        q1 = machine.context.quarter(Quarter.Q1)
        assert machine.context.remaining_budget == 1_925_000
        assert q1.budget_spent == 75_000
        assert q1.time_spent == 10

    def test_add_then_remove_restores_budget_exactly(self):
        machine = started_machine()
        machine.send(AddTactic(Quarter.Q1, make_tactic("a", cost=12_345.67)))
        before = machine.context.remaining_budget
        machine.send(AddTactic(Quarter.Q1, make_tactic("b", cost=0.1)))
        machine.send(RemoveTactic(Quarter.Q1, "b")).raise_for_failure()
        assert machine.context.remaining_budget == before

    def test_remove_only_first_duplicate(self):
        machine = started_machine()
        machine.send(AddTactic(Quarter.Q1, make_tactic("a")))
        machine.send(AddTactic(Quarter.Q1, make_tactic("a")))
        machine.send(RemoveTactic(Quarter.Q1, "a"))
        assert len(machine.context.quarter(Quarter.Q1).tactics) == 1
        assert machine.context.remaining_budget == 1_925_000

    def test_remove_unknown_tactic_is_not_found(self):
        machine = started_machine()
        result = machine.send(RemoveTactic(Quarter.Q1, "missing"))
        assert result.reason is FailureReason.NOT_FOUND

    def test_tactic_for_other_quarter_is_rejected(self):
        machine = started_machine()
        result = machine.send(AddTactic(Quarter.Q2, make_tactic()))
        assert result.reason is FailureReason.GUARD_NOT_SATISFIED
        assert machine.context.quarter(Quarter.Q2).tactics == ()

    def test_overspend_is_representable(self):
        machine = started_machine(total_budget=100_000)
        machine.send(AddTactic(Quarter.Q1, make_tactic(cost=150_000)))
        assert machine.context.remaining_budget == -50_000
        assert machine.context.budget_exceeded
        assert machine.send(CompleteQuarter(Quarter.Q1)).accepted

    def test_overspend_can_block_quarter_completion(self):
        machine = started_machine(CampaignConfig(block_overspent_quarters=True), total_budget=100_000)
        machine.send(AddTactic(Quarter.Q1, make_tactic(cost=150_000)))
        result = machine.send(CompleteQuarter(Quarter.Q1))
        assert result.reason is FailureReason.GUARD_NOT_SATISFIED
        assert machine.phase is CampaignPhase.Q1


# =============================================================================
# Quarter completion
# =============================================================================


class TestCompleteQuarter:
    def test_wrong_quarter_is_rejected(self):
        machine = started_machine()
        result = machine.send(CompleteQuarter(Quarter.Q2))
        assert result.reason is FailureReason.GUARD_NOT_SATISFIED
        assert machine.phase is CampaignPhase.Q1

    def test_folds_results_once(self):
        machine = started_machine()
        machine.send(AddTactic(Quarter.Q1, make_tactic(market_share=3, brand_awareness=15)))
        machine.send(CompleteQuarter(Quarter.Q1))
        kpis = machine.context.kpis
        assert kpis.revenue == 150_000
        assert kpis.profit == 75_000
        assert kpis.market_share == 13
        assert kpis.brand_awareness == 45
        q1 = machine.context.quarter(Quarter.Q1)
        assert q1.completed
        assert q1.results.revenue == 150_000

    def test_percent_kpis_are_clamped(self):
        machine = started_machine()
        machine.send(
            AddTactic(
                Quarter.Q1,
                make_tactic(market_share=500, customer_satisfaction=-500, brand_awareness=80),
            )
        )
        machine.send(CompleteQuarter(Quarter.Q1))
        kpis = machine.context.kpis
        assert kpis.market_share == 100
        assert kpis.customer_satisfaction == 0
        assert kpis.brand_awareness == 100

    def test_revenue_and_profit_are_unclamped(self):
        machine = started_machine()
        machine.send(AddTactic(Quarter.Q1, make_tactic(cost=500_000, revenue=-300_000)))
        machine.send(CompleteQuarter(Quarter.Q1))
        assert machine.context.kpis.revenue == -300_000
        assert machine.context.kpis.profit == -800_000

    def test_resolved_wildcard_impact_is_included(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard()))
        machine.send(RespondToWildcard("wc-1", "respond"))
        machine.send(CompleteQuarter(Quarter.Q1))
        kpis = machine.context.kpis
        assert kpis.revenue == -10_000
        assert kpis.profit == -30_000
        assert kpis.customer_satisfaction == 75

    def test_unresolved_wildcard_has_no_impact(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard()))
        machine.send(CompleteQuarter(Quarter.Q1))
        assert machine.context.kpis == CampaignConfig().initial_kpis

    def test_current_quarter_helper(self):
        machine = started_machine()
        assert machine.context.current_quarter is Quarter.Q1
        machine.send(CompleteQuarter(Quarter.Q1))
        assert machine.context.current_quarter is Quarter.Q2


# =============================================================================
# Wildcards
# =============================================================================


class TestWildcards:
    """Tests for trigger, respond, and apply."""

    def test_trigger_tags_quarter(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard()))
        event = machine.context.quarter(Quarter.Q1).wildcard("wc-1")
        assert event.triggered_in_quarter is Quarter.Q1
        assert not event.resolved
        assert machine.context.wildcards == (event,)

    def test_duplicate_trigger_is_rejected(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard()))
        result = machine.send(TriggerWildcard(Quarter.Q1, make_wildcard()))
        assert result.reason is FailureReason.GUARD_NOT_SATISFIED

    def test_respond_records_choice_and_cost(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard()))
        machine.send(RespondToWildcard("wc-1", "respond")).raise_for_failure()
        event = machine.context.quarter(Quarter.Q1).wildcard("wc-1")
        assert event.selected_choice == "respond"
        assert event.impact.revenue == -10_000
        assert machine.context.remaining_budget == 1_970_000
        assert machine.context.quarter(Quarter.Q1).time_spent == 20

    def test_respond_unknown_wildcard_is_not_found(self):
        machine = started_machine()
        assert machine.send(RespondToWildcard("nope", "respond")).reason is FailureReason.NOT_FOUND

    def test_respond_unknown_choice_is_not_found(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard()))
        assert machine.send(RespondToWildcard("wc-1", "panic")).reason is FailureReason.NOT_FOUND

    def test_respond_twice_is_rejected(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard()))
        machine.send(RespondToWildcard("wc-1", "respond"))
        result = machine.send(RespondToWildcard("wc-1", "ignore"))
        assert result.reason is FailureReason.GUARD_NOT_SATISFIED
        assert machine.context.remaining_budget == 1_970_000

    def test_apply_before_respond_is_rejected(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard(morale=10)))
        result = machine.send(ApplyWildcardImpact("wc-1"))
        assert result.reason is FailureReason.GUARD_NOT_SATISFIED
        assert machine.context.morale == 75

    def test_apply_unknown_wildcard_is_not_found(self):
        machine = started_machine()
        assert machine.send(ApplyWildcardImpact("nope")).reason is FailureReason.NOT_FOUND

    def test_apply_updates_morale_and_brand_equity(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard(morale=10, brand_equity=-20)))
        machine.send(RespondToWildcard("wc-1", "respond"))
        machine.send(ApplyWildcardImpact("wc-1")).raise_for_failure()
        assert machine.context.morale == 85
        assert machine.context.brand_equity == 30
        assert machine.context.quarter(Quarter.Q1).wildcard("wc-1").applied

    def test_apply_twice_is_rejected(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard(morale=10)))
        machine.send(RespondToWildcard("wc-1", "respond"))
        machine.send(ApplyWildcardImpact("wc-1"))
        result = machine.send(ApplyWildcardImpact("wc-1"))
        assert result.reason is FailureReason.GUARD_NOT_SATISFIED
        assert machine.context.morale == 85

    def test_apply_does_not_touch_kpis(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard()))
        machine.send(RespondToWildcard("wc-1", "respond"))
        kpis = machine.context.kpis
        machine.send(ApplyWildcardImpact("wc-1"))
        assert machine.context.kpis == kpis

    @pytest.mark.parametrize("delta", [1000, -1000, 1e9, -1e9])
    def test_morale_and_brand_equity_stay_in_range(self, delta):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard(morale=delta, brand_equity=delta)))
        machine.send(RespondToWildcard("wc-1", "respond"))
        machine.send(ApplyWildcardImpact("wc-1"))
        expected = 100 if delta > 0 else 0
        assert machine.context.morale == expected
        assert machine.context.brand_equity == expected

    def test_hidden_impact_combines_base_and_modifier(self):
        wildcard = replace(
            make_wildcard(morale=5),
            morale_impact=HiddenImpact(base=-20, choice_modifiers={"respond": 10}),
        )
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, wildcard))
        machine.send(RespondToWildcard("wc-1", "respond"))
        machine.send(ApplyWildcardImpact("wc-1"))
        assert machine.context.morale == 70

    def test_wildcard_history_spans_quarters(self):
        machine = started_machine()
        machine.send(TriggerWildcard(Quarter.Q1, make_wildcard("a")))
        machine.send(CompleteQuarter(Quarter.Q1))
        machine.send(TriggerWildcard(Quarter.Q2, make_wildcard("b")))
        assert [w.id for w in machine.context.wildcards] == ["a", "b"]
        assert [w.triggered_in_quarter for w in machine.context.wildcards] == [Quarter.Q1, Quarter.Q2]


# =============================================================================
# Results and errors
# =============================================================================


class TestTransitionResult:
    def test_raise_for_failure(self):
        machine = CampaignMachine()
        result = machine.send(CompleteQuarter(Quarter.Q1))
        with pytest.raises(TransitionError) as exc_info:
            result.raise_for_failure()
        assert exc_info.value.reason is FailureReason.EVENT_NOT_ACCEPTED

    def test_raise_for_failure_returns_self_on_success(self):
        machine = CampaignMachine()
        result = machine.send(StartSimulation())
        assert result.raise_for_failure() is result

    def test_transition_is_pure(self):
        snapshot = initial_snapshot()
        first = transition(snapshot, StartSimulation(total_budget=5))
        second = transition(snapshot, StartSimulation(total_budget=5))
        assert first.snapshot == second.snapshot
        assert snapshot.phase is CampaignPhase.IDLE

    def test_negative_start_budget_is_rejected(self):
        result = transition(initial_snapshot(), StartSimulation(total_budget=-1))
        assert result.reason is FailureReason.GUARD_NOT_SATISFIED

    def test_rejections_are_logged(self, caplog):
        machine = CampaignMachine()
        with caplog.at_level(logging.INFO, logger="cmosimulator"):
            machine.send(CompleteDebrief())
        assert any("rejected" in r.getMessage() for r in caplog.records)


class TestCampaignConfig:
    def test_defaults(self):
        config = CampaignConfig()
        assert config.total_budget == 2_000_000
        assert config.initial_morale == 75
        assert config.initial_brand_equity == 50
        assert config.initial_kpis == KPIs(
            market_share=10, customer_satisfaction=70, brand_awareness=30
        )

    def test_negative_budget_raises(self):
        with pytest.raises(ValueError, match="total_budget"):
            CampaignConfig(total_budget=-1)

    def test_out_of_range_morale_raises(self):
        with pytest.raises(ValueError, match="initial_morale"):
            CampaignConfig(initial_morale=120)

    def test_non_monotonic_thresholds_raise(self):
        with pytest.raises(ValueError, match="descending"):
            CampaignConfig(grade_thresholds=((80, "B"), (90, "A")))
