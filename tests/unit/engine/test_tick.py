"""Tests for the tick orchestrator."""

from __future__ import annotations

import logging

import pytest

from cmosimulator.engine import (
    CHANNEL_PARAMS,
    DEFAULT_ENGINE_CONFIG,
    INDUSTRY_PROFILES,
    Channel,
    EngineConfig,
    MarketConditions,
    PlayerInput,
    get_industry,
    initialize_simulation_state,
    run_simulation_tick,
)


def _digital_only(spend: float = 150_000) -> PlayerInput:
    return PlayerInput.from_budgets({"digital": spend})


def _mixed() -> PlayerInput:
    return PlayerInput.from_budgets(
        {"tv": 180_000, "digital": 90_000, "seo": 40_000, "pr": 25_000, "events": 60_000}
    )


class TestInitialState:
    def test_initial_state(self):
        state = initialize_simulation_state()
        assert state.tick == 0
        assert all(v == 0.0 for v in state.adstock.values())
        assert set(state.adstock) == set(Channel)
        assert state.results.base_sales == 100_000
        assert state.results.total_sales == 100_000
        assert state.results.incremental_sales == 0
        assert state.market_conditions == MarketConditions()


class TestRunSimulationTick:
    """Tests for one tick of the response pipeline."""

    def test_single_channel_worked_example(self):
        # Spend at the half-saturation point: response 0.5, no synergy.
        # traffic 3750 -> leads 187 -> conversions 28 -> 140,000 * 0.9 seasonality factor.
        state = run_simulation_tick(
            initialize_simulation_state(), _digital_only(), MarketConditions()
        )
        assert state.tick == 1
        assert state.results.incremental_sales == pytest.approx(126_000)
        assert state.results.base_sales == pytest.approx(50_000)
        assert state.results.total_sales == pytest.approx(176_000)
        assert state.results.channel_contributions[Channel.DIGITAL] == pytest.approx(126_000)
        assert state.results.channel_roi[Channel.DIGITAL] == pytest.approx(84.0)
        assert state.adstock[Channel.DIGITAL] == 150_000

    def test_total_is_base_plus_incremental(self):
        state = initialize_simulation_state()
        for seasonality in (0.7, 1.0, 1.3):
            state = run_simulation_tick(
                state, _mixed(), MarketConditions(seasonality_index=seasonality, economic_index=1.05)
            )
            r = state.results
            assert r.total_sales == r.base_sales + r.incremental_sales

    def test_contributions_sum_to_incremental(self):
        state = run_simulation_tick(initialize_simulation_state(), _mixed(), MarketConditions())
        total = sum(state.results.channel_contributions.values())
        assert state.results.incremental_sales > 0
        assert total == pytest.approx(state.results.incremental_sales, rel=1e-9)

    def test_zero_spend_gives_zero_incremental(self):
        state = run_simulation_tick(initialize_simulation_state(), PlayerInput(), MarketConditions())
        assert state.results.incremental_sales == 0
        assert all(v == 0 for v in state.results.channel_contributions.values())
        assert all(v == 0 for v in state.results.channel_roi.values())

    def test_roi_is_zero_for_unfunded_channels(self):
        state = run_simulation_tick(initialize_simulation_state(), _digital_only(), MarketConditions())
        assert state.results.channel_roi[Channel.TV] == 0.0

    def test_adstock_carries_into_next_tick(self):
        state = run_simulation_tick(initialize_simulation_state(), _digital_only(), MarketConditions())
        state = run_simulation_tick(state, PlayerInput(), MarketConditions())
        assert state.adstock[Channel.DIGITAL] == pytest.approx(75_000)
        # No spend this tick means no traffic, whatever the memory.
        assert state.results.incremental_sales == 0

    def test_is_deterministic(self):
        previous = initialize_simulation_state()
        conditions = MarketConditions(seasonality_index=1.1, economic_index=0.95)
        a = run_simulation_tick(previous, _mixed(), conditions)
        b = run_simulation_tick(previous, _mixed(), conditions)
        assert a == b

    def test_previous_state_is_not_modified(self):
        previous = initialize_simulation_state()
        run_simulation_tick(previous, _mixed(), MarketConditions())
        assert previous.tick == 0
        assert all(v == 0.0 for v in previous.adstock.values())

    def test_economic_index_scales_traffic(self):
        low = run_simulation_tick(
            initialize_simulation_state(), _mixed(), MarketConditions(economic_index=0.5)
        )
        high = run_simulation_tick(
            initialize_simulation_state(), _mixed(), MarketConditions(economic_index=1.5)
        )
        assert high.results.incremental_sales > low.results.incremental_sales

    def test_base_sales_uses_industry_and_seasonality(self):
        state = run_simulation_tick(
            initialize_simulation_state(),
            PlayerInput(),
            MarketConditions(seasonality_index=1.2),
            industry="saas",
        )
        assert state.results.base_sales == pytest.approx(8_000_000 * 0.01 * 1.2)

    def test_synergy_boosts_combined_channels(self):
        tv_only = run_simulation_tick(
            initialize_simulation_state(),
            PlayerInput.from_budgets({"tv": 400_000}),
            MarketConditions(),
        )
        with_pr = run_simulation_tick(
            initialize_simulation_state(),
            PlayerInput.from_budgets({"tv": 400_000, "pr": 1}),
            MarketConditions(),
        )
        assert (
            with_pr.results.channel_contributions[Channel.TV]
            >= tv_only.results.channel_contributions[Channel.TV]
        )

    def test_unknown_industry_raises(self):
        with pytest.raises(ValueError, match="Unknown industry"):
            run_simulation_tick(
                initialize_simulation_state(), PlayerInput(), MarketConditions(), industry="piracy"
            )

    def test_logs_tick_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="cmosimulator"):
            run_simulation_tick(initialize_simulation_state(), _digital_only(), MarketConditions())
        assert any("tick 1" in r.getMessage() for r in caplog.records)


class TestEngineConfig:
    def test_defaults(self):
        assert DEFAULT_ENGINE_CONFIG.lead_rate == 0.05
        assert DEFAULT_ENGINE_CONFIG.conversion_rate == 0.15
        assert DEFAULT_ENGINE_CONFIG.base_sales_fraction == 0.01

    def test_missing_channel_params_raise(self):
        params = {c: p for c, p in CHANNEL_PARAMS.items() if c is not Channel.PR}
        with pytest.raises(ValueError, match="pr"):
            EngineConfig(channel_params=params)

    def test_custom_rates_change_funnel(self):
        generous = EngineConfig(lead_rate=0.5, conversion_rate=0.5)
        default = run_simulation_tick(initialize_simulation_state(), _mixed(), MarketConditions())
        boosted = run_simulation_tick(
            initialize_simulation_state(), _mixed(), MarketConditions(), config=generous
        )
        assert boosted.results.incremental_sales > default.results.incremental_sales


class TestIndustryProfiles:
    def test_default_is_healthcare(self):
        profile = get_industry("healthcare")
        assert profile.avg_customer_value == 5_000
        assert profile.base_market_size == 5_000_000

    def test_table_size(self):
        assert len(INDUSTRY_PROFILES) == 24

    def test_profile_passes_through(self):
        profile = INDUSTRY_PROFILES["travel"]
        assert get_industry(profile) is profile


class TestPlayerInput:
    def test_from_budgets_fills_missing_channels(self):
        player_input = PlayerInput.from_budgets({"tv": 10, Channel.SEO: 5})
        assert player_input.spend(Channel.RADIO) == 0.0
        assert player_input.total_spend == 15
        assert player_input.active_channels == (Channel.TV, Channel.SEO)

    def test_unknown_channel_name_raises(self):
        with pytest.raises(ValueError):
            PlayerInput.from_budgets({"billboards": 10})
        with pytest.raises(ValueError):
            PlayerInput(channel_budgets={"billboards": 10})

    def test_constructor_accepts_channel_names(self):
        direct = PlayerInput(channel_budgets={"tv": 200_000})
        assert direct.spend(Channel.TV) == 200_000

        state = initialize_simulation_state()
        from_names = run_simulation_tick(state, direct, MarketConditions())
        from_budgets = run_simulation_tick(
            state, PlayerInput.from_budgets({"tv": 200_000}), MarketConditions()
        )
        assert from_names.adstock[Channel.TV] == 200_000
        assert from_names.results.incremental_sales > 0
        assert from_names.results.incremental_sales == from_budgets.results.incremental_sales

    def test_budgets_are_read_only(self):
        player_input = PlayerInput.from_budgets({"tv": 10})
        with pytest.raises(TypeError):
            player_input.channel_budgets[Channel.TV] = 99  # type: ignore[index]

    def test_competitor_spend_is_read_only(self):
        conditions = MarketConditions()
        with pytest.raises(TypeError):
            conditions.competitor_spend[Channel.TV] = 0  # type: ignore[index]
