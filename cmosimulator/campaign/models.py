"""Immutable data model for the quarterly campaign.

Everything the state machine tracks lives in frozen dataclasses. Updates
go through ``dataclasses.replace`` so each transition yields a new context
and earlier snapshots stay valid.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from cmosimulator.campaign.debrief import FinalResults


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Limit ``value`` to the closed interval [low, high]."""
    return max(low, min(high, value))


class Quarter(Enum):
    """The four campaign periods, in order."""

    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"

    @property
    def index(self) -> int:
        return _QUARTER_ORDER.index(self)

    @property
    def next(self) -> Quarter | None:
        """The following quarter, or None after Q4."""
        i = self.index + 1
        return _QUARTER_ORDER[i] if i < len(_QUARTER_ORDER) else None


_QUARTER_ORDER = (Quarter.Q1, Quarter.Q2, Quarter.Q3, Quarter.Q4)


@dataclass(frozen=True)
class KPIs:
    """Key performance indicators, used both as running totals and as deltas.

    Revenue and profit are unbounded. Market share, customer satisfaction
    and brand awareness are percentages; running totals keep them in
    [0, 100] via ``fold``.
    """

    revenue: float = 0.0
    profit: float = 0.0
    market_share: float = 0.0
    customer_satisfaction: float = 0.0
    brand_awareness: float = 0.0

    def __add__(self, other: KPIs) -> KPIs:
        return KPIs(
            revenue=self.revenue + other.revenue,
            profit=self.profit + other.profit,
            market_share=self.market_share + other.market_share,
            customer_satisfaction=self.customer_satisfaction + other.customer_satisfaction,
            brand_awareness=self.brand_awareness + other.brand_awareness,
        )

    def fold(self, delta: KPIs) -> KPIs:
        """Add a quarter delta to running totals, clamping the percentages."""
        return KPIs(
            revenue=self.revenue + delta.revenue,
            profit=self.profit + delta.profit,
            market_share=clamp(self.market_share + delta.market_share),
            customer_satisfaction=clamp(self.customer_satisfaction + delta.customer_satisfaction),
            brand_awareness=clamp(self.brand_awareness + delta.brand_awareness),
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "revenue": self.revenue,
            "profit": self.profit,
            "market_share": self.market_share,
            "customer_satisfaction": self.customer_satisfaction,
            "brand_awareness": self.brand_awareness,
        }


DEFAULT_STARTING_KPIS = KPIs(
    revenue=0.0,
    profit=0.0,
    market_share=10.0,
    customer_satisfaction=70.0,
    brand_awareness=30.0,
)


@dataclass(frozen=True)
class Impact:
    """Expected effect of a tactic or wildcard choice.

    ``morale`` and ``brand_equity`` are deltas to the hidden team-morale and
    brand-equity scalars; they do not feed the KPI totals.
    """

    revenue: float = 0.0
    profit: float = 0.0
    market_share: float = 0.0
    customer_satisfaction: float = 0.0
    brand_awareness: float = 0.0
    morale: float = 0.0
    brand_equity: float = 0.0

    def as_kpis(self) -> KPIs:
        return KPIs(
            revenue=self.revenue,
            profit=self.profit,
            market_share=self.market_share,
            customer_satisfaction=self.customer_satisfaction,
            brand_awareness=self.brand_awareness,
        )


class TacticCategory(Enum):
    DIGITAL = "digital"
    TRADITIONAL = "traditional"
    CONTENT = "content"
    EVENTS = "events"
    PARTNERSHIPS = "partnerships"


@dataclass(frozen=True)
class Tactic:
    """A purchasable marketing action from the tactic catalog.

    Attributes:
        id: Catalog identifier.
        name: Display name.
        category: Tactic family.
        cost: Budget consumed when added to a quarter.
        time_required: Team hours consumed.
        expected_impact: KPI effect realized when the quarter completes.
            Profit is derived as ``revenue - cost``.
    """

    id: str
    name: str
    category: TacticCategory
    cost: float
    time_required: float
    expected_impact: Impact = field(default_factory=Impact)


class WildcardType(Enum):
    OPPORTUNITY = "opportunity"
    CRISIS = "crisis"
    MARKET_SHIFT = "market_shift"
    COMPETITOR_ACTION = "competitor_action"


class Rarity(Enum):
    """How often a wildcard is drawn relative to others."""

    COMMON = 10
    UNCOMMON = 5
    RARE = 2
    LEGENDARY = 1

    @property
    def weight(self) -> int:
        return self.value


@dataclass(frozen=True)
class WildcardChoice:
    """One response option for a wildcard event."""

    id: str
    title: str
    description: str = ""
    cost: float = 0.0
    time_required: float = 0.0
    impact: Impact = field(default_factory=Impact)


@dataclass(frozen=True)
class HiddenImpact:
    """Event-level morale or brand-equity effect.

    The total delta for a choice is ``base`` plus that choice's modifier.
    """

    base: float = 0.0
    choice_modifiers: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "choice_modifiers", MappingProxyType(dict(self.choice_modifiers)))

    def for_choice(self, choice_id: str) -> float:
        return self.base + self.choice_modifiers.get(choice_id, 0.0)


@dataclass(frozen=True)
class TriggerConditions:
    """Campaign conditions under which a wildcard may be drawn.

    Unset bounds are not checked.
    """

    quarters: tuple[Quarter, ...] = ()
    min_revenue: float | None = None
    max_revenue: float | None = None
    min_market_share: float | None = None
    max_market_share: float | None = None

    def allows(self, quarter: Quarter, kpis: KPIs) -> bool:
        if self.quarters and quarter not in self.quarters:
            return False
        if self.min_revenue is not None and kpis.revenue < self.min_revenue:
            return False
        if self.max_revenue is not None and kpis.revenue > self.max_revenue:
            return False
        if self.min_market_share is not None and kpis.market_share < self.min_market_share:
            return False
        if self.max_market_share is not None and kpis.market_share > self.max_market_share:
            return False
        return True


@dataclass(frozen=True)
class WildcardEvent:
    """A random mid-campaign event and, once answered, its resolution.

    Attributes:
        id: Event identifier, unique within a quarter.
        type: Event family.
        title: Headline.
        description: Longer text shown to the player.
        choices: Available responses.
        selected_choice: Id of the chosen response, once resolved.
        impact: Impact of the chosen response, once resolved.
        triggered_in_quarter: Quarter in which the event fired.
        applied: Whether the morale/brand-equity deltas have been applied.
        rarity: Draw weight used by catalog selection.
        trigger: Conditions under which the catalog may draw this event.
        morale_impact: Event-level morale effect added to the choice's own.
        brand_equity_impact: Event-level brand-equity effect.
    """

    id: str
    type: WildcardType
    title: str
    description: str = ""
    choices: tuple[WildcardChoice, ...] = ()
    selected_choice: str | None = None
    impact: Impact | None = None
    triggered_in_quarter: Quarter | None = None
    applied: bool = False
    rarity: Rarity = Rarity.COMMON
    trigger: TriggerConditions | None = None
    morale_impact: HiddenImpact | None = None
    brand_equity_impact: HiddenImpact | None = None

    @property
    def resolved(self) -> bool:
        return self.selected_choice is not None

    def choice(self, choice_id: str) -> WildcardChoice | None:
        for c in self.choices:
            if c.id == choice_id:
                return c
        return None

    @property
    def chosen(self) -> WildcardChoice | None:
        if self.selected_choice is None:
            return None
        return self.choice(self.selected_choice)

    def morale_delta(self, choice_id: str) -> float:
        """Total morale change if ``choice_id`` is chosen."""
        choice = self.choice(choice_id)
        delta = choice.impact.morale if choice else 0.0
        if self.morale_impact is not None:
            delta += self.morale_impact.for_choice(choice_id)
        return delta

    def brand_equity_delta(self, choice_id: str) -> float:
        """Total brand-equity change if ``choice_id`` is chosen."""
        choice = self.choice(choice_id)
        delta = choice.impact.brand_equity if choice else 0.0
        if self.brand_equity_impact is not None:
            delta += self.brand_equity_impact.for_choice(choice_id)
        return delta


@dataclass(frozen=True)
class QuarterData:
    """Decisions and outcome of a single quarter.

    ``results`` holds the quarter's KPI delta and is only meaningful once
    ``completed`` is True.
    """

    quarter: Quarter
    tactics: tuple[Tactic, ...] = ()
    budget_spent: float = 0.0
    time_spent: float = 0.0
    wildcard_events: tuple[WildcardEvent, ...] = ()
    results: KPIs = field(default_factory=KPIs)
    completed: bool = False

    def tactic(self, tactic_id: str) -> Tactic | None:
        for t in self.tactics:
            if t.id == tactic_id:
                return t
        return None

    def wildcard(self, wildcard_id: str) -> WildcardEvent | None:
        for w in self.wildcard_events:
            if w.id == wildcard_id:
                return w
        return None

    def replace_wildcard(self, updated: WildcardEvent) -> QuarterData:
        events = tuple(updated if w.id == updated.id else w for w in self.wildcard_events)
        return replace(self, wildcard_events=events)

    def with_spend_recomputed(self) -> QuarterData:
        """Recompute budget and time spent from tactics and chosen responses."""
        budget = sum(t.cost for t in self.tactics)
        time = sum(t.time_required for t in self.tactics)
        for w in self.wildcard_events:
            chosen = w.chosen
            if chosen is not None:
                budget += chosen.cost
                time += chosen.time_required
        return replace(self, budget_spent=budget, time_spent=time)


@dataclass(frozen=True)
class Strategy:
    """Strategic choices made in the strategy session."""

    target_audience: str | None = None
    brand_positioning: str | None = None
    primary_channels: tuple[str, ...] = ()
    budget_allocation: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "primary_channels", tuple(self.primary_channels))
        object.__setattr__(self, "budget_allocation", MappingProxyType(dict(self.budget_allocation)))

    @property
    def is_complete(self) -> bool:
        """True once audience, positioning, and a primary channel are set."""
        return bool(self.target_audience and self.brand_positioning and self.primary_channels)

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.target_audience:
            missing.append("target_audience")
        if not self.brand_positioning:
            missing.append("brand_positioning")
        if not self.primary_channels:
            missing.append("primary_channels")
        return missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_audience": self.target_audience,
            "brand_positioning": self.brand_positioning,
            "primary_channels": list(self.primary_channels),
            "budget_allocation": dict(self.budget_allocation),
        }


def _empty_quarters() -> tuple[QuarterData, ...]:
    return tuple(QuarterData(quarter=q) for q in Quarter)


@dataclass(frozen=True)
class SimulationContext:
    """Complete state of one campaign run.

    Attributes:
        strategy: Strategy session output.
        quarters: One QuarterData per quarter, Q1 to Q4.
        total_budget: Budget available for the whole campaign.
        remaining_budget: Budget not yet committed. May go negative.
        kpis: Running KPI totals.
        morale: Hidden team morale, 0-100.
        brand_equity: Hidden brand equity, 0-100.
        user_id: Player identifier supplied at start.
        started_at: Start timestamp supplied by the caller.
        final_results: Debrief outcome, set on entering the debrief.
    """

    strategy: Strategy = field(default_factory=Strategy)
    quarters: tuple[QuarterData, ...] = field(default_factory=_empty_quarters)
    total_budget: float = 2_000_000.0
    remaining_budget: float = 2_000_000.0
    kpis: KPIs = DEFAULT_STARTING_KPIS
    morale: float = 75.0
    brand_equity: float = 50.0
    user_id: str | None = None
    started_at: datetime | None = None
    final_results: FinalResults | None = None

    def quarter(self, quarter: Quarter) -> QuarterData:
        return self.quarters[quarter.index]

    def with_quarter(self, data: QuarterData) -> SimulationContext:
        """Replace one quarter and recompute the budget ledger."""
        quarters = tuple(data if q.quarter is data.quarter else q for q in self.quarters)
        spent = sum(q.budget_spent for q in quarters)
        return replace(self, quarters=quarters, remaining_budget=self.total_budget - spent)

    @property
    def current_quarter(self) -> Quarter | None:
        """The first quarter not yet completed, or None after Q4."""
        for q in self.quarters:
            if not q.completed:
                return q.quarter
        return None

    @property
    def wildcards(self) -> tuple[WildcardEvent, ...]:
        """Every wildcard triggered so far, in quarter order."""
        return tuple(w for q in self.quarters for w in q.wildcard_events)

    @property
    def total_budget_spent(self) -> float:
        return self.total_budget - self.remaining_budget

    @property
    def total_time_spent(self) -> float:
        return sum(q.time_spent for q in self.quarters)

    @property
    def budget_exceeded(self) -> bool:
        return self.remaining_budget < 0
