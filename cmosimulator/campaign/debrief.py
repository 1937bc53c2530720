"""Scoring and debrief for a finished campaign.

``calculate_final_results`` turns the final context into a composite score,
a letter grade, and rule-based feedback. The score is a weighted sum of
normalized revenue (revenue / 1,000,000 * 100), market share, customer
satisfaction and brand awareness, 25% each by default, rounded half up.

Feedback comes from three independent rule lists (recommendations,
strengths, weaknesses). Each rule tests the context on its own; rule
priority only orders the output.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Sequence

from cmosimulator.campaign.models import KPIs, SimulationContext, Strategy, WildcardEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of each KPI in the composite score.

    Attributes:
        revenue: Weight of normalized revenue.
        market_share: Weight of market share (percent).
        customer_satisfaction: Weight of customer satisfaction (percent).
        brand_awareness: Weight of brand awareness (percent).
        revenue_normalization: Revenue that counts as 100 points.
    """

    revenue: float = 0.25
    market_share: float = 0.25
    customer_satisfaction: float = 0.25
    brand_awareness: float = 0.25
    revenue_normalization: float = 1_000_000.0

    def __post_init__(self) -> None:
        if self.revenue_normalization <= 0:
            raise ValueError(
                f"revenue_normalization must be > 0, got {self.revenue_normalization}"
            )
        for name in ("revenue", "market_share", "customer_satisfaction", "brand_awareness"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} weight must be >= 0, got {getattr(self, name)}")


DEFAULT_SCORING_WEIGHTS = ScoringWeights()

GRADE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)
FAILING_GRADE = "F"


def grade_for_score(
    score: float,
    thresholds: Sequence[tuple[float, str]] = GRADE_THRESHOLDS,
    failing_grade: str = FAILING_GRADE,
) -> str:
    """Letter grade for ``score``.

    Args:
        score: Composite score.
        thresholds: ``(minimum, grade)`` pairs, strictly descending by minimum.
        failing_grade: Grade below the lowest threshold.

    Raises:
        ValueError: If the thresholds are not strictly descending.
    """
    minimums = [minimum for minimum, _ in thresholds]
    if any(a <= b for a, b in zip(minimums, minimums[1:])):
        raise ValueError(f"grade thresholds must be strictly descending, got {minimums}")
    for minimum, grade in thresholds:
        if score >= minimum:
            return grade
    return failing_grade


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def campaign_roi(context: SimulationContext) -> float:
    """Profit per dollar committed, as a percentage. 0 when nothing was spent."""
    spent = context.total_budget_spent
    if spent <= 0:
        return 0.0
    return context.kpis.profit / spent * 100


# ---------------------------------------------------------------------------
# Feedback rules
# ---------------------------------------------------------------------------

RuleCondition = Callable[[SimulationContext], bool]


@dataclass(frozen=True)
class FeedbackRule:
    """A condition and the message emitted when it holds.

    Attributes:
        condition: Predicate over the final context.
        message: Text added to the feedback list.
        priority: Higher priority rules are listed first.
    """

    condition: RuleCondition
    message: str
    priority: int = 0


def evaluate_rules(rules: Sequence[FeedbackRule], context: SimulationContext) -> tuple[str, ...]:
    ordered = sorted(rules, key=lambda r: r.priority, reverse=True)
    return tuple(rule.message for rule in ordered if rule.condition(context))


def _has_spend(context: SimulationContext) -> bool:
    return context.total_budget_spent > 0


RECOMMENDATION_RULES: tuple[FeedbackRule, ...] = (
    FeedbackRule(
        lambda c: c.kpis.revenue < 500_000,
        "Focus on revenue-generating tactics like digital advertising and partnerships.",
        priority=50,
    ),
    FeedbackRule(
        lambda c: c.kpis.market_share < 15,
        "Increase market share through competitive pricing and brand differentiation.",
        priority=40,
    ),
    FeedbackRule(
        lambda c: c.kpis.customer_satisfaction < 70,
        "Invest in customer experience improvements and support initiatives.",
        priority=30,
    ),
    FeedbackRule(
        lambda c: c.kpis.brand_awareness < 40,
        "Boost brand awareness through content marketing and social media campaigns.",
        priority=20,
    ),
    FeedbackRule(
        lambda c: c.remaining_budget > c.total_budget * 0.2,
        "You left significant budget unused. Consider more aggressive marketing investments.",
        priority=10,
    ),
    FeedbackRule(
        lambda c: c.brand_equity < 50,
        "Focus on content quality and PR to build brand equity.",
        priority=0,
    ),
)

STRENGTH_RULES: tuple[FeedbackRule, ...] = (
    FeedbackRule(
        lambda c: _has_spend(c) and campaign_roi(c) > 150,
        "Exceptional ROI - highly efficient budget use",
        priority=20,
    ),
    FeedbackRule(lambda c: c.kpis.market_share > 15, "Strong market presence achieved", priority=10),
    FeedbackRule(lambda c: c.brand_equity > 70, "Built powerful brand equity"),
    FeedbackRule(lambda c: c.morale >= 80, "Kept the team energized throughout the campaign"),
)

WEAKNESS_RULES: tuple[FeedbackRule, ...] = (
    FeedbackRule(
        lambda c: _has_spend(c) and campaign_roi(c) < 50,
        "Low ROI - budget efficiency needs improvement",
        priority=20,
    ),
    FeedbackRule(lambda c: c.kpis.market_share < 8, "Limited market penetration", priority=10),
    FeedbackRule(lambda c: c.morale < 50, "Team burnout affected performance"),
    FeedbackRule(lambda c: c.budget_exceeded, "Campaign spending exceeded the total budget"),
)


# ---------------------------------------------------------------------------
# Final results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QuarterSummary:
    """Per-quarter figures carried into the debrief."""

    quarter: str
    tactic_ids: tuple[str, ...]
    budget_spent: float
    time_spent: float
    wildcard_ids: tuple[str, ...]
    results: KPIs

    def to_dict(self) -> dict[str, Any]:
        return {
            "quarter": self.quarter,
            "tactic_ids": list(self.tactic_ids),
            "budget_spent": self.budget_spent,
            "time_spent": self.time_spent,
            "wildcard_ids": list(self.wildcard_ids),
            "results": self.results.to_dict(),
        }


@dataclass(frozen=True)
class FinalResults:
    """Read-only outcome of a finished campaign.

    Attributes:
        score: Composite score, rounded half up.
        grade: Letter grade for ``score``.
        final_kpis: KPI totals at the end of Q4.
        breakdown: Points contributed by each KPI before rounding.
        recommendations: Suggestions for the next run.
        strengths: What went well.
        weaknesses: What went poorly.
        roi: Profit per dollar committed, as a percentage.
        total_budget: Budget available for the run.
        remaining_budget: Budget left uncommitted (may be negative).
        morale: Final team morale.
        brand_equity: Final brand equity.
        quarters: Per-quarter summaries in order.
        wildcard_events: Every wildcard triggered during the run.
        strategy: The strategy the run was played with.
    """

    score: int
    grade: str
    final_kpis: KPIs
    breakdown: Mapping[str, float] = field(default_factory=dict)
    recommendations: tuple[str, ...] = ()
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    roi: float = 0.0
    total_budget: float = 0.0
    remaining_budget: float = 0.0
    morale: float = 0.0
    brand_equity: float = 0.0
    quarters: tuple[QuarterSummary, ...] = ()
    wildcard_events: tuple[WildcardEvent, ...] = ()
    strategy: Strategy = field(default_factory=Strategy)

    def __post_init__(self) -> None:
        object.__setattr__(self, "breakdown", MappingProxyType(dict(self.breakdown)))

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible snapshot of the results."""
        return {
            "score": self.score,
            "grade": self.grade,
            "final_kpis": self.final_kpis.to_dict(),
            "breakdown": dict(self.breakdown),
            "recommendations": list(self.recommendations),
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "roi": self.roi,
            "total_budget": self.total_budget,
            "remaining_budget": self.remaining_budget,
            "morale": self.morale,
            "brand_equity": self.brand_equity,
            "quarters": [q.to_dict() for q in self.quarters],
            "wildcard_events": [
                {
                    "id": w.id,
                    "type": w.type.value,
                    "title": w.title,
                    "quarter": w.triggered_in_quarter.value if w.triggered_in_quarter else None,
                    "selected_choice": w.selected_choice,
                }
                for w in self.wildcard_events
            ],
            "strategy": self.strategy.to_dict(),
        }

    def to_prompt_context(self) -> str:
        """Plain-text summary for narrative or commentary generators."""
        kpis = self.final_kpis
        sections: list[str] = []

        sections.append("## Campaign Results")
        sections.append(f"Score: {self.score} ({self.grade})")
        sections.append(f"Revenue: ${kpis.revenue:,.0f}")
        sections.append(f"Profit: ${kpis.profit:,.0f}")
        sections.append(f"Market share: {kpis.market_share:.1f}%")
        sections.append(f"Customer satisfaction: {kpis.customer_satisfaction:.1f}%")
        sections.append(f"Brand awareness: {kpis.brand_awareness:.1f}%")
        sections.append(
            f"Budget: ${self.total_budget:,.0f} total, ${self.remaining_budget:,.0f} remaining"
        )

        if self.strategy.target_audience or self.strategy.brand_positioning:
            sections.append("\n## Strategy")
            sections.append(f"Audience: {self.strategy.target_audience}")
            sections.append(f"Positioning: {self.strategy.brand_positioning}")
            if self.strategy.primary_channels:
                sections.append(f"Channels: {', '.join(self.strategy.primary_channels)}")

        if self.quarters:
            sections.append("\n## Quarters")
            for q in self.quarters:
                sections.append(
                    f"- {q.quarter}: {len(q.tactic_ids)} tactics, "
                    f"spent ${q.budget_spent:,.0f}, revenue ${q.results.revenue:,.0f}"
                )

        if self.wildcard_events:
            sections.append("\n## Wildcards")
            for w in self.wildcard_events:
                choice = w.selected_choice or "unresolved"
                sections.append(f"- {w.title}: {choice}")

        for title, items in (
            ("Strengths", self.strengths),
            ("Weaknesses", self.weaknesses),
            ("Recommendations", self.recommendations),
        ):
            if items:
                sections.append(f"\n## {title}")
                for item in items:
                    sections.append(f"- {item}")

        return "\n".join(sections)


def score_breakdown(kpis: KPIs, weights: ScoringWeights = DEFAULT_SCORING_WEIGHTS) -> dict[str, float]:
    """Points contributed by each KPI to the composite score."""
    return {
        "revenue": kpis.revenue / weights.revenue_normalization * 100 * weights.revenue,
        "market_share": kpis.market_share * weights.market_share,
        "customer_satisfaction": kpis.customer_satisfaction * weights.customer_satisfaction,
        "brand_awareness": kpis.brand_awareness * weights.brand_awareness,
    }


def calculate_final_results(
    context: SimulationContext,
    weights: ScoringWeights = DEFAULT_SCORING_WEIGHTS,
    thresholds: Sequence[tuple[float, str]] = GRADE_THRESHOLDS,
) -> FinalResults:
    """Score a finished campaign.

    Args:
        context: Context after the last quarter has been folded in.
        weights: KPI weights and revenue normalization.
        thresholds: Grade thresholds, strictly descending.

    Returns:
        The final results. ``context`` is not modified.
    """
    breakdown = score_breakdown(context.kpis, weights)
    score = round_half_up(sum(breakdown.values()))
    grade = grade_for_score(score, thresholds)

    quarters = tuple(
        QuarterSummary(
            quarter=q.quarter.value,
            tactic_ids=tuple(t.id for t in q.tactics),
            budget_spent=q.budget_spent,
            time_spent=q.time_spent,
            wildcard_ids=tuple(w.id for w in q.wildcard_events),
            results=q.results,
        )
        for q in context.quarters
    )

    results = FinalResults(
        score=score,
        grade=grade,
        final_kpis=context.kpis,
        breakdown=breakdown,
        recommendations=evaluate_rules(RECOMMENDATION_RULES, context),
        strengths=evaluate_rules(STRENGTH_RULES, context),
        weaknesses=evaluate_rules(WEAKNESS_RULES, context),
        roi=campaign_roi(context),
        total_budget=context.total_budget,
        remaining_budget=context.remaining_budget,
        morale=context.morale,
        brand_equity=context.brand_equity,
        quarters=quarters,
        wildcard_events=context.wildcards,
        strategy=context.strategy,
    )
    logger.info("Campaign scored %d (%s), revenue=%.0f", score, grade, context.kpis.revenue)
    return results
