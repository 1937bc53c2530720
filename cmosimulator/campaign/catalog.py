"""Sample tactic and wildcard catalogs.

Catalog entries are plain data consumed by AddTactic and TriggerWildcard.
``select_wildcard`` draws an eligible wildcard weighted by rarity from an
injected random source; the state machine itself never draws.
"""

from __future__ import annotations

import random
from typing import Sequence

from cmosimulator.campaign.models import (
    HiddenImpact,
    Impact,
    KPIs,
    Quarter,
    Rarity,
    Tactic,
    TacticCategory,
    TriggerConditions,
    WildcardChoice,
    WildcardEvent,
    WildcardType,
)


def _tactic(
    id: str,
    name: str,
    category: TacticCategory,
    cost: float,
    time_required: float,
    revenue: float,
    market_share: float,
    customer_satisfaction: float,
    brand_awareness: float,
) -> Tactic:
    return Tactic(
        id=id,
        name=name,
        category=category,
        cost=cost,
        time_required=time_required,
        expected_impact=Impact(
            revenue=revenue,
            profit=revenue - cost,
            market_share=market_share,
            customer_satisfaction=customer_satisfaction,
            brand_awareness=brand_awareness,
        ),
    )


def _choice(
    id: str,
    title: str,
    description: str,
    cost: float,
    time_required: float,
    revenue: float,
    profit: float,
    market_share: float,
    customer_satisfaction: float,
    brand_awareness: float,
) -> WildcardChoice:
    return WildcardChoice(
        id=id,
        title=title,
        description=description,
        cost=cost,
        time_required=time_required,
        impact=Impact(
            revenue=revenue,
            profit=profit,
            market_share=market_share,
            customer_satisfaction=customer_satisfaction,
            brand_awareness=brand_awareness,
        ),
    )


_D = TacticCategory.DIGITAL
_C = TacticCategory.CONTENT
_T = TacticCategory.TRADITIONAL
_E = TacticCategory.EVENTS
_P = TacticCategory.PARTNERSHIPS

TACTIC_LIBRARY: tuple[Tactic, ...] = (
    _tactic("digital-1", "Social Media Advertising Campaign", _D, 75_000, 30, 150_000, 3, 2, 15),
    _tactic("digital-2", "Google Ads & SEM", _D, 100_000, 25, 200_000, 4, 1, 10),
    _tactic("digital-3", "Influencer Partnership Program", _D, 50_000, 40, 80_000, 2, 5, 20),
    _tactic("content-1", "Content Marketing Hub", _C, 60_000, 50, 90_000, 2, 8, 12),
    _tactic("content-2", "Video Marketing Series", _C, 80_000, 60, 120_000, 3, 6, 18),
    _tactic("content-3", "Podcast Sponsorship", _C, 30_000, 20, 50_000, 1, 3, 8),
    _tactic("traditional-1", "TV Commercial Campaign", _T, 200_000, 45, 300_000, 8, 2, 25),
    _tactic("traditional-2", "Print Advertising", _T, 40_000, 15, 60_000, 2, 1, 8),
    _tactic("traditional-3", "Radio Sponsorship", _T, 25_000, 10, 40_000, 1, 1, 6),
    _tactic("events-1", "Trade Show Presence", _E, 120_000, 80, 180_000, 5, 10, 15),
    _tactic("events-2", "Customer Experience Events", _E, 90_000, 70, 110_000, 3, 15, 12),
    _tactic("events-3", "Product Launch Event", _E, 150_000, 90, 250_000, 6, 8, 20),
    _tactic("partnerships-1", "Strategic Brand Partnership", _P, 70_000, 60, 140_000, 4, 6, 14),
    _tactic("partnerships-2", "Retail Partnership Program", _P, 100_000, 50, 200_000, 6, 4, 10),
    _tactic(
        "partnerships-3", "Technology Integration Partnership", _P, 80_000, 70, 160_000, 5, 12, 8
    ),
)


WILDCARD_LIBRARY: tuple[WildcardEvent, ...] = (
    WildcardEvent(
        id="wildcard-1",
        type=WildcardType.CRISIS,
        title="Negative Social Media Viral Post",
        description="A customer complaint has gone viral and is hurting the brand's reputation.",
        choices=(
            _choice("crisis-1-ignore", "Ignore and Wait", "Let it blow over without a response.",
                    0, 0, -50_000, 0, -2, -10, -5),
            _choice("crisis-1-respond", "Public Response Campaign", "Address the concerns publicly.",
                    30_000, 20, -10_000, -30_000, 0, 5, 3),
            _choice("crisis-1-overhaul", "Complete Brand Overhaul", "Turn the crisis into a rebrand.",
                    100_000, 60, 50_000, -50_000, 3, 15, 10),
        ),
    ),
    WildcardEvent(
        id="wildcard-2",
        type=WildcardType.OPPORTUNITY,
        title="Celebrity Endorsement Opportunity",
        description="A popular celebrity wants to endorse the brand.",
        choices=(
            _choice("opportunity-2-decline", "Decline the Offer", "Keep the current strategy.",
                    0, 0, 0, 0, 0, 0, 0),
            _choice("opportunity-2-basic", "Basic Endorsement Deal", "Sign a standard contract.",
                    150_000, 30, 300_000, 150_000, 8, 5, 25),
            _choice("opportunity-2-premium", "Premium Partnership", "Co-create content together.",
                    300_000, 60, 500_000, 200_000, 12, 8, 35),
        ),
    ),
    WildcardEvent(
        id="wildcard-3",
        type=WildcardType.MARKET_SHIFT,
        title="Economic Downturn",
        description="A sudden downturn has changed consumer spending patterns.",
        choices=(
            _choice("downturn-3-maintain", "Maintain Current Strategy", "Continue as planned.",
                    0, 0, -100_000, -100_000, -3, -2, -5),
            _choice("downturn-3-pivot", "Pivot to Value Messaging", "Focus on affordability.",
                    50_000, 40, -30_000, -80_000, 2, 5, 0),
            _choice("downturn-3-aggressive", "Aggressive Market Capture", "Outspend competitors.",
                    200_000, 50, 100_000, -100_000, 8, 3, 15),
        ),
    ),
    WildcardEvent(
        id="wildcard-4",
        type=WildcardType.COMPETITOR_ACTION,
        title="Major Competitor Product Launch",
        description="The main competitor launched a product that threatens the brand's position.",
        choices=(
            _choice("competitor-4-ignore", "Focus on Strengths", "Double down on existing advantages.",
                    25_000, 20, -50_000, -25_000, -5, 2, 0),
            _choice("competitor-4-counter", "Counter-Launch Campaign", "Highlight competitive advantages.",
                    100_000, 45, 50_000, -50_000, 0, 0, 12),
            _choice("competitor-4-innovate", "Accelerate Innovation", "Fast-track product development.",
                    250_000, 80, 200_000, -50_000, 6, 10, 18),
        ),
    ),
    WildcardEvent(
        id="wildcard-enhanced-1",
        type=WildcardType.CRISIS,
        title="Data Privacy Scandal",
        description="A data breach exposed customer information and trust is falling.",
        rarity=Rarity.UNCOMMON,
        morale_impact=HiddenImpact(
            base=-20,
            choice_modifiers={
                "crisis-data-ignore": -30,
                "crisis-data-minimal": -10,
                "crisis-data-comprehensive": 10,
            },
        ),
        brand_equity_impact=HiddenImpact(
            base=-25,
            choice_modifiers={
                "crisis-data-ignore": -40,
                "crisis-data-minimal": -15,
                "crisis-data-comprehensive": 5,
            },
        ),
        choices=(
            _choice("crisis-data-ignore", "Minimal Response", "Issue a brief statement.",
                    25_000, 10, -200_000, -25_000, -5, -25, -10),
            _choice("crisis-data-minimal", "Standard Crisis Management", "Hire a PR firm.",
                    150_000, 40, -100_000, -150_000, -2, -10, -5),
            _choice("crisis-data-comprehensive", "Transparency & Innovation",
                    "Full transparency, compensation, and a security overhaul.",
                    500_000, 80, 100_000, -400_000, 3, 20, 15),
        ),
    ),
    WildcardEvent(
        id="wildcard-enhanced-2",
        type=WildcardType.OPPORTUNITY,
        title="Viral Social Media Moment",
        description="A customer's creative content about the brand went viral.",
        rarity=Rarity.RARE,
        trigger=TriggerConditions(quarters=(Quarter.Q2, Quarter.Q3)),
        morale_impact=HiddenImpact(
            base=15,
            choice_modifiers={"viral-ignore": -10, "viral-capitalize": 20, "viral-overdo": 5},
        ),
        brand_equity_impact=HiddenImpact(
            base=10,
            choice_modifiers={"viral-ignore": -5, "viral-capitalize": 25, "viral-overdo": -10},
        ),
        choices=(
            _choice("viral-ignore", "Stay the Course", "Let the moment pass.",
                    0, 0, 50_000, 50_000, 1, 2, 5),
            _choice("viral-capitalize", "Strategic Amplification", "Amplify with matching content.",
                    100_000, 30, 400_000, 300_000, 8, 15, 30),
            _choice("viral-overdo", "Maximum Exploitation", "Try to recreate the moment at scale.",
                    300_000, 60, 200_000, -100_000, 3, -5, 10),
        ),
    ),
    WildcardEvent(
        id="wildcard-enhanced-3",
        type=WildcardType.MARKET_SHIFT,
        title="Economic Recession Warning",
        description="Indicators suggest a recession and falling consumer spend.",
        rarity=Rarity.UNCOMMON,
        trigger=TriggerConditions(quarters=(Quarter.Q3, Quarter.Q4)),
        morale_impact=HiddenImpact(
            base=-15,
            choice_modifiers={"recession-cuts": -25, "recession-pivot": -5, "recession-invest": 10},
        ),
        brand_equity_impact=HiddenImpact(
            base=-5,
            choice_modifiers={"recession-cuts": -15, "recession-pivot": 5, "recession-invest": 15},
        ),
        choices=(
            # Negative cost: cutting spend returns budget.
            _choice("recession-cuts", "Defensive Cost Cutting", "Reduce spend, focus on efficiency.",
                    -200_000, 20, -300_000, 100_000, -8, -10, -15),
            _choice("recession-pivot", "Value-Focused Messaging", "Emphasize value and affordability.",
                    100_000, 50, -100_000, -100_000, 2, 10, 5),
            _choice("recession-invest", "Counter-Cyclical Investment", "Invest while competitors retreat.",
                    400_000, 70, 300_000, -100_000, 12, 5, 20),
        ),
    ),
    WildcardEvent(
        id="wildcard-enhanced-4",
        type=WildcardType.OPPORTUNITY,
        title="Industry Innovation Award",
        description="The campaign was nominated for a prestigious industry award.",
        rarity=Rarity.RARE,
        trigger=TriggerConditions(quarters=(Quarter.Q3, Quarter.Q4), min_revenue=200_000),
        morale_impact=HiddenImpact(
            base=20,
            choice_modifiers={"award-ignore": -15, "award-participate": 10, "award-campaign": 25},
        ),
        brand_equity_impact=HiddenImpact(
            base=15,
            choice_modifiers={"award-ignore": -10, "award-participate": 10, "award-campaign": 30},
        ),
        choices=(
            _choice("award-ignore", "Focus on Business", "Ignore the award.",
                    0, 0, 0, 0, 0, 0, 0),
            _choice("award-participate", "Professional Participation", "Take part without extra spend.",
                    25_000, 15, 75_000, 50_000, 2, 5, 10),
            _choice("award-campaign", "Full PR Campaign", "Run PR around the nomination.",
                    150_000, 45, 300_000, 150_000, 6, 12, 25),
        ),
    ),
)


_TACTICS_BY_ID = {t.id: t for t in TACTIC_LIBRARY}
_WILDCARDS_BY_ID = {w.id: w for w in WILDCARD_LIBRARY}


def get_tactic(tactic_id: str) -> Tactic:
    """Look up a catalog tactic.

    Raises:
        KeyError: If no tactic has that id.
    """
    try:
        return _TACTICS_BY_ID[tactic_id]
    except KeyError:
        raise KeyError(f"Unknown tactic '{tactic_id}'") from None


def get_wildcard(wildcard_id: str) -> WildcardEvent:
    """Look up a catalog wildcard.

    Raises:
        KeyError: If no wildcard has that id.
    """
    try:
        return _WILDCARDS_BY_ID[wildcard_id]
    except KeyError:
        raise KeyError(f"Unknown wildcard '{wildcard_id}'") from None


def tactics_by_category(category: TacticCategory | str) -> list[Tactic]:
    category = TacticCategory(category)
    return [t for t in TACTIC_LIBRARY if t.category is category]


def eligible_wildcards(
    quarter: Quarter,
    kpis: KPIs,
    pool: Sequence[WildcardEvent] = WILDCARD_LIBRARY,
) -> list[WildcardEvent]:
    """Wildcards in ``pool`` whose trigger conditions hold."""
    return [w for w in pool if w.trigger is None or w.trigger.allows(quarter, kpis)]


def select_wildcard(
    rng: random.Random,
    quarter: Quarter,
    kpis: KPIs,
    pool: Sequence[WildcardEvent] = WILDCARD_LIBRARY,
) -> WildcardEvent | None:
    """Draw an eligible wildcard, weighted by rarity.

    Args:
        rng: Random source; pass ``random.Random(seed)`` for replayable draws.
        quarter: Quarter the wildcard would fire in.
        kpis: Current running KPIs, checked against trigger bounds.
        pool: Candidate wildcards.

    Returns:
        The drawn wildcard, or None if nothing in the pool is eligible.
    """
    candidates = eligible_wildcards(quarter, kpis, pool)
    if not candidates:
        return None
    weights = [w.rarity.weight for w in candidates]
    return rng.choices(candidates, weights=weights, k=1)[0]
