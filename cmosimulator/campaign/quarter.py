"""Quarter outcome calculation."""

from __future__ import annotations

from cmosimulator.campaign.models import KPIs, QuarterData


def calculate_quarter_results(quarter_data: QuarterData) -> KPIs:
    """Sum the KPI delta produced by one quarter's decisions.

    Each tactic contributes its expected revenue, market share, satisfaction
    and awareness, with profit taken as ``revenue - cost``. Each resolved
    wildcard contributes its chosen impact. Unresolved wildcards contribute
    nothing.

    The result is a delta only; folding it into running totals is the state
    machine's job.

    Args:
        quarter_data: The quarter to evaluate.

    Returns:
        Unclamped KPI delta for the quarter.
    """
    delta = KPIs()
    for tactic in quarter_data.tactics:
        impact = tactic.expected_impact
        delta += KPIs(
            revenue=impact.revenue,
            profit=impact.revenue - tactic.cost,
            market_share=impact.market_share,
            customer_satisfaction=impact.customer_satisfaction,
            brand_awareness=impact.brand_awareness,
        )
    for event in quarter_data.wildcard_events:
        if event.impact is not None:
            delta += event.impact.as_kpis()
    return delta
