"""Read-only exports of campaign outcomes.

``final_results_digest`` gives a stable fingerprint of a FinalResults for a
leaderboard store. ``quarterly_frame`` lays the per-quarter figures out as a
pandas DataFrame for analysis or plotting.
"""

from __future__ import annotations

import hashlib
import json

import pandas as pd

from cmosimulator.campaign.debrief import FinalResults
from cmosimulator.campaign.models import SimulationContext


def canonical_json(results: FinalResults) -> str:
    """``results.to_dict()`` as compact JSON with sorted keys."""
    return json.dumps(results.to_dict(), sort_keys=True, separators=(",", ":"))


def final_results_digest(results: FinalResults) -> str:
    """Hex SHA-256 of the canonical JSON form of ``results``."""
    return hashlib.sha256(canonical_json(results).encode("utf-8")).hexdigest()


def quarterly_frame(context: SimulationContext) -> pd.DataFrame:
    """One row per quarter with spend, time, counts, and KPI deltas."""
    rows = []
    for q in context.quarters:
        row = {
            "quarter": q.quarter.value,
            "completed": q.completed,
            "tactics": len(q.tactics),
            "wildcards": len(q.wildcard_events),
            "budget_spent": q.budget_spent,
            "time_spent": q.time_spent,
        }
        row.update(q.results.to_dict())
        rows.append(row)
    return pd.DataFrame(rows).set_index("quarter")
