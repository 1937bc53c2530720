"""Matplotlib charts for the response engine and campaign runs.

Figures are built with ``matplotlib.figure.Figure`` directly, so they work
under any backend and never open a window. Save them with
``fig.savefig(path)``.
"""

from __future__ import annotations

from typing import Iterable, Mapping

import pandas as pd
from matplotlib.figure import Figure

from cmosimulator.engine.channels import CHANNEL_PARAMS, Channel, ChannelParams
from cmosimulator.engine.saturation import hill_transform


def plot_response_curves(
    max_spend: float = 500_000,
    channels: Iterable[Channel] | None = None,
    params: Mapping[Channel, ChannelParams] = CHANNEL_PARAMS,
    points: int = 200,
) -> Figure:
    """Hill response curve per channel over ``[0, max_spend]``.

    The half-saturation point of each channel is marked.
    """
    selected = list(channels) if channels is not None else list(Channel)
    xs = [max_spend * i / (points - 1) for i in range(points)]

    fig = Figure(figsize=(10, 6))
    ax = fig.add_subplot(1, 1, 1)
    for channel in selected:
        p = params[channel]
        ys = [hill_transform(x, p.half_saturation, p.shape) for x in xs]
        (line,) = ax.plot(xs, ys, label=channel.value, linewidth=1.5)
        if p.half_saturation <= max_spend:
            ax.plot([p.half_saturation], [0.5], "o", color=line.get_color())
    ax.axhline(0.5, color="gray", linestyle="--", alpha=0.5)
    ax.set_title("Channel Response Curves")
    ax.set_xlabel("Adstocked Spend ($)")
    ax.set_ylabel("Response")
    ax.set_ylim(0, 1)
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def plot_tick_history(history: pd.DataFrame) -> Figure:
    """Sales, spend, and per-channel contribution over ticks.

    Args:
        history: Frame from ``MarketSimulation.history_frame()``.

    Raises:
        ValueError: If ``history`` is empty.
    """
    if history.empty:
        raise ValueError("history frame has no rows to plot")

    ticks = history["tick"]
    fig = Figure(figsize=(14, 5))

    ax = fig.add_subplot(1, 2, 1)
    ax.plot(ticks, history["total_sales"], label="Total sales", linewidth=2)
    ax.plot(ticks, history["base_sales"], label="Base sales", linestyle="--")
    ax.bar(ticks, history["total_spend"], alpha=0.3, color="gray", label="Spend")
    ax.set_title("Sales and Spend per Tick")
    ax.set_xlabel("Tick")
    ax.set_ylabel("$")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = fig.add_subplot(1, 2, 2)
    columns = [f"contribution_{c.value}" for c in Channel if f"contribution_{c.value}" in history]
    bottom = [0.0] * len(history)
    for column in columns:
        values = history[column].tolist()
        if not any(values):
            continue
        ax.bar(ticks, values, bottom=bottom, label=column.removeprefix("contribution_"))
        bottom = [b + v for b, v in zip(bottom, values)]
    ax.set_title("Incremental Revenue by Channel")
    ax.set_xlabel("Tick")
    ax.set_ylabel("$")
    ax.legend()
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    return fig


def plot_quarterly_kpis(quarters: pd.DataFrame) -> Figure:
    """Budget spent and KPI deltas per quarter.

    Args:
        quarters: Frame from ``campaign.export.quarterly_frame()``.
    """
    fig = Figure(figsize=(12, 5))
    labels = list(quarters.index)

    ax = fig.add_subplot(1, 2, 1)
    ax.bar(labels, quarters["budget_spent"], alpha=0.6, label="Budget spent")
    ax.plot(labels, quarters["revenue"], "o-", color="forestgreen", label="Revenue")
    ax.set_title("Spend and Revenue per Quarter")
    ax.set_ylabel("$")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = fig.add_subplot(1, 2, 2)
    for column in ("market_share", "customer_satisfaction", "brand_awareness"):
        ax.plot(labels, quarters[column], "o-", label=column.replace("_", " "))
    ax.axhline(0, color="gray", linewidth=0.8)
    ax.set_title("KPI Change per Quarter")
    ax.set_ylabel("Points")
    ax.legend()
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    return fig
