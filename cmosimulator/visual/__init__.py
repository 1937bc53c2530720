"""Charts for engine runs and campaigns."""

from cmosimulator.visual.plots import plot_quarterly_kpis, plot_response_curves, plot_tick_history

__all__ = [
    "plot_response_curves",
    "plot_tick_history",
    "plot_quarterly_kpis",
]
