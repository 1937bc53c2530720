"""Geometric adstock: carried-over memory of advertising spend.

    adstock_t = spend_t + decay * adstock_{t-1}

Channels are independent at this stage. Inputs are assumed non-negative;
the functions do not validate them.
"""

from __future__ import annotations

from typing import Mapping

from cmosimulator.engine.channels import CHANNEL_PARAMS, Channel, ChannelParams


def adstock(spend: float, previous_adstock: float, decay_rate: float) -> float:
    """Return this period's adstock for one channel.

    Args:
        spend: Spend in the current period.
        previous_adstock: Adstock carried from the previous period.
        decay_rate: Share of previous adstock retained, in [0, 1).
    """
    return spend + decay_rate * previous_adstock


def adstock_all(
    spends: Mapping[Channel, float],
    previous: Mapping[Channel, float],
    params: Mapping[Channel, ChannelParams] = CHANNEL_PARAMS,
) -> dict[Channel, float]:
    """Apply ``adstock`` to every channel.

    Channels missing from ``spends`` or ``previous`` are treated as zero, so
    the result always covers the full channel set.
    """
    return {
        channel: adstock(
            spends.get(channel, 0.0),
            previous.get(channel, 0.0),
            params[channel].decay_rate,
        )
        for channel in Channel
    }
