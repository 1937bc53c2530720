"""Cross-channel synergy.

A channel's response is scaled by the product of its directed coefficients
with every *other* active channel. Coefficients above 1 reinforce (PR
amplifying TV), below 1 cannibalize. A channel never multiplies with itself.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from cmosimulator.engine.channels import SYNERGY_MATRIX, Channel

SynergyMatrix = Mapping[Channel, Mapping[Channel, float]]


def synergy_multiplier(
    channel: Channel,
    active_channels: Iterable[Channel],
    matrix: SynergyMatrix = SYNERGY_MATRIX,
) -> float:
    """Multiplier for ``channel`` given the channels active this tick.

    Returns exactly 1.0 when no other channel is active.
    """
    multiplier = 1.0
    for other in active_channels:
        if other is not channel:
            multiplier *= matrix[channel][other]
    return multiplier


def apply_synergy(
    responses: Mapping[Channel, float],
    active_channels: Iterable[Channel],
    matrix: SynergyMatrix = SYNERGY_MATRIX,
) -> dict[Channel, float]:
    """Scale each response by its synergy multiplier."""
    active = tuple(active_channels)
    return {
        channel: response * synergy_multiplier(channel, active, matrix)
        for channel, response in responses.items()
    }
