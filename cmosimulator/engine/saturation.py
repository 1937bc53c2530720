"""Hill saturation transform for diminishing returns.

    response = x**n / (S**n + x**n)

``S`` is the half-saturation point: the response is exactly 0.5 there.
The response rises monotonically toward 1 and never reaches it.
"""

from __future__ import annotations

from typing import Mapping

from cmosimulator.engine.channels import CHANNEL_PARAMS, Channel, ChannelParams


def hill_transform(adstocked_spend: float, half_saturation: float, shape: float) -> float:
    """Map adstocked spend to an effectiveness score in [0, 1).

    Args:
        adstocked_spend: Spend after adstock (x).
        half_saturation: Spend at which the response is 0.5 (S).
        shape: Hill coefficient (n). Larger values make the curve switch on
            more sharply around S.
    """
    if adstocked_spend == half_saturation:
        return 0.5
    numerator = adstocked_spend**shape
    return numerator / (half_saturation**shape + numerator)


def hill_transform_all(
    adstocked: Mapping[Channel, float],
    params: Mapping[Channel, ChannelParams] = CHANNEL_PARAMS,
) -> dict[Channel, float]:
    """Apply ``hill_transform`` to every channel in ``adstocked``."""
    return {
        channel: hill_transform(value, params[channel].half_saturation, params[channel].shape)
        for channel, value in adstocked.items()
    }
