"""Marketing channels and their response-curve parameters.

Every channel carries a single ``ChannelParams`` record holding its adstock
decay, Hill saturation parameters, and traffic efficiency. Keeping these in
one record keyed by the ``Channel`` enum guarantees every table covers the
same closed set of channels.

Industry profiles describe the market a campaign runs in: how large the
organic market is, what a converted customer is worth, and how strongly the
industry reacts to seasonality.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Channel(Enum):
    """Closed set of marketing channels a budget can be spent on."""

    TV = "tv"
    RADIO = "radio"
    PRINT = "print"
    DIGITAL = "digital"
    SOCIAL = "social"
    SEO = "seo"
    EVENTS = "events"
    PR = "pr"

    @classmethod
    def coerce(cls, value: Channel | str) -> Channel:
        """Accept either a Channel or its string value."""
        if isinstance(value, cls):
            return value
        return cls(value)


@dataclass(frozen=True)
class ChannelParams:
    """Response-curve parameters for a single channel.

    Attributes:
        decay_rate: Share of last period's adstock carried into this one,
            in [0, 1). High values (SEO) mean long memory.
        half_saturation: Adstocked spend at which the Hill response is 0.5.
        shape: Hill coefficient. Higher values give a sharper threshold.
        traffic_efficiency: Visitors generated per response-weighted dollar.
    """

    decay_rate: float
    half_saturation: float
    shape: float
    traffic_efficiency: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.decay_rate < 1.0:
            raise ValueError(f"decay_rate must be in [0, 1), got {self.decay_rate}")
        if self.half_saturation <= 0:
            raise ValueError(f"half_saturation must be > 0, got {self.half_saturation}")
        if self.shape <= 0:
            raise ValueError(f"shape must be > 0, got {self.shape}")


CHANNEL_PARAMS: Mapping[Channel, ChannelParams] = MappingProxyType({
    Channel.TV: ChannelParams(decay_rate=0.8, half_saturation=200_000, shape=2.0, traffic_efficiency=0.02),
    Channel.RADIO: ChannelParams(decay_rate=0.6, half_saturation=100_000, shape=1.5, traffic_efficiency=0.015),
    Channel.PRINT: ChannelParams(decay_rate=0.7, half_saturation=80_000, shape=2.5, traffic_efficiency=0.01),
    Channel.DIGITAL: ChannelParams(decay_rate=0.5, half_saturation=150_000, shape=1.8, traffic_efficiency=0.05),
    Channel.SOCIAL: ChannelParams(decay_rate=0.4, half_saturation=120_000, shape=1.6, traffic_efficiency=0.03),
    Channel.SEO: ChannelParams(decay_rate=0.9, half_saturation=100_000, shape=3.0, traffic_efficiency=0.08),
    Channel.EVENTS: ChannelParams(decay_rate=0.7, half_saturation=50_000, shape=2.0, traffic_efficiency=0.04),
    Channel.PR: ChannelParams(decay_rate=0.8, half_saturation=60_000, shape=2.2, traffic_efficiency=0.025),
})


def _matrix(rows: dict[str, dict[str, float]]) -> Mapping[Channel, Mapping[Channel, float]]:
    return MappingProxyType({
        Channel(src): MappingProxyType({Channel(dst): coef for dst, coef in row.items()})
        for src, row in rows.items()
    })


# Directed coefficients: SYNERGY_MATRIX[a][b] scales a's response while b is active.
SYNERGY_MATRIX: Mapping[Channel, Mapping[Channel, float]] = _matrix({
    "tv": {"tv": 1.0, "radio": 1.1, "print": 1.05, "digital": 1.2, "social": 1.15, "seo": 1.1, "events": 1.05, "pr": 1.2},
    "radio": {"tv": 1.1, "radio": 1.0, "print": 1.1, "digital": 1.05, "social": 1.1, "seo": 1.05, "events": 1.05, "pr": 1.1},
    "print": {"tv": 1.05, "radio": 1.1, "print": 1.0, "digital": 1.05, "social": 1.05, "seo": 1.05, "events": 1.05, "pr": 1.1},
    "digital": {"tv": 1.2, "radio": 1.05, "print": 1.05, "digital": 1.0, "social": 1.1, "seo": 1.2, "events": 1.1, "pr": 1.15},
    "social": {"tv": 1.15, "radio": 1.1, "print": 1.05, "digital": 1.1, "social": 1.0, "seo": 1.1, "events": 1.2, "pr": 1.1},
    "seo": {"tv": 1.1, "radio": 1.05, "print": 1.05, "digital": 1.2, "social": 1.1, "seo": 1.0, "events": 1.05, "pr": 1.1},
    "events": {"tv": 1.05, "radio": 1.05, "print": 1.05, "digital": 1.1, "social": 1.2, "seo": 1.05, "events": 1.0, "pr": 1.15},
    "pr": {"tv": 1.2, "radio": 1.1, "print": 1.1, "digital": 1.15, "social": 1.1, "seo": 1.1, "events": 1.15, "pr": 1.0},
})


@dataclass(frozen=True)
class IndustryProfile:
    """Market characteristics of an industry.

    Attributes:
        name: Industry identifier (e.g. "healthcare").
        base_market_size: Annual organic market size in dollars.
        avg_customer_value: Revenue per converted customer.
        base_traffic_multiplier: Relative traffic propensity of the audience.
        seasonality_factor: Industry sensitivity to the seasonality index.
    """

    name: str
    base_market_size: float
    avg_customer_value: float
    base_traffic_multiplier: float
    seasonality_factor: float


def _industries(*profiles: IndustryProfile) -> Mapping[str, IndustryProfile]:
    return MappingProxyType({p.name: p for p in profiles})


INDUSTRY_PROFILES: Mapping[str, IndustryProfile] = _industries(
    IndustryProfile("healthcare", 5_000_000, 5_000, 1.2, 0.9),
    IndustryProfile("legal", 3_000_000, 8_000, 1.0, 1.0),
    IndustryProfile("ecommerce", 10_000_000, 150, 0.8, 1.3),
    IndustryProfile("saas", 8_000_000, 2_500, 1.1, 0.95),
    IndustryProfile("fintech", 6_000_000, 1_200, 1.0, 1.0),
    IndustryProfile("education", 4_000_000, 800, 1.3, 1.4),
    IndustryProfile("real-estate", 7_000_000, 15_000, 0.9, 1.2),
    IndustryProfile("food-delivery", 12_000_000, 35, 0.7, 1.0),
    IndustryProfile("fitness", 8_000_000, 200, 1.1, 1.1),
    IndustryProfile("automotive", 9_000_000, 25_000, 0.8, 0.9),
    IndustryProfile("travel", 6_000_000, 300, 0.9, 2.0),
    IndustryProfile("gaming", 15_000_000, 60, 0.6, 1.2),
    IndustryProfile("fashion", 11_000_000, 120, 0.8, 1.5),
    IndustryProfile("construction", 5_000_000, 50_000, 0.7, 0.8),
    IndustryProfile("energy", 3_000_000, 8_000, 1.1, 0.9),
    IndustryProfile("agritech", 2_000_000, 10_000, 1.2, 1.3),
    IndustryProfile("manufacturing", 4_000_000, 75_000, 0.8, 0.85),
    IndustryProfile("nonprofit", 1_000_000, 250, 1.4, 1.0),
    IndustryProfile("music", 8_000_000, 15, 0.5, 1.1),
    IndustryProfile("sports", 9_000_000, 80, 0.9, 1.8),
    IndustryProfile("pet-care", 6_000_000, 180, 1.0, 0.9),
    IndustryProfile("home-services", 8_000_000, 150, 0.9, 0.95),
    IndustryProfile("cannabis", 3_000_000, 90, 0.8, 1.0),
    IndustryProfile("space", 500_000, 500_000, 1.5, 0.8),
)

DEFAULT_INDUSTRY = "healthcare"


def get_industry(industry: IndustryProfile | str) -> IndustryProfile:
    """Resolve an industry name to its profile.

    Raises:
        ValueError: If the name is not a known industry.
    """
    if isinstance(industry, IndustryProfile):
        return industry
    try:
        return INDUSTRY_PROFILES[industry]
    except KeyError:
        raise ValueError(
            f"Unknown industry {industry!r}; expected one of {sorted(INDUSTRY_PROFILES)}"
        ) from None


def zero_vector() -> dict[Channel, float]:
    """A per-channel mapping with every channel at 0.0."""
    return {channel: 0.0 for channel in Channel}
