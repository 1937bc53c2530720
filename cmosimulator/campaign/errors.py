"""Exceptions raised by the campaign layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmosimulator.campaign.results import TransitionFailure


class CampaignError(Exception):
    """Base class for campaign errors."""


class TransitionError(CampaignError):
    """A rejected transition, raised on request by ``raise_for_failure``.

    Attributes:
        failure: The rejected transition's reason and message.
    """

    def __init__(self, failure: TransitionFailure):
        super().__init__(f"{failure.reason.value}: {failure.message}")
        self.failure = failure

    @property
    def reason(self):
        return self.failure.reason
