"""Outcome of a single transition attempt.

Every call to ``transition`` returns a TransitionResult. Rejections carry
the unchanged snapshot plus a reason, so callers can tell a guard that
did not hold from an unknown id or an event the phase does not handle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from cmosimulator.campaign.errors import TransitionError

if TYPE_CHECKING:
    from cmosimulator.campaign.events import CampaignEvent
    from cmosimulator.campaign.machine import CampaignSnapshot


class FailureReason(Enum):
    GUARD_NOT_SATISFIED = "guard_not_satisfied"
    NOT_FOUND = "not_found"
    EVENT_NOT_ACCEPTED = "event_not_accepted"


@dataclass(frozen=True)
class TransitionFailure:
    """Why an event was rejected."""

    reason: FailureReason
    message: str


@dataclass(frozen=True)
class TransitionResult:
    """New snapshot on success, unchanged snapshot plus failure otherwise.

    Attributes:
        snapshot: Snapshot after the attempt.
        event: The event that was sent.
        failure: Populated only when the event was rejected.
    """

    snapshot: CampaignSnapshot
    event: CampaignEvent
    failure: TransitionFailure | None = None

    @property
    def accepted(self) -> bool:
        return self.failure is None

    @property
    def reason(self) -> FailureReason | None:
        return self.failure.reason if self.failure else None

    def raise_for_failure(self) -> TransitionResult:
        """Raise TransitionError if rejected; otherwise return self.

        Raises:
            TransitionError: If the event was rejected.
        """
        if self.failure is not None:
            raise TransitionError(self.failure)
        return self
