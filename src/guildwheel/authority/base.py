"""Interface of the external winner authority."""

from typing import Protocol, runtime_checkable

from guildwheel.wheel.models import CandidateSet, SpinCriteria, SpinResult


@runtime_checkable
class WinnerAuthority(Protocol):
    """Server-side source of truth for eligibility and winners.

    pick_winner() is not idempotent: each call may consume server-side
    eligibility (e.g. remove the winner from future pools), so callers must
    make at most one call per spin. Failures are raised as SpinError
    subclasses from guildwheel.core.errors.
    """

    async def list_eligible_candidates(self, criteria: SpinCriteria) -> CandidateSet:
        """Read-only query of who may currently win."""
        ...

    async def pick_winner(self, criteria: SpinCriteria) -> SpinResult:
        """Make the single authoritative random selection."""
        ...
