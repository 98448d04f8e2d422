"""Error kinds and exceptions for spin failures."""

from enum import Enum
from typing import Optional


class SpinErrorKind(Enum):
    """Why a spin did not resolve.

    Each kind carries the single notification text shown to the user.
    """

    NO_ELIGIBLE_CANDIDATES = "No eligible candidates to spin for"
    AUTHORITY_UNREACHABLE = "Could not reach the server to pick a winner"
    AUTHORITY_REJECTED = "The server rejected the spin request"
    SESSION_SUPERSEDED = "Spin was superseded"

    @property
    def message(self) -> str:
        return self.value

    @property
    def user_visible(self) -> bool:
        # Stale responses after cancel/teardown are dropped silently
        return self is not SpinErrorKind.SESSION_SUPERSEDED


class SpinError(Exception):
    """Base error for spin failures.

    Attributes:
        kind: Error category
        detail: Technical detail for logs (never shown to the user)
    """

    kind: SpinErrorKind = SpinErrorKind.AUTHORITY_REJECTED

    def __init__(self, detail: str = "", kind: Optional[SpinErrorKind] = None) -> None:
        if kind is not None:
            self.kind = kind
        self.detail = detail
        super().__init__(detail or self.kind.message)

    @property
    def message(self) -> str:
        """Human-readable notification text."""
        return self.kind.message


class NoEligibleCandidates(SpinError):
    """Nobody is eligible for the requested criteria."""

    kind = SpinErrorKind.NO_ELIGIBLE_CANDIDATES


class AuthorityUnreachable(SpinError):
    """The winner authority could not be contacted."""

    kind = SpinErrorKind.AUTHORITY_UNREACHABLE


class AuthorityRejected(SpinError):
    """The authority refused the request or replied with something unusable."""

    kind = SpinErrorKind.AUTHORITY_REJECTED
