"""Reward-winner selection wheel for the guild front-end."""

from guildwheel.controller import SpinController, SpinSession
from guildwheel.core.errors import SpinError, SpinErrorKind
from guildwheel.core.state import SpinState
from guildwheel.wheel.models import Candidate, CandidateSet, SpinCriteria, SpinResult

__version__ = "0.1.0"

__all__ = [
    "SpinController",
    "SpinSession",
    "SpinError",
    "SpinErrorKind",
    "SpinState",
    "Candidate",
    "CandidateSet",
    "SpinCriteria",
    "SpinResult",
]
