"""In-memory winner authority for the simulator and local development.

Mirrors the server's distribution list rules: winners are drawn from the
members not yet rewarded this cycle, each winner is marked completed, and the
cycle restarts once everyone has been rewarded.
"""

import asyncio
import logging
import random
from typing import Iterable, Optional

from guildwheel.core.errors import NoEligibleCandidates
from guildwheel.wheel.models import Candidate, CandidateSet, SpinCriteria, SpinResult

logger = logging.getLogger(__name__)


class InMemoryAuthority:
    """Local stand-in for the guild API."""

    def __init__(
        self,
        candidates: Iterable[Candidate],
        latency: float = 0.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Args:
            candidates: Full roster, in display order
            latency: Simulated network delay in seconds
            rng: Random source for the draw
        """
        self._roster = CandidateSet(candidates)
        self._completed: dict[str, set[str]] = {}
        self._latency = latency
        self._rng = rng or random.Random()

    def _remaining(self, quality: str) -> CandidateSet:
        done = self._completed.get(quality, set())
        return CandidateSet(c for c in self._roster if c.id not in done)

    async def list_eligible_candidates(self, criteria: SpinCriteria) -> CandidateSet:
        if self._latency:
            await asyncio.sleep(self._latency)
        return self._remaining(criteria.quality)

    async def pick_winner(self, criteria: SpinCriteria) -> SpinResult:
        if self._latency:
            await asyncio.sleep(self._latency)

        remaining = self._remaining(criteria.quality)
        if not remaining:
            raise NoEligibleCandidates(f"no eligible members available for {criteria.quality} links")

        winner = self._rng.choice(list(remaining))
        done = self._completed.setdefault(criteria.quality, set())
        done.add(winner.id)

        cycle_complete = len(done) >= len(self._roster)
        if cycle_complete:
            logger.info(f"{criteria.quality} list complete, starting a new cycle")
            done.clear()

        return SpinResult(
            winner_id=winner.id,
            winner=winner,
            payload={
                "quality": criteria.quality,
                "eligible_count": len(remaining) - 1,
                "cycle_complete": cycle_complete,
            },
        )
