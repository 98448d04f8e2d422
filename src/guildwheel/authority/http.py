"""HTTP client for the guild distribution API.

Talks to the guild backend's distribution endpoints:

    GET  {api_base}/distribution/eligible?quality=silver
    POST {api_base}/distribution/pick-winner?list_id=...

Every reply is wrapped in a {"success": bool, "data": ..., "error": str}
envelope. Members come back as dicts with at least "discord_id" and
"username"; the whole dict is kept as candidate metadata.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from guildwheel.core.errors import (
    AuthorityRejected,
    AuthorityUnreachable,
    NoEligibleCandidates,
)
from guildwheel.wheel.models import Candidate, CandidateSet, SpinCriteria, SpinResult

logger = logging.getLogger(__name__)


def member_to_candidate(member: dict[str, Any]) -> Candidate:
    """Map an API member record to a wheel candidate."""
    try:
        member_id = str(member["discord_id"])
    except (KeyError, TypeError) as e:
        raise AuthorityRejected(f"Member record without discord_id: {member!r}") from e
    label = member.get("username") or member.get("discord_username") or member_id
    return Candidate(id=member_id, label=str(label), metadata=dict(member))


class GuildApiAuthority:
    """Winner authority backed by the guild HTTP API.

    Usable as an async context manager; otherwise call close() when done.
    """

    DEFAULT_API_BASE = "http://localhost:8080/api"

    def __init__(
        self,
        api_base: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the client.

        Args:
            api_base: Base URL of the API (up to and including "/api")
            api_key: Bearer token, if the deployment requires one
            timeout: Total request timeout in seconds
            session: Existing aiohttp session to reuse (not closed by us)
        """
        self._api_base = (api_base or self.DEFAULT_API_BASE).rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "GuildApiAuthority":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            headers = {"Accept": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers=headers,
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if we created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(self, method: str, path: str, params: dict[str, str]) -> Any:
        """Perform a request and unwrap the response envelope.

        Returns:
            The envelope's "data" field

        Raises:
            AuthorityUnreachable: Network failure or timeout
            NoEligibleCandidates: The server reports nobody eligible
            AuthorityRejected: Any other unsuccessful or malformed reply
        """
        url = f"{self._api_base}{path}"
        try:
            session = await self._get_session()
            async with session.request(method, url, params=params) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError as e:
                    raise AuthorityRejected(
                        f"{method} {path}: invalid JSON (HTTP {response.status})"
                    ) from e
                status = response.status
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout calling {method} {path}")
            raise AuthorityUnreachable(f"{method} {path}: timeout") from e
        except aiohttp.ClientError as e:
            logger.error(f"Network error calling {method} {path}: {e}")
            raise AuthorityUnreachable(f"{method} {path}: {e}") from e

        if not isinstance(body, dict):
            raise AuthorityRejected(f"{method} {path}: unexpected body {body!r}")

        if status == 200 and body.get("success"):
            return body.get("data")

        error = str(body.get("error") or f"HTTP {status}")
        logger.warning(f"{method} {path} failed: {error}")
        if "no eligible" in error.lower():
            raise NoEligibleCandidates(error)
        raise AuthorityRejected(error)

    async def list_eligible_candidates(self, criteria: SpinCriteria) -> CandidateSet:
        """Fetch members eligible for the criteria's link quality."""
        data = await self._request(
            "GET", "/distribution/eligible", {"quality": criteria.quality}
        )
        if data is None:
            # The API serialises an empty Go slice as null
            return CandidateSet()
        if not isinstance(data, list):
            raise AuthorityRejected(f"Eligible members is not a list: {data!r}")

        try:
            candidates = CandidateSet(member_to_candidate(m) for m in data)
        except ValueError as e:
            raise AuthorityRejected(str(e)) from e

        logger.info(f"Fetched {len(candidates)} eligible candidates ({criteria.quality})")
        return candidates

    async def pick_winner(self, criteria: SpinCriteria) -> SpinResult:
        """Ask the server to draw a winner. Called at most once per spin."""
        params = {"quality": criteria.quality}
        params["list_id"] = criteria.list_id or criteria.quality
        data = await self._request("POST", "/distribution/pick-winner", params)

        if not isinstance(data, dict) or not isinstance(data.get("winner"), dict):
            raise AuthorityRejected(f"Winner missing from response: {data!r}")

        winner = member_to_candidate(data["winner"])
        payload = {k: v for k, v in data.items() if k != "winner"}
        logger.info(f"Authority picked winner {winner.label} ({winner.id})")
        return SpinResult(winner_id=winner.id, winner=winner, payload=payload)
