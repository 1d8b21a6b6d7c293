"""MusicBrainz HTTP client implementation with rate limiting."""

import logging
from typing import Any

import httpx

from spot2lidarr.config.settings import MusicBrainzSettings
from spot2lidarr.domain.entities import CandidateMatch
from spot2lidarr.domain.exceptions import MusicBrainzApiError
from spot2lidarr.domain.ports import IMusicBrainzClient
from spot2lidarr.infrastructure.rate_limiter import RateLimiter, get_musicbrainz_limiter

logger = logging.getLogger(__name__)


def build_artist_query(name: str) -> str:
    """Build a Lucene phrase query for an artist name.

    Backslashes and double quotes are escaped so names like 'The "Band"' stay
    inside the phrase.
    """
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'artist:"{escaped}"'


class MusicBrainzClient(IMusicBrainzClient):
    """HTTP client for MusicBrainz artist search with rate limiting."""

    # Hey future me, MusicBrainz is STRICT about rate limiting - 1 req/sec, NO EXCEPTIONS!
    # The shared limiter takes care of that across every client instance in the process.
    # There's deliberately NO retry here: a failed search becomes a failed item in the
    # migration, and hammering MB with retries is exactly what gets clients banned.
    def __init__(
        self,
        settings: MusicBrainzSettings,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize MusicBrainz client.

        Args:
            settings: MusicBrainz configuration settings
            rate_limiter: Limiter for all requests (defaults to the shared MB limiter)
            transport: Optional custom httpx transport (tests)
        """
        self.settings = settings
        self._rate_limiter = rate_limiter or get_musicbrainz_limiter()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    # Listen future me, MusicBrainz REQUIRES a User-Agent with your app name, version, AND
    # contact info. Without it requests get rejected with 403. The format matters:
    # "AppName/Version ( contact )" with those exact spaces and parens.
    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.base_url,
                headers={
                    "User-Agent": self.settings.user_agent,
                    "Accept": "application/json",
                },
                timeout=self.settings.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "MusicBrainzClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def search_artist(self, name: str) -> list[CandidateMatch]:
        """
        Search for artists by name.

        Args:
            name: Artist name as shown in the source catalog

        Returns:
            Artist matches, ordered by MusicBrainz relevance score (best first)

        Raises:
            MusicBrainzApiError: On HTTP errors (with status) or network errors (status None)
        """
        endpoint = "/artist"
        client = await self._get_client()
        params = {
            "query": build_artist_query(name),
            "fmt": "json",
            "limit": self.settings.search_limit,
        }

        try:
            response = await self._rate_limiter.execute(
                lambda: client.get(endpoint, params=params)
            )
        except httpx.TransportError as e:
            raise MusicBrainzApiError(
                "GET", endpoint, detail=f"Network error calling MusicBrainz: {e}"
            ) from e

        if response.is_error:
            raise MusicBrainzApiError(
                "GET",
                endpoint,
                detail=_error_detail(response),
                status_code=response.status_code,
            )

        data = response.json()
        candidates = [CandidateMatch.from_api(item) for item in data.get("artists", [])]
        logger.debug(f"MusicBrainz search '{name}': {len(candidates)} result(s)")
        return candidates


def _error_detail(response: httpx.Response) -> str:
    # MB error bodies look like {"error": "...", "help": "..."}
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return response.text or response.reason_phrase
