"""Spotify Web API client for reading a user's library."""

import asyncio
import logging
from typing import Any, cast

import httpx

from spot2lidarr.config.settings import SpotifySettings
from spot2lidarr.domain.entities import SourceAlbum, SourceArtist
from spot2lidarr.domain.exceptions import ConfigurationError, SpotifyApiError
from spot2lidarr.domain.ports import ISpotifyClient, PageProgress
from spot2lidarr.infrastructure.rate_limiter import RateLimiter, get_spotify_limiter

logger = logging.getLogger(__name__)

PAGE_SIZE = 50  # Spotify's max for both library endpoints
MAX_RETRY_AFTER_SECONDS = 600.0


class SpotifyClient(ISpotifyClient):
    """HTTP client for the Spotify library endpoints.

    The OAuth dance happens elsewhere (browser PKCE flow), this client only needs a
    valid access token with user-follow-read and user-library-read scopes.
    """

    def __init__(
        self,
        settings: SpotifySettings,
        access_token: str | None = None,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Spotify client.

        Args:
            settings: Spotify configuration settings
            access_token: OAuth access token (falls back to settings.access_token)
            rate_limiter: Limiter for all requests (defaults to the shared Spotify limiter)
            transport: Optional custom httpx transport (tests)
        """
        self.settings = settings
        self._access_token = access_token or settings.access_token
        self._rate_limiter = rate_limiter or get_spotify_limiter()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if not self._access_token:
            raise ConfigurationError(
                "Spotify access token missing. Set SPOTIFY_ACCESS_TOKEN."
            )
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.api_base_url,
                headers={"Authorization": f"Bearer {self._access_token}"},
                timeout=self.settings.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "SpotifyClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # Hey future me - CENTRALIZED API REQUEST with Rate Limiting!
    # All Spotify calls go through here:
    # - every attempt waits for its burst slot in the Spotify limiter
    # - 429 -> sleep Retry-After (or 1s, 2s, 4s when the header is missing), then retry
    # - max_retries caps the 429 loop, after that it's a SpotifyApiError
    # - any other non-2xx is raised immediately with Spotify's error.message
    async def _api_request(
        self, method: str, endpoint: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Make rate-limited API request with automatic retry on 429.

        Args:
            method: HTTP method
            endpoint: Path below the API base URL (e.g. "/me/albums")
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            SpotifyApiError: On HTTP errors, exhausted 429 retries or network errors
        """
        client = await self._get_client()
        max_retries = self.settings.max_retries

        for attempt in range(max_retries + 1):
            try:
                response = await self._rate_limiter.execute(
                    lambda: client.request(method, endpoint, params=params)
                )
            except httpx.TransportError as e:
                raise SpotifyApiError(
                    method, endpoint, detail=f"Network error calling Spotify: {e}"
                ) from e

            if response.status_code == 429 and attempt < max_retries:
                wait_time = _retry_after_seconds(response, attempt)
                logger.warning(
                    f"Spotify 429 Rate Limit (attempt {attempt + 1}/{max_retries}): "
                    f"waiting {wait_time:.1f}s, retrying {endpoint}"
                )
                await asyncio.sleep(wait_time)
                continue

            if response.is_error:
                raise SpotifyApiError(
                    method,
                    endpoint,
                    detail=_error_detail(response),
                    status_code=response.status_code,
                )
            return cast(dict[str, Any], response.json())

        # Should not reach here, but just in case
        raise RuntimeError("Unexpected state in _api_request")

    async def get_current_user(self) -> dict[str, Any]:
        """Get the profile of the token's owner (id, display_name, ...)."""
        return await self._api_request("GET", "/me")

    # Hey future me, /me/following uses CURSOR pagination (not offset!). The "after"
    # parameter is the last artist id of the previous page. We stop when artists.next
    # is null. Requires the user-follow-read scope, 403 otherwise.
    async def get_followed_artists(
        self, on_progress: PageProgress | None = None
    ) -> list[SourceArtist]:
        """
        Get every artist the user follows.

        Args:
            on_progress: Called after each page with (loaded, total)

        Returns:
            Followed artists in Spotify's order
        """
        artists: list[SourceArtist] = []
        after: str | None = None

        while True:
            params: dict[str, Any] = {"type": "artist", "limit": PAGE_SIZE}
            if after:
                params["after"] = after
            data = await self._api_request("GET", "/me/following", params=params)
            page = data.get("artists") or {}

            artists.extend(
                SourceArtist.from_api(item) for item in page.get("items") or []
            )
            if on_progress is not None:
                on_progress(len(artists), int(page.get("total") or len(artists)))

            after = (page.get("cursors") or {}).get("after")
            if not page.get("next") or not after:
                break

        logger.info(f"Loaded {len(artists)} followed artists from Spotify")
        return artists

    # Yo, /me/albums is OFFSET paginated and wraps each album in {"added_at", "album"}.
    async def get_saved_albums(
        self, on_progress: PageProgress | None = None
    ) -> list[SourceAlbum]:
        """
        Get every album saved in the user's library.

        Args:
            on_progress: Called after each page with (loaded, total)

        Returns:
            Saved albums, most recently saved first
        """
        albums: list[SourceAlbum] = []
        offset = 0

        while True:
            data = await self._api_request(
                "GET", "/me/albums", params={"limit": PAGE_SIZE, "offset": offset}
            )
            items = data.get("items") or []
            albums.extend(
                SourceAlbum.from_api(item["album"]) for item in items if item.get("album")
            )
            offset += len(items)
            if on_progress is not None:
                on_progress(len(albums), int(data.get("total") or len(albums)))

            if not data.get("next") or not items:
                break

        logger.info(f"Loaded {len(albums)} saved albums from Spotify")
        return albums


def _retry_after_seconds(response: httpx.Response, attempt: int) -> float:
    raw = response.headers.get("Retry-After")
    try:
        wait_time = float(raw) if raw else float(2**attempt)
    except ValueError:
        wait_time = float(2**attempt)
    return min(wait_time, MAX_RETRY_AFTER_SECONDS)


def _error_detail(response: httpx.Response) -> str:
    # Spotify errors: {"error": {"status": 401, "message": "The access token expired"}}
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str):
        return error
    return response.text or response.reason_phrase
