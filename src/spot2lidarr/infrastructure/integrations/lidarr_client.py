"""Lidarr REST API v1 client with rate limiting and retries."""

import json
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from spot2lidarr.config.settings import LidarrSettings
from spot2lidarr.domain.entities import (
    AddArtistRequest,
    MetadataProfile,
    QualityProfile,
    RootFolder,
    SystemStatus,
    TargetAlbum,
    TargetArtist,
)
from spot2lidarr.domain.exceptions import ConfigurationError, LidarrApiError
from spot2lidarr.domain.ports import ILidarrClient
from spot2lidarr.infrastructure.rate_limiter import RateLimiter, get_lidarr_limiter
from spot2lidarr.infrastructure.retry import RetryPolicy, execute_with_retry

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Lidarr not configured. Please enter URL and API key."


def extract_error_detail(response: httpx.Response) -> str:
    """Pull a human-readable detail out of a Lidarr error response.

    Hey future me - Lidarr answers errors in (at least) three shapes:
    - {"message": "..."} for general failures
    - a bare JSON string
    - a list of FluentValidation field errors:
      [{"propertyName": "Path", "errorMessage": "...", "errorCode": "..."}]
    Anything else gets JSON-dumped, and non-JSON bodies are returned as-is.

    Args:
        response: Non-2xx response from Lidarr

    Returns:
        Detail text for LidarrApiError
    """
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    if isinstance(payload, str):
        return payload
    if isinstance(payload, list):
        parts = [
            str(item.get("errorMessage") or item.get("propertyName") or "")
            for item in payload
            if isinstance(item, dict)
        ]
        joined = ", ".join(part for part in parts if part)
        if joined:
            return joined
    return json.dumps(payload)


def extract_error_codes(response: httpx.Response) -> list[str]:
    """Collect the structured errorCode values of a validation error list."""
    try:
        payload = response.json()
    except ValueError:
        return []
    if not isinstance(payload, list):
        return []
    return [
        str(item["errorCode"])
        for item in payload
        if isinstance(item, dict) and item.get("errorCode")
    ]


class LidarrClient(ILidarrClient):
    """HTTP client for Lidarr API operations."""

    API_PREFIX = "/api/v1"

    # Hey future me, same lazy-client trick as the other integrations - we DON'T create
    # the httpx client here, only on first request. transport is only there so tests can
    # plug in httpx.MockTransport. rate_limiter defaults to the process-wide Lidarr limiter.
    def __init__(
        self,
        settings: LidarrSettings,
        rate_limiter: RateLimiter | None = None,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Lidarr client.

        Args:
            settings: Lidarr connection settings
            rate_limiter: Limiter every attempt passes through
            retry_policy: Retry policy for network errors and 5xx
            transport: Optional custom httpx transport (tests)
        """
        self.settings = settings
        self._rate_limiter = rate_limiter or get_lidarr_limiter()
        self._retry_policy = retry_policy or RetryPolicy(
            max_retries=settings.max_retries,
            base_delay=settings.retry_base_delay,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if not self.settings.is_configured:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.settings.url}{self.API_PREFIX}",
                headers={
                    "X-Api-Key": self.settings.api_key,
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

    async def __aenter__(self) -> "LidarrClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # Yo future me, this is THE request path for everything Lidarr. Order matters:
    #   retry( limiter( http call ) )
    # Each ATTEMPT queues in the limiter again, but the backoff sleep between attempts
    # happens OUTSIDE the limiter so a retrying call doesn't block everyone else's burst.
    # 4xx -> LidarrApiError right away. 5xx / transport errors -> retried, then raised.
    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any:
        """
        Make a rate-limited, retried request to the Lidarr API.

        Args:
            method: HTTP method
            endpoint: Path below /api/v1 (e.g. "/artist")
            params: Query parameters
            json_body: JSON request body

        Returns:
            Decoded JSON body, None for empty responses

        Raises:
            ConfigurationError: If URL or API key is missing
            LidarrApiError: On HTTP errors or exhausted retries
        """
        client = await self._get_client()

        async def attempt() -> httpx.Response:
            response = await self._rate_limiter.execute(
                lambda: client.request(method, endpoint, params=params, json=json_body)
            )
            if response.is_error:
                raise LidarrApiError(
                    method,
                    endpoint,
                    detail=extract_error_detail(response),
                    status_code=response.status_code,
                    error_codes=extract_error_codes(response),
                )
            return response

        try:
            response = await execute_with_retry(
                attempt, self._retry_policy, description=f"{method} {endpoint}"
            )
        except httpx.TransportError as e:
            url = f"{self.settings.url}{self.API_PREFIX}{endpoint}"
            raise LidarrApiError(
                method, endpoint, detail=f"Network error calling {url}: {e}"
            ) from e

        if not response.content:
            return None
        return response.json()

    async def test_connection(self) -> SystemStatus:
        """
        Check connectivity and credentials.

        Returns:
            Lidarr version info

        Raises:
            LidarrApiError: 401 for a wrong API key, status None if unreachable
        """
        data = await self._request("GET", "/system/status")
        status = SystemStatus.from_api(data or {})
        logger.info(f"Connected to {status.app_name} {status.version}")
        return status

    async def get_quality_profiles(self) -> list[QualityProfile]:
        data = await self._request("GET", "/qualityprofile")
        return [QualityProfile.from_api(item) for item in data or []]

    async def get_metadata_profiles(self) -> list[MetadataProfile]:
        data = await self._request("GET", "/metadataprofile")
        return [MetadataProfile.from_api(item) for item in data or []]

    async def get_root_folders(self) -> list[RootFolder]:
        data = await self._request("GET", "/rootfolder")
        return [RootFolder.from_api(item) for item in data or []]

    async def get_artists(self) -> list[TargetArtist]:
        """List every artist in the Lidarr library."""
        data = await self._request("GET", "/artist")
        return [TargetArtist.from_api(item) for item in data or []]

    async def get_albums(self) -> list[TargetAlbum]:
        """List every album in the Lidarr library."""
        data = await self._request("GET", "/album")
        return [TargetAlbum.from_api(item) for item in data or []]

    # Hey future me, this is Lidarr's own search, proxied to its MusicBrainz mirror
    # (api.lidarr.audio). The migration pipeline queries MusicBrainz directly instead,
    # this stays for manual lookups and diagnostics.
    async def lookup_artist(self, term: str) -> list[TargetArtist]:
        """
        Search artists by name through Lidarr.

        Args:
            term: Free-text artist name

        Returns:
            Lookup results (id is None for artists not yet in the library)
        """
        data = await self._request("GET", "/artist/lookup", params={"term": term})
        return [TargetArtist.from_api(item) for item in data or []]

    async def add_artist(
        self, name: str, foreign_artist_id: str, request: AddArtistRequest
    ) -> TargetArtist:
        """
        Add an artist to Lidarr.

        Args:
            name: Canonical artist name
            foreign_artist_id: MusicBrainz artist id
            request: Profiles, root folder and add options

        Returns:
            The created artist with its Lidarr id

        Raises:
            LidarrApiError: e.g. 400 when the artist or its folder already exists
        """
        body = {
            "artistName": name,
            "foreignArtistId": foreign_artist_id,
            "qualityProfileId": request.quality_profile_id,
            "metadataProfileId": request.metadata_profile_id,
            "rootFolderPath": request.root_folder_path,
            "monitored": request.monitored,
            "addOptions": request.add_options.to_api(),
            "tags": [],
        }
        data = await self._request("POST", "/artist", json_body=body)
        return TargetArtist.from_api(data or {})

    async def get_albums_by_artist(self, artist_id: int) -> list[TargetAlbum]:
        """List the albums Lidarr has materialized for one artist so far."""
        data = await self._request("GET", "/album", params={"artistId": artist_id})
        return [TargetAlbum.from_api(item) for item in data or []]

    async def set_albums_monitored(
        self, album_ids: Sequence[int], monitored: bool = True
    ) -> None:
        """
        Bulk-update the monitored flag of albums.

        Args:
            album_ids: Lidarr album ids (no request is made when empty)
            monitored: New monitored state
        """
        if not album_ids:
            return
        await self._request(
            "PUT",
            "/album/monitor",
            json_body={"albumIds": list(album_ids), "monitored": monitored},
        )

    # Listen future me, adding with addOptions.monitor="none" leaves the ARTIST itself
    # unmonitored in Lidarr. The editor endpoint is how we flip it back afterwards.
    async def set_artist_monitored(self, artist_id: int, monitored: bool = True) -> None:
        """Set the monitored flag of one artist."""
        await self._request(
            "PUT",
            "/artist/editor",
            json_body={"artistIds": [artist_id], "monitored": monitored},
        )
