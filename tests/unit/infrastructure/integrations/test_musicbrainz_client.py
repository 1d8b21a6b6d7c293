"""Tests for MusicBrainz client implementation."""

import httpx
import pytest

from spot2lidarr.config.settings import MusicBrainzSettings
from spot2lidarr.domain.exceptions import MusicBrainzApiError
from spot2lidarr.infrastructure.integrations.musicbrainz_client import (
    MusicBrainzClient,
    build_artist_query,
)
from spot2lidarr.infrastructure.rate_limiter import RateLimiter, RateLimiterConfig


@pytest.fixture
def musicbrainz_settings() -> MusicBrainzSettings:
    """Create MusicBrainz settings for testing."""
    return MusicBrainzSettings(
        app_name="TestApp",
        app_version="1.0.0",
        contact="test@example.com",
        search_limit=5,
    )


def _client(settings: MusicBrainzSettings, handler) -> MusicBrainzClient:
    return MusicBrainzClient(
        settings,
        rate_limiter=RateLimiter(config=RateLimiterConfig(requests_per_second=1000.0)),
        transport=httpx.MockTransport(handler),
    )


class TestBuildArtistQuery:
    """Test Lucene query construction."""

    def test_phrase_query(self) -> None:
        assert build_artist_query("The Beatles") == 'artist:"The Beatles"'

    def test_quotes_are_escaped(self) -> None:
        assert build_artist_query('The "Band"') == 'artist:"The \\"Band\\""'


class TestMusicBrainzClientSearch:
    """Test artist search."""

    async def test_search_artist(self, musicbrainz_settings: MusicBrainzSettings) -> None:
        """Test params, User-Agent and candidate mapping."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "artists": [
                        {
                            "id": "b10bbbfc-cf9e-42e0-be17-e2c3e1d2600d",
                            "name": "The Beatles",
                            "score": 100,
                            "type": "Group",
                            "country": "GB",
                        },
                        {"id": "other", "name": "Beatles Revival", "score": 62},
                    ]
                },
            )

        async with _client(musicbrainz_settings, handler) as client:
            candidates = await client.search_artist("The Beatles")

        assert [c.name for c in candidates] == ["The Beatles", "Beatles Revival"]
        assert candidates[0].score == 100.0
        assert candidates[0].country == "GB"

        request = seen[0]
        assert request.url.path == "/ws/2/artist"
        assert request.url.params["query"] == 'artist:"The Beatles"'
        assert request.url.params["fmt"] == "json"
        assert request.url.params["limit"] == "5"
        assert request.headers["User-Agent"] == "TestApp/1.0.0 ( test@example.com )"

    async def test_empty_result(self, musicbrainz_settings: MusicBrainzSettings) -> None:
        """Test a search without hits returns an empty list."""
        client = _client(
            musicbrainz_settings, lambda request: httpx.Response(200, json={"artists": []})
        )
        assert await client.search_artist("Nobody") == []
        await client.close()

    async def test_http_error_is_not_retried(
        self, musicbrainz_settings: MusicBrainzSettings
    ) -> None:
        """Test 503 surfaces immediately as MusicBrainzApiError."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(503, json={"error": "Rate limit exceeded"})

        client = _client(musicbrainz_settings, handler)

        with pytest.raises(MusicBrainzApiError) as exc_info:
            await client.search_artist("The Beatles")

        assert exc_info.value.status_code == 503
        assert exc_info.value.detail == "Rate limit exceeded"
        assert calls == 1

    async def test_network_error(self, musicbrainz_settings: MusicBrainzSettings) -> None:
        """Test transport failures surface with no status."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        client = _client(musicbrainz_settings, handler)

        with pytest.raises(MusicBrainzApiError) as exc_info:
            await client.search_artist("The Beatles")

        assert exc_info.value.is_network_error
