"""In-memory fakes of the ports for application service tests."""

from collections.abc import Sequence

import pytest

from spot2lidarr.domain.entities import (
    AddArtistRequest,
    CandidateMatch,
    MetadataProfile,
    QualityProfile,
    RootFolder,
    SourceAlbum,
    SourceArtist,
    SystemStatus,
    TargetAlbum,
    TargetArtist,
)
from spot2lidarr.domain.ports import (
    ILidarrClient,
    IMusicBrainzClient,
    ISpotifyClient,
    PageProgress,
)


class FakeLidarr(ILidarrClient):
    """Lidarr stand-in that records every call in `events`."""

    def __init__(self) -> None:
        self.events: list[tuple] = []
        self.artists: dict[int, TargetArtist] = {}
        self.quality_profiles = [QualityProfile(id=1, name="Any")]
        self.metadata_profiles = [MetadataProfile(id=2, name="Standard")]
        self.root_folders = [RootFolder(id=3, path="/music")]
        # artist id -> list of album lists, one per get_albums_by_artist call
        self.album_responses: dict[int, list[list[TargetAlbum] | Exception]] = {}
        self.add_errors: dict[str, Exception] = {}
        self.get_artists_error: Exception | None = None
        self.connection_error: Exception | None = None
        self.set_artist_monitored_error: Exception | None = None
        self.add_returns_no_id = False
        self.added_requests: list[AddArtistRequest] = []
        self._next_id = 100

    def seed_artist(self, foreign_artist_id: str, name: str) -> None:
        artist_id = self._next_id
        self._next_id += 1
        self.artists[artist_id] = TargetArtist(
            id=artist_id, foreign_artist_id=foreign_artist_id, name=name, monitored=True
        )

    async def test_connection(self) -> SystemStatus:
        self.events.append(("test_connection",))
        if self.connection_error:
            raise self.connection_error
        return SystemStatus(version="2.5.0")

    async def get_quality_profiles(self) -> list[QualityProfile]:
        self.events.append(("get_quality_profiles",))
        return list(self.quality_profiles)

    async def get_metadata_profiles(self) -> list[MetadataProfile]:
        self.events.append(("get_metadata_profiles",))
        return list(self.metadata_profiles)

    async def get_root_folders(self) -> list[RootFolder]:
        self.events.append(("get_root_folders",))
        return list(self.root_folders)

    async def get_artists(self) -> list[TargetArtist]:
        self.events.append(("get_artists",))
        if self.get_artists_error:
            raise self.get_artists_error
        return list(self.artists.values())

    async def get_albums(self) -> list[TargetAlbum]:
        return []

    async def lookup_artist(self, term: str) -> list[TargetArtist]:
        return []

    async def add_artist(
        self, name: str, foreign_artist_id: str, request: AddArtistRequest
    ) -> TargetArtist:
        self.events.append(("add_artist", foreign_artist_id))
        self.added_requests.append(request)
        if foreign_artist_id in self.add_errors:
            raise self.add_errors[foreign_artist_id]
        artist_id = self._next_id
        self._next_id += 1
        # Lidarr leaves the artist unmonitored when added with monitor=none
        artist = TargetArtist(
            id=artist_id,
            foreign_artist_id=foreign_artist_id,
            name=name,
            monitored=request.add_options.monitor != "none",
        )
        self.artists[artist_id] = artist
        if self.add_returns_no_id:
            return TargetArtist(id=None, foreign_artist_id=foreign_artist_id, name=name)
        return artist

    async def get_albums_by_artist(self, artist_id: int) -> list[TargetAlbum]:
        self.events.append(("get_albums_by_artist", artist_id, self.artists[artist_id].monitored))
        responses = self.album_responses.get(artist_id, [])
        if not responses:
            return []
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def set_albums_monitored(
        self, album_ids: Sequence[int], monitored: bool = True
    ) -> None:
        self.events.append(("set_albums_monitored", list(album_ids), monitored))

    async def set_artist_monitored(self, artist_id: int, monitored: bool = True) -> None:
        self.events.append(("set_artist_monitored", artist_id, monitored))
        if self.set_artist_monitored_error:
            raise self.set_artist_monitored_error
        artist = self.artists[artist_id]
        self.artists[artist_id] = TargetArtist(
            id=artist.id,
            foreign_artist_id=artist.foreign_artist_id,
            name=artist.name,
            monitored=monitored,
        )

    def calls(self, name: str) -> list[tuple]:
        return [event for event in self.events if event[0] == name]


class FakeMusicBrainz(IMusicBrainzClient):
    """Returns canned search results per artist name."""

    def __init__(self) -> None:
        self.results: dict[str, list[CandidateMatch] | Exception] = {}
        self.searched: list[str] = []

    async def search_artist(self, name: str) -> list[CandidateMatch]:
        self.searched.append(name)
        result = self.results.get(name, [])
        if isinstance(result, Exception):
            raise result
        return result


class FakeSpotify(ISpotifyClient):
    """Serves a fixed library in pages of two."""

    def __init__(self, artists: list[SourceArtist], albums: list[SourceAlbum]) -> None:
        self.artists = artists
        self.albums = albums

    async def get_followed_artists(
        self, on_progress: PageProgress | None = None
    ) -> list[SourceArtist]:
        for loaded in range(2, len(self.artists) + 2, 2):
            if on_progress:
                on_progress(min(loaded, len(self.artists)), len(self.artists))
        return list(self.artists)

    async def get_saved_albums(
        self, on_progress: PageProgress | None = None
    ) -> list[SourceAlbum]:
        if on_progress:
            on_progress(len(self.albums), len(self.albums))
        return list(self.albums)


@pytest.fixture
def fake_lidarr() -> FakeLidarr:
    return FakeLidarr()


@pytest.fixture
def fake_musicbrainz() -> FakeMusicBrainz:
    return FakeMusicBrainz()


@pytest.fixture
def make_spotify() -> type[FakeSpotify]:
    return FakeSpotify
