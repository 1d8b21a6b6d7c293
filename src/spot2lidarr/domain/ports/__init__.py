"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

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

PageProgress = Callable[[int, int], None]


# Hey future me, ILidarrClient is a PORT! Services depend on this ABC, not on the httpx
# implementation, so the migration pipeline tests run against an in-memory fake. If you
# change this interface, the real client AND the test fakes must change too!
class ILidarrClient(ABC):
    """Port for the Lidarr REST API."""

    @abstractmethod
    async def test_connection(self) -> SystemStatus:
        """Check connectivity and credentials."""
        pass

    @abstractmethod
    async def get_quality_profiles(self) -> list[QualityProfile]:
        pass

    @abstractmethod
    async def get_metadata_profiles(self) -> list[MetadataProfile]:
        pass

    @abstractmethod
    async def get_root_folders(self) -> list[RootFolder]:
        pass

    @abstractmethod
    async def get_artists(self) -> list[TargetArtist]:
        """List every artist already in the library."""
        pass

    @abstractmethod
    async def get_albums(self) -> list[TargetAlbum]:
        pass

    @abstractmethod
    async def lookup_artist(self, term: str) -> list[TargetArtist]:
        """Name lookup through Lidarr's own MusicBrainz proxy."""
        pass

    @abstractmethod
    async def add_artist(
        self, name: str, foreign_artist_id: str, request: AddArtistRequest
    ) -> TargetArtist:
        """Add an artist by MusicBrainz id."""
        pass

    @abstractmethod
    async def get_albums_by_artist(self, artist_id: int) -> list[TargetAlbum]:
        pass

    @abstractmethod
    async def set_albums_monitored(
        self, album_ids: Sequence[int], monitored: bool = True
    ) -> None:
        """Bulk monitoring update."""
        pass

    @abstractmethod
    async def set_artist_monitored(self, artist_id: int, monitored: bool = True) -> None:
        pass


class IMusicBrainzClient(ABC):
    """Port for MusicBrainz artist search."""

    @abstractmethod
    async def search_artist(self, name: str) -> list[CandidateMatch]:
        """Search artists by name, best match first."""
        pass


class ISpotifyClient(ABC):
    """Port for reading a user's Spotify library."""

    @abstractmethod
    async def get_followed_artists(
        self, on_progress: PageProgress | None = None
    ) -> list[SourceArtist]:
        pass

    @abstractmethod
    async def get_saved_albums(
        self, on_progress: PageProgress | None = None
    ) -> list[SourceAlbum]:
        pass


__all__ = ["ILidarrClient", "IMusicBrainzClient", "ISpotifyClient", "PageProgress"]
