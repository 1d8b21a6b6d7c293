"""Library entities from the three services involved in a migration.

Hey future me - these are plain, immutable data carriers. Each one that comes
from an HTTP API has a from_api() classmethod that knows the service's JSON
field names, so the rest of the code never touches raw payloads:

- SourceArtist / SourceAlbum  <- Spotify (the catalog we migrate FROM)
- CandidateMatch              <- MusicBrainz artist search
- TargetArtist / TargetAlbum  <- Lidarr (the media manager we migrate TO)

GOTCHA: Lidarr calls the MusicBrainz artist id "foreignArtistId". That value is
the join key between CandidateMatch.id, TargetArtist.foreign_artist_id and the
dedupe set of a migration run.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SourceArtist:
    """Followed artist from the source catalog."""

    id: str
    name: str
    genres: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "SourceArtist":
        """Build from a Spotify artist object."""
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            genres=tuple(payload.get("genres") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "genres": list(self.genres)}


@dataclass(frozen=True)
class SourceAlbum:
    """Saved album from the source catalog.

    artist_ids links the album to every SourceArtist credited on it
    (many-to-many). Only used to build the artist -> saved titles index for the
    "saved albums only" monitoring policy.
    """

    id: str
    name: str
    release_date: str | None = None
    artist_ids: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "SourceAlbum":
        """Build from a Spotify album object."""
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            release_date=payload.get("release_date"),
            artist_ids=tuple(
                str(artist["id"])
                for artist in payload.get("artists") or ()
                if artist.get("id")
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "release_date": self.release_date,
            "artist_ids": list(self.artist_ids),
        }


@dataclass(frozen=True)
class SourceLibrary:
    """Everything extracted from the source catalog in one go."""

    artists: tuple[SourceArtist, ...] = ()
    albums: tuple[SourceAlbum, ...] = ()

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "SourceLibrary":
        return cls(
            artists=tuple(
                SourceArtist(
                    id=str(item["id"]),
                    name=str(item["name"]),
                    genres=tuple(item.get("genres") or ()),
                )
                for item in payload.get("artists") or ()
            ),
            albums=tuple(
                SourceAlbum(
                    id=str(item["id"]),
                    name=str(item["name"]),
                    release_date=item.get("release_date"),
                    artist_ids=tuple(item.get("artist_ids") or ()),
                )
                for item in payload.get("albums") or ()
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "artists": [artist.to_dict() for artist in self.artists],
            "albums": [album.to_dict() for album in self.albums],
        }


@dataclass(frozen=True)
class CandidateMatch:
    """One MusicBrainz artist search hit.

    score is MusicBrainz's 0-100 relevance, None when the provider has none.
    """

    id: str
    name: str
    score: float | None = None
    type: str | None = None
    country: str | None = None
    disambiguation: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "CandidateMatch":
        raw_score = payload.get("score")
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            score=float(raw_score) if raw_score is not None else None,
            type=payload.get("type"),
            country=payload.get("country"),
            disambiguation=payload.get("disambiguation") or None,
        )


@dataclass(frozen=True)
class TargetArtist:
    """Artist as stored in (or looked up through) Lidarr."""

    id: int | None
    foreign_artist_id: str
    name: str
    monitored: bool = False

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "TargetArtist":
        # Lookup results have no id yet (not imported), so id stays optional.
        raw_id = payload.get("id")
        return cls(
            id=int(raw_id) if raw_id else None,
            foreign_artist_id=str(payload.get("foreignArtistId") or ""),
            name=str(payload.get("artistName") or ""),
            monitored=bool(payload.get("monitored", False)),
        )


@dataclass(frozen=True)
class TargetAlbum:
    """Album record materialized by Lidarr for an artist."""

    id: int
    title: str
    artist_id: int
    monitored: bool = False
    foreign_album_id: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "TargetAlbum":
        return cls(
            id=int(payload["id"]),
            title=str(payload.get("title") or ""),
            artist_id=int(payload.get("artistId") or 0),
            monitored=bool(payload.get("monitored", False)),
            foreign_album_id=payload.get("foreignAlbumId"),
        )


@dataclass(frozen=True)
class QualityProfile:
    id: int
    name: str

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "QualityProfile":
        return cls(id=int(payload["id"]), name=str(payload.get("name") or ""))


@dataclass(frozen=True)
class MetadataProfile:
    id: int
    name: str

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "MetadataProfile":
        return cls(id=int(payload["id"]), name=str(payload.get("name") or ""))


@dataclass(frozen=True)
class RootFolder:
    id: int
    path: str
    free_space: int | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "RootFolder":
        return cls(
            id=int(payload["id"]),
            path=str(payload.get("path") or ""),
            free_space=payload.get("freeSpace"),
        )


@dataclass(frozen=True)
class SystemStatus:
    version: str
    app_name: str = "Lidarr"

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "SystemStatus":
        return cls(
            version=str(payload.get("version") or ""),
            app_name=str(payload.get("appName") or "Lidarr"),
        )
