"""HTTP clients for Lidarr, MusicBrainz and Spotify."""

from spot2lidarr.infrastructure.integrations.lidarr_client import LidarrClient
from spot2lidarr.infrastructure.integrations.musicbrainz_client import (
    MusicBrainzClient,
)
from spot2lidarr.infrastructure.integrations.spotify_client import SpotifyClient

__all__ = ["LidarrClient", "MusicBrainzClient", "SpotifyClient"]
