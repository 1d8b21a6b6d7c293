"""spot2lidarr - move a Spotify library into Lidarr via MusicBrainz."""

__version__ = "0.3.0"
