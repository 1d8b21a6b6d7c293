"""Configuration module for spot2lidarr."""

from .settings import (
    LidarrSettings,
    MigrationSettings,
    MusicBrainzSettings,
    ObservabilitySettings,
    Settings,
    SpotifySettings,
    get_settings,
)

__all__ = [
    "LidarrSettings",
    "MigrationSettings",
    "MusicBrainzSettings",
    "ObservabilitySettings",
    "Settings",
    "SpotifySettings",
    "get_settings",
]
