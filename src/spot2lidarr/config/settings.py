"""Application settings loaded from environment variables.

Hey future me - every group has its OWN env prefix (LIDARR_, MUSICBRAINZ_, ...).
The nested groups are built with default_factory, so each one reads the
environment by itself when Settings() is created. Call get_settings() instead
of Settings() so the whole process shares one instance.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spot2lidarr import __version__


class LidarrSettings(BaseSettings):
    """Lidarr connection settings."""

    model_config = SettingsConfigDict(env_prefix="LIDARR_", extra="ignore")

    url: str = ""
    api_key: str = ""
    timeout: float = 30.0
    max_retries: int = Field(default=3, ge=0)
    retry_base_delay: float = Field(default=1.0, ge=0.0)

    # Users paste "http://lidarr:8686/" from the browser. We build
    # "{url}/api/v1{endpoint}" so a trailing slash would double up.
    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @property
    def is_configured(self) -> bool:
        """Check if both URL and API key are set."""
        return bool(self.url and self.api_key)


class MusicBrainzSettings(BaseSettings):
    """MusicBrainz client settings.

    MusicBrainz rejects clients without a meaningful User-Agent, the format is
    "AppName/Version ( contact )".
    """

    model_config = SettingsConfigDict(env_prefix="MUSICBRAINZ_", extra="ignore")

    app_name: str = "Spot2Lidarr"
    app_version: str = __version__
    contact: str = "contact@example.com"
    base_url: str = "https://musicbrainz.org/ws/2"
    search_limit: int = Field(default=10, ge=1, le=100)
    timeout: float = 30.0

    @property
    def user_agent(self) -> str:
        """User-Agent header value required by the MusicBrainz usage policy."""
        return f"{self.app_name}/{self.app_version} ( {self.contact} )"


class SpotifySettings(BaseSettings):
    """Spotify Web API settings.

    The access token is obtained outside this tool (OAuth PKCE in a browser).
    """

    model_config = SettingsConfigDict(env_prefix="SPOTIFY_", extra="ignore")

    access_token: str = ""
    api_base_url: str = "https://api.spotify.com/v1"
    timeout: float = 30.0
    max_retries: int = Field(default=3, ge=0)


class MigrationSettings(BaseSettings):
    """Pacing and matching knobs for a migration run."""

    model_config = SettingsConfigDict(env_prefix="MIGRATION_", extra="ignore")

    # Pause between artists on top of what the rate limiters enforce.
    item_delay_seconds: float = Field(default=2.0, ge=0.0)
    # Lidarr fills the album list asynchronously after an artist is added.
    album_poll_delays: list[float] = Field(default_factory=lambda: [2.0, 4.0, 8.0])
    confidence_threshold: float = 80.0
    album_similarity_threshold: float = Field(default=0.85, ge=0.0, le=1.0)


class ObservabilitySettings(BaseSettings):
    """Logging output settings."""

    model_config = SettingsConfigDict(env_prefix="OBSERVABILITY_", extra="ignore")

    log_json_format: bool = False


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "spot2lidarr"
    log_level: str = "INFO"

    lidarr: LidarrSettings = Field(default_factory=LidarrSettings)
    musicbrainz: MusicBrainzSettings = Field(default_factory=MusicBrainzSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    migration: MigrationSettings = Field(default_factory=MigrationSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings()
