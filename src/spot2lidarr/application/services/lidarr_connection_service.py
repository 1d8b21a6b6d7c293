"""Connect to Lidarr and gather what a migration needs to be configured."""

import asyncio
import logging
from dataclasses import dataclass, field

from spot2lidarr.domain.entities import (
    MetadataProfile,
    MigrationConfig,
    MonitorOption,
    QualityProfile,
    RootFolder,
    SystemStatus,
)
from spot2lidarr.domain.ports import ILidarrClient
from spot2lidarr.infrastructure.observability.log_messages import LogMessages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LidarrConnection:
    """Snapshot of a Lidarr instance taken when connecting."""

    status: SystemStatus
    quality_profiles: list[QualityProfile] = field(default_factory=list)
    metadata_profiles: list[MetadataProfile] = field(default_factory=list)
    root_folders: list[RootFolder] = field(default_factory=list)
    existing_artist_ids: frozenset[str] = frozenset()

    def default_config(
        self,
        monitor_option: MonitorOption = MonitorOption.SAVED_ALBUMS_ONLY,
        search_for_missing: bool = True,
    ) -> MigrationConfig:
        """Preselect the first profile and root folder of each list.

        Any of them stays None when Lidarr has none configured, which then makes
        the migration pre-flight abort with a clear message.
        """
        return MigrationConfig(
            quality_profile_id=self.quality_profiles[0].id if self.quality_profiles else None,
            metadata_profile_id=(
                self.metadata_profiles[0].id if self.metadata_profiles else None
            ),
            root_folder_path=self.root_folders[0].path if self.root_folders else None,
            monitor_option=monitor_option,
            search_for_missing=search_for_missing,
        )

    def resolve_config(
        self,
        quality_profile_id: int | None = None,
        metadata_profile_id: int | None = None,
        root_folder_path: str | None = None,
        monitor_option: MonitorOption = MonitorOption.SAVED_ALBUMS_ONLY,
        search_for_missing: bool = True,
    ) -> MigrationConfig:
        """Explicit choices win, anything left out falls back to default_config()."""
        defaults = self.default_config(monitor_option, search_for_missing)
        return MigrationConfig(
            quality_profile_id=quality_profile_id or defaults.quality_profile_id,
            metadata_profile_id=metadata_profile_id or defaults.metadata_profile_id,
            root_folder_path=root_folder_path or defaults.root_folder_path,
            monitor_option=monitor_option,
            search_for_missing=search_for_missing,
        )


class LidarrConnectionService:
    """Test the connection and load profiles, root folders and existing artists."""

    def __init__(self, lidarr: ILidarrClient, target: str = "") -> None:
        """Initialize the service.

        Args:
            lidarr: Lidarr client port
            target: Lidarr URL, only used in log messages
        """
        self._lidarr = lidarr
        self._target = target

    async def connect(self) -> LidarrConnection:
        """
        Connect to Lidarr.

        Hey future me - test_connection() runs FIRST and alone: if the URL or API key
        is wrong there's no point firing three more requests that fail the same way.
        The three lists are independent, so they go out concurrently (the Lidarr
        limiter still paces them).

        Returns:
            Connection snapshot

        Raises:
            ConfigurationError: If Lidarr URL or API key is missing
            LidarrApiError: If Lidarr is unreachable or rejects the API key
        """
        try:
            status = await self._lidarr.test_connection()
        except Exception as e:
            logger.error(
                LogMessages.connection_failed(
                    service="Lidarr",
                    target=self._target or "(not configured)",
                    error=str(e),
                    hint="Check LIDARR_URL and LIDARR_API_KEY (Settings > General in Lidarr)",
                )
            )
            raise

        quality_profiles, metadata_profiles, root_folders = await asyncio.gather(
            self._lidarr.get_quality_profiles(),
            self._lidarr.get_metadata_profiles(),
            self._lidarr.get_root_folders(),
        )
        artists = await self._lidarr.get_artists()

        logger.info(
            f"Lidarr {status.version}: {len(quality_profiles)} quality profile(s), "
            f"{len(metadata_profiles)} metadata profile(s), "
            f"{len(root_folders)} root folder(s), {len(artists)} artist(s)"
        )
        return LidarrConnection(
            status=status,
            quality_profiles=quality_profiles,
            metadata_profiles=metadata_profiles,
            root_folders=root_folders,
            existing_artist_ids=frozenset(
                artist.foreign_artist_id for artist in artists if artist.foreign_artist_id
            ),
        )
