"""Command-line interface for spot2lidarr.

    spot2lidarr extract --output library.json
    spot2lidarr migrate --library library.json [--monitor all] [--artist-id ID ...]

Connection settings come from the environment (LIDARR_URL, LIDARR_API_KEY,
SPOTIFY_ACCESS_TOKEN, ...), see spot2lidarr.config.settings.
"""

import argparse
import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from spot2lidarr.application.services import (
    AlbumMonitoringService,
    LibraryExtractionService,
    LidarrConnectionService,
    MigrationObserver,
    MigrationService,
    load_library,
    save_library,
)
from spot2lidarr.config import Settings, get_settings
from spot2lidarr.domain.entities import MigrationOutcome, MonitorOption
from spot2lidarr.domain.exceptions import DomainException
from spot2lidarr.infrastructure.integrations import (
    LidarrClient,
    MusicBrainzClient,
    SpotifyClient,
)
from spot2lidarr.infrastructure.observability import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_ERROR = 2


class LoggingObserver(MigrationObserver):
    """Reports run progress through the log."""

    def on_progress(self, index: int, total: int, name: str) -> None:
        logger.info(f"[{index}/{total}] {name}")

    def on_outcome(self, outcome: MigrationOutcome) -> None:
        logger.debug(f"Outcome: {outcome.to_dict()}")


async def run_extract(settings: Settings, output: Path) -> int:
    """Extract the Spotify library into a JSON file."""

    def on_progress(stage: str, loaded: int, total: int) -> None:
        logger.info(f"Loading {stage}: {loaded}/{total}")

    async with SpotifyClient(settings.spotify) as spotify:
        library = await LibraryExtractionService(spotify).extract(on_progress)
    save_library(library, output)
    return EXIT_OK


async def run_migrate(
    settings: Settings,
    library_path: Path,
    monitor_option: MonitorOption,
    search_for_missing: bool,
    quality_profile_id: int | None = None,
    metadata_profile_id: int | None = None,
    root_folder_path: str | None = None,
    selected_ids: Sequence[str] | None = None,
) -> int:
    """Migrate a previously extracted library into Lidarr.

    Returns:
        Exit code (0 completed, 1 aborted during pre-flight)
    """
    library = load_library(library_path)
    migration_settings = settings.migration

    async with LidarrClient(settings.lidarr) as lidarr, MusicBrainzClient(
        settings.musicbrainz
    ) as musicbrainz:
        connection = await LidarrConnectionService(lidarr, settings.lidarr.url).connect()
        config = connection.resolve_config(
            quality_profile_id=quality_profile_id,
            metadata_profile_id=metadata_profile_id,
            root_folder_path=root_folder_path,
            monitor_option=monitor_option,
            search_for_missing=search_for_missing,
        )

        service = MigrationService(
            lidarr,
            musicbrainz,
            album_monitoring=AlbumMonitoringService(
                lidarr,
                poll_delays=migration_settings.album_poll_delays,
                similarity_threshold=migration_settings.album_similarity_threshold,
            ),
            item_delay_seconds=migration_settings.item_delay_seconds,
            confidence_threshold=migration_settings.confidence_threshold,
            observer=LoggingObserver(),
        )
        state = await service.run(
            library.artists,
            config,
            albums=library.albums,
            selected_ids=set(selected_ids) if selected_ids else None,
        )

    return EXIT_ABORTED if state.error else EXIT_OK


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="spot2lidarr",
        description="Move followed Spotify artists and saved albums into Lidarr",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    extract = sub.add_parser("extract", help="Export the Spotify library to JSON")
    extract.add_argument(
        "--output",
        default="library.json",
        help="Output JSON file (default: library.json)",
    )

    migrate = sub.add_parser("migrate", help="Add the artists of a library file to Lidarr")
    migrate.add_argument("--library", required=True, help="Library JSON from 'extract'")
    migrate.add_argument(
        "--monitor",
        choices=[option.value for option in MonitorOption],
        default=MonitorOption.SAVED_ALBUMS_ONLY.value,
        help="Which albums Lidarr should monitor (default: savedAlbumsOnly)",
    )
    migrate.add_argument(
        "--no-search",
        action="store_true",
        help="Don't search for missing albums after adding",
    )
    migrate.add_argument("--quality-profile-id", type=int, help="Default: first profile")
    migrate.add_argument("--metadata-profile-id", type=int, help="Default: first profile")
    migrate.add_argument("--root-folder", help="Default: first root folder")
    migrate.add_argument(
        "--artist-id",
        action="append",
        dest="artist_ids",
        help="Only migrate this Spotify artist id (repeatable)",
    )

    return p


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for CLI."""
    args = build_arg_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )

    try:
        if args.cmd == "extract":
            return asyncio.run(run_extract(settings, Path(args.output)))
        return asyncio.run(
            run_migrate(
                settings,
                Path(args.library),
                monitor_option=MonitorOption(args.monitor),
                search_for_missing=not args.no_search,
                quality_profile_id=args.quality_profile_id,
                metadata_profile_id=args.metadata_profile_id,
                root_folder_path=args.root_folder,
                selected_ids=args.artist_ids,
            )
        )
    except (DomainException, OSError, ValueError) as e:
        logger.error(f"{args.cmd} failed: {e}")
        return EXIT_ERROR
