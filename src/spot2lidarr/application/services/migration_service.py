"""Migration pipeline: Spotify artists -> MusicBrainz ids -> Lidarr artists.

Hey future me - this is the heart of the tool. One run looks like this:

    pre-flight   validate config (abort here, and ONLY here)
                 read Lidarr's artist list once -> dedupe set of MusicBrainz ids
                 index saved album titles by Spotify artist id (savedAlbumsOnly)
    per artist   (strictly one after another, 2s pause between artists)
                 a. progress
                 b. MusicBrainz search          -> failed on error
                 c. no results                  -> failed
                 d. find_best_match             -> failed if no match
                 e. id already in dedupe set    -> exists (no Lidarr call)
                 f. POST /artist                -> exists if Lidarr says duplicate,
                                                   failed otherwise
                 g. savedAlbumsOnly: monitor saved albums, then re-monitor artist
                 h. remember the new id in the dedupe set
                 i. anything unexpected         -> failed, loop continues

TWO-PHASE COMMIT for savedAlbumsOnly: Lidarr has no "add artist and monitor just
these albums" call. We add with monitor=none (phase 1), which leaves the ARTIST
unmonitored too, then monitor the matched albums and flip the artist back to
monitored (phase 2). Between the phases an unmonitored artist in Lidarr is an
expected transient state, not a bug. If phase 2 fails the artist still counts as
added and the outcome message says what went wrong.
"""

import asyncio
from collections.abc import Collection, Iterable, Sequence

from spot2lidarr.application.services.album_monitoring_service import (
    AlbumMonitoringService,
)
from spot2lidarr.application.services.error_classification import is_duplicate_error
from spot2lidarr.domain.entities import (
    AddArtistRequest,
    CandidateMatch,
    MigrationConfig,
    MigrationOutcome,
    MigrationRunState,
    MigrationStatus,
    SourceAlbum,
    SourceArtist,
)
from spot2lidarr.domain.exceptions import ConfigurationError
from spot2lidarr.domain.ports import ILidarrClient, IMusicBrainzClient
from spot2lidarr.domain.value_objects import CONFIDENCE_THRESHOLD, find_best_match
from spot2lidarr.infrastructure.observability.log_messages import LogMessages
from spot2lidarr.infrastructure.observability.logger_template import (
    get_module_logger,
    log_operation,
)
from spot2lidarr.infrastructure.observability.logging import set_correlation_id

logger = get_module_logger(__name__)

DEFAULT_ITEM_DELAY_SECONDS = 2.0


class MigrationObserver:
    """Receives run events. Override what you need, every hook is a no-op here."""

    def on_progress(self, index: int, total: int, name: str) -> None:
        pass

    def on_outcome(self, outcome: MigrationOutcome) -> None:
        pass

    def on_complete(self, state: MigrationRunState) -> None:
        pass

    def on_abort(self, message: str) -> None:
        pass


def configuration_error_message(missing: Sequence[str]) -> str:
    """Build the single pre-flight error message for all missing settings.

    Examples:
        ["root folder"] -> "Please configure root folder"
        all three -> "Please configure quality profile, metadata profile, and root folder"
    """
    if len(missing) == 1:
        listed = missing[0]
    elif len(missing) == 2:
        listed = f"{missing[0]} and {missing[1]}"
    else:
        listed = f"{', '.join(missing[:-1])}, and {missing[-1]}"
    return f"Please configure {listed}"


def build_saved_album_index(albums: Iterable[SourceAlbum]) -> dict[str, list[str]]:
    """Map each source artist id to the titles of their saved albums.

    An album credited to several artists is listed under each of them.
    """
    index: dict[str, list[str]] = {}
    for album in albums:
        for artist_id in album.artist_ids:
            index.setdefault(artist_id, []).append(album.name)
    return index


class MigrationService:
    """Migrate source artists into Lidarr, one at a time."""

    def __init__(
        self,
        lidarr: ILidarrClient,
        musicbrainz: IMusicBrainzClient,
        album_monitoring: AlbumMonitoringService | None = None,
        item_delay_seconds: float = DEFAULT_ITEM_DELAY_SECONDS,
        confidence_threshold: float = CONFIDENCE_THRESHOLD,
        observer: MigrationObserver | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            lidarr: Lidarr client port
            musicbrainz: MusicBrainz client port
            album_monitoring: Poller for savedAlbumsOnly (default: one using lidarr)
            item_delay_seconds: Pause before every artist except the first
            confidence_threshold: Score the top MusicBrainz hit must exceed
            observer: Receives progress, outcomes and the terminal signal
        """
        self._lidarr = lidarr
        self._musicbrainz = musicbrainz
        self._album_monitoring = album_monitoring or AlbumMonitoringService(lidarr)
        self._item_delay_seconds = item_delay_seconds
        self._confidence_threshold = confidence_threshold
        self._observer = observer or MigrationObserver()

    async def run(
        self,
        artists: Sequence[SourceArtist],
        config: MigrationConfig,
        albums: Iterable[SourceAlbum] = (),
        selected_ids: Collection[str] | None = None,
    ) -> MigrationRunState:
        """Run one migration.

        Args:
            artists: Source artists in the order they should be processed
            config: Lidarr placement and monitoring policy
            albums: Saved albums (only used with savedAlbumsOnly)
            selected_ids: Only migrate artists with these source ids (None = all)

        Returns:
            Final run state (COMPLETED with one outcome per selected artist, or
            ABORTED with an error and no outcomes)
        """
        set_correlation_id()
        state = MigrationRunState()

        missing = config.missing_fields()
        if missing:
            return self._abort(state, configuration_error_message(missing))

        items = [
            artist
            for artist in artists
            if selected_ids is None or artist.id in selected_ids
        ]

        # Hey future me - the dedupe set lives HERE, owned by this run and passed down
        # explicitly. Two runs never share one, each reads Lidarr fresh.
        try:
            existing_ids = await self._load_existing_ids()
        except ConfigurationError as e:
            return self._abort(state, e.message)

        saved_index = (
            build_saved_album_index(albums)
            if config.monitor_option.is_saved_albums_only
            else {}
        )
        add_request = config.build_add_request()

        state.start(total=len(items))
        async with log_operation(
            logger,
            "migration_run",
            total=len(items),
            monitor=config.monitor_option.value,
            existing=len(existing_ids),
        ):
            for index, artist in enumerate(items):
                if index > 0:
                    await asyncio.sleep(self._item_delay_seconds)

                state.update_progress(index + 1, artist.name)
                self._observer.on_progress(index + 1, len(items), artist.name)

                try:
                    outcome = await self._migrate_artist(
                        artist, config, add_request, existing_ids, saved_index
                    )
                except Exception as e:
                    logger.error(
                        f"Unexpected error migrating '{artist.name}'", exc_info=True
                    )
                    outcome = MigrationOutcome(
                        artist=artist.name,
                        status=MigrationStatus.FAILED,
                        message=f"Unexpected error: {e}",
                        source_id=artist.id,
                    )

                if outcome.status is MigrationStatus.FAILED:
                    logger.warning(
                        LogMessages.migration_item_failed(artist.name, outcome.message)
                    )
                else:
                    logger.info(f"{artist.name}: {outcome.status.value} - {outcome.message}")

                state.add_outcome(outcome)
                self._observer.on_outcome(outcome)

            state.complete()

        counts = state.summary()
        logger.info(
            LogMessages.migration_completed(
                total=len(state.outcomes),
                added=counts["added"],
                exists=counts["exists"],
                failed=counts["failed"],
                skipped=counts["skipped"],
            )
        )
        self._observer.on_complete(state)
        return state

    def _abort(self, state: MigrationRunState, message: str) -> MigrationRunState:
        state.abort(message)
        logger.error(LogMessages.migration_aborted(message))
        self._observer.on_abort(message)
        return state

    async def _load_existing_ids(self) -> set[str]:
        """Read the MusicBrainz ids of every artist already in Lidarr.

        A failed read is NOT fatal: we continue with an empty set and let Lidarr's own
        duplicate check (classified in step f) catch what we miss. Only a missing
        Lidarr configuration stops the run.
        """
        try:
            artists = await self._lidarr.get_artists()
        except ConfigurationError:
            raise
        except Exception as e:
            logger.warning(f"Could not read existing Lidarr artists, continuing: {e}")
            return set()
        return {artist.foreign_artist_id for artist in artists if artist.foreign_artist_id}

    async def _migrate_artist(
        self,
        artist: SourceArtist,
        config: MigrationConfig,
        add_request: AddArtistRequest,
        existing_ids: set[str],
        saved_index: dict[str, list[str]],
    ) -> MigrationOutcome:
        """Steps b-h for one artist. Raises only on unexpected errors."""
        try:
            candidates = await self._musicbrainz.search_artist(artist.name)
        except Exception as e:
            return self._failed(artist, f"MusicBrainz lookup failed: {e}")

        if not candidates:
            return self._failed(artist, "No results found in MusicBrainz", lookup_results=0)

        decision = find_best_match(
            artist.name,
            candidates,
            name_of=_candidate_name,
            score_of=_candidate_score,
            threshold=self._confidence_threshold,
        )
        match = decision.candidate
        if match is None:
            top = candidates[0]
            return self._failed(
                artist,
                f"No confident match among {len(candidates)} result(s), "
                f"top result: {top.name} (score {_format_score(top.score)})",
                lookup_results=len(candidates),
            )

        if match.id in existing_ids:
            return MigrationOutcome(
                artist=artist.name,
                status=MigrationStatus.EXISTS,
                message=f"Already in Lidarr as {match.name}",
                source_id=artist.id,
                matched_name=match.name,
                lookup_results=len(candidates),
            )

        try:
            added = await self._lidarr.add_artist(match.name, match.id, add_request)
        except Exception as e:
            if is_duplicate_error(e):
                existing_ids.add(match.id)
                return MigrationOutcome(
                    artist=artist.name,
                    status=MigrationStatus.EXISTS,
                    message=f"Already in Lidarr as {match.name}: {e}",
                    source_id=artist.id,
                    matched_name=match.name,
                    lookup_results=len(candidates),
                )
            return self._failed(
                artist,
                f"Failed to add {match.name}: {e}",
                matched_name=match.name,
                lookup_results=len(candidates),
            )

        existing_ids.add(match.id)

        message = f"Added as {match.name}"
        albums_monitored: int | None = None
        albums_total: int | None = None
        if config.monitor_option.is_saved_albums_only and added.id is None:
            logger.warning(f"Lidarr returned no id for {match.name}, skipping album monitoring")
            message += " (artist left unmonitored: Lidarr returned no artist id)"
        elif config.monitor_option.is_saved_albums_only:
            try:
                result = await self._album_monitoring.monitor_saved_albums(
                    added.id, saved_index.get(artist.id, [])
                )
                albums_monitored, albums_total = result.monitored, result.total
                message += f" ({result.summary})"
            except Exception as e:
                logger.warning(f"Album monitoring failed for {match.name}: {e}")
                message += f" (album monitoring failed: {e})"

            # Phase 2 of the add: monitor=none left the artist itself unmonitored
            try:
                await self._lidarr.set_artist_monitored(added.id, monitored=True)
            except Exception as e:
                logger.warning(f"Re-monitoring {match.name} failed: {e}")
                message += f" (artist left unmonitored: {e})"

        return MigrationOutcome(
            artist=artist.name,
            status=MigrationStatus.ADDED,
            message=message,
            source_id=artist.id,
            matched_name=match.name,
            lidarr_id=added.id,
            lookup_results=len(candidates),
            albums_monitored=albums_monitored,
            albums_total=albums_total,
        )

    @staticmethod
    def _failed(
        artist: SourceArtist,
        message: str,
        matched_name: str | None = None,
        lookup_results: int | None = None,
    ) -> MigrationOutcome:
        return MigrationOutcome(
            artist=artist.name,
            status=MigrationStatus.FAILED,
            message=message,
            source_id=artist.id,
            matched_name=matched_name,
            lookup_results=lookup_results,
        )


def _candidate_name(candidate: CandidateMatch) -> str:
    return candidate.name


def _candidate_score(candidate: CandidateMatch) -> float | None:
    return candidate.score


def _format_score(score: float | None) -> str:
    return "n/a" if score is None else f"{score:g}"
