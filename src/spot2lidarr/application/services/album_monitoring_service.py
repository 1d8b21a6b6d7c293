"""Monitor only the saved albums of a freshly added Lidarr artist."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from spot2lidarr.domain.entities import TargetAlbum
from spot2lidarr.domain.ports import ILidarrClient
from spot2lidarr.domain.value_objects import ALBUM_SIMILARITY_THRESHOLD, album_title_matches

logger = logging.getLogger(__name__)

DEFAULT_POLL_DELAYS: tuple[float, ...] = (2.0, 4.0, 8.0)


@dataclass(frozen=True)
class AlbumMonitoringResult:
    """How many of the artist's Lidarr albums ended up monitored."""

    monitored: int
    total: int

    @property
    def summary(self) -> str:
        return f"{self.monitored}/{self.total} albums monitored"


class AlbumMonitoringService:
    """Wait for Lidarr to materialize an artist's albums, then monitor the saved ones.

    Hey future me - right after POST /artist, Lidarr refreshes the artist from its
    metadata server in the BACKGROUND. GET /album?artistId= returns [] until that's
    done. So we poll with growing delays (2s, 4s, 8s = 14s worst case) and stop at
    the first non-empty list. All empty is NOT an error, some artists simply have
    nothing catalogued yet, we report 0/0.

    This is a plain awaited function, no background task. The pipeline waits for it
    before moving to the next artist.
    """

    def __init__(
        self,
        lidarr: ILidarrClient,
        poll_delays: Sequence[float] = DEFAULT_POLL_DELAYS,
        similarity_threshold: float = ALBUM_SIMILARITY_THRESHOLD,
    ) -> None:
        """Initialize the service.

        Args:
            lidarr: Lidarr client port
            poll_delays: Sleep before each fetch attempt, in seconds
            similarity_threshold: Minimum title similarity for a fuzzy match
        """
        self._lidarr = lidarr
        self._poll_delays = tuple(poll_delays)
        self._similarity_threshold = similarity_threshold

    async def monitor_saved_albums(
        self, artist_id: int, saved_titles: Sequence[str]
    ) -> AlbumMonitoringResult:
        """Monitor the albums of an artist whose titles match saved album titles.

        Args:
            artist_id: Lidarr id of the newly added artist
            saved_titles: Titles of the user's saved albums by this artist

        Returns:
            (monitored, total) counts

        Raises:
            ExternalServiceError: If the bulk monitoring update fails
        """
        albums = await self._wait_for_albums(artist_id)
        if not albums:
            logger.info(f"No albums appeared for Lidarr artist {artist_id}")
            return AlbumMonitoringResult(monitored=0, total=0)

        matched_ids = [
            album.id
            for album in albums
            if album_title_matches(album.title, saved_titles, self._similarity_threshold)
        ]

        if matched_ids:
            await self._lidarr.set_albums_monitored(matched_ids, monitored=True)

        logger.debug(
            f"Lidarr artist {artist_id}: monitored {len(matched_ids)} of "
            f"{len(albums)} albums ({len(saved_titles)} saved titles)"
        )
        return AlbumMonitoringResult(monitored=len(matched_ids), total=len(albums))

    async def _wait_for_albums(self, artist_id: int) -> list[TargetAlbum]:
        """Poll until the album list is non-empty or the delays run out."""
        for attempt, delay in enumerate(self._poll_delays, start=1):
            await asyncio.sleep(delay)
            try:
                albums = await self._lidarr.get_albums_by_artist(artist_id)
            except Exception as e:
                # A failed fetch counts as an empty attempt, the next delay may succeed
                logger.warning(
                    f"Album fetch for Lidarr artist {artist_id} failed "
                    f"(attempt {attempt}/{len(self._poll_delays)}): {e}"
                )
                continue
            if albums:
                return albums
        return []
