"""Extract the user's library from Spotify and store it as JSON."""

import json
import logging
from collections.abc import Callable
from pathlib import Path

from spot2lidarr.domain.entities import SourceLibrary
from spot2lidarr.domain.ports import ISpotifyClient

logger = logging.getLogger(__name__)

# (stage, loaded, total), stage is "artists" or "albums"
ExtractionProgress = Callable[[str, int, int], None]


class LibraryExtractionService:
    """Read followed artists and saved albums in one go."""

    def __init__(self, spotify: ISpotifyClient) -> None:
        self._spotify = spotify

    async def extract(self, on_progress: ExtractionProgress | None = None) -> SourceLibrary:
        """
        Extract followed artists, then saved albums.

        Args:
            on_progress: Called after every page with (stage, loaded, total)

        Returns:
            The extracted library

        Raises:
            SpotifyApiError: If Spotify rejects a request (e.g. expired token)
        """

        def stage_progress(stage: str) -> Callable[[int, int], None] | None:
            if on_progress is None:
                return None
            return lambda loaded, total: on_progress(stage, loaded, total)

        artists = await self._spotify.get_followed_artists(stage_progress("artists"))
        albums = await self._spotify.get_saved_albums(stage_progress("albums"))

        logger.info(
            f"Extracted {len(artists)} followed artists and {len(albums)} saved albums"
        )
        return SourceLibrary(artists=tuple(artists), albums=tuple(albums))


# Hey future me - the JSON file is the hand-off between "extract" and "migrate". The user
# can edit it (drop artists they don't want) before migrating. Keep the format stable!
def save_library(library: SourceLibrary, path: Path) -> None:
    """Write a library to a JSON file (UTF-8, pretty-printed)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(library.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
    )
    logger.info(f"Saved library to {path}")


def load_library(path: Path) -> SourceLibrary:
    """
    Read a library JSON file written by save_library().

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file isn't valid library JSON
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        return SourceLibrary.from_dict(payload)
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Invalid library file {path}: {e}") from e
