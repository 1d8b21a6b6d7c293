"""Migration run entities: configuration, outcomes and run state."""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# Hey future me - the first seven values are Lidarr's own "monitor" add-option
# values and go to the API verbatim. SAVED_ALBUMS_ONLY is OURS: Lidarr has no
# such option, so the artist is added with monitor=none and the saved albums get
# monitored afterwards (see AlbumMonitoringService).
class MonitorOption(str, Enum):
    """Which albums of a newly added artist Lidarr should monitor."""

    ALL = "all"
    FUTURE = "future"
    MISSING = "missing"
    EXISTING = "existing"
    FIRST = "first"
    LATEST = "latest"
    NONE = "none"
    SAVED_ALBUMS_ONLY = "savedAlbumsOnly"

    @property
    def is_saved_albums_only(self) -> bool:
        return self is MonitorOption.SAVED_ALBUMS_ONLY


class MigrationStatus(str, Enum):
    """Terminal result of one source artist."""

    ADDED = "added"
    EXISTS = "exists"
    FAILED = "failed"
    SKIPPED = "skipped"


class RunPhase(str, Enum):
    """Idle -> Running -> Completed | Aborted."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in {RunPhase.COMPLETED, RunPhase.ABORTED}


@dataclass(frozen=True)
class AddArtistOptions:
    """Lidarr "addOptions" block."""

    monitor: str
    monitored: bool = True
    search_for_missing_albums: bool = False

    def to_api(self) -> dict[str, Any]:
        return {
            "monitor": self.monitor,
            "monitored": self.monitored,
            "searchForMissingAlbums": self.search_for_missing_albums,
        }


@dataclass(frozen=True)
class AddArtistRequest:
    """Caller-chosen placement of a new artist in Lidarr."""

    quality_profile_id: int
    metadata_profile_id: int
    root_folder_path: str
    add_options: AddArtistOptions
    monitored: bool = True


@dataclass(frozen=True)
class MigrationConfig:
    """Run configuration supplied by the caller and validated pre-flight."""

    quality_profile_id: int | None = None
    metadata_profile_id: int | None = None
    root_folder_path: str | None = None
    monitor_option: MonitorOption = MonitorOption.SAVED_ALBUMS_ONLY
    search_for_missing: bool = True

    def missing_fields(self) -> list[str]:
        """Names of required settings that are not set."""
        missing = []
        if not self.quality_profile_id:
            missing.append("quality profile")
        if not self.metadata_profile_id:
            missing.append("metadata profile")
        if not self.root_folder_path:
            missing.append("root folder")
        return missing

    def build_add_request(self) -> AddArtistRequest:
        """Translate the run configuration into Lidarr add parameters.

        With SAVED_ALBUMS_ONLY the add options are forced to monitor=none and no
        search, the saved albums get monitored surgically after the add.
        """
        if self.quality_profile_id is None or self.metadata_profile_id is None:
            raise ValueError("Profiles must be set before building an add request")
        if self.monitor_option.is_saved_albums_only:
            options = AddArtistOptions(
                monitor=MonitorOption.NONE.value,
                monitored=True,
                search_for_missing_albums=False,
            )
        else:
            options = AddArtistOptions(
                monitor=self.monitor_option.value,
                monitored=True,
                search_for_missing_albums=self.search_for_missing,
            )
        return AddArtistRequest(
            quality_profile_id=self.quality_profile_id,
            metadata_profile_id=self.metadata_profile_id,
            root_folder_path=self.root_folder_path or "",
            add_options=options,
            monitored=True,
        )


@dataclass(frozen=True)
class MigrationOutcome:
    """Result for one processed source artist. Never mutated once recorded."""

    artist: str
    status: MigrationStatus
    message: str = ""
    source_id: str | None = None
    matched_name: str | None = None
    lidarr_id: int | None = None
    lookup_results: int | None = None
    albums_monitored: int | None = None
    albums_total: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "artist": self.artist,
            "status": self.status.value,
            "message": self.message,
            "source_id": self.source_id,
            "matched_name": self.matched_name,
            "lidarr_id": self.lidarr_id,
            "lookup_results": self.lookup_results,
            "albums_monitored": self.albums_monitored,
            "albums_total": self.albums_total,
        }


@dataclass
class MigrationRunState:
    """Progress and results of a single migration run.

    Hey future me - outcomes is append-only and only the pipeline loop writes to
    it (no concurrent writers), so there's no locking here on purpose.
    """

    phase: RunPhase = RunPhase.IDLE
    total: int = 0
    current: int = 0
    current_item: str | None = None
    error: str | None = None
    outcomes: list[MigrationOutcome] = field(default_factory=list)

    def start(self, total: int) -> None:
        self.phase = RunPhase.RUNNING
        self.total = total
        self.current = 0
        self.current_item = None
        self.error = None
        self.outcomes = []

    def update_progress(self, current: int, item: str) -> None:
        self.current = current
        self.current_item = item

    def add_outcome(self, outcome: MigrationOutcome) -> None:
        self.outcomes.append(outcome)

    def complete(self) -> None:
        self.phase = RunPhase.COMPLETED
        self.current_item = None

    def abort(self, error: str) -> None:
        self.phase = RunPhase.ABORTED
        self.error = error
        self.current_item = None

    def summary(self) -> dict[str, int]:
        """Count of outcomes per status (all statuses present, zero if unused)."""
        counts = Counter(outcome.status for outcome in self.outcomes)
        return {status.value: counts.get(status, 0) for status in MigrationStatus}
