"""Domain entities."""

from spot2lidarr.domain.entities.library import (
    CandidateMatch,
    MetadataProfile,
    QualityProfile,
    RootFolder,
    SourceAlbum,
    SourceArtist,
    SourceLibrary,
    SystemStatus,
    TargetAlbum,
    TargetArtist,
)
from spot2lidarr.domain.entities.migration import (
    AddArtistOptions,
    AddArtistRequest,
    MigrationConfig,
    MigrationOutcome,
    MigrationRunState,
    MigrationStatus,
    MonitorOption,
    RunPhase,
)

__all__ = [
    "AddArtistOptions",
    "AddArtistRequest",
    "CandidateMatch",
    "MetadataProfile",
    "MigrationConfig",
    "MigrationOutcome",
    "MigrationRunState",
    "MigrationStatus",
    "MonitorOption",
    "QualityProfile",
    "RootFolder",
    "RunPhase",
    "SourceAlbum",
    "SourceArtist",
    "SourceLibrary",
    "SystemStatus",
    "TargetAlbum",
    "TargetArtist",
]
