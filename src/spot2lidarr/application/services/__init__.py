"""Application services - migration pipeline and the workflows around it."""

from spot2lidarr.application.services.album_monitoring_service import (
    AlbumMonitoringResult,
    AlbumMonitoringService,
)
from spot2lidarr.application.services.error_classification import is_duplicate_error
from spot2lidarr.application.services.library_extraction_service import (
    LibraryExtractionService,
    load_library,
    save_library,
)
from spot2lidarr.application.services.lidarr_connection_service import (
    LidarrConnection,
    LidarrConnectionService,
)

# Hey future me - MigrationService is THE entry point, everything else above feeds it.
from spot2lidarr.application.services.migration_service import (
    MigrationObserver,
    MigrationService,
    build_saved_album_index,
    configuration_error_message,
)

__all__ = [
    "AlbumMonitoringResult",
    "AlbumMonitoringService",
    "LibraryExtractionService",
    "LidarrConnection",
    "LidarrConnectionService",
    "MigrationObserver",
    "MigrationService",
    "build_saved_album_index",
    "configuration_error_message",
    "is_duplicate_error",
    "load_library",
    "save_library",
]
