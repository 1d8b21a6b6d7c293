"""Observability infrastructure for structured logging."""

from spot2lidarr.infrastructure.observability.log_messages import (
    LogMessages,
    LogTemplate,
)
from spot2lidarr.infrastructure.observability.logger_template import (
    get_module_logger,
    log_operation,
)
from spot2lidarr.infrastructure.observability.logging import (
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)

__all__ = [
    "LogMessages",
    "LogTemplate",
    "configure_logging",
    "get_correlation_id",
    "get_module_logger",
    "log_operation",
    "set_correlation_id",
]
