"""Domain exceptions."""

from collections.abc import Sequence
from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so code can inspect it without parsing
    # str(exception). Don't raise this directly - use a specific subclass so callers can catch
    # precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ConfigurationError(DomainException):
    """Raised when required settings are missing or invalid.

    Examples: Lidarr URL/API key not set, no quality profile selected for a run.
    """

    pass


class ExternalServiceError(DomainException):
    """Raised when a call to an external HTTP service fails.

    Carries everything an operator needs to diagnose the failure without
    digging through logs: which service, which request, the HTTP status (None
    for transport-level failures) and a human-readable detail extracted from the
    response body.
    """

    service: str = "External service"

    def __init__(
        self,
        method: str,
        endpoint: str,
        detail: str = "",
        status_code: int | None = None,
        error_codes: Sequence[str] = (),
    ) -> None:
        if status_code is None:
            message = f"{self.service} request failed on {method} {endpoint}: {detail}"
        else:
            message = f"{self.service} {status_code} on {method} {endpoint}: {detail}"
        super().__init__(message)
        self.method = method
        self.endpoint = endpoint
        self.detail = detail
        self.status_code = status_code
        # Structured validation codes (e.g. Lidarr's FluentValidation "errorCode").
        self.error_codes = tuple(error_codes)

    @property
    def is_network_error(self) -> bool:
        """True when no HTTP response was received at all."""
        return self.status_code is None

    @property
    def is_server_error(self) -> bool:
        """True for HTTP 5xx responses."""
        return self.status_code is not None and self.status_code >= 500

    @property
    def is_client_error(self) -> bool:
        """True for HTTP 4xx responses."""
        return self.status_code is not None and 400 <= self.status_code < 500

    def to_dict(self) -> dict[str, Any]:
        """Error payload as surfaced to callers: {status, endpoint, method, detail}."""
        return {
            "status": self.status_code,
            "endpoint": self.endpoint,
            "method": self.method,
            "detail": self.detail,
        }


class LidarrApiError(ExternalServiceError):
    """Lidarr REST API failure."""

    service = "Lidarr"


class MusicBrainzApiError(ExternalServiceError):
    """MusicBrainz WS/2 failure."""

    service = "MusicBrainz"


class SpotifyApiError(ExternalServiceError):
    """Spotify Web API failure."""

    service = "Spotify"


__all__ = [
    "ConfigurationError",
    "DomainException",
    "ExternalServiceError",
    "LidarrApiError",
    "MusicBrainzApiError",
    "SpotifyApiError",
]
