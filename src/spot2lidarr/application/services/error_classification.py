"""Classification of Lidarr add-artist failures.

Hey future me - Lidarr rejects an add when the artist is already in the library
(or when its folder is already taken). That can happen even after our dedupe
check, e.g. someone added the artist by hand while the migration was running.
Those rejections must show up as "exists", not "failed".

Order of evidence:
1. Structured FluentValidation errorCode values on the error (preferred)
2. Message text containing "already" or "exist" (fallback, case-insensitive)

GOTCHA: the text fallback is coupled to Lidarr's English wording, and it treats
"artist exists" and "path already configured for another artist" the same way.
Nobody has confirmed which of the two a live Lidarr returns for a concurrent
duplicate add. Keep all of that in this module so it can change without touching
the pipeline.
"""

from spot2lidarr.domain.exceptions import ExternalServiceError

# Validator names Lidarr reports as errorCode for duplicate artists / artist folders.
DUPLICATE_ERROR_CODES = frozenset({"ArtistExistsValidator", "ArtistPathValidator"})

_DUPLICATE_KEYWORDS = ("already", "exist")


def is_duplicate_error(error: Exception) -> bool:
    """Decide whether an add-artist failure means "already in Lidarr".

    Args:
        error: Exception raised by ILidarrClient.add_artist

    Returns:
        True if the failure should be reported as an existing artist
    """
    if isinstance(error, ExternalServiceError):
        if any(code in DUPLICATE_ERROR_CODES for code in error.error_codes):
            return True
        text = error.detail or error.message
    else:
        text = str(error)

    lowered = text.lower()
    return any(keyword in lowered for keyword in _DUPLICATE_KEYWORDS)
