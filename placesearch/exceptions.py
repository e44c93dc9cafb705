#  Place Search - Custom Exceptions
#
#  Typed exception hierarchy so the app can map pipeline failures to HTTP
#  status codes without pattern-matching on message strings.
#
#  Depends on: (none)
#  Used by:    services/search.py, services/places_client.py, store/*, app.py

class SearchError(Exception):
    """Base exception for all search pipeline errors."""


class InvalidRequestError(SearchError):
    """Search payload is malformed or its coordinates/radius are invalid."""


class RateLimitExceededError(SearchError):
    """Client has no tokens left in its bucket."""

    def __init__(self, retry_after_seconds: int):
        super().__init__(f"Rate limit exceeded. Retry after {retry_after_seconds}s.")
        self.retry_after_seconds = retry_after_seconds


class UpstreamError(SearchError):
    """Geo-search provider returned non-2xx or could not be reached.

    status_code is the upstream HTTP status, or None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StoreError(SearchError):
    """Key-value store backend failed. Callers treat this as a miss, never fatal."""
