"""Error types raised along the audit pipeline."""


class AuditError(Exception):
    """Base class for audit failures."""


class InvalidURLError(AuditError, ValueError):
    """The submitted URL is missing or malformed. Maps to HTTP 400."""


class FetchError(AuditError):
    """The page could not be retrieved. Fatal to the request (HTTP 500)."""


class NetworkError(FetchError):
    """DNS, connection, redirect or HTTP status failure."""


class FetchTimeoutError(FetchError, TimeoutError):
    """The origin did not answer within the fetch timeout."""


class InsightError(AuditError):
    """A single model in the insight fallback chain failed."""
