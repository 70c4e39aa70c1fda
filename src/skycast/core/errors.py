"""Query error taxonomy.

Every failure of a pipeline run is raised as one of the QueryError subclasses
below. Each carries a kind tag and a user-facing message; raw upstream text is
only surfaced through UnknownQueryError.
"""

from enum import Enum


class QueryErrorKind(str, Enum):
    """Tag identifying the class of a failed query."""

    MISSING_CREDENTIAL = "missing_credential"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    NETWORK_UNREACHABLE = "network_unreachable"
    UPSTREAM_MALFORMED = "upstream_malformed"
    UNKNOWN = "unknown"


class QueryError(Exception):
    """Base exception for a failed weather query.

    Example:
        >>> err = RateLimitedError()
        >>> err.kind
        <QueryErrorKind.RATE_LIMITED: 'rate_limited'>
        >>> err.message
        'Too many requests. Please try again later.'
    """

    kind: QueryErrorKind = QueryErrorKind.UNKNOWN
    default_message: str = "Failed to fetch weather data"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class MissingCredentialError(QueryError):
    """Raised before any request when no API key is configured."""

    kind = QueryErrorKind.MISSING_CREDENTIAL
    default_message = (
        "API key is missing. Please add your OpenWeather API key to the environment variables."
    )


class InvalidInputError(QueryError):
    """Raised when the city input cannot be turned into a query."""

    kind = QueryErrorKind.INVALID_INPUT
    default_message = "Invalid city name provided"


class NotFoundError(QueryError):
    """Raised when the geocoder has no match or the API answers 404."""

    kind = QueryErrorKind.NOT_FOUND
    default_message = (
        "City not found. Please try entering a different city name or check the spelling."
    )

    @classmethod
    def for_query(cls, query: str) -> "NotFoundError":
        return cls(
            f'City "{query}" not found. Please check the spelling or try a different city name.'
        )


class RateLimitedError(QueryError):
    """Raised when the API answers 429."""

    kind = QueryErrorKind.RATE_LIMITED
    default_message = "Too many requests. Please try again later."


class UnauthorizedError(QueryError):
    """Raised when the API answers 401, regardless of the response body."""

    kind = QueryErrorKind.UNAUTHORIZED
    default_message = "Invalid API key. Please check your configuration."


class NetworkUnreachableError(QueryError):
    """Raised when no response was received (timeout, DNS, connection refused)."""

    kind = QueryErrorKind.NETWORK_UNREACHABLE
    default_message = (
        "No response received from weather service. Please check your internet connection."
    )


class UpstreamMalformedError(QueryError):
    """Raised when a response arrived but lacks the expected payload."""

    kind = QueryErrorKind.UPSTREAM_MALFORMED
    default_message = (
        "Failed to fetch weather data: the weather service returned an unexpected response."
    )


class UnknownQueryError(QueryError):
    """Any other failure. The detail is appended to a fixed prefix."""

    kind = QueryErrorKind.UNKNOWN

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_message
        super().__init__(f"Error: {self.detail}")
