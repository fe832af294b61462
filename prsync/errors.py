"""Errors raised when talking to the review platform."""


class ReviewPlatformError(Exception):
    """Raised when a review platform API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ReviewPlatformError):
    """Raised when a response body is not JSON or does not match the expected
    payload."""

    pass


class UnexpectedResponseError(ReviewPlatformError, ValueError):
    """Raised when an endpoint answers with a status the protocol does not
    allow (e.g. the diff endpoint not redirecting)."""

    pass
