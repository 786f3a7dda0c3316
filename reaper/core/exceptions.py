"""
Custom application exceptions.
"""


class ReaperError(Exception):
    """Base exception for reaper errors."""
    pass


class ConfigurationError(ReaperError, ValueError):
    """Configuration is missing or malformed."""
    pass


class TransportError(ReaperError):
    """Provider API call failed."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class RequestFailedError(TransportError):
    """Request never produced a response (connection, DNS, timeout)."""
    pass


class UnexpectedStatusError(TransportError):
    """Provider answered with a status other than 200/204."""

    def __init__(self, status_code: int, body: str, method: str, url: str):
        super().__init__(
            f"{method} {url} returned {status_code}\n\n{body}\n",
            url=url,
        )
        self.status_code = status_code
        self.body = body
        self.method = method


class DecodeError(TransportError):
    """Response body could not be decoded."""

    def __init__(self, message: str, raw_body: str | bytes, url: str | None = None):
        super().__init__(message, url=url)
        self.raw_body = raw_body


class PayloadError(DecodeError):
    """Response body is valid JSON but not the shape we expect."""
    pass


class ProbeError(ReaperError):
    """Operations of one repository check failed while others went through.

    ``cancellations`` holds the cancels the provider accepted before the
    check was given up on.
    """

    def __init__(self, errors: list[Exception], cancellations: list | None = None):
        self.errors = list(errors)
        self.cancellations = list(cancellations or [])
        summary = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(f"{len(self.errors)} operations failed: {summary}")
