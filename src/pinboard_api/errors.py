"""Exceptions raised by the Pinboard API client."""

from typing import Optional


class PinboardError(Exception):
    """Base exception class for Pinboard API client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code:
            return f"[Status Code: {self.status_code}] {self.message}"
        return self.message


class InvalidArgument(PinboardError, ValueError):
    """Raised when caller input fails a precondition. No request is sent."""


class PinboardConnectionError(PinboardError):
    """Raised for transport failures: DNS, connect, TLS or timeout."""


class AuthenticationFailure(PinboardError):
    """Exception raised for authentication errors (401)."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401)


class TooManyRequests(PinboardError):
    """Exception raised when the API rate limit is hit (429).

    The client never retries; backing off is up to the caller.
    """

    def __init__(self, message: str = "Too many requests"):
        super().__init__(message, status_code=429)


class InvalidResponse(PinboardError):
    """Raised for unexpected HTTP statuses and unparsable response bodies."""
