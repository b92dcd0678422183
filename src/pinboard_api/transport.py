"""HTTP transport for the Pinboard API: one GET per call, outcome classification."""

import logging
import re
from collections.abc import Callable
from enum import Enum
from typing import Any, Optional

import httpx

from pinboard_api.errors import (
    AuthenticationFailure,
    InvalidArgument,
    InvalidResponse,
    PinboardConnectionError,
    TooManyRequests,
)
from pinboard_api.version import __version__

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.pinboard.in/v1/"
USER_AGENT = f"pinboard-api-client/{__version__} (python-httpx/{httpx.__version__})"
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_TIMEOUT = 30.0
TOKEN_HEX_LENGTH = 20

_AUTH_TOKEN_IN_URL = re.compile(r"(auth_token=)[^&]+")


class AuthMode(str, Enum):
    """How credentials are presented to the API."""

    BASIC = "basic"
    TOKEN = "token"


def detect_auth_mode(username: str, secret: str) -> AuthMode:
    """Pick token mode for ``username:<20 hex>`` secrets, Basic auth otherwise."""
    pattern = rf"^{re.escape(username)}:[0-9A-Fa-f]{{{TOKEN_HEX_LENGTH}}}$"
    if re.match(pattern, secret):
        return AuthMode.TOKEN
    return AuthMode.BASIC


def mask_token(url: str) -> str:
    """Hide the auth_token value of a request URL."""
    return _AUTH_TOKEN_IN_URL.sub(r"\1***", url)


class Transport:
    """Issue authenticated GET requests against the API and classify the result.

    The underlying ``httpx.Client`` is created on first use and kept for the
    transport's lifetime. Requests are never retried.
    """

    def __init__(
        self,
        username: str,
        secret: str,
        *,
        base_url: str = API_BASE_URL,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        timeout: float = DEFAULT_TIMEOUT,
        default_params: Optional[dict[str, str]] = None,
    ):
        self.username = username
        self._secret = secret
        self.auth_mode = detect_auth_mode(username, secret)
        self.base_url = base_url
        self.connect_timeout = connect_timeout
        self.timeout = timeout
        self.default_params = dict(default_params or {})

        self._http: Optional[httpx.Client] = None
        self._logging_callback: Optional[Callable[[str], Any]] = None

    def enable_logging(self, func: Callable[[str], Any]) -> None:
        """Report every fully resolved request URL to ``func`` before sending."""
        if not callable(func):
            raise InvalidArgument("Argument is not a callable function or method")
        self._logging_callback = func

    def _client(self) -> httpx.Client:
        if self._http is None or self._http.is_closed:
            auth = (
                (self.username, self._secret)
                if self.auth_mode is AuthMode.BASIC
                else None
            )
            self._http = httpx.Client(
                base_url=self.base_url,
                auth=auth,
                headers={"User-Agent": USER_AGENT},
                timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
                follow_redirects=True,
                max_redirects=1,
            )
        return self._http

    def _query(self, params: Optional[dict[str, Any]]) -> dict[str, Any]:
        query = dict(params or {})
        query.update(self.default_params)
        if self.auth_mode is AuthMode.TOKEN:
            query["auth_token"] = self._secret
        return query

    def get(self, method: str, params: Optional[dict[str, Any]] = None) -> str:
        """Call an API method and return the body of a 200 response.

        Raises:
            AuthenticationFailure: HTTP 401.
            TooManyRequests: HTTP 429.
            InvalidResponse: any other non-200 status, or a redirect loop.
            PinboardConnectionError: no HTTP response was received.
        """
        http = self._client()
        request = http.build_request("GET", method, params=self._query(params))
        url = str(request.url)

        logger.debug("GET %s", mask_token(url))
        if self._logging_callback is not None:
            self._logging_callback(url)

        try:
            response = http.send(request)
        except httpx.TooManyRedirects as e:
            logger.warning("Too many redirects calling %s", method)
            raise InvalidResponse(f"Too many redirects: {e}") from e
        except httpx.RequestError as e:
            logger.warning("Connection error calling %s: %s", method, e)
            raise PinboardConnectionError(str(e) or "Unknown error") from e

        status = response.status_code
        if status == 200:
            return response.text

        logger.warning("%s returned HTTP %d", method, status)
        if status == 401:
            raise AuthenticationFailure()
        if status == 429:
            raise TooManyRequests()
        raise InvalidResponse(
            f"Server responded with HTTP status code {status}", status_code=status
        )

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        if self._http is not None:
            self._http.close()
            self._http = None
