"""Shared HTTP transport for the directory REST adapter.

A thin wrapper around ``requests.Session`` that owns the timeout policy, the
retry loop for transport failures and the API-key header.

Dependencies:
    - ``requests`` for network I/O.
    - ``userdir.adapters.api_errors.ApiTimeoutError`` for typed transport failures.

Call context:
    - Constructed by ``UserRestAdapter`` in ``userdir/adapters/user_rest.py``.
    - Mapping non-2xx responses into errors is left to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from userdir.adapters.api_errors import ApiError, ApiTimeoutError

LOGGER = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Timeout in seconds for JSON API calls.
        retries: Number of retry attempts after the initial request.
    """

    request_timeout_s: int = 10
    retries: int = 2


class RetryingSession:
    """Requests wrapper with API-key headers and a retry loop.

    Only timeouts and connection errors are retried. HTTP error statuses are
    returned to the caller unchanged.
    """

    def __init__(self, api_key: Optional[str], cfg: HttpConfig) -> None:
        self.session = requests.Session()
        self.api_key = api_key
        self.cfg = cfg

    def _headers(self, accept: str = "application/json") -> Dict[str, str]:
        headers = {"Accept": accept}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        accept: str = "application/json",
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a GET request, retrying on timeout/connectivity failures.

        Args:
            url: Absolute endpoint URL.
            params: Optional query parameter mapping.
            accept: ``Accept`` header value.
            timeout: Optional timeout override in seconds.

        Returns:
            ``requests.Response`` from the first attempt that reached the server.

        Raises:
            ApiTimeoutError: If every attempt timed out or failed to connect.
            ApiError: For any other ``requests`` failure.
        """
        context = f"GET {url}"
        last_err: ApiTimeoutError | None = None
        attempts = self.cfg.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self.session.get(
                    url,
                    params=params,
                    headers=self._headers(accept=accept),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError):
                LOGGER.debug("%s failed (attempt %d/%d)", context, attempt, attempts)
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
            except req_exc.RequestException as exc:
                raise ApiError(str(exc), context=context) from exc
        raise last_err


__all__ = ["HttpConfig", "RetryingSession"]
