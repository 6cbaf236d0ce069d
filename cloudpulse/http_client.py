"""
Secure HTTP Client Wrapper

Thin wrapper around a ``requests.Session`` used by every outbound HTTP call
(secret store, EC2 metadata service, GitHub API).

Usage:
    from cloudpulse.http_client import SecureHTTPClient

    client = SecureHTTPClient(headers={"Accept": "application/json"})
    response = client.get(url)

Security Features:
    - SSL verification always enabled (verify=True)
    - Default 30-second timeout on all requests
    - Shared default headers per client instance
    - Optional opt-out of environment proxy settings (trust_env=False)
"""

from typing import Any

import requests


class SecureHTTPClient:
    """
    HTTP client with enforced SSL verification and timeouts.

    One instance is created per external service at startup and shared by all
    request handlers.
    """

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        trust_env: bool = True,
    ):
        self.session = requests.Session()
        # trust_env=False ignores HTTP(S)_PROXY, NO_PROXY and .netrc
        self.session.trust_env = trust_env
        if headers:
            self.session.headers.update(headers)
        self.timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT

    def _apply_defaults(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        # Force SSL verification; callers may still shorten the timeout
        kwargs["verify"] = True
        kwargs.setdefault("timeout", self.timeout)
        return kwargs

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        """
        GET request with SSL verification enforced.

        Args:
            url: URL to fetch
            **kwargs: Additional arguments to pass to Session.get()
        """
        return self.session.get(url, **self._apply_defaults(kwargs))

    def put(self, url: str, **kwargs: Any) -> requests.Response:
        """
        PUT request with SSL verification enforced.

        Args:
            url: URL to put to
            **kwargs: Additional arguments to pass to Session.put()
        """
        return self.session.put(url, **self._apply_defaults(kwargs))

    def close(self) -> None:
        self.session.close()
