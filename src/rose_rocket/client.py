"""Base API client for the Rose Rocket platform.

Every resource call goes through :meth:`RoseRocketClient.request`, which
resolves the tenant's host, attaches a bearer token and retries transient
server failures.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import httpx

from rose_rocket.auth import AuthManager
from rose_rocket.config import Config
from rose_rocket.utils.errors import ParseError
from rose_rocket.utils.retry import call_with_retry

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class RoseRocketClient:
    """HTTP client for the Rose Rocket API with retry and auth handling."""

    def __init__(
        self,
        config: Config,
        auth: AuthManager,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        retry_jitter: float | None = None,
        verbose: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        settings = config.settings
        self._config = config
        self._auth = auth
        self._max_retries = max_retries if max_retries is not None else settings.max_retries
        self._retry_delay = retry_delay if retry_delay is not None else settings.retry_delay
        self._retry_jitter = retry_jitter if retry_jitter is not None else settings.retry_jitter
        self._verbose = verbose
        self._sleep = sleep
        self._http = httpx.Client(timeout=settings.timeout)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def auth(self) -> AuthManager:
        return self._auth

    def url(self, tenant: str, path: str) -> str:
        """Absolute URL for an API path such as "/orders/123"."""
        return self._config.base_url(tenant) + API_PREFIX + path

    def request(
        self,
        method: str,
        path: str,
        tenant: str,
        *,
        body: dict[str, Any] | list | None = None,
        params: Any = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        accept: str | None = None,
        extra_headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make an authenticated API request with retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: API path below /api/v1 (e.g. "/orders/abc/legs").
            tenant: Tenant name; selects credentials and host.
            body: JSON request body.
            params: Query parameters (mapping, list of pairs, or query string).
            files: Multipart file parts.
            data: Multipart form fields sent alongside ``files``.
            accept: Override Accept header.
            extra_headers: Additional headers to include.

        Returns:
            The first 2xx httpx.Response.

        Raises:
            RequestFailed: 4xx, or 5xx after all retries.
            NetworkError: Transport failure after all retries.
            TokenExchangeFailed / MalformedTokenResponse / UnknownTenant: from auth.
        """
        url = self.url(tenant, path)
        label = f"{method.upper()} {url}"

        def send() -> httpx.Response:
            headers = self._build_headers(tenant, accept, extra_headers)
            if self._verbose and body is not None:
                logger.info(f"Body: {body}")
            return self._http.request(
                method=method.upper(),
                url=url,
                headers=headers,
                json=body,
                params=params,
                files=files,
                data=data,
            )

        return call_with_retry(
            send,
            self._max_retries,
            retry_delay=self._retry_delay,
            jitter=self._retry_jitter,
            sleep=self._sleep,
            label=label,
        )

    def request_json(self, method: str, path: str, tenant: str, **kwargs: Any) -> Any:
        """Make a request and decode its JSON body (None for an empty body)."""
        response = self.request(method, path, tenant, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {method.upper()} {path}: {e}") from e

    def get(self, path: str, tenant: str, **kwargs: Any) -> Any:
        """GET and decode JSON."""
        return self.request_json("GET", path, tenant, **kwargs)

    def post(self, path: str, tenant: str, **kwargs: Any) -> Any:
        """POST and decode JSON."""
        return self.request_json("POST", path, tenant, **kwargs)

    def put(self, path: str, tenant: str, **kwargs: Any) -> Any:
        """PUT and decode JSON."""
        return self.request_json("PUT", path, tenant, **kwargs)

    def delete(self, path: str, tenant: str, **kwargs: Any) -> Any:
        """DELETE and decode JSON (usually None: 204 No Content)."""
        return self.request_json("DELETE", path, tenant, **kwargs)

    def _build_headers(
        self,
        tenant: str,
        accept: str | None = None,
        extra_headers: dict[str, str] | None = None,
    ) -> dict[str, str]:
        """Build request headers with the tenant's bearer token."""
        token = self._auth.get_access_token(tenant)

        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": accept or "application/json",
        }

        if extra_headers:
            headers.update(extra_headers)

        return headers

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
        self._auth.close()
