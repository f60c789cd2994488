"""OAuth2 password-grant authentication for the Rose Rocket API.

Exchanges per-tenant credentials for bearer tokens and caches them until
expiry. Expiry is checked lazily on every call; there is no background
refresh.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable

import httpx
from pydantic import ValidationError

from rose_rocket.config import Config, TenantConfig
from rose_rocket.models.auth import CachedToken, TokenResponse, TokenStatus
from rose_rocket.utils.errors import MalformedTokenResponse, TokenExchangeFailed

logger = logging.getLogger(__name__)


class TokenCache:
    """In-memory token store, one entry per tenant.

    Entries are frozen ``CachedToken`` records replaced by a single dict
    assignment, so a reader never sees a token paired with another token's
    expiry.
    """

    def __init__(self) -> None:
        self._store: dict[str, CachedToken] = {}

    def get(self, tenant_id: str) -> CachedToken | None:
        return self._store.get(tenant_id)

    def put(self, entry: CachedToken) -> None:
        self._store[entry.tenant_id] = entry

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


class AuthManager:
    """Manages OAuth2 access tokens for every configured tenant."""

    def __init__(
        self,
        config: Config,
        cache: TokenCache | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._cache = cache if cache is not None else TokenCache()
        self._clock = clock
        self._http = httpx.Client(timeout=30.0)

    @property
    def cache(self) -> TokenCache:
        return self._cache

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def get_access_token(self, tenant: str, force_refresh: bool = False) -> str:
        """Get a valid access token, exchanging credentials if needed.

        Args:
            tenant: Tenant name as configured in tenants.yaml.
            force_refresh: Exchange credentials even if the cached token is valid.

        Returns:
            A bearer token whose expiry is still in the future.

        Raises:
            UnknownTenant: The tenant is not configured.
            TokenExchangeFailed: The identity endpoint rejected the exchange
                or could not be reached. The cache is left untouched.
            MalformedTokenResponse: A 2xx body lacked access_token/expires_in.
        """
        tenant_cfg = self._config.get_tenant(tenant)

        cached = self._cache.get(tenant)
        if not force_refresh and cached is not None and cached.is_valid(self._now_ms()):
            logger.debug(f"Returning cached access token for {tenant}")
            return cached.token

        return self._exchange(tenant_cfg)

    def get_status(self, tenant: str) -> TokenStatus:
        """Get the cached token status for a tenant."""
        self._config.get_tenant(tenant)
        cached = self._cache.get(tenant)
        if cached is None:
            return TokenStatus(tenant_id=tenant, has_token=False, is_expired=True)

        now_ms = self._now_ms()
        is_expired = not cached.is_valid(now_ms)
        seconds_remaining = None
        if not is_expired:
            seconds_remaining = (cached.expires_at_ms - now_ms) // 1000

        return TokenStatus(
            tenant_id=tenant,
            has_token=True,
            is_expired=is_expired,
            expires_at=datetime.fromtimestamp(cached.expires_at_ms / 1000),
            seconds_remaining=seconds_remaining,
        )

    def _exchange(self, tenant_cfg: TenantConfig) -> str:
        """Trade the tenant's credentials for a new token and cache it."""
        tenant = tenant_cfg.tenant_id
        endpoint = self._config.settings.token_endpoint

        try:
            response = self._http.post(
                endpoint,
                json={
                    "grant_type": "password",
                    "username": tenant_cfg.username,
                    "password": tenant_cfg.password,
                    "client_id": tenant_cfg.client_id,
                    "client_secret": tenant_cfg.client_secret,
                },
            )
        except httpx.HTTPError as e:
            logger.warning(f"Token exchange for {tenant} failed: {e}")
            raise TokenExchangeFailed(tenant, None, str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"Token exchange for {tenant} returned HTTP {response.status_code}")
            raise TokenExchangeFailed(tenant, response.status_code, response.text)

        try:
            token_data = TokenResponse(**response.json()).data
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"access_token or expires_in missing from token response for {tenant}")
            raise MalformedTokenResponse(
                f"Token response for '{tenant}' lacks data.access_token/data.expires_in"
            ) from e

        entry = CachedToken(
            tenant_id=tenant,
            token=token_data.access_token,
            expires_at_ms=self._now_ms() + token_data.expires_in * 1000,
        )
        self._cache.put(entry)
        logger.info(
            f"Obtained new access token for {tenant}; expires at "
            f"{datetime.fromtimestamp(entry.expires_at_ms / 1000)}"
        )
        return entry.token

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
