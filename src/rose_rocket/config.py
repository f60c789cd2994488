"""Configuration management for the Rose Rocket client.

Loads tenant credentials from config/tenants.yaml (with .env fallbacks)
and client settings from ROSE_ROCKET_* environment variables.
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from rose_rocket.utils.errors import ConfigMissing, UnknownTenant

DEFAULT_BASE_URL = "https://platform.roserocket.com"
DEFAULT_TOKEN_ENDPOINT = "https://auth.roserocket.com/oauth2/token"

CREDENTIAL_FIELDS = ("username", "password", "client_id", "client_secret")


class TenantConfig(BaseModel):
    """Credential bundle for one backend account."""
    tenant_id: str
    username: str
    password: str
    client_id: str
    client_secret: str
    subdomain: str | None = None
    base_url: str | None = None

    model_config = {"frozen": True}


class Settings(BaseModel):
    """Client settings loaded from environment variables."""
    token_endpoint: str = Field(default=DEFAULT_TOKEN_ENDPOINT, description="OAuth2 password-grant endpoint")
    default_base_url: str = Field(default=DEFAULT_BASE_URL, description="API host used when a tenant has no subdomain")
    max_retries: int = Field(default=3, description="Attempts per request before giving up")
    retry_delay: float = Field(default=1.0, description="Backoff base in seconds")
    retry_jitter: float = Field(default=1.0, description="Upper bound of random backoff jitter in seconds")
    page_limit: int = Field(default=50, description="Records requested per page")
    timeout: float = Field(default=60.0, description="HTTP timeout in seconds")
    webhook_status: str = Field(default="in-transit", description="Order status accepted by the webhook")


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings
    tenants: dict[str, TenantConfig]

    def get_tenant(self, tenant: str) -> TenantConfig:
        """Look up a tenant by name (case-sensitive)."""
        if tenant not in self.tenants:
            raise UnknownTenant(tenant, self.all_tenants)
        return self.tenants[tenant]

    def base_url(self, tenant: str) -> str:
        """API host for a tenant, without trailing slash."""
        cfg = self.get_tenant(tenant)
        if cfg.subdomain and cfg.subdomain.strip():
            return f"https://{cfg.subdomain.strip()}.roserocket.com"
        if cfg.base_url and cfg.base_url.strip():
            return cfg.base_url.strip().rstrip("/")
        return self.settings.default_base_url.rstrip("/")

    @property
    def all_tenants(self) -> list[str]:
        """List all configured tenant names."""
        return sorted(self.tenants.keys())


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where config/ lives)."""
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / "config" / "tenants.yaml").exists():
            return parent
    return Path.cwd()


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _tenant_env_key(tenant: str, field: str) -> str:
    """ROSE_ROCKET_<TENANT>_<FIELD>, e.g. ROSE_ROCKET_ACME_CLIENT_SECRET."""
    slug = re.sub(r"[^A-Za-z0-9]+", "_", tenant).strip("_").upper()
    return f"ROSE_ROCKET_{slug}_{field.upper()}"


def _build_tenant(name: str, data: dict | None) -> TenantConfig:
    """Merge YAML values with environment fallbacks for one tenant."""
    if data is not None and not isinstance(data, dict):
        raise ConfigMissing(f"Tenant '{name}' must be a mapping of credential fields, got {type(data).__name__}")
    data = {str(k).lower(): v for k, v in (data or {}).items()}
    values: dict[str, str | None] = {"tenant_id": name}

    for field in CREDENTIAL_FIELDS:
        value = data.get(field) or _env(_tenant_env_key(name, field))
        if not value:
            raise ConfigMissing(
                f"Tenant '{name}' is missing '{field}' "
                f"(set it in tenants.yaml or {_tenant_env_key(name, field)})"
            )
        values[field] = str(value)

    for field in ("subdomain", "base_url"):
        value = data.get(field) or _env(_tenant_env_key(name, field))
        values[field] = str(value) if value else None

    return TenantConfig(**values)


def _load_tenants(tenants_path: Path) -> dict[str, TenantConfig]:
    """Load tenant credential bundles from tenants.yaml."""
    if not tenants_path.exists():
        raise ConfigMissing(f"Tenants config not found at {tenants_path}")

    try:
        with open(tenants_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigMissing(f"Tenants config at {tenants_path} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigMissing(f"Tenants config at {tenants_path} must be a mapping with a 'tenants' key")

    entries = data.get("tenants") or {}
    if not isinstance(entries, dict):
        raise ConfigMissing(f"'tenants' in {tenants_path} must map tenant names to credentials")

    tenants = {}
    for name, tenant_data in entries.items():
        tenants[str(name)] = _build_tenant(str(name), tenant_data)
    return tenants


def _load_settings() -> Settings:
    """Load settings from ROSE_ROCKET_* environment variables."""
    try:
        return Settings(
            token_endpoint=_env("ROSE_ROCKET_TOKEN_ENDPOINT", default=DEFAULT_TOKEN_ENDPOINT),
            default_base_url=_env("ROSE_ROCKET_BASE_URL", default=DEFAULT_BASE_URL),
            max_retries=_env("ROSE_ROCKET_MAX_RETRIES", default="3"),
            retry_delay=_env("ROSE_ROCKET_RETRY_DELAY", default="1.0"),
            retry_jitter=_env("ROSE_ROCKET_RETRY_JITTER", default="1.0"),
            page_limit=_env("ROSE_ROCKET_PAGE_LIMIT", default="50"),
            timeout=_env("ROSE_ROCKET_TIMEOUT", default="60"),
            webhook_status=_env("ROSE_ROCKET_WEBHOOK_STATUS", default="in-transit"),
        )
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ConfigMissing(f"Invalid ROSE_ROCKET_* setting(s): {fields}") from e


def _load_env_file(project_root: Path) -> None:
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)


def load_settings() -> Settings:
    """Load settings from the environment, reading the project's .env first."""
    _load_env_file(_find_project_root())
    return _load_settings()


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()
    _load_env_file(project_root)

    tenants_file = _env("ROSE_ROCKET_TENANTS_FILE")
    tenants_path = Path(tenants_file) if tenants_file else project_root / "config" / "tenants.yaml"

    return Config(settings=_load_settings(), tenants=_load_tenants(tenants_path))
