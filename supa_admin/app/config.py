from __future__ import annotations

import os
from dataclasses import dataclass

from supa_admin.clients.supabase_sdk.config import ClientConfig, ConfigError, load_config, parse_bool

DEFAULT_SITE_URL = "http://localhost:4200"


@dataclass(frozen=True)
class AppConfig:
    client: ClientConfig
    site_url: str = DEFAULT_SITE_URL
    legacy_users_shape: bool = False
    page_size: int = 10

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "AppConfig":
        client = load_config(env_file)
        raw_page_size = os.getenv("SUPA_ADMIN_PAGE_SIZE", "10")
        try:
            page_size = int(raw_page_size)
        except ValueError as exc:
            raise ConfigError(f"Invalid SUPA_ADMIN_PAGE_SIZE: expected an integer, got {raw_page_size!r}") from exc
        config = cls(
            client=client,
            site_url=(os.getenv("SUPA_ADMIN_SITE_URL") or DEFAULT_SITE_URL).strip().rstrip("/"),
            legacy_users_shape=parse_bool(os.getenv("SUPA_ADMIN_LEGACY_USERS_SHAPE"), default=False),
            page_size=page_size,
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not self.site_url.startswith(("http://", "https://")):
            raise ConfigError("SUPA_ADMIN_SITE_URL debe ser una URL http(s)")
        if self.page_size < 1:
            raise ConfigError("SUPA_ADMIN_PAGE_SIZE debe ser >= 1")

    def redirect_url(self, path: str) -> str:
        return f"{self.site_url}/{path.lstrip('/')}"

    @property
    def invitation_redirect_url(self) -> str:
        return self.redirect_url("/auth/callback")

    @property
    def oauth_redirect_url(self) -> str:
        return self.redirect_url("/dashboard")
