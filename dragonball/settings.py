"""Centralized configuration management for the Dragon Ball favorites layer."""

from __future__ import annotations

import logging
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables defined in a local .env file before instantiating the
# settings singleton so every consumer of :mod:`dragonball.settings` sees them.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_CATALOG_BASE_URL = "https://dragonball-api.com/api"
DEFAULT_CATALOG_CATEGORIES = ("dragonball", "dragonballz", "dragonballgt", "dragons")
DEFAULT_CATALOG_PAGE_SIZE = 58
DEFAULT_CATALOG_MAX_PAGES = 20
DEFAULT_FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"
DEFAULT_FIRESTORE_COLLECTION = "favoriteCharacters"
DEFAULT_FIRESTORE_PAGE_SIZE = 100
DEFAULT_FIRESTORE_MAX_PAGES = 50
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0
DEFAULT_LOG_LEVEL = "INFO"


def _normalize_base_url(url: str) -> str:
    """Return ``url`` stripped of whitespace and trailing slashes."""

    return url.strip().rstrip("/")


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Besides the raw environment values the class exposes derived helpers
    (the Firestore documents URL, the numeric log level) so the store and
    catalog clients never repeat parsing logic.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    catalog_base_url: str = Field(
        default=DEFAULT_CATALOG_BASE_URL,
        alias="CATALOG_BASE_URL",
        description="Root URL of the character catalog HTTP service.",
    )
    catalog_page_size: int = Field(
        default=DEFAULT_CATALOG_PAGE_SIZE,
        alias="CATALOG_PAGE_SIZE",
        ge=1,
        description="Number of characters requested per catalog page.",
    )
    catalog_max_pages: int = Field(
        default=DEFAULT_CATALOG_MAX_PAGES,
        alias="CATALOG_MAX_PAGES",
        ge=1,
        description="Upper bound on pages followed for a single category.",
    )
    firestore_base_url: str = Field(
        default=DEFAULT_FIRESTORE_BASE_URL,
        alias="FIRESTORE_BASE_URL",
        description="Firestore REST endpoint (override for the local emulator).",
    )
    firestore_project_id: str | None = Field(
        default=None,
        alias="FIRESTORE_PROJECT_ID",
        description="Project owning the favorites documents.",
    )
    firestore_collection: str = Field(
        default=DEFAULT_FIRESTORE_COLLECTION,
        alias="FIRESTORE_COLLECTION",
        description="Collection whose documents are keyed by character ID.",
    )
    firestore_api_token: str | None = Field(
        default=None,
        alias="FIRESTORE_API_TOKEN",
        description="Optional bearer token attached to every Firestore request.",
    )
    firestore_page_size: int = Field(
        default=DEFAULT_FIRESTORE_PAGE_SIZE,
        alias="FIRESTORE_PAGE_SIZE",
        ge=1,
        description="Documents requested per page when listing favorites.",
    )
    firestore_max_pages: int = Field(
        default=DEFAULT_FIRESTORE_MAX_PAGES,
        alias="FIRESTORE_MAX_PAGES",
        ge=1,
        description="Upper bound on pages followed when listing favorites.",
    )
    http_timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        alias="HTTP_TIMEOUT_SECONDS",
        gt=0,
        description="Timeout applied to every outbound HTTP request.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )

    @property
    def firestore_documents_url(self) -> str:
        """Return the documents root for the configured project."""

        project = (self.firestore_project_id or "").strip()
        if not project:
            raise RuntimeError(
                "FIRESTORE_PROJECT_ID is not set; favorites cannot be persisted."
            )
        base = _normalize_base_url(self.firestore_base_url)
        return f"{base}/projects/{project}/databases/(default)/documents"

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not (self.firestore_project_id or "").strip():
            warnings.append(
                "FIRESTORE_PROJECT_ID is not set - the favorites view model "
                "cannot be created"
            )

        if not self.firestore_api_token:
            warnings.append(
                "FIRESTORE_API_TOKEN is not set - requests are sent unauthenticated "
                "(only the Firestore emulator accepts them)"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


settings = get_settings()

__all__ = [
    "AppSettings",
    "DEFAULT_CATALOG_BASE_URL",
    "DEFAULT_CATALOG_CATEGORIES",
    "DEFAULT_CATALOG_MAX_PAGES",
    "DEFAULT_CATALOG_PAGE_SIZE",
    "DEFAULT_FIRESTORE_BASE_URL",
    "DEFAULT_FIRESTORE_COLLECTION",
    "DEFAULT_FIRESTORE_MAX_PAGES",
    "DEFAULT_FIRESTORE_PAGE_SIZE",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_LOG_LEVEL",
    "get_settings",
    "settings",
]
