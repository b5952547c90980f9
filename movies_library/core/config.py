import json
from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


@dataclass(frozen=True)
class TMDBConfig:
    api_key: str
    base_url: str = "https://api.themoviedb.org/3"
    image_base_url: str = "https://image.tmdb.org/t/p/w500"
    image_original_base_url: str = "https://image.tmdb.org/t/p/original"
    language: str = "en-US"
    timeout_seconds: float = 10
    cache_ttl_seconds: int = 600


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = Field(default="local", alias="ENV")
    database_url: str = Field(default="sqlite+aiosqlite:///./movies_library.db", alias="DATABASE_URL")

    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    # ─────────────────────────────────────────────
    # TMDB
    # ─────────────────────────────────────────────
    tmdb_api_key: str = Field(alias="TMDB_API_KEY")
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3", alias="TMDB_BASE_URL")
    tmdb_image_base_url: str = Field(default="https://image.tmdb.org/t/p/w500", alias="TMDB_IMAGE_BASE_URL")
    tmdb_image_original_base_url: str = Field(
        default="https://image.tmdb.org/t/p/original",
        alias="TMDB_IMAGE_ORIGINAL_BASE_URL",
    )
    tmdb_language: str = Field(default="en-US", alias="TMDB_LANGUAGE")
    tmdb_timeout_seconds: float = Field(default=10, alias="TMDB_TIMEOUT_SECONDS")
    tmdb_cache_ttl_seconds: int = Field(default=600, alias="TMDB_CACHE_TTL_SECONDS")

    # ─────────────────────────────────────────────
    # Search / wishlist
    # ─────────────────────────────────────────────
    search_debounce_ms: int = Field(default=500, alias="SEARCH_DEBOUNCE_MS")
    wishlist_cookie_name: str = Field(default="wishlist_client", alias="WISHLIST_COOKIE_NAME")

    @field_validator("database_url", mode="before")
    @classmethod
    def normalize_database_url(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        cleaned = value.strip()
        if cleaned.startswith("postgres://"):
            cleaned = f"postgresql://{cleaned[len('postgres://'):]}"
        if cleaned.startswith("postgresql://") and not cleaned.startswith("postgresql+"):
            cleaned = cleaned.replace("postgresql://", "postgresql+asyncpg://", 1)
        return cleaned

    @field_validator("tmdb_base_url", "tmdb_image_base_url", "tmdb_image_original_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        return value.strip().rstrip("/")

    @field_validator("search_debounce_ms")
    @classmethod
    def validate_search_debounce_ms(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("SEARCH_DEBOUNCE_MS must be greater than 0")
        return value

    def tmdb_config(self) -> TMDBConfig:
        return TMDBConfig(
            api_key=self.tmdb_api_key,
            base_url=self.tmdb_base_url,
            image_base_url=self.tmdb_image_base_url,
            image_original_base_url=self.tmdb_image_original_base_url,
            language=self.tmdb_language,
            timeout_seconds=self.tmdb_timeout_seconds,
            cache_ttl_seconds=self.tmdb_cache_ttl_seconds,
        )

    def cors_origin_list(self) -> list[str]:
        raw = (self.cors_origins or "").strip()
        if not raw:
            return []

        values: list[str]
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                values = [str(v) for v in parsed if isinstance(v, str)]
            else:
                values = [raw]
        else:
            values = raw.split(",")

        normalized: list[str] = []
        seen: set[str] = set()
        for value in values:
            cleaned = value.strip().strip("\"'")
            if not cleaned:
                continue
            # CORS origins are scheme + host (+ optional port) with no path slash.
            if cleaned != "*" and cleaned.endswith("/"):
                cleaned = cleaned.rstrip("/")
            if cleaned in seen:
                continue
            seen.add(cleaned)
            normalized.append(cleaned)

        return normalized

settings = Settings()
