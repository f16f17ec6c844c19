"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "UnboundedFigures API"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./unbounded_figures.db"

    # Identity provider
    auth_provider_url: str = ""
    auth_provider_api_key: str = ""
    auth_jwt_secret: str = ""
    auth_jwt_algorithm: str = "HS256"
    auth_jwt_audience: str = "authenticated"
    auth_cookie_name: str = "sb-access-token"

    # Avatar uploads
    avatar_dir: str = "./public/avatars"
    avatar_url_prefix: str = "/avatars"
    avatar_max_bytes: int = 5 * 1024 * 1024

    # Development-only identity substitute (requires DEBUG and DEV_AUTH_BYPASS)
    dev_seed_user_id: int | None = None
    dev_auth_bypass: bool = False

    @field_validator("auth_jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str, info) -> str:
        """Reject short verification secrets outside debug mode."""
        debug = info.data.get("debug", False)
        if v and not debug and len(v) < 32:
            raise ValueError("AUTH_JWT_SECRET must be at least 32 characters in production mode")
        return v

    @property
    def dev_bypass_active(self) -> bool:
        """Whether the seed user may stand in for a missing identity."""
        return self.debug and self.dev_auth_bypass and self.dev_seed_user_id is not None

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if not self.auth_jwt_secret and not self.auth_provider_url:
            warnings.append(
                "Neither AUTH_JWT_SECRET nor AUTH_PROVIDER_URL is set - "
                "authenticated endpoints will reject every request"
            )

        if self.auth_provider_url and not self.auth_provider_api_key:
            warnings.append("AUTH_PROVIDER_API_KEY is not set - provider lookups may be refused")

        if self.dev_auth_bypass and not self.debug:
            warnings.append("DEV_AUTH_BYPASS is ignored because DEBUG is disabled")
        elif self.dev_bypass_active:
            warnings.append(
                "DEV_AUTH_BYPASS is enabled - anonymous requests act as user "
                f"{self.dev_seed_user_id}"
            )

        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
