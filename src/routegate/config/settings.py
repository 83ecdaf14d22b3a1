"""Gateway configuration using pydantic-settings"""

from typing import Mapping, Optional, Protocol

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CORS_ALLOWED_LIST_KEY = "cors.allowed.list"


class Settings(BaseSettings):
    """Gateway configuration from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gateway Configuration
    gateway_host: str = Field(
        default="0.0.0.0",
        description="Gateway bind host",
    )
    gateway_port: int = Field(
        default=8080,
        description="Gateway bind port",
    )

    # CORS Configuration
    cors_allowed_list: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://localhost:8080",
        description="Comma-separated list of allowed CORS origins, matched exactly (no wildcard)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Authentication Configuration
    auth_required: bool = Field(
        default=False,
        description="Reject requests without a bearer token. Off by default so public routes stay reachable.",
    )
    jwt_secret: Optional[str] = Field(
        default=None,
        description="Shared secret for HS* signed tokens",
    )
    jwt_algorithms: str = Field(
        default="HS256",
        description="Comma-separated list of accepted signing algorithms",
    )
    jwt_audience: Optional[str] = Field(
        default=None,
        description="Expected 'aud' claim, not checked when unset",
    )
    jwt_issuer: Optional[str] = Field(
        default=None,
        description="Expected 'iss' claim, not checked when unset",
    )
    jwks_url: Optional[str] = Field(
        default=None,
        description="JWKS endpoint for RS256 tokens, used when no secret is set",
    )

    # JWK Cache Configuration
    jwk_cache_ttl: int = Field(
        default=300,
        description="JWK cache TTL in seconds (5 minutes)",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into list"""
        return _split_list(self.cors_allowed_list)

    @property
    def jwt_algorithms_list(self) -> list[str]:
        return _split_list(self.jwt_algorithms)


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class ConfigLookup(Protocol):
    """Read-only key/value configuration source"""

    def get(self, key: str) -> str:
        ...


class SettingsConfigLookup:
    """
    Resolve dotted configuration keys against a Settings instance.

    ``cors.allowed.list`` maps to ``Settings.cors_allowed_list``. Unknown
    keys resolve to an empty string.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def get(self, key: str) -> str:
        value = getattr(self.settings, key.replace(".", "_"), None)
        if value is None:
            return ""
        return str(value)


class StaticConfigLookup:
    """Configuration lookup backed by a fixed mapping"""

    def __init__(self, values: Mapping[str, str]):
        self._values = dict(values)

    def get(self, key: str) -> str:
        return self._values.get(key, "")


# Singleton settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings singleton"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
