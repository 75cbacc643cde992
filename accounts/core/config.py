# accounts/core/config.py
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from accounts.core.tokens import parse_ttl

_ALLOWED_ENVS = {"dev", "prod", "test"}


def _normalize_origin(origin: str) -> str:
    return origin.strip().rstrip("/")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # DB
    database_url: str = Field(..., alias="DATABASE_URL")

    # JWT (RS256 keypair, PEM; "\n" escapes allowed)
    jwt_private_key: str = Field("", alias="JWT_PRIVATE_KEY")
    jwt_public_key: str = Field("", alias="JWT_PUBLIC_KEY")
    access_token_ttl: int = Field(parse_ttl(None, "15m"), alias="ACCESS_TOKEN_TTL")
    refresh_token_ttl: int = Field(parse_ttl(None, "30d"), alias="REFRESH_TOKEN_TTL")

    # CORS
    front_api_base_url: str = Field("", alias="FRONT_API_BASE_URL")
    admin_app_origin: str = Field("", alias="ADMIN_APP_ORIGIN")
    cors_allow_origins: str = Field("", alias="CORS_ALLOW_ORIGINS")

    @field_validator("app_env")
    @classmethod
    def _check_env(cls, v: str) -> str:
        env = v.strip().lower()
        if env not in _ALLOWED_ENVS:
            allowed = "|".join(sorted(_ALLOWED_ENVS))
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return env

    @field_validator("access_token_ttl", mode="before")
    @classmethod
    def _access_ttl(cls, v):
        return parse_ttl(v if isinstance(v, str) else str(v), "15m")

    @field_validator("refresh_token_ttl", mode="before")
    @classmethod
    def _refresh_ttl(cls, v):
        return parse_ttl(v if isinstance(v, str) else str(v), "30d")

    @property
    def allowed_origins(self) -> List[str]:
        raw = [self.front_api_base_url, self.admin_app_origin, *self.cors_allow_origins.split(",")]
        origins: List[str] = []
        for o in raw:
            o = _normalize_origin(o)
            if o and o not in origins:
                origins.append(o)
        return origins


@lru_cache
def get_settings() -> Settings:
    """Settings loaded once from the environment (and .env)."""
    return Settings()
