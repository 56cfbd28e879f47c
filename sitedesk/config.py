import json
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_project_root = Path(__file__).resolve().parents[1]
load_dotenv(_project_root / ".env", override=False)


def _coerce_json(value: str):
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


# Blur placeholder served until an application uploads its own image.
PLACEHOLDER_BLURHASH = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"

    DATABASE_URL: str
    CLERK_JWT_ISSUER: str
    CLERK_JWKS_URL: str
    CLERK_AUDIENCE: list[str] = ["http://localhost:3000", "backend"]

    DB_POOL_SIZE: int = 20
    DB_POOL_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30

    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Tenant sites are served from https://{subdomain}.{SITES_ROOT_DOMAIN}.
    SITES_ROOT_DOMAIN: str = "vercel.pub"
    REVALIDATE_TIMEOUT_SECONDS: float = 10.0

    DEFAULT_APP_LOGO: str = "/logo.png"
    DEFAULT_APP_IMAGE: str = "/placeholder.png"
    PLACEHOLDER_BLURHASH: str = PLACEHOLDER_BLURHASH

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("CLERK_AUDIENCE", mode="before")
    @classmethod
    def split_audience(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [aud.strip() for aud in value.split(",") if aud.strip()]
        return value

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def site_hostname(self, subdomain: str) -> str:
        return f"https://{subdomain}.{self.SITES_ROOT_DOMAIN}"

    model_config = SettingsConfigDict(env_file=".env", env_json_loads=_coerce_json, extra="ignore")


settings = Settings()
