from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

REPO_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = REPO_ROOT / ".env"

APP_VERSION = "0.1.0"
SERVICE_NAME = "ride-fare-compare"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), env_file_encoding="utf-8", extra="ignore"
    )

    # console logs instead of JSON
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # CORS allowed origin(s), comma-separated. Default "*" (allow all).
    CORS_ORIGIN: str = "*"

    # Distance lookup. A key switches resolution to the remote strategy.
    GOOGLE_API_KEY: str | None = None
    DISTANCE_MATRIX_URL: str = "https://maps.googleapis.com/maps/api/distancematrix/json"
    DISTANCE_TIMEOUT_SECONDS: float = 10.0
    AVERAGE_CITY_SPEED_KMH: float = 22.0

    # Observability
    SENTRY_DSN: str | None = None
    SENTRY_ENVIRONMENT: str = "development"
    SENTRY_RELEASE: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.2

    @property
    def allow_origins(self) -> list[str]:
        s = (self.CORS_ORIGIN or "").strip()
        if s == "*":
            return ["*"]
        if s == "":
            return []
        return [part.strip() for part in s.split(",") if part.strip()]

    @property
    def google_api_key(self) -> str | None:
        # Blank values in `.env` count as "unset".
        key = (self.GOOGLE_API_KEY or "").strip()
        return key or None

    @property
    def remote_distance_enabled(self) -> bool:
        return self.google_api_key is not None


settings = Settings()
