from functools import lru_cache
from pathlib import Path
from urllib.parse import urlparse
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=str(ENV_FILE), case_sensitive=False)

    APP_NAME: str = "IoT Lock"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    API_BASE_URL: str = "https://iot-lock-backend.onrender.com"
    # Image uploads may live on a separate host; empty means API_BASE_URL.
    UPLOAD_BASE_URL: str = ""
    API_KEY: str = ""

    VISITS_PAGE_SIZE: int = 10
    MIN_PASSWORD_LENGTH: int = 6

    SESSION_DATABASE_URL: str = "sqlite:///./iotlock_session.db"
    SESSION_STORAGE_KEY: str = "user"

    PUSH_PLATFORM: str = "android"
    FALLBACK_PHOTO_URL: str = "https://i.pravatar.cc/300?img=3"
    FALLBACK_AVATAR_URL: str = "https://i.pravatar.cc/150?img=1"

    # Mock remote API (local development and tests)
    MOCK_DATABASE_URL: str = "sqlite:///./iotlock_mock.db"
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8000
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    @property
    def api_base_url(self) -> str:
        return self._normalize_base(self.API_BASE_URL)

    @property
    def upload_base_url(self) -> str:
        return self._normalize_base(self.UPLOAD_BASE_URL or self.API_BASE_URL)

    @staticmethod
    def _normalize_base(raw: str) -> str:
        value = raw.strip()
        parsed = urlparse(value)
        if parsed.scheme and parsed.netloc:
            value = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
        return value.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
