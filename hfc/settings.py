# hfc/settings.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

PRODUCTION_ORIGINS = [
    "https://nguyenshomefurniture.vercel.app",
    "https://nguyenshomefurniture-admin.vercel.app",
]
DEVELOPMENT_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
]


class Settings(BaseSettings):
    """
    Manages the application's settings, loading from environment variables
    and .env files.
    """
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # Application settings
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "Development"

    # Server settings
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 5000
    CHECK_ORIGIN: bool = True
    EXTRA_ORIGINS: str = ""

    # Presence settings
    CLEANUP_ON_DISCONNECT: bool = True
    PRESENCE_MIRROR: str = "memory"

    # Redis settings
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0

    @property
    def redis_url(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def allowed_origins(self) -> List[str]:
        """Browser origins allowed to open the real-time channel."""
        if self.ENVIRONMENT == "Production":
            origins = list(PRODUCTION_ORIGINS)
        else:
            origins = list(DEVELOPMENT_ORIGINS)
        origins.extend(o.strip() for o in self.EXTRA_ORIGINS.split(",") if o.strip())
        return origins


# Create a single, globally accessible instance of the settings.
settings = Settings()
