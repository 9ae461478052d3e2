from typing import Optional, Union
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Define the root directory of the prompt_service package
SERVICE_ROOT_DIR = Path(__file__).parent.parent.resolve()
# Path to the repository root (two levels up from this settings.py)
PROJECT_ROOT_DIR = SERVICE_ROOT_DIR.parent


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "PromptGalleryService"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_HOST: str = "0.0.0.0"
    API_PORT: int = Field(default=4000, validation_alias=AliasChoices("API_PORT", "PORT"))

    # CORS settings
    CORS_ORIGINS: Union[str, list[str]] = "http://localhost:5173,http://localhost:8080"
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: Union[str, list[str]] = "GET,POST,PATCH"
    CORS_ALLOW_HEADERS: Union[str, list[str]] = "*"

    # Database settings
    DATABASE_URL: str = f"sqlite+aiosqlite:///{PROJECT_ROOT_DIR / 'prompts.db'}"

    # Listing cache settings
    REDIS_URL: Optional[str] = None
    CACHE_KEY: str = "prompts"
    CACHE_TTL_SECONDS: int = 60
    MEMORY_CACHE_TTL_SECONDS: int = 60
    REDIS_SOCKET_TIMEOUT_SECONDS: float = 1.0
    REDIS_RECHECK_INTERVAL_SECONDS: float = 30.0

    # Logging configuration path (can be overridden by env var)
    LOGGING_CONFIG_PATH: str = str(SERVICE_ROOT_DIR / "config" / "logging_config.yaml")
    LOG_LEVEL: str = "INFO"

    @field_validator("REDIS_URL", mode="before")
    @classmethod
    def _blank_redis_url(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def model_post_init(self, __context) -> None:
        """Parse comma-separated strings into lists after model initialization."""
        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]

        if isinstance(self.CORS_ALLOW_METHODS, str):
            self.CORS_ALLOW_METHODS = [method.strip() for method in self.CORS_ALLOW_METHODS.split(',') if method.strip()]

        if isinstance(self.CORS_ALLOW_HEADERS, str):
            if self.CORS_ALLOW_HEADERS == "*":
                self.CORS_ALLOW_HEADERS = ["*"]
            else:
                self.CORS_ALLOW_HEADERS = [header.strip() for header in self.CORS_ALLOW_HEADERS.split(',') if header.strip()]

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT_DIR / ".env"),  # Load variables from project root .env
        env_file_encoding='utf-8',
        extra='ignore'
    )


# Instantiate settings
settings = Settings()
