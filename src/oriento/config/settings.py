from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import to_uppercase, to_lowercase, blank_to_none
from ..prompts.oriento import DEFAULT_MODEL_NAME


class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Database configuration
    POSTGRES_DRIVER: str = "psycopg"
    POSTGRES_USERNAME: str = "oriento"
    POSTGRES_PASSWORD: str = "oriento"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "oriento"

    # Test database configuration
    TEST_POSTGRES_DB: str | None = None
    TESTING: bool = False

    # Full SQLAlchemy URL; wins over the POSTGRES_* parts when set
    # (e.g. "sqlite+aiosqlite:///./oriento.db" for a local run).
    DATABASE_URL_OVERRIDE: str | None = None

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False
    DB_AUTO_CREATE: bool = False

    # Gemini
    GEMINI_API_KEY: SecretStr | None = None
    GEMINI_MODEL: str = DEFAULT_MODEL_NAME
    GEMINI_TEMPERATURE: float | None = None
    GEMINI_TIMEOUT_SECONDS: float = 60.0

    # HTTP
    CORS_ORIGINS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/oriento")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False
    LOG_USE_QUEUE: bool = False
    LOG_QUEUE_MAX_SIZE: int = 0  # 0 -> unbounded

    # --- Derived settings ---
    @property
    def DATABASE_URL(self) -> str:
        """
        Return the database URL for the current environment.

        Resolution order:
          1. DATABASE_URL_OVERRIDE, verbatim.
          2. TESTING=True with TEST_POSTGRES_DB set -> the test database, so a test
             run never touches the regular database.
          3. The regular POSTGRES_DB database.
        """
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE

        database = self.POSTGRES_DB
        if self.TESTING and self.TEST_POSTGRES_DB:
            database = self.TEST_POSTGRES_DB

        return (
            f"postgresql+{self.POSTGRES_DRIVER}://"
            f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{database}"
        )

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize LOG_LEVEL to uppercase before Literal validation, so
        LOG_LEVEL=debug in the environment is accepted.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_FORMAT environment variable value to lowercase.
        """
        return to_lowercase(v)

    @field_validator("GEMINI_API_KEY", "DATABASE_URL_OVERRIDE", "TEST_POSTGRES_DB", mode="before")
    def empty_as_unset(cls, v):
        return blank_to_none(v)

    @field_validator("GEMINI_MODEL")
    def model_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("GEMINI_MODEL must not be blank")
        return v.strip()

    model_config = SettingsConfigDict(
        # .env next to the package root (src/oriento/.env)
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Settings are read from the environment once per process.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
