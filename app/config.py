"""
Application Configuration
Uses Pydantic Settings for environment-based configuration
"""

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Image Labeling API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    DEBUG: bool = Field(default=False)
    API_V1_STR: str = "/api/v1"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # Tokens live for a working day

    # Account created on first startup when missing
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin"

    # CORS
    # Allow str because it can be a comma-separated string in .env
    CORS_ORIGINS: str | list[str] = Field(default=["http://localhost:3000"])

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./labeling.db"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Image uploads
    ALLOWED_IMAGE_TYPES: str | list[str] = Field(default=["png", "jpeg", "jpg"])
    MAX_IMAGE_SIZE: int = 16 * 1024 * 1024  # 16MB decoded

    # Consensus
    FINAL_TAG_THRESHOLD: float = Field(default=0.5, gt=0.0, le=1.0)

    # Tag suggestions (OpenAI-compatible chat completions API)
    OPENAI_API_KEY: str | None = None
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TIMEOUT: float = 30.0
    MAX_SUGGESTIONS: int = 3

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="console", pattern="^(console|json)$")  # Console applies in development only

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("ALLOWED_IMAGE_TYPES", mode="before")
    @classmethod
    def parse_allowed_image_types(cls, v: str | list[str]) -> list[str]:
        """Parse allowed image types from comma-separated string, lowercased"""
        if isinstance(v, str):
            v = v.split(",")
        return [ext.strip().lower() for ext in v if ext.strip()]


# Create global settings instance

load_dotenv()
settings = Settings()  # type: ignore[call-arg]


class UserRole:
    """Account roles carried in the JWT ``role`` claim"""

    ADMIN = "admin"
    LABELER = "labeler"

    ALL = (ADMIN, LABELER)


class LabelStatus:
    """Per-labeler progress on an image"""

    DONE = "done"
    PENDING = "pending"
