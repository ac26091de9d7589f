"""
Configuration settings for the BioTutor backend.

Uses Pydantic settings management for environment variables and configuration.
"""

from typing import Annotated, List
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import AliasChoices, AnyHttpUrl, Field, field_validator
import secrets


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # API Settings
    PROJECT_NAME: str = "BioTutor"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "AI biology tutor: lessons, quizzes, streaming tutor chat and progress tracking"

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30  # 30 days
    BCRYPT_ROUNDS: int = 10
    MIN_PASSWORD_LENGTH: int = 6

    # Session cookie and protected areas
    SESSION_COOKIE_NAME: str = "biotutor_session"
    SESSION_COOKIE_SECURE: bool = False
    LOGIN_PATH: str = "/login"
    PROTECTED_PATH_PREFIXES: Annotated[List[str], NoDecode] = [
        "/learn",
        "/api/lessons",
        "/api/chat",
    ]

    # Database
    DATABASE_URL: str = "sqlite:///./biotutor.db"

    # Completion provider (OpenAI-compatible chat completions API)
    LLM_API_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("LLM_API_KEY", "GROQ_API_KEY"),
    )
    LLM_BASE_URL: str = "https://api.groq.com/openai/v1"
    LLM_MODEL: str = "llama-3.3-70b-versatile"
    LLM_TEMPERATURE: float = 1.0
    LLM_TOP_P: float = 1.0
    LLM_MAX_TOKENS: int = 1024

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[AnyHttpUrl], NoDecode] = []

    @field_validator("BACKEND_CORS_ORIGINS", "PROTECTED_PATH_PREFIXES", mode="before")
    @classmethod
    def split_comma_separated(cls, v: str | List[str]) -> List[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, str):
            import json
            return json.loads(v)
        elif isinstance(v, list):
            return v
        raise ValueError(v)

    @field_validator("PROTECTED_PATH_PREFIXES")
    @classmethod
    def normalize_prefixes(cls, v: List[str]) -> List[str]:
        return ["/" + p.strip("/") for p in v]

    # Logging
    LOG_LEVEL: str = "INFO"

    # Development settings
    DEBUG: bool = False
    TESTING: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        populate_by_name=True,
        extra="ignore"
    )

    @property
    def llm_enabled(self) -> bool:
        """Check if a completion provider key is configured."""
        return bool(self.LLM_API_KEY)


# Create global settings instance
settings = Settings()
