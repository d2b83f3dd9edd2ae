"""
Application configuration management
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Review gate settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_GATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field("INFO")

    # GitHub Configuration
    github_api_url: str = Field("https://api.github.com")
    github_user_agent: str = Field("review-gate")

    # HTTP client
    request_timeout: float = Field(10.0, gt=0)
    max_connections: int = Field(20, gt=0)
    max_keepalive_connections: int = Field(10, ge=0)
    keepalive_expiry: float = Field(30.0, ge=0)

    # Authorization cache
    auth_cache_ttl_seconds: float = Field(300.0, gt=0)
    auth_cache_max_entries: int = Field(1000, gt=0)

    # Circuit breaker for the GitHub permission endpoint
    circuit_breaker_failure_threshold: int = Field(5, gt=0)
    circuit_breaker_timeout: int = Field(60, gt=0)

    @field_validator("github_api_url")
    @classmethod
    def validate_github_api_url(cls, v: str) -> str:
        """Validate GitHub API URL format"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("GitHub API URL must include protocol (http:// or https://)")
        # Remove trailing slash for consistency
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name"""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} github_api_url={self.github_api_url} "
            f"log_level={self.log_level}>"
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment"""
    global _settings
    _settings = None
