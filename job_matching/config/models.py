"""Configuration schema models using Pydantic."""

from datetime import timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .duration import DurationParseError, parse_duration, parse_timedelta, validate_duration_range


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _validate_duration(value: str, min_seconds: int, max_seconds: int, label: str) -> str:
    try:
        validate_duration_range(parse_duration(value), min_seconds, max_seconds, label)
    except DurationParseError as e:
        raise ValueError(str(e)) from e
    return value.strip()


class ServerConfig(BaseModel):
    """HTTP listener settings."""

    host: str = Field("127.0.0.1", min_length=1, description="Interface to bind")
    port: int = Field(3001, ge=1, le=65535, description="TCP port to listen on")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: List[str]) -> List[str]:
        """Origins are trimmed; an empty list disables cross-origin access."""
        origins = [origin.strip() for origin in v if origin and origin.strip()]
        if len(origins) != len(v):
            raise ValueError("cors_origins entries must be non-empty strings")
        return origins


class MatchingConfig(BaseModel):
    """Dashboard statistics settings."""

    recent_match_window: str = Field(
        "7d", description="Trailing window counted as recent matches on the talent dashboard"
    )

    @field_validator("recent_match_window")
    @classmethod
    def validate_window(cls, v: str) -> str:
        """Window must be between one hour and one year."""
        return _validate_duration(v, 3600, 365 * 86400, "recent_match_window")

    @property
    def recent_match_window_delta(self) -> timedelta:
        return parse_timedelta(self.recent_match_window)


class AccountsConfig(BaseModel):
    """Registration and email verification settings."""

    verification_code_ttl: str = Field(
        "10m", description="How long an emailed verification code stays valid"
    )
    min_password_length: int = Field(6, ge=6, le=128, description="Minimum password length")

    @field_validator("verification_code_ttl")
    @classmethod
    def validate_ttl(cls, v: str) -> str:
        """TTL must be between one minute and one day."""
        return _validate_duration(v, 60, 86400, "verification_code_ttl")

    @property
    def verification_code_ttl_delta(self) -> timedelta:
        return parse_timedelta(self.verification_code_ttl)


class EmailConfig(BaseModel):
    """Outgoing email identity. Delivery itself is handled by the injected sender."""

    sender_name: str = Field("Job Matching", min_length=1, description="Display name for From")
    sender_email: Optional[str] = Field(
        None, description="From address (falls back to EMAIL_FROM, then noreply@localhost)"
    )

    @field_validator("sender_name")
    @classmethod
    def strip_sender_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("sender_name cannot be empty")
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object. Every section has defaults, so {} is valid."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    accounts: AccountsConfig = Field(default_factory=AccountsConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
