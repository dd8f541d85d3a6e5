"""Environment variable loading and validation."""

import os
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/job_matching.db"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Settings that come from the process environment rather than the config file."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
        email_from: Optional[str] = None,
        email_from_name: Optional[str] = None,
        gateway_token: Optional[str] = None,
    ):
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.log_level = log_level
        self.environment = environment or "local"
        self.email_from = email_from
        self.email_from_name = email_from_name
        self.gateway_token = gateway_token


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - DATABASE_URL: SQLAlchemy URL (default: sqlite:///./data/job_matching.db)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Label stamped on log records (default: local)
    - EMAIL_FROM: From address for outgoing email
    - EMAIL_FROM_NAME: Display name for outgoing email
    - GATEWAY_TOKEN: Shared secret the authenticating gateway sends with X-User-Id

    Returns:
        EnvironmentConfig with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    database_url = os.getenv("DATABASE_URL")
    log_level = os.getenv("LOG_LEVEL")
    environment = os.getenv("ENVIRONMENT")
    email_from = os.getenv("EMAIL_FROM")
    email_from_name = os.getenv("EMAIL_FROM_NAME")
    gateway_token = (os.getenv("GATEWAY_TOKEN") or "").strip() or None

    if database_url is not None and "://" not in database_url:
        errors.append(
            f"Invalid DATABASE_URL: '{database_url}'. Expected a URL like sqlite:///./data/app.db"
        )

    if log_level:
        if log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        else:
            log_level = log_level.upper()

    if email_from:
        try:
            email_from = validate_email(email_from, check_deliverability=False).normalized
        except EmailNotValidError as e:
            errors.append(f"Invalid email address in EMAIL_FROM: '{email_from}' - {e}")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        database_url=database_url,
        log_level=log_level,
        environment=environment,
        email_from=email_from,
        email_from_name=email_from_name,
        gateway_token=gateway_token,
    )
