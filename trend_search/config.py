"""
Application configuration.

Settings come from environment variables (a ``.env`` file is loaded first)
and are validated by a pydantic model. Invalid values are reported all at
once through ConfigurationError.
"""

import os
from typing import Dict, List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

# Load environment variables from .env file
load_dotenv()


class ConfigurationError(Exception):
    """Raised when one or more configuration values are invalid."""

    pass


# Model field -> environment variable
ENV_VARS: Dict[str, str] = {
    "port": "PORT",
    "host": "HOST",
    "update_interval_ms": "UPDATE_INTERVAL_MS",
    "storage_ttl_ms": "STORAGE_TTL_MS",
    "collector_timeout_seconds": "COLLECTOR_TIMEOUT_SECONDS",
    "news_api_key": "NEWS_API_KEY",
    "news_api_country": "NEWS_API_COUNTRY",
    "twitter_bearer_token": "TWITTER_BEARER_TOKEN",
    "twitter_consumer_key": "TWITTER_CONSUMER_KEY",
    "twitter_consumer_secret": "TWITTER_CONSUMER_SECRET",
    "twitter_access_token": "TWITTER_ACCESS_TOKEN",
    "twitter_access_token_secret": "TWITTER_ACCESS_TOKEN_SECRET",
    "twitter_woeid": "TWITTER_WOEID",
    "rss_feed_urls": "RSS_FEED_URLS",
    "x_trends_country": "X_TRENDS_COUNTRY",
    "log_level": "LOG_LEVEL",
    "log_json": "LOG_JSON",
    "log_file": "LOG_FILE",
}


class AppConfig(BaseModel):
    """Validated application settings."""

    # Server
    port: int = Field(3000, gt=0)
    host: str = "0.0.0.0"

    # Update interval (ms) - default 1 hour
    update_interval_ms: int = Field(3_600_000, gt=0)

    # Cache TTL (ms) - default 24 hours
    storage_ttl_ms: int = Field(86_400_000, gt=0)

    # Per-collector timeout; unset means collectors may run as long as they need
    collector_timeout_seconds: Optional[float] = Field(None, gt=0)

    # News API
    news_api_key: Optional[str] = None
    news_api_country: str = "jp"

    # Twitter / X
    twitter_bearer_token: Optional[str] = None
    # OAuth 1.0a user context; used instead of the bearer token when all four are set
    twitter_consumer_key: Optional[str] = None
    twitter_consumer_secret: Optional[str] = None
    twitter_access_token: Optional[str] = None
    twitter_access_token_secret: Optional[str] = None
    twitter_woeid: int = 23424856
    x_trends_country: str = "japan"

    # RSS feed URLs (comma-separated in the environment)
    rss_feed_urls: List[str] = Field(default_factory=list)

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Optional[str] = None

    class Config:
        frozen = True

    @field_validator("rss_feed_urls", mode="before")
    @classmethod
    def split_feed_urls(cls, value):
        if isinstance(value, str):
            return [url.strip() for url in value.split(",") if url.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{value}'")
        return level

    @property
    def update_interval_seconds(self) -> float:
        return self.update_interval_ms / 1000

    @property
    def storage_ttl_seconds(self) -> float:
        return self.storage_ttl_ms / 1000

    @property
    def twitter_oauth_configured(self) -> bool:
        return all(
            (
                self.twitter_consumer_key,
                self.twitter_consumer_secret,
                self.twitter_access_token,
                self.twitter_access_token_secret,
            )
        )


# Cache for loaded config
_config_cache: Optional[AppConfig] = None


def _format_errors(error: ValidationError) -> str:
    lines = []
    for issue in error.errors():
        field = ".".join(str(part) for part in issue["loc"])
        lines.append(f"  - {field}: {issue['msg']}")
    return "\n".join(lines)


def load_config(
    env: Optional[Mapping[str, str]] = None, force_reload: bool = False
) -> AppConfig:
    """
    Load configuration from the environment.

    Args:
        env: Variables to read instead of ``os.environ`` (never cached)
        force_reload: If True, re-read the environment even if cached

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If any value is invalid; the message lists every
            invalid field
    """
    global _config_cache

    if env is None and _config_cache is not None and not force_reload:
        return _config_cache

    source = os.environ if env is None else env

    # Empty variables count as unset
    values = {
        field: source[var]
        for field, var in ENV_VARS.items()
        if source.get(var, "").strip() != ""
    }

    try:
        config = AppConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration:\n{_format_errors(e)}") from e

    if env is None:
        _config_cache = config
    return config
