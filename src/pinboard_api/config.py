"""Client configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from pinboard_api.errors import InvalidArgument
from pinboard_api.transport import API_BASE_URL, DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT


class Settings(BaseSettings):
    """Settings loaded from ``PINBOARD_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PINBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Either an API token (username:HEX) or a username/password pair
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    response_format: Literal["json", "xml"] = "json"
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    timeout: float = DEFAULT_TIMEOUT
    base_url: str = API_BASE_URL

    log_level: str = "WARNING"
    # Log every request URL at INFO
    log_requests: bool = False

    def credentials(self) -> tuple[str, str]:
        """Return ``(username, secret)`` for the configured auth mode."""
        if self.token:
            username, sep, _ = self.token.partition(":")
            if not sep or not username:
                raise InvalidArgument("PINBOARD_TOKEN must look like 'username:TOKEN'")
            return username, self.token
        if self.username and self.password:
            return self.username, self.password
        raise InvalidArgument(
            "Set PINBOARD_TOKEN, or PINBOARD_USERNAME and PINBOARD_PASSWORD"
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
