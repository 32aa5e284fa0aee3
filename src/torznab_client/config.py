"""Client configuration.

`ClientConfig` is the immutable value the client is built from.
`Settings` loads the same values from environment variables.
"""

from dataclasses import dataclass
from urllib.parse import urlsplit

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings shared read-only by every request of one client."""

    host: str
    api_key: str | None = None

    # Talk to a tracker's own Torznab endpoint instead of a Jackett proxy
    direct_mode: bool = False

    basic_user: str | None = None
    basic_pass: str | None = None

    verify_tls: bool = True
    timeout: float = DEFAULT_TIMEOUT  # seconds

    # Retry policy
    retry_attempts: int = 5
    retry_delay: float = 3.0  # seconds between attempts
    retry_max_jitter: float = 1.0  # extra random delay, seconds

    @property
    def basic_auth(self) -> tuple[str, str] | None:
        """Credentials for HTTP Basic auth, only when both parts are set."""
        if self.basic_user and self.basic_pass:
            return (self.basic_user, self.basic_pass)
        return None


class Settings(BaseSettings):
    """Client configuration loaded from environment."""

    # Jackett base URL, or the tracker's Torznab API URL in direct mode
    host: str = "http://localhost:9117"
    api_key: str | None = None
    direct_mode: bool = False

    # HTTP Basic auth (optional, e.g. behind a reverse proxy)
    basic_user: str | None = None
    basic_pass: str | None = None

    verify_tls: bool = True
    timeout: float = DEFAULT_TIMEOUT

    retry_attempts: int = 5
    retry_delay: float = 3.0
    retry_max_jitter: float = 1.0

    model_config = {"env_prefix": "TORZNAB_", "env_file": ".env", "extra": "ignore"}

    @field_validator("host")
    @classmethod
    def _normalize_host(cls, value: str) -> str:
        value = value.strip()
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"host must be an absolute http(s) URL, got {value!r}")
        return value.rstrip("/")

    @field_validator("retry_attempts")
    @classmethod
    def _at_least_one_attempt(cls, value: int) -> int:
        if value < 1:
            raise ValueError("retry_attempts must be >= 1")
        return value

    def to_client_config(self) -> ClientConfig:
        """Build the immutable client configuration."""
        return ClientConfig(
            host=self.host,
            api_key=self.api_key or None,
            direct_mode=self.direct_mode,
            basic_user=self.basic_user,
            basic_pass=self.basic_pass,
            verify_tls=self.verify_tls,
            timeout=self.timeout,
            retry_attempts=self.retry_attempts,
            retry_delay=self.retry_delay,
            retry_max_jitter=self.retry_max_jitter,
        )


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
