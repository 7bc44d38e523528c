"""Application settings."""

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, read from TEAMBOARD_* environment variables."""

    remote_url: str | None = Field(
        default=None,
        description="Base URL of the remote record store (PostgREST/Supabase project URL)",
    )

    remote_key: SecretStr | None = Field(
        default=None,
        description="API key for the remote record store",
    )

    password: SecretStr = Field(
        default=SecretStr("lockin2024"),
        description="Shared password that unlocks the board",
    )

    state_file: Path | None = Field(
        default=None,
        description="Optional local state file, rewritten after every change",
    )

    offline: bool = Field(
        default=False,
        description="Ignore the remote store even if configured",
    )

    sync_retries: int = Field(
        default=3,
        ge=0,
        description="Retries per remote write before it is dropped",
    )

    sync_retry_delay: float = Field(
        default=0.5,
        ge=0,
        description="Seconds to wait between remote write retries",
    )

    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds for remote store calls",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "TEAMBOARD_",
    }

    @property
    def remote_configured(self) -> bool:
        """Whether a remote store should be used."""
        return not self.offline and bool(self.remote_url) and self.remote_key is not None
