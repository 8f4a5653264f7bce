"""Application configuration."""

import json
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from vizcom_mcp.domain.models import Session

DEFAULT_API_URL = "https://app.vizcom.ai/api/v1"
DEFAULT_STORAGE_URL = "https://storage.vizcom.ai"


def default_credentials_path() -> Path:
    """Return the per-user credentials file location."""
    return Path.home() / ".vizcom" / "credentials.json"


class Settings(BaseSettings):
    """Application settings loaded from VIZCOM_* environment variables."""

    api_url: str = DEFAULT_API_URL
    auth_token: str | None = None
    organization_id: str | None = None
    storage_url: str = DEFAULT_STORAGE_URL
    credentials_path: Path | None = None
    poll_interval_ms: int = 2000
    poll_max_attempts: int = 60
    request_timeout_seconds: float = 60.0
    log_level: str = "INFO"
    query_hashes: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="VIZCOM_",
        env_file=".env",
        extra="ignore",
    )

    def resolved_credentials_path(self) -> Path:
        """Return the configured credentials path or the default one."""
        return self.credentials_path or default_credentials_path()

    def env_session(self) -> Session | None:
        """Build a session from the environment when both overrides are set."""
        if not self.auth_token or not self.organization_id:
            return None
        return Session(
            api_url=self.api_url,
            auth_token=self.auth_token,
            organization_id=self.organization_id,
            user_id="",
            email="",
        )


def parse_query_hashes(raw: str | None) -> dict[str, str]:
    """Parse persisted-query hash overrides from a JSON object string."""
    if raw is None or not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"VIZCOM_QUERY_HASHES is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("VIZCOM_QUERY_HASHES must be a JSON object")
    return {str(name): str(value) for name, value in payload.items()}
