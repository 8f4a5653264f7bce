"""Local persistence for the active Vizcom session."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from vizcom_mcp.domain.models import Session

_logger = logging.getLogger(__name__)

_FIELDS = {
    "apiUrl": "api_url",
    "authToken": "auth_token",
    "organizationId": "organization_id",
    "userId": "user_id",
    "email": "email",
}


@dataclass
class CredentialStore:
    """Stores a single session record as JSON readable only by its owner."""

    path: Path

    def load(self) -> Session | None:
        """Return the stored session, or None if absent or unreadable."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            _logger.debug("Cannot read credentials at %s: %s", self.path, exc)
            return None
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            _logger.debug("Ignoring corrupted credentials at %s", self.path)
            return None
        return _session_from_payload(payload)

    def save(self, session: Session) -> None:
        """Atomically replace the stored session."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {key: getattr(session, attr) for key, attr in _FIELDS.items()}
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=".credentials-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        _logger.debug("Saved credentials to %s", self.path)

    def clear(self) -> None:
        """Remove the stored session if there is one."""
        self.path.unlink(missing_ok=True)


def _session_from_payload(payload: object) -> Session | None:
    if not isinstance(payload, dict):
        return None
    values: dict[str, str] = {}
    for key, attr in _FIELDS.items():
        value = payload.get(key)
        if not isinstance(value, str):
            return None
        values[attr] = value
    return Session(**values)
