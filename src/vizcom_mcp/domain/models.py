"""Domain models for the Vizcom MCP server."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """An authenticated Vizcom session bound to one organization."""

    api_url: str
    auth_token: str
    organization_id: str
    user_id: str
    email: str


@dataclass(frozen=True)
class Organization:
    """An organization the user belongs to."""

    id: str
    name: str


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful email/password login."""

    auth_token: str
    user_id: str
    email: str
    organizations: list[Organization]


@dataclass(frozen=True)
class FileUpload:
    """A binary payload that fills one upload placeholder."""

    variable_path: str
    content: bytes
    filename: str
    content_type: str = "image/png"


@dataclass(frozen=True)
class PromptOutput:
    """One output slot of a generation job."""

    id: str
    image_path: str | None = None
    failure_reason: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.image_path is not None or self.failure_reason is not None


@dataclass(frozen=True)
class PollResult:
    """Snapshot of a completed generation job."""

    prompt_id: str
    status: str
    outputs: list[PromptOutput]


@dataclass(frozen=True)
class PlacedDrawing:
    """A drawing created from a generated output."""

    drawing_id: str
    name: str
    image_url: str
