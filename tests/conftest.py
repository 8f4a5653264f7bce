"""Shared test fixtures."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from vizcom_mcp.adapters.credentials_store import CredentialStore
from vizcom_mcp.adapters.graphql_client import GraphQLClient
from vizcom_mcp.adapters.storage_client import StorageClient, to_image_url
from vizcom_mcp.config import Settings
from vizcom_mcp.domain.models import FileUpload, Session
from vizcom_mcp.tools.base import ToolContext

PROMPT_ID = "3f1c2a9e-8d4b-4c1e-9a7f-2b6d5e8c1a90"
DRAWING_ID = "0b8f4c3e-1d2a-4e5f-8a9b-7c6d5e4f3a21"
WORKBENCH_ID = "9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d"
FOLDER_ID = "1a2b3c4d-5e6f-4a7b-8c9d-0e1f2a3b4c5d"
PNG_BASE64 = "iVBORw0KGgo="


def prompt_payload(*outputs: dict[str, object], status: str = "pending") -> dict:
    return {
        "prompt": {
            "id": PROMPT_ID,
            "status": status,
            "promptOutputs": {"nodes": list(outputs)},
        }
    }


PENDING = prompt_payload({"id": "o-1", "imagePath": None, "failureReason": None})
COMPLETED = prompt_payload(
    {"id": "o-1", "imagePath": "prompts/o-1.png", "failureReason": None},
    status="completed",
)


@dataclass
class FakeGraphQLClient(GraphQLClient):
    """Scripted GraphQL client that records every call."""

    responses: list[object] = field(default_factory=list)
    upload_responses: list[object] = field(default_factory=list)
    calls: list[tuple[str, dict[str, object] | None]] = field(default_factory=list)
    uploads: list[tuple[str, dict[str, object], list[FileUpload]]] = field(
        default_factory=list
    )

    async def query(
        self, operation: str, variables: dict[str, object] | None = None
    ) -> dict[str, object]:
        self.calls.append((operation, variables))
        return _next(self.responses)

    async def mutation_with_upload(
        self,
        operation: str,
        variables: dict[str, object],
        files,
    ) -> dict[str, object]:
        self.uploads.append((operation, variables, list(files)))
        return _next(self.upload_responses)

    def operation_names(self) -> list[str]:
        return [operation for operation, _ in self.calls]


def _next(queue: list[object]) -> dict[str, object]:
    if not queue:
        raise AssertionError("Unexpected GraphQL call")
    item = queue.pop(0)
    if isinstance(item, Exception):
        raise item
    return item


@dataclass
class FakeStorageClient(StorageClient):
    """Storage client serving static bytes."""

    content: bytes = b"png-bytes"
    fetched: list[str] = field(default_factory=list)
    failing_paths: set[str] = field(default_factory=set)

    def image_url(self, image_path: str) -> str:
        return to_image_url(image_path)

    async def fetch_image_bytes(self, image_path: str) -> bytes:
        self.fetched.append(image_path)
        if image_path in self.failing_paths:
            raise RuntimeError(f"Failed to fetch image: {image_path}")
        return self.content


@dataclass
class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture(autouse=True)
def _clean_vizcom_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("VIZCOM_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def session() -> Session:
    return Session(
        api_url="https://app.vizcom.ai/api/v1",
        auth_token="test-token",
        organization_id="org-123",
        user_id="user-123",
        email="test@example.com",
    )


@pytest.fixture
def credentials_path(tmp_path: Path) -> Path:
    return tmp_path / ".vizcom" / "credentials.json"


@pytest.fixture
def store(credentials_path: Path) -> CredentialStore:
    return CredentialStore(credentials_path)


@pytest.fixture
def settings(credentials_path: Path) -> Settings:
    return Settings(_env_file=None, credentials_path=credentials_path)


@pytest.fixture
def graphql_client() -> FakeGraphQLClient:
    return FakeGraphQLClient()


@pytest.fixture
def storage() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def tool_context(
    graphql_client: FakeGraphQLClient,
    storage: FakeStorageClient,
    sleep: RecordingSleep,
) -> ToolContext:
    return ToolContext(
        client=graphql_client,
        storage=storage,
        organization_id="org-123",
        poll_interval_ms=10,
        poll_max_attempts=5,
        sleep=sleep,
    )
