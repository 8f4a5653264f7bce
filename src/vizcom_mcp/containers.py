"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from vizcom_mcp.adapters.credentials_store import CredentialStore
from vizcom_mcp.adapters.graphql_client import GraphQLClient, VizcomClient
from vizcom_mcp.adapters.storage_client import HttpxStorageClient, StorageClient
from vizcom_mcp.config import Settings, parse_query_hashes
from vizcom_mcp.domain.models import Session
from vizcom_mcp.errors import NotAuthenticatedError
from vizcom_mcp.queries import build_registry
from vizcom_mcp.tools.base import ToolContext


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session: Session
    client: GraphQLClient
    storage: StorageClient
    tool_context: ToolContext
    close_resources: Callable[[], Awaitable[None]]


def build_credential_store(settings: Settings) -> CredentialStore:
    """Create the credential store at the configured location."""
    return CredentialStore(settings.resolved_credentials_path())


def resolve_session(settings: Settings, store: CredentialStore) -> Session:
    """Pick the environment override, then the stored session."""
    session = settings.env_session() or store.load()
    if session is None:
        raise NotAuthenticatedError(
            "Not logged in. Run `vizcom-mcp login` or set VIZCOM_AUTH_TOKEN "
            "and VIZCOM_ORGANIZATION_ID."
        )
    return session


def build_container(
    settings: Settings | None = None, store: CredentialStore | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_store = store or build_credential_store(resolved_settings)
    session = resolve_session(resolved_settings, resolved_store)
    client = VizcomClient.create(
        session,
        operations=build_registry(parse_query_hashes(resolved_settings.query_hashes)),
        timeout=resolved_settings.request_timeout_seconds,
    )
    storage = HttpxStorageClient.create(resolved_settings.storage_url)
    tool_context = ToolContext(
        client=client,
        storage=storage,
        organization_id=session.organization_id,
        poll_interval_ms=resolved_settings.poll_interval_ms,
        poll_max_attempts=resolved_settings.poll_max_attempts,
    )

    async def close_resources() -> None:
        await client.close()
        await storage.close()

    return AppContainer(
        settings=resolved_settings,
        session=session,
        client=client,
        storage=storage,
        tool_context=tool_context,
        close_resources=close_resources,
    )
