"""Email/password login against the Vizcom API."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from vizcom_mcp.adapters.graphql_client import decode_response, persisted_envelope
from vizcom_mcp.domain.models import LoginResult, Organization, Session
from vizcom_mcp.errors import AuthError, EmptyResultError, GraphQLError
from vizcom_mcp.queries import QUERIES

_logger = logging.getLogger(__name__)

FORGOT_PASSWORD_URL = "https://app.vizcom.ai/forgot-password"


@dataclass
class Authenticator:
    """Performs the login exchange; persisting the session is up to the caller."""

    http_client: httpx.AsyncClient
    operations: Mapping[str, str] = field(default_factory=lambda: dict(QUERIES))

    @classmethod
    def create(cls, operations: Mapping[str, str] | None = None) -> "Authenticator":
        """Create an authenticator with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(),
            operations=dict(operations) if operations is not None else dict(QUERIES),
        )

    async def login(self, api_url: str, email: str, password: str) -> LoginResult:
        """Exchange email and password for a token and organization list."""
        envelope = persisted_envelope(
            self.operations["login"],
            {"input": {"email": email, "password": password}},
        )
        response = await self.http_client.post(
            f"{api_url.rstrip('/')}/graphql",
            json=envelope,
            headers={"Content-Type": "application/json"},
            timeout=30,
        )
        try:
            data = decode_response(response.status_code, response.text)
        except GraphQLError as exc:
            raise AuthError(str(exc)) from exc
        except EmptyResultError as exc:
            raise AuthError("Login failed: no data returned") from exc

        login = data.get("login")
        if not isinstance(login, dict) or not login.get("authToken"):
            raise AuthError("Login failed: no data returned")
        user = login.get("user")
        if not isinstance(user, dict):
            user = {}
        organizations = [
            _parse_organization(node)
            for node in (user.get("organizations") or {}).get("nodes", [])
        ]
        _logger.info("Logged in as %s", user.get("email", email))
        return LoginResult(
            auth_token=str(login["authToken"]),
            user_id=str(user.get("id", "")),
            email=str(user.get("email", email)),
            organizations=organizations,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def select_organization(
    organizations: list[Organization], choice: str
) -> Organization:
    """Resolve a 1-based menu choice to an organization."""
    value = choice.strip()
    if not value.isdigit():
        raise ValueError("Invalid choice.")
    index = int(value) - 1
    if index < 0 or index >= len(organizations):
        raise ValueError("Invalid choice.")
    return organizations[index]


def session_from_login(
    api_url: str, result: LoginResult, organization: Organization
) -> Session:
    """Build the session to persist after the organization is chosen."""
    return Session(
        api_url=api_url,
        auth_token=result.auth_token,
        organization_id=organization.id,
        user_id=result.user_id,
        email=result.email,
    )


def is_password_failure(message: str) -> bool:
    """Return True when a login failure points at a missing/incorrect password."""
    return "password" in message.lower()


def _parse_organization(node: object) -> Organization:
    if not isinstance(node, dict) or not node.get("id"):
        raise AuthError("Login failed: malformed organization in response")
    return Organization(id=str(node["id"]), name=str(node.get("name", "")))
