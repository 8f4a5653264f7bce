"""Command-line entrypoint: login, logout, whoami and serve."""

import argparse
import asyncio
import getpass
import logging
import sys
from collections.abc import Callable

import httpx

from vizcom_mcp.adapters.credentials_store import CredentialStore
from vizcom_mcp.app_logging import configure_logging
from vizcom_mcp.config import Settings, parse_query_hashes
from vizcom_mcp.containers import build_container, build_credential_store
from vizcom_mcp.domain.models import Session
from vizcom_mcp.errors import AuthError, NotAuthenticatedError, VizcomError
from vizcom_mcp.queries import build_registry
from vizcom_mcp.services.auth import (
    FORGOT_PASSWORD_URL,
    Authenticator,
    is_password_failure,
    select_organization,
    session_from_login,
)

_logger = logging.getLogger(__name__)


async def login_flow(  # noqa: PLR0913
    api_url: str,
    store: CredentialStore,
    authenticator: Authenticator,
    ask: Callable[[str], str] = input,
    ask_password: Callable[[str], str] = getpass.getpass,
    say: Callable[[str], None] = print,
) -> Session:
    """Prompt for credentials and organization, then persist the session."""
    email = ask("Email: ").strip()
    password = ask_password("Password: ")
    result = await authenticator.login(api_url, email, password)

    if not result.organizations:
        raise AuthError("No organizations found for this account.")
    if len(result.organizations) == 1:
        organization = result.organizations[0]
        say(f"Organization: {organization.name}")
    else:
        say("\nSelect an organization:")
        for position, candidate in enumerate(result.organizations, start=1):
            say(f"  {position}. {candidate.name}")
        organization = select_organization(result.organizations, ask("Choice: "))

    session = session_from_login(api_url, result, organization)
    store.save(session)
    return session


def _login(settings: Settings, store: CredentialStore) -> int:
    async def run() -> Session:
        authenticator = Authenticator.create(
            build_registry(parse_query_hashes(settings.query_hashes))
        )
        try:
            return await login_flow(settings.api_url, store, authenticator)
        finally:
            await authenticator.close()

    try:
        session = asyncio.run(run())
    except AuthError as exc:
        message = str(exc)
        if is_password_failure(message):
            print(f"\n✗ {message}", file=sys.stderr)
            print(
                "\nIf you signed up with Google/SSO, set a password first:\n"
                f"  1. Go to {FORGOT_PASSWORD_URL}\n"
                "  2. Enter your email to receive a reset link\n"
                "  3. Set a password, then run this command again",
                file=sys.stderr,
            )
        else:
            print(f"\nLogin failed: {message}", file=sys.stderr)
        return 1
    except (ValueError, VizcomError) as exc:
        print(f"\nLogin failed: {exc}", file=sys.stderr)
        return 1
    except httpx.HTTPError as exc:
        print(
            f"\nLogin failed: could not reach {settings.api_url}: {exc}",
            file=sys.stderr,
        )
        return 1
    except (EOFError, KeyboardInterrupt):
        print("\nLogin failed: input cancelled", file=sys.stderr)
        return 1

    print(f"\n✓ Logged in as {session.email}")
    print(f"Credentials saved to {store.path}")
    return 0


def _logout(store: CredentialStore) -> int:
    store.clear()
    print("Logged out.")
    return 0


def _whoami(settings: Settings, store: CredentialStore) -> int:
    env_session = settings.env_session()
    if env_session is not None:
        print(f"Using environment token for organization {env_session.organization_id}")
        return 0
    session = store.load()
    if session is None:
        print("Not logged in. Run `vizcom-mcp login`.", file=sys.stderr)
        return 1
    print(f"{session.email} (organization {session.organization_id}) at {session.api_url}")
    return 0


def _serve(settings: Settings, store: CredentialStore) -> int:
    from vizcom_mcp.server import run_stdio

    try:
        container = build_container(settings, store)
    except NotAuthenticatedError as exc:
        _logger.error("%s", exc)
        return 1
    try:
        asyncio.run(run_stdio(container))
    except KeyboardInterrupt:
        _logger.info("Shutdown complete")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vizcom-mcp",
        description="Vizcom MCP server - AI design generation via Model Context Protocol",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="Run the MCP server over stdio (default)")
    subparsers.add_parser("login", help="Log in with email and password")
    subparsers.add_parser("logout", help="Remove stored credentials")
    subparsers.add_parser("whoami", help="Show the active session")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(settings.log_level.upper())
    store = build_credential_store(settings)

    if args.command == "login":
        return _login(settings, store)
    if args.command == "logout":
        return _logout(store)
    if args.command == "whoami":
        return _whoami(settings, store)
    return _serve(settings, store)


if __name__ == "__main__":
    sys.exit(main())
