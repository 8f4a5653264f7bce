"""Tests for the command-line entrypoint."""

import functools
import io

import httpx
import pytest

from vizcom_mcp.adapters.credentials_store import CredentialStore
from vizcom_mcp.cli import build_parser, login_flow, main
from vizcom_mcp.services.auth import Authenticator


@pytest.fixture
def cli_store(monkeypatch: pytest.MonkeyPatch, credentials_path) -> CredentialStore:
    monkeypatch.setenv("VIZCOM_CREDENTIALS_PATH", str(credentials_path))
    return CredentialStore(credentials_path)


def test_parser_defaults_to_serve() -> None:
    assert build_parser().parse_args([]).command is None


def test_whoami_without_session(cli_store: CredentialStore, capsys) -> None:
    assert main(["whoami"]) == 1
    assert "Not logged in" in capsys.readouterr().err


def test_whoami_with_stored_session(
    cli_store: CredentialStore, session, capsys
) -> None:
    cli_store.save(session)

    assert main(["whoami"]) == 0
    assert "test@example.com" in capsys.readouterr().out


def test_logout_clears_credentials(cli_store: CredentialStore, session) -> None:
    cli_store.save(session)

    assert main(["logout"]) == 0
    assert cli_store.load() is None


def test_serve_without_session_exits_with_error(cli_store: CredentialStore) -> None:
    assert main(["serve"]) == 1


def _unreachable_authenticator(operations=None) -> Authenticator:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    return Authenticator(
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


def test_login_reports_unreachable_endpoint(
    monkeypatch: pytest.MonkeyPatch, cli_store: CredentialStore, capsys
) -> None:
    monkeypatch.setattr(Authenticator, "create", _unreachable_authenticator)
    monkeypatch.setattr("sys.stdin", io.StringIO("user@example.com\n"))
    monkeypatch.setattr(
        "vizcom_mcp.cli.login_flow",
        functools.partial(login_flow, ask_password=lambda prompt: "pw"),
    )

    assert main(["login"]) == 1
    assert "Login failed: could not reach" in capsys.readouterr().err
    assert cli_store.load() is None


def test_login_reports_closed_input(
    monkeypatch: pytest.MonkeyPatch, cli_store: CredentialStore, capsys
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    assert main(["login"]) == 1
    assert "Login failed: input cancelled" in capsys.readouterr().err
