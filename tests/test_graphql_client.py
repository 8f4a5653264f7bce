"""Tests for the persisted-query GraphQL transport."""

import asyncio
import json

import httpx
import pytest

from vizcom_mcp.adapters.graphql_client import (
    VizcomClient,
    build_upload,
    decode_response,
    persisted_envelope,
)
from vizcom_mcp.domain.models import FileUpload
from vizcom_mcp.errors import (
    ConfigurationError,
    EmptyResultError,
    GraphQLError,
    ProtocolError,
)
from vizcom_mcp.queries import QUERIES


def _client(session, handler, operations=None) -> VizcomClient:
    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return VizcomClient(
        session=session,
        http_client=async_client,
        operations=operations or dict(QUERIES),
    )


def test_query_sends_persisted_envelope_with_auth_headers(session) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"viewer": {"id": "123"}}})

    client = _client(session, handler)

    data = asyncio.run(client.query("currentUser", {"a": 1}))

    assert data == {"viewer": {"id": "123"}}
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://app.vizcom.ai/api/v1/graphql"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["x-organization-id"] == "org-123"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {
        "extensions": {"persistedQuery": {"sha256Hash": QUERIES["currentUser"]}},
        "query": "",
        "variables": {"a": 1},
    }


def test_query_joins_error_messages_even_with_data(session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "data": {"viewer": None},
                "errors": [{"message": "Not authorized"}, {"message": "Try again"}],
            },
        )

    client = _client(session, handler)

    with pytest.raises(GraphQLError) as excinfo:
        asyncio.run(client.query("currentUser"))

    assert str(excinfo.value) == "Not authorized, Try again"


def test_query_without_data_or_errors_is_empty(session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    client = _client(session, handler)

    with pytest.raises(EmptyResultError):
        asyncio.run(client.query("currentUser"))


def test_query_with_non_json_body_reports_status_and_excerpt(session) -> None:
    body = "<html>" + "x" * 500 + "</html>"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text=body)

    client = _client(session, handler)

    with pytest.raises(ProtocolError) as excinfo:
        asyncio.run(client.query("currentUser"))

    assert excinfo.value.status_code == 502
    assert excinfo.value.body_excerpt == body[:200]
    assert "HTTP 502" in str(excinfo.value)


def test_unregistered_operation_fails_before_sending(session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("request should not be sent")

    client = _client(session, handler, operations={"CreateDrawings": ""})

    with pytest.raises(ConfigurationError):
        asyncio.run(client.query("CreateDrawings"))


def test_decode_response_returns_data() -> None:
    assert decode_response(200, '{"data": {"ok": true}}') == {"ok": True}


def test_decode_response_rejects_non_object_json() -> None:
    with pytest.raises(ProtocolError):
        decode_response(200, "[1, 2]")


def test_build_upload_declares_one_map_entry_per_file() -> None:
    envelope = persisted_envelope(
        "hash", {"input": {"id": "p-1", "data": None, "mask": None}}
    )
    files = [
        FileUpload("variables.input.data", b"source", "source.png"),
        FileUpload("variables.input.mask", b"mask", "mask.png"),
    ]

    upload = build_upload(envelope, files)

    assert upload.file_map == {
        "0": ["variables.input.data"],
        "1": ["variables.input.mask"],
    }
    assert [index for index, _ in upload.parts] == ["0", "1"]
    assert [part.content for _, part in upload.parts] == [b"source", b"mask"]


def test_build_upload_nulls_placeholders_in_a_copy() -> None:
    variables = {"input": [{"workbenchId": "w-1", "image": "stale"}]}
    envelope = persisted_envelope("hash", variables)

    upload = build_upload(
        envelope, [FileUpload("variables.input.0.image", b"img", "result.png")]
    )

    assert upload.operations["variables"]["input"][0]["image"] is None
    assert variables["input"][0]["image"] == "stale"


def test_build_upload_rejects_unknown_path() -> None:
    envelope = persisted_envelope("hash", {"input": {}})

    with pytest.raises(ValueError):
        build_upload(envelope, [FileUpload("variables.other.data", b"x", "x.png")])


def test_build_upload_rejects_duplicate_paths() -> None:
    envelope = persisted_envelope("hash", {"input": {"data": None}})
    files = [
        FileUpload("variables.input.data", b"a", "a.png"),
        FileUpload("variables.input.data", b"b", "b.png"),
    ]

    with pytest.raises(ValueError):
        build_upload(envelope, files)


def test_mutation_with_upload_sends_multipart_parts_in_order(session) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"data": {"createEditPrompt": {"prompt": {"id": "p-1"}}}}
        )

    client = _client(session, handler)
    files = [
        FileUpload("variables.input.data", b"SOURCE-BYTES", "source.png"),
        FileUpload("variables.input.mask", b"MASK-BYTES", "mask.png"),
    ]

    data = asyncio.run(
        client.mutation_with_upload(
            "CreateEditPrompt", {"input": {"id": "p-1", "data": None}}, files
        )
    )

    assert data == {"createEditPrompt": {"prompt": {"id": "p-1"}}}
    request = seen[0]
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["x-organization-id"] == "org-123"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    body = request.content
    positions = [
        body.index(b'name="operations"'),
        body.index(b'name="map"'),
        body.index(b'name="0"'),
        body.index(b'name="1"'),
    ]
    assert positions == sorted(positions)
    assert body.index(b"SOURCE-BYTES") < body.index(b"MASK-BYTES")
    assert b'{"0": ["variables.input.data"], "1": ["variables.input.mask"]}' in body
    assert QUERIES["CreateEditPrompt"].encode() in body


def test_mutation_with_upload_uses_same_error_decoding(session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": None})

    client = _client(session, handler)

    with pytest.raises(EmptyResultError):
        asyncio.run(
            client.mutation_with_upload(
                "CreatePrompt",
                {"input": {"data": None}},
                [FileUpload("variables.input.data", b"x", "source.png")],
            )
        )


@pytest.mark.parametrize(
    "path", ["query", "extensions.persistedQuery.sha256Hash", "variables"]
)
def test_build_upload_only_targets_variables(path: str) -> None:
    envelope = persisted_envelope("hash", {"input": {"data": None}})

    with pytest.raises(ValueError):
        build_upload(envelope, [FileUpload(path, b"x", "x.png")])
