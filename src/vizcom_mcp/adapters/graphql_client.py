"""Persisted-query GraphQL transport for the Vizcom API."""

import copy
import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from vizcom_mcp.domain.models import FileUpload, Session
from vizcom_mcp.errors import (
    ConfigurationError,
    EmptyResultError,
    GraphQLError,
    ProtocolError,
)
from vizcom_mcp.queries import QUERIES

_logger = logging.getLogger(__name__)

_BODY_EXCERPT_LIMIT = 200


class GraphQLClient(Protocol):
    """Interface for authenticated Vizcom GraphQL calls."""

    async def query(
        self, operation: str, variables: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Run a persisted query or mutation and return its data."""

    async def mutation_with_upload(
        self,
        operation: str,
        variables: dict[str, object],
        files: Sequence[FileUpload],
    ) -> dict[str, object]:
        """Run a persisted mutation with multipart file parts."""


@dataclass(frozen=True)
class UploadRequest:
    """Multipart upload payload with index-aligned map and binary parts."""

    operations: dict[str, object]
    file_map: dict[str, list[str]]
    parts: list[tuple[str, FileUpload]]

    def form_fields(self) -> dict[str, str]:
        return {
            "operations": json.dumps(self.operations),
            "map": json.dumps(self.file_map),
        }

    def form_files(self) -> list[tuple[str, tuple[str, bytes, str]]]:
        return [
            (index, (upload.filename, upload.content, upload.content_type))
            for index, upload in self.parts
        ]


def persisted_envelope(
    sha256_hash: str, variables: dict[str, object] | None
) -> dict[str, object]:
    """Build the JSON envelope that references a persisted operation."""
    return {
        "extensions": {"persistedQuery": {"sha256Hash": sha256_hash}},
        "query": "",
        "variables": variables or {},
    }


def build_upload(
    operations: dict[str, object], files: Sequence[FileUpload]
) -> UploadRequest:
    """Pair each file with a positional index in the map and the part list.

    Every variable path is set to null in a copy of the operations envelope,
    so each declared placeholder has exactly one binary part.
    """
    envelope = copy.deepcopy(operations)
    file_map: dict[str, list[str]] = {}
    parts: list[tuple[str, FileUpload]] = []
    seen: set[str] = set()
    for position, upload in enumerate(files):
        if upload.variable_path in seen:
            raise ValueError(f"Duplicate upload path: {upload.variable_path}")
        seen.add(upload.variable_path)
        _set_placeholder(envelope, upload.variable_path)
        index = str(position)
        file_map[index] = [upload.variable_path]
        parts.append((index, upload))
    return UploadRequest(operations=envelope, file_map=file_map, parts=parts)


def _set_placeholder(envelope: dict[str, object], path: str) -> None:
    segments = path.split(".")
    if len(segments) < 2 or segments[0] != "variables":
        raise ValueError(f"Upload path must start with 'variables.': {path}")
    target: object = envelope
    for segment in segments[:-1]:
        target = _step(target, segment, path)
    last = segments[-1]
    if isinstance(target, list):
        if not last.isdigit() or int(last) >= len(target):
            raise ValueError(f"Upload path does not match variables: {path}")
        target[int(last)] = None
    elif isinstance(target, dict):
        target[last] = None
    else:
        raise ValueError(f"Upload path does not match variables: {path}")


def _step(target: object, segment: str, path: str) -> object:
    if isinstance(target, dict) and segment in target:
        return target[segment]
    if isinstance(target, list) and segment.isdigit() and int(segment) < len(target):
        return target[int(segment)]
    raise ValueError(f"Upload path does not match variables: {path}")


def decode_response(status_code: int, body: str) -> dict[str, object]:
    """Classify a raw GraphQL response body into data or an error."""
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise ProtocolError(status_code, body[:_BODY_EXCERPT_LIMIT])

    errors = payload.get("errors")
    if errors:
        if not isinstance(errors, list):
            errors = [errors]
        raise GraphQLError([_error_message(error) for error in errors])

    data = payload.get("data")
    if data is None:
        raise EmptyResultError()
    if not isinstance(data, dict):
        raise ProtocolError(status_code, body[:_BODY_EXCERPT_LIMIT])
    return data


def _error_message(error: object) -> str:
    if isinstance(error, dict):
        return str(error.get("message", error))
    return str(error)


@dataclass
class VizcomClient(GraphQLClient):
    """HTTPX-backed client bound to one session."""

    session: Session
    http_client: httpx.AsyncClient
    operations: Mapping[str, str] = field(default_factory=lambda: dict(QUERIES))
    timeout: float = 60.0

    @classmethod
    def create(
        cls,
        session: Session,
        operations: Mapping[str, str] | None = None,
        timeout: float = 60.0,
    ) -> "VizcomClient":
        """Create a client with a managed httpx session."""
        return cls(
            session=session,
            http_client=httpx.AsyncClient(),
            operations=dict(operations) if operations is not None else dict(QUERIES),
            timeout=timeout,
        )

    @property
    def organization_id(self) -> str:
        return self.session.organization_id

    @property
    def graphql_url(self) -> str:
        return f"{self.session.api_url.rstrip('/')}/graphql"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.session.auth_token}",
            "x-organization-id": self.session.organization_id,
        }

    def _hash_for(self, operation: str) -> str:
        sha256_hash = self.operations.get(operation)
        if not sha256_hash:
            raise ConfigurationError(
                f"No persisted query hash registered for operation '{operation}'"
            )
        return sha256_hash

    async def query(
        self, operation: str, variables: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Send a persisted operation as a JSON request."""
        envelope = persisted_envelope(self._hash_for(operation), variables)
        _logger.debug("GraphQL %s", operation)
        response = await self.http_client.post(
            self.graphql_url,
            json=envelope,
            headers={**self._headers(), "Content-Type": "application/json"},
            timeout=self.timeout,
        )
        return decode_response(response.status_code, response.text)

    async def mutation_with_upload(
        self,
        operation: str,
        variables: dict[str, object],
        files: Sequence[FileUpload],
    ) -> dict[str, object]:
        """Send a persisted mutation as a multipart upload."""
        upload = build_upload(
            persisted_envelope(self._hash_for(operation), variables), files
        )
        _logger.debug("GraphQL upload %s with %s file(s)", operation, len(upload.parts))
        response = await self.http_client.post(
            self.graphql_url,
            data=upload.form_fields(),
            files=upload.form_files(),
            headers=self._headers(),
            timeout=self.timeout,
        )
        return decode_response(response.status_code, response.text)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
