"""Shared building blocks for MCP tool handlers."""

import asyncio
import base64
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from vizcom_mcp.adapters.graphql_client import GraphQLClient
from vizcom_mcp.adapters.storage_client import StorageClient
from vizcom_mcp.domain.models import PollResult, PromptOutput
from vizcom_mcp.errors import JobFailedError
from vizcom_mcp.services.polling import (
    DEFAULT_INTERVAL_MS,
    DEFAULT_MAX_ATTEMPTS,
    poll_for_result,
)


@dataclass
class ToolContext:
    """Dependencies handed to every tool handler."""

    client: GraphQLClient
    storage: StorageClient
    organization_id: str
    poll_interval_ms: int = DEFAULT_INTERVAL_MS
    poll_max_attempts: int = DEFAULT_MAX_ATTEMPTS
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def poll(self, prompt_id: str) -> PollResult:
        return await poll_for_result(
            self.client,
            prompt_id,
            interval_ms=self.poll_interval_ms,
            max_attempts=self.poll_max_attempts,
            sleep=self.sleep,
        )


class ToolInput(BaseModel):
    """Base model for tool arguments; camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class EmptyInput(ToolInput):
    """Arguments for tools that take none."""


ToolHandler = Callable[[ToolContext, Any], Awaitable[object]]


@dataclass(frozen=True)
class ToolDefinition:
    """A named tool with its argument model and handler."""

    name: str
    description: str
    input_model: type[ToolInput]
    handler: ToolHandler

    def input_schema(self) -> dict[str, object]:
        return self.input_model.model_json_schema(by_alias=True)

    async def invoke(self, context: ToolContext, arguments: dict[str, object]) -> object:
        params = self.input_model.model_validate(arguments)
        return await self.handler(context, params)


def _decode_image(value: object) -> object:
    if isinstance(value, str):
        if value.startswith("data:") and "," in value:
            value = value.split(",", 1)[1]
        return base64.b64decode(value, validate=True)
    return value


ImageBytes = Annotated[bytes, BeforeValidator(_decode_image)]
"""Image payload passed as base64 (optionally a data URL), decoded to bytes."""


def output_payload(output: PromptOutput, storage: StorageClient) -> dict[str, object]:
    return {
        "id": output.id,
        "imagePath": output.image_path,
        "imageUrl": storage.image_url(output.image_path) if output.image_path else None,
        "failureReason": output.failure_reason,
    }


def poll_result_payload(result: PollResult, storage: StorageClient) -> dict[str, object]:
    return {
        "promptId": result.prompt_id,
        "status": result.status,
        "outputs": [output_payload(output, storage) for output in result.outputs],
    }


def failed_job_payload(
    exc: JobFailedError, storage: StorageClient
) -> dict[str, object]:
    """Describe a failed job, keeping the outputs that did produce images."""
    return {
        "promptId": exc.prompt_id,
        "status": "failed",
        "failureReason": exc.reason,
        "completedOutputs": [
            output_payload(output, storage)
            for output in exc.outputs
            if output.image_path
        ],
    }


def unwrap(data: dict[str, object], key: str) -> object:
    """Return data[key] when the response nests the payload under it."""
    return data.get(key, data)
