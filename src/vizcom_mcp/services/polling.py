"""Polling for asynchronous generation jobs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from vizcom_mcp.adapters.graphql_client import GraphQLClient
from vizcom_mcp.domain.models import PollResult, PromptOutput
from vizcom_mcp.errors import JobFailedError, JobTimeoutError

DEFAULT_INTERVAL_MS = 2000
DEFAULT_MAX_ATTEMPTS = 60

_logger = logging.getLogger(__name__)


async def fetch_prompt_outputs(
    client: GraphQLClient, prompt_id: str
) -> tuple[str, list[PromptOutput]]:
    """Query a prompt once and return its status and outputs."""
    data = await client.query("prompt", {"id": prompt_id})
    prompt = data.get("prompt")
    if not isinstance(prompt, dict):
        # A freshly created prompt can be invisible for a moment.
        _logger.debug(
            "Prompt %s not visible yet; treating as processing", prompt_id
        )
        return "", []
    outputs = prompt.get("promptOutputs") or prompt.get("outputs") or {}
    nodes = outputs.get("nodes", []) if isinstance(outputs, dict) else []
    return str(prompt.get("status") or ""), [
        parse_output(node) for node in nodes if isinstance(node, dict)
    ]


def parse_output(node: dict[str, object]) -> PromptOutput:
    image_path = node.get("imagePath")
    failure_reason = node.get("failureReason")
    return PromptOutput(
        id=str(node.get("id", "")),
        image_path=str(image_path) if image_path else None,
        failure_reason=str(failure_reason) if failure_reason else None,
    )


async def poll_for_result(
    client: GraphQLClient,
    prompt_id: str,
    *,
    interval_ms: int = DEFAULT_INTERVAL_MS,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> PollResult:
    """Poll a prompt until an output completes or fails, or attempts run out.

    A failure reason on any output fails the job, even when sibling outputs
    already completed; those outputs are kept on the raised JobFailedError.
    When an output has an image the full snapshot is returned, including
    outputs that are still pending.
    """
    for attempt in range(max_attempts):
        _, outputs = await fetch_prompt_outputs(client, prompt_id)

        failed = next((output for output in outputs if output.failure_reason), None)
        if failed is not None:
            _logger.info("Prompt %s failed: %s", prompt_id, failed.failure_reason)
            raise JobFailedError(prompt_id, str(failed.failure_reason), outputs)

        if any(output.image_path for output in outputs):
            _logger.info(
                "Prompt %s completed after %s attempt(s)", prompt_id, attempt + 1
            )
            return PollResult(prompt_id=prompt_id, status="completed", outputs=outputs)

        if attempt < max_attempts - 1:
            await sleep(interval_ms / 1000)

    raise JobTimeoutError(prompt_id, max_attempts * interval_ms / 1000)
