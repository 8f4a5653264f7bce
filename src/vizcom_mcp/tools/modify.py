"""AI edit tool for existing images."""

import logging
from typing import Literal
from uuid import UUID, uuid4

from pydantic import Field

from vizcom_mcp.domain.models import FileUpload
from vizcom_mcp.services.placement import place_outputs
from vizcom_mcp.tools.base import (
    ImageBytes,
    ToolContext,
    ToolDefinition,
    ToolInput,
    poll_result_payload,
)

_logger = logging.getLogger(__name__)


class ModifyImageInput(ToolInput):
    drawing_id: UUID = Field(description="Drawing ID to modify")
    prompt: str = Field(min_length=1, description="Description of the changes to make")
    source_image_base64: ImageBytes = Field(
        description="Base64-encoded source image (PNG/JPEG)"
    )
    mask_base64: ImageBytes | None = Field(
        default=None,
        description="Base64-encoded mask image (white = area to change)",
    )
    quality_mode: Literal["standard", "pro"] = Field(
        default="standard",
        description='Quality mode: "standard" or "pro" (pro requires paid plan)',
    )
    outputs_count: int = Field(
        default=1, ge=1, le=4, description="Number of variations (1-4)"
    )
    place_on_workbench: bool = Field(
        default=True,
        description="Add each result as a new drawing in the source workbench",
    )


async def modify_image(context: ToolContext, params: ModifyImageInput) -> object:
    prompt_id = str(uuid4())
    prompt_input: dict[str, object] = {
        "id": prompt_id,
        "drawingId": str(params.drawing_id),
        "prompt": params.prompt,
        "outputsCount": params.outputs_count,
        "qualityMode": params.quality_mode,
        "data": None,
    }
    files = [
        FileUpload(
            variable_path="variables.input.data",
            content=params.source_image_base64,
            filename="source.png",
        )
    ]
    if params.mask_base64 is not None:
        prompt_input["mask"] = None
        files.append(
            FileUpload(
                variable_path="variables.input.mask",
                content=params.mask_base64,
                filename="mask.png",
            )
        )

    await context.client.mutation_with_upload(
        "CreateEditPrompt", {"input": prompt_input}, files
    )
    result = await context.poll(prompt_id)
    payload = poll_result_payload(result, context.storage)
    if not params.place_on_workbench:
        return payload

    try:
        report = await place_outputs(
            context.client, context.storage, str(params.drawing_id), result.outputs
        )
    except Exception as exc:
        _logger.warning("Could not place results for prompt %s: %s", prompt_id, exc)
        payload["placementError"] = str(exc)
        return payload
    payload["placedDrawings"] = [
        {"drawingId": placed.drawing_id, "name": placed.name, "imageUrl": placed.image_url}
        for placed in report.placed
    ]
    if report.errors:
        payload["placementErrors"] = report.errors
    return payload


TOOLS = [
    ToolDefinition(
        name="modify_image",
        description=(
            "Modify an existing image using AI. Describe the changes you want in "
            "the prompt. Optionally provide a mask (base64 PNG where white = area "
            'to change) for targeted edits. Supports "standard" and "pro" quality '
            "modes (pro requires a paid plan). Results are added to the source "
            "drawing's workbench unless placeOnWorkbench is false. If any output "
            "fails, nothing is placed; images that did complete are returned in "
            "completedOutputs and can be saved with save_image_to_workbench."
        ),
        input_model=ModifyImageInput,
        handler=modify_image,
    ),
]
