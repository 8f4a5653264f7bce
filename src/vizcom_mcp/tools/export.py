"""Status, export and workspace-saving tools."""

import base64
from uuid import UUID

from pydantic import Field

from vizcom_mcp.services.placement import create_drawing_from_image
from vizcom_mcp.services.polling import fetch_prompt_outputs
from vizcom_mcp.tools.base import (
    ToolContext,
    ToolDefinition,
    ToolInput,
    output_payload,
)


class GenerationStatusInput(ToolInput):
    prompt_id: UUID = Field(description="Prompt ID to check")


class ExportImageInput(ToolInput):
    image_path: str = Field(
        min_length=1, description="Image storage path from a generation result"
    )
    include_data: bool = Field(
        default=False, description="Also return the image bytes as base64"
    )


class SaveImageInput(ToolInput):
    workbench_id: UUID = Field(description="Workbench to add the drawing to")
    image_path: str = Field(
        min_length=1, description="Image storage path from a generation result"
    )


class CreateWorkbenchInput(ToolInput):
    folder_id: UUID = Field(description="Folder ID to create the workbench in")
    name: str = Field(min_length=1, description="Name for the new workbench")


async def get_generation_status(
    context: ToolContext, params: GenerationStatusInput
) -> object:
    prompt_id = str(params.prompt_id)
    status, outputs = await fetch_prompt_outputs(context.client, prompt_id)
    return {
        "promptId": prompt_id,
        "status": status,
        "outputs": [output_payload(output, context.storage) for output in outputs],
    }


async def export_image(context: ToolContext, params: ExportImageInput) -> object:
    result: dict[str, object] = {
        "url": context.storage.image_url(params.image_path),
        "imagePath": params.image_path,
    }
    if params.include_data:
        content = await context.storage.fetch_image_bytes(params.image_path)
        result["base64"] = base64.b64encode(content).decode("ascii")
    return result


async def save_image_to_workbench(
    context: ToolContext, params: SaveImageInput
) -> object:
    placed = await create_drawing_from_image(
        context.client, context.storage, str(params.workbench_id), params.image_path
    )
    return {
        "drawingId": placed.drawing_id,
        "name": placed.name,
        "imageUrl": placed.image_url,
    }


async def create_workbench(
    context: ToolContext, params: CreateWorkbenchInput
) -> object:
    data = await context.client.query(
        "CreateWorkbench",
        {"input": {"workbench": {"folderId": str(params.folder_id), "name": params.name}}},
    )
    return data["createWorkbench"]["workbench"]


TOOLS = [
    ToolDefinition(
        name="get_generation_status",
        description="Check the status of an image generation by prompt ID.",
        input_model=GenerationStatusInput,
        handler=get_generation_status,
    ),
    ToolDefinition(
        name="export_image",
        description=(
            "Get the full URL for a generated image. Pass the imagePath from a "
            "generation result."
        ),
        input_model=ExportImageInput,
        handler=export_image,
    ),
    ToolDefinition(
        name="save_image_to_workbench",
        description="Save a generated image into a workbench as a new drawing.",
        input_model=SaveImageInput,
        handler=save_image_to_workbench,
    ),
    ToolDefinition(
        name="create_workbench",
        description="Create a new workbench in a folder.",
        input_model=CreateWorkbenchInput,
        handler=create_workbench,
    ),
]
