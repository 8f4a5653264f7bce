"""Text-to-image generation tool."""

from uuid import UUID, uuid4

from pydantic import Field

from vizcom_mcp.tools.base import (
    ToolContext,
    ToolDefinition,
    ToolInput,
    poll_result_payload,
)


class GenerateImageInput(ToolInput):
    drawing_id: UUID = Field(description="Drawing ID to generate into")
    prompt: str = Field(min_length=1, description="Text description of the image")
    outputs_count: int = Field(
        default=1, ge=1, le=4, description="Number of variations (1-4)"
    )


async def generate_image(context: ToolContext, params: GenerateImageInput) -> object:
    prompt_id = str(uuid4())
    await context.client.query(
        "CreatePrompt",
        {
            "input": {
                "id": prompt_id,
                "drawingId": str(params.drawing_id),
                "prompt": params.prompt,
                "imageInferenceType": "RAW_GENERATION",
                "outputsCount": params.outputs_count,
                "sourceImageInfluence": 0,
            }
        },
    )
    result = await context.poll(prompt_id)
    return poll_result_payload(result, context.storage)


TOOLS = [
    ToolDefinition(
        name="generate_image",
        description=(
            "Generate an image from a text prompt alone, no source sketch needed. "
            "Use this for early ideation and concept exploration."
        ),
        input_model=GenerateImageInput,
        handler=generate_image,
    ),
]
