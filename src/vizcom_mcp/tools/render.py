"""Sketch rendering tools."""

from uuid import UUID, uuid4

from pydantic import Field

from vizcom_mcp.domain.models import FileUpload
from vizcom_mcp.tools.base import (
    EmptyInput,
    ImageBytes,
    ToolContext,
    ToolDefinition,
    ToolInput,
    poll_result_payload,
)

DEFAULT_STYLE = "generalV2"

STYLE_CATEGORIES: dict[str, list[str]] = {
    "general": ["generalV2", "technicolor_v2", "cybercel_v2", "volume_v2", "pastel"],
    "product": ["realisticProduct_v2", "surfaceSculpt"],
    "sketch": ["wireframe_v2", "pdSketchColor_v2", "lineart_v2"],
    "automotive": [
        "carShading_v2",
        "carExterior_v2",
        "carInterior_v2",
        "carInteriorSketch_v2",
        "carDesignRender_v2",
    ],
    "architecture": ["architectureRendering_v2"],
}

PUBLIC_STYLES = [style for styles in STYLE_CATEGORIES.values() for style in styles]


class RenderSketchInput(ToolInput):
    drawing_id: UUID = Field(description="Drawing ID to render into")
    prompt: str = Field(min_length=1, description="Description of the desired render")
    source_image_base64: ImageBytes = Field(
        description="Base64-encoded sketch image (PNG/JPEG)"
    )
    style: str = Field(
        default=DEFAULT_STYLE,
        description='Style preset (e.g. "generalV2", "realisticProduct_v2")',
    )
    influence_level: float = Field(
        default=0.5,
        ge=0,
        le=1,
        description="How closely the output follows the sketch (0-1)",
    )
    outputs_count: int = Field(
        default=1, ge=1, le=4, description="Number of variations (1-4)"
    )


async def render_sketch(context: ToolContext, params: RenderSketchInput) -> object:
    prompt_id = str(uuid4())
    await context.client.mutation_with_upload(
        "CreatePrompt",
        {
            "input": {
                "id": prompt_id,
                "drawingId": str(params.drawing_id),
                "prompt": params.prompt,
                "imageInferenceType": "RENDER",
                "publicPaletteId": params.style,
                "sourceImageInfluence": params.influence_level,
                "outputsCount": params.outputs_count,
                "data": None,
            }
        },
        [
            FileUpload(
                variable_path="variables.input.data",
                content=params.source_image_base64,
                filename="source.png",
            )
        ],
    )
    result = await context.poll(prompt_id)
    return poll_result_payload(result, context.storage)


async def list_styles(context: ToolContext, params: EmptyInput) -> object:
    return {
        "styles": PUBLIC_STYLES,
        "recommended": DEFAULT_STYLE,
        "categories": STYLE_CATEGORIES,
    }


TOOLS = [
    ToolDefinition(
        name="render_sketch",
        description=(
            "Turn a sketch into a photorealistic rendered visualization. Provide a "
            "source sketch image and a text prompt describing the desired look. "
            "influenceLevel controls how closely the output follows the sketch "
            '(0 = loose, 1 = strict). Common styles: "generalV2" (default), '
            '"realisticProduct_v2" (product design), "architectureRendering_v2" '
            '(architecture), "carExterior_v2" / "carInterior_v2" (automotive). '
            "Use list_styles to see all options."
        ),
        input_model=RenderSketchInput,
        handler=render_sketch,
    ),
    ToolDefinition(
        name="list_styles",
        description="List available rendering styles for the render_sketch tool.",
        input_model=EmptyInput,
        handler=list_styles,
    ),
]
