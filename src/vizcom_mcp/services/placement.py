"""Saving generated images back into a workbench as new drawings."""

import logging
from dataclasses import dataclass, field

from vizcom_mcp.adapters.graphql_client import GraphQLClient
from vizcom_mcp.adapters.storage_client import StorageClient
from vizcom_mcp.domain.models import FileUpload, PlacedDrawing, PromptOutput

_logger = logging.getLogger(__name__)

DRAWING_SIZE = 1024


@dataclass
class PlacementReport:
    """Per-output outcome of a best-effort placement run."""

    placed: list[PlacedDrawing] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)


async def get_workbench_id(client: GraphQLClient, drawing_id: str) -> str:
    """Return the workbench that owns a drawing."""
    data = await client.query("drawingById", {"id": drawing_id})
    drawing = data.get("drawing") or {}
    return str(drawing["workbenchId"])


async def create_drawing_from_image(
    client: GraphQLClient,
    storage: StorageClient,
    workbench_id: str,
    image_path: str,
) -> PlacedDrawing:
    """Download an image and upload it as a new drawing in the workbench."""
    content = await storage.fetch_image_bytes(image_path)
    variables: dict[str, object] = {
        "input": [
            {
                "workbenchId": workbench_id,
                "width": DRAWING_SIZE,
                "height": DRAWING_SIZE,
                "backgroundColor": "#FFFFFF",
                "backgroundVisible": True,
                "image": None,
            }
        ]
    }
    result = await client.mutation_with_upload(
        "CreateDrawings",
        variables,
        [
            FileUpload(
                variable_path="variables.input.0.image",
                content=content,
                filename="result.png",
            )
        ],
    )
    drawing = result["createDrawings"]["drawings"][0]
    return PlacedDrawing(
        drawing_id=str(drawing["id"]),
        name=str(drawing.get("name", "")),
        image_url=storage.image_url(image_path),
    )


async def place_outputs(
    client: GraphQLClient,
    storage: StorageClient,
    drawing_id: str,
    outputs: list[PromptOutput],
) -> PlacementReport:
    """Place each completed output next to the source drawing.

    Outputs are handled one at a time; a failure on one is recorded and the
    rest are still placed.
    """
    report = PlacementReport()
    completed = [output for output in outputs if output.image_path]
    if not completed:
        return report
    workbench_id = await get_workbench_id(client, drawing_id)
    for output in completed:
        try:
            placed = await create_drawing_from_image(
                client, storage, workbench_id, str(output.image_path)
            )
        except Exception as exc:
            _logger.warning("Failed to place output %s: %s", output.id, exc)
            report.errors[output.id] = str(exc)
            continue
        report.placed.append(placed)
    return report
