"""Workspace browsing tools."""

from uuid import UUID

from pydantic import Field

from vizcom_mcp.tools.base import (
    EmptyInput,
    ToolContext,
    ToolDefinition,
    ToolInput,
    unwrap,
)


class FolderInput(ToolInput):
    folder_id: UUID = Field(description="Folder ID to browse")


class WorkbenchInput(ToolInput):
    workbench_id: UUID = Field(description="Workbench ID")


class DrawingInput(ToolInput):
    drawing_id: UUID = Field(description="Drawing ID")


async def get_current_user(context: ToolContext, params: EmptyInput) -> object:
    data = await context.client.query("currentUser")
    return unwrap(data, "viewer")


async def list_teams(context: ToolContext, params: EmptyInput) -> object:
    data = await context.client.query(
        "organizationTeams", {"id": context.organization_id}
    )
    teams = unwrap(data, "teams")
    if isinstance(teams, dict):
        return teams.get("nodes", teams)
    return teams


async def list_folders(context: ToolContext, params: FolderInput) -> object:
    data = await context.client.query("folder", {"id": str(params.folder_id)})
    return unwrap(data, "folder")


async def list_workbenches(context: ToolContext, params: FolderInput) -> object:
    data = await context.client.query(
        "workbenchesByFolderId", {"folderId": str(params.folder_id)}
    )
    return unwrap(data, "workbenches")


async def get_workbench(context: ToolContext, params: WorkbenchInput) -> object:
    data = await context.client.query(
        "workbenchContent", {"id": str(params.workbench_id)}
    )
    return unwrap(data, "workbench")


async def get_drawing(context: ToolContext, params: DrawingInput) -> object:
    data = await context.client.query("drawingById", {"id": str(params.drawing_id)})
    return unwrap(data, "drawing")


TOOLS = [
    ToolDefinition(
        name="get_current_user",
        description="Get the authenticated user and their organizations.",
        input_model=EmptyInput,
        handler=get_current_user,
    ),
    ToolDefinition(
        name="list_teams",
        description="List teams in the current organization.",
        input_model=EmptyInput,
        handler=list_teams,
    ),
    ToolDefinition(
        name="list_folders",
        description=(
            "List subfolders and workbenches within a folder. "
            "Use the root folder ID from list_teams to start browsing."
        ),
        input_model=FolderInput,
        handler=list_folders,
    ),
    ToolDefinition(
        name="list_workbenches",
        description="List the workbenches in a folder, most recently updated first.",
        input_model=FolderInput,
        handler=list_workbenches,
    ),
    ToolDefinition(
        name="get_workbench",
        description="Get workbench details including its drawings.",
        input_model=WorkbenchInput,
        handler=get_workbench,
    ),
    ToolDefinition(
        name="get_drawing",
        description="Get a drawing with its layers and recent generation history.",
        input_model=DrawingInput,
        handler=get_drawing,
    ),
]
