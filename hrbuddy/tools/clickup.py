"""
ClickUp MCP adapter.

Typed operations over the ClickUp MCP server
(https://github.com/taazkareem/clickup-mcp-server).
"""

from enum import Enum

from pydantic import BaseModel

from hrbuddy.tools.mcp_client import McpSession, ToolResult, invoke, shape_arguments


class CreateTaskParams(BaseModel):
    list_id: str
    name: str
    description: str | None = None
    status: str | None = None
    priority: int | None = None
    due_date: str | None = None
    tags: list[str] | None = None
    assignees: list[str] | None = None


class GetTasksParams(BaseModel):
    list_id: str
    statuses: list[str] | None = None
    assignees: list[str] | None = None


class GetTaskParams(BaseModel):
    task_id: str


class UpdateTaskParams(BaseModel):
    task_id: str
    name: str | None = None
    description: str | None = None
    status: str | None = None
    priority: int | None = None
    due_date: str | None = None
    tags: list[str] | None = None
    assignees: list[str] | None = None


class AddTaskCommentParams(BaseModel):
    task_id: str
    comment_text: str


class GetListsParams(BaseModel):
    folder_id: str


class ClickUpOperation(str, Enum):
    CREATE_TASK = "createTask"
    GET_TASKS = "getTasks"
    GET_TASK = "getTask"
    UPDATE_TASK = "updateTask"
    ADD_TASK_COMMENT = "addTaskComment"
    GET_LISTS = "getLists"


# operation -> (tool name, argument model)
TOOLS: dict[ClickUpOperation, tuple[str, type[BaseModel]]] = {
    ClickUpOperation.CREATE_TASK: ("create_task", CreateTaskParams),
    ClickUpOperation.GET_TASKS: ("get_tasks", GetTasksParams),
    ClickUpOperation.GET_TASK: ("get_task", GetTaskParams),
    ClickUpOperation.UPDATE_TASK: ("update_task", UpdateTaskParams),
    ClickUpOperation.ADD_TASK_COMMENT: ("add_task_comment", AddTaskCommentParams),
    ClickUpOperation.GET_LISTS: ("get_lists", GetListsParams),
}

assert set(TOOLS) == set(ClickUpOperation), "every ClickUp operation needs a tool binding"


class ClickUpAdapter:
    """ClickUp operations bound to one MCP session."""

    def __init__(self, session: McpSession):
        self.session = session

    async def run(self, operation: ClickUpOperation, params: BaseModel | dict) -> ToolResult:
        """Validate params for the operation and forward the call to the server."""
        tool_name, model = TOOLS[operation]
        return await invoke(self.session, tool_name, shape_arguments(model, params))

    async def create_task(self, params: CreateTaskParams | dict) -> ToolResult:
        return await self.run(ClickUpOperation.CREATE_TASK, params)

    async def get_tasks(self, params: GetTasksParams | dict) -> ToolResult:
        return await self.run(ClickUpOperation.GET_TASKS, params)

    async def get_task(self, params: GetTaskParams | dict) -> ToolResult:
        return await self.run(ClickUpOperation.GET_TASK, params)

    async def update_task(self, params: UpdateTaskParams | dict) -> ToolResult:
        return await self.run(ClickUpOperation.UPDATE_TASK, params)

    async def add_task_comment(self, params: AddTaskCommentParams | dict) -> ToolResult:
        return await self.run(ClickUpOperation.ADD_TASK_COMMENT, params)

    async def get_lists(self, params: GetListsParams | dict) -> ToolResult:
        return await self.run(ClickUpOperation.GET_LISTS, params)
