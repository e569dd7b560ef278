"""
MCP service manager.

Owns the ClickUp and Neon MCP sessions and exposes their operations.
One instance is created at application startup and shared through
``app.state``.
"""

import asyncio
import logging

from pydantic import BaseModel

from hrbuddy.config import Settings
from hrbuddy.errors import ToolConnectionError
from hrbuddy.tools import mcp_client
from hrbuddy.tools.clickup import (
    AddTaskCommentParams,
    ClickUpAdapter,
    ClickUpOperation,
    CreateTaskParams,
    GetListsParams,
    GetTaskParams,
    GetTasksParams,
    UpdateTaskParams,
)
from hrbuddy.tools.mcp_client import McpSession, ToolResult
from hrbuddy.tools.neon import (
    DeleteDataParams,
    ExecuteQueryParams,
    GetSchemaParams,
    GetTableInfoParams,
    InsertDataParams,
    NeonAdapter,
    NeonOperation,
    UpdateDataParams,
)

logger = logging.getLogger(__name__)

CLICKUP = "clickup"
NEON = "neon"


class ClickUpGroup:
    """ClickUp operations that initialize the service on first use."""

    def __init__(self, service: "McpService"):
        self._service = service

    async def run(self, operation: ClickUpOperation, params: BaseModel | dict) -> ToolResult:
        await self._service.initialize()
        return await self._service.clickup_adapter.run(operation, params)

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


class NeonGroup:
    """Neon operations that initialize the service on first use."""

    def __init__(self, service: "McpService"):
        self._service = service

    async def run(self, operation: NeonOperation, params: BaseModel | dict | None = None) -> ToolResult:
        await self._service.initialize()
        return await self._service.neon_adapter.run(operation, params)

    async def execute_query(self, params: ExecuteQueryParams | dict) -> ToolResult:
        return await self.run(NeonOperation.EXECUTE_QUERY, params)

    async def get_schema(self, params: GetSchemaParams | dict | None = None) -> ToolResult:
        return await self.run(NeonOperation.GET_SCHEMA, params)

    async def get_table_info(self, params: GetTableInfoParams | dict) -> ToolResult:
        return await self.run(NeonOperation.GET_TABLE_INFO, params)

    async def insert_data(self, params: InsertDataParams | dict) -> ToolResult:
        return await self.run(NeonOperation.INSERT_DATA, params)

    async def update_data(self, params: UpdateDataParams | dict) -> ToolResult:
        return await self.run(NeonOperation.UPDATE_DATA, params)

    async def delete_data(self, params: DeleteDataParams | dict) -> ToolResult:
        return await self.run(NeonOperation.DELETE_DATA, params)


class McpService:
    """
    Unified access to the MCP servers.

    Sessions are opened lazily by ``initialize()``, which every operation
    awaits. Concurrent first calls share one lock, so each endpoint is
    connected at most once. A failed endpoint leaves the service
    uninitialized and the next call tries that endpoint again; an endpoint
    that did connect keeps its session.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._sessions: dict[str, McpSession] = {}
        self._lock = asyncio.Lock()
        self.initialized = False
        self.clickup = ClickUpGroup(self)
        self.neon = NeonGroup(self)

    def _endpoint(self, name: str) -> tuple[str, str, str]:
        if name == CLICKUP:
            url, token = self.settings.clickup_mcp_url, self.settings.clickup_mcp_token
            label = "ClickUp"
        else:
            url, token = self.settings.neon_mcp_url, self.settings.neon_mcp_token
            label = "Neon"
        if not url or not token:
            raise ToolConnectionError(f"{label} MCP environment variables not configured")
        return url, token, f"myhrbuddy-{name}-client"

    async def _connect(self, name: str) -> None:
        url, token, client_name = self._endpoint(name)
        self._sessions[name] = await mcp_client.connect(url, token, client_name)

    async def initialize(self) -> None:
        """Connect to every MCP server that is not connected yet."""
        if self.initialized:
            return

        async with self._lock:
            if self.initialized:
                return

            pending = [name for name in (CLICKUP, NEON) if name not in self._sessions]
            results = await asyncio.gather(
                *(self._connect(name) for name in pending), return_exceptions=True
            )
            errors = [r for r in results if isinstance(r, BaseException)]
            for error in errors:
                logger.error(f"Error initializing MCP services: {error}")
            if errors:
                raise errors[0]

            self.initialized = True
            logger.info("All MCP services initialized successfully")

    @property
    def clickup_adapter(self) -> ClickUpAdapter:
        return ClickUpAdapter(self._sessions[CLICKUP])

    @property
    def neon_adapter(self) -> NeonAdapter:
        return NeonAdapter(self._sessions[NEON])

    async def close(self) -> None:
        """Close all open sessions. The service can be initialized again afterwards."""
        async with self._lock:
            sessions, self._sessions = self._sessions, {}
            self.initialized = False
        for session in sessions.values():
            try:
                await session.close()
            except Exception as e:
                logger.warning(f"Error closing MCP session {session.client_name}: {e}")
