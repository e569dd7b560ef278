"""
Neon database MCP adapter.

Typed operations over the Neon MCP server
(https://neon.tech/docs/ai/neon-mcp-server).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hrbuddy.tools.mcp_client import McpSession, ToolResult, invoke, shape_arguments


class NeonParams(BaseModel):
    """Base for Neon tool arguments; the server expects camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)


class ExecuteQueryParams(NeonParams):
    query: str = Field(min_length=1)
    params: list[Any] | None = None


class GetSchemaParams(NeonParams):
    schema_name: str | None = Field(default=None, alias="schema")


class GetTableInfoParams(NeonParams):
    table_name: str = Field(alias="tableName", min_length=1)
    schema_name: str | None = Field(default=None, alias="schema")


class InsertDataParams(NeonParams):
    table_name: str = Field(alias="tableName", min_length=1)
    data: dict[str, Any] = Field(min_length=1)
    schema_name: str | None = Field(default=None, alias="schema")


class UpdateDataParams(NeonParams):
    table_name: str = Field(alias="tableName", min_length=1)
    data: dict[str, Any] = Field(min_length=1)
    # An empty filter would update every row
    where: dict[str, Any] = Field(min_length=1)
    schema_name: str | None = Field(default=None, alias="schema")


class DeleteDataParams(NeonParams):
    table_name: str = Field(alias="tableName", min_length=1)
    where: dict[str, Any] = Field(min_length=1)
    schema_name: str | None = Field(default=None, alias="schema")


class NeonOperation(str, Enum):
    EXECUTE_QUERY = "executeQuery"
    GET_SCHEMA = "getSchema"
    GET_TABLE_INFO = "getTableInfo"
    INSERT_DATA = "insertData"
    UPDATE_DATA = "updateData"
    DELETE_DATA = "deleteData"


TOOLS: dict[NeonOperation, tuple[str, type[NeonParams]]] = {
    NeonOperation.EXECUTE_QUERY: ("execute_query", ExecuteQueryParams),
    NeonOperation.GET_SCHEMA: ("get_schema", GetSchemaParams),
    NeonOperation.GET_TABLE_INFO: ("get_table_info", GetTableInfoParams),
    NeonOperation.INSERT_DATA: ("insert_data", InsertDataParams),
    NeonOperation.UPDATE_DATA: ("update_data", UpdateDataParams),
    NeonOperation.DELETE_DATA: ("delete_data", DeleteDataParams),
}

assert set(TOOLS) == set(NeonOperation), "every Neon operation needs a tool binding"


class NeonAdapter:
    """Neon operations bound to one MCP session."""

    def __init__(self, session: McpSession):
        self.session = session

    async def run(self, operation: NeonOperation, params: BaseModel | dict | None = None) -> ToolResult:
        tool_name, model = TOOLS[operation]
        return await invoke(self.session, tool_name, shape_arguments(model, params or {}))

    async def execute_query(self, params: ExecuteQueryParams | dict) -> ToolResult:
        """Execute a SQL query on Neon PostgreSQL."""
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
