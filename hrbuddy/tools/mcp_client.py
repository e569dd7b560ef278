"""
MCP transport client.

Connects to a remote MCP server over streamable HTTP and calls its tools.
Sessions stay open for the life of the process; there is no retry layer.
"""

import logging
from dataclasses import dataclass
from typing import Any

from fastmcp import Client
from fastmcp.client.transports import StreamableHttpTransport
from mcp.types import Implementation
from pydantic import BaseModel, Field

from hrbuddy import __version__
from hrbuddy.errors import ToolConnectionError, ToolInvocationError

logger = logging.getLogger(__name__)


class ToolContent(BaseModel):
    type: str
    text: str = ""


class ToolResult(BaseModel):
    """Result of an MCP tool call. May hold several content parts."""

    content: list[ToolContent] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """All text parts joined by newlines."""
        return "\n".join(part.text for part in self.content if part.text)


@dataclass
class McpSession:
    """An authenticated, connected MCP client bound to one endpoint."""

    endpoint_url: str
    client_name: str
    client: Any

    async def close(self) -> None:
        await self.client.__aexit__(None, None, None)
        logger.info(f"Closed MCP session {self.client_name}")


def _build_client(endpoint_url: str, credential: str, client_name: str) -> Client:
    transport = StreamableHttpTransport(
        url=endpoint_url,
        headers={
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        },
    )
    return Client(
        transport,
        client_info=Implementation(name=client_name, version=__version__),
    )


async def connect(
    endpoint_url: str,
    credential: str,
    client_name: str = "myhrbuddy-client",
) -> McpSession:
    """
    Open an MCP session to a remote server.

    Args:
        endpoint_url: Streamable HTTP endpoint of the MCP server
        credential: Bearer token sent with every request
        client_name: Name this client reports during the handshake

    Returns:
        A connected session

    Raises:
        ToolConnectionError: The server is unreachable or rejected the handshake
    """
    logger.info(f"Connecting to MCP server at {endpoint_url}...")
    client = _build_client(endpoint_url, credential, client_name)
    try:
        await client.__aenter__()
    except Exception as e:
        logger.error(f"Error connecting to MCP server {endpoint_url}: {e}")
        raise ToolConnectionError(f"Failed to connect to MCP server: {e}") from e

    logger.info(f"Connected to MCP server {endpoint_url} as {client_name}")
    return McpSession(endpoint_url=endpoint_url, client_name=client_name, client=client)


def _to_content(item: Any) -> ToolContent:
    text = getattr(item, "text", None)
    if text is None:
        # Non-text parts (images, resources) are passed on as their JSON form
        text = item.model_dump_json() if hasattr(item, "model_dump_json") else str(item)
    return ToolContent(type=getattr(item, "type", "text"), text=text)


async def invoke(session: McpSession, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
    """
    Call a tool on the remote MCP server.

    Raises:
        ToolInvocationError: The server rejected the call or could not be reached
    """
    logger.info(f"Calling MCP tool: {tool_name} on {session.client_name}")
    try:
        raw = await session.client.call_tool_mcp(name=tool_name, arguments=arguments)
    except Exception as e:
        logger.error(f"Error calling MCP tool {tool_name}: {e}")
        raise ToolInvocationError(tool_name, str(e)) from e

    result = ToolResult(content=[_to_content(item) for item in raw.content])
    if getattr(raw, "isError", False):
        logger.error(f"MCP tool {tool_name} returned an error: {result.text}")
        raise ToolInvocationError(tool_name, result.text or "tool reported an error", payload=result)
    return result


def shape_arguments(model: type[BaseModel], params: BaseModel | dict[str, Any]) -> dict[str, Any]:
    """Validate params against a tool argument model and dump them in wire form."""
    if isinstance(params, BaseModel):
        params = params.model_dump(by_alias=True)
    return model.model_validate(params).model_dump(by_alias=True, exclude_none=True)
