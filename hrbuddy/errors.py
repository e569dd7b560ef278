"""Exception types raised by HR Buddy services."""

from typing import Any


class HRBuddyError(Exception):
    """Base class for application errors."""


class ToolConnectionError(HRBuddyError, ConnectionError):
    """An MCP session could not be established."""


class ToolInvocationError(HRBuddyError):
    """A remote tool rejected the call or could not be reached."""

    def __init__(self, tool_name: str, message: str, payload: Any = None):
        super().__init__(f"MCP tool {tool_name} failed: {message}")
        self.tool_name = tool_name
        self.payload = payload


class GenerationError(HRBuddyError):
    """The text-generation backend failed or returned nothing."""


class EmailError(HRBuddyError):
    """Email delivery failed."""
