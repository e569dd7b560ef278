"""MCP proxy endpoint: run a ClickUp or Neon operation by name."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from hrbuddy.api.deps import get_mcp_service
from hrbuddy.api.schemas import McpRequest
from hrbuddy.errors import HRBuddyError
from hrbuddy.services.mcp_service import McpService
from hrbuddy.tools.clickup import ClickUpOperation
from hrbuddy.tools.neon import NeonOperation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def call_mcp(data: McpRequest, mcp: McpService = Depends(get_mcp_service)):
    """Execute an MCP operation, e.g. ``{"service": "clickup", "operation": "createTask", "params": {...}}``."""
    try:
        if data.service == "clickup":
            operation = ClickUpOperation(data.operation)
            group = mcp.clickup
        else:
            operation = NeonOperation(data.operation)
            group = mcp.neon
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown operation: {data.operation} for service: {data.service}",
        )

    try:
        result = await group.run(operation, data.params)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Invalid parameters",
                "details": e.errors(include_url=False, include_context=False, include_input=False),
            },
        )
    except HRBuddyError as e:
        logger.error(f"MCP route error: {e}")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return {"success": True, "result": result.model_dump()}
