"""Natural-language search endpoint."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from hrbuddy.api.limiter import limiter
from hrbuddy.api.schemas import SearchRequest
from hrbuddy.db import get_db
from hrbuddy.errors import GenerationError
from hrbuddy.services.ai_service import process_natural_language_query
from hrbuddy.services.search import QueryFilter, format_result, search_applications

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
@limiter.limit("10/minute")
async def search(request: Request, data: SearchRequest, db: Session = Depends(get_db)):
    """Search applications with a free-text query interpreted by Gemini."""
    query = data.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Query is required")

    try:
        interpreted = await process_natural_language_query(query)
    except GenerationError as e:
        logger.error(f"Search error: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to process search query"},
        )

    query_filter = QueryFilter.from_interpreted(interpreted)
    if query_filter.is_empty:
        logger.info("Search query produced no filters, returning all applications")

    results = [format_result(app) for app in search_applications(db, query_filter)]

    return {
        "query": query,
        "interpretedAs": interpreted,
        "results": results,
        "count": len(results),
    }
