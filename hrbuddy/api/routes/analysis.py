"""Resume analysis queue endpoint."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from hrbuddy.api.deps import verify_webhook_secret
from hrbuddy.api.schemas import AnalysisQueueRequest
from hrbuddy.db import get_db
from hrbuddy.services.analysis import AnalysisStatus, analyze_application

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_webhook_secret)])


@router.post("/queue")
async def queue_analysis(data: AnalysisQueueRequest, db: Session = Depends(get_db)):
    """Analyze the resume of an application."""
    try:
        outcome = await analyze_application(db, data.application_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Application not found")

    status = outcome["status"]
    if status == AnalysisStatus.FAILED:
        return JSONResponse(status_code=500, content={"success": False, "error": outcome["message"]})
    if status == AnalysisStatus.COMPLETED:
        return {"success": True, "message": outcome["message"]}
    return {"status": status.value, "message": outcome["message"]}
