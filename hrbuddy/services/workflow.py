"""
Applicant stage workflow.

Moves an applicant to a new stage: drafts the status email with Gemini,
opens a ClickUp task, sends the email and records the stage change. Steps
run in order and are not rolled back if a later one fails.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from hrbuddy.config import settings
from hrbuddy.db import Applicant, ApplicationStage
from hrbuddy.services import ai_service
from hrbuddy.services.mcp_service import McpService
from hrbuddy.tools.clickup import CreateTaskParams
from hrbuddy.tools.email import send_email

logger = logging.getLogger(__name__)


async def process_applicant_workflow(
    db: Session,
    mcp: McpService,
    applicant_id: str,
    position_title: str,
    stage: str,
    list_id: str,
    comments: str | None = None,
) -> dict[str, Any]:
    """Run the stage workflow. Returns ``{"success": False, "error": ...}`` on any failure."""
    try:
        applicant = db.get(Applicant, applicant_id)
        if not applicant:
            raise LookupError("Applicant not found")
        if not applicant.applications:
            raise LookupError("Applicant has no applications")

        await mcp.initialize()

        email_html = await ai_service.generate_email_content(
            applicant_name=applicant.full_name,
            position_title=position_title,
            stage=stage,
            custom_message=comments,
        )

        task_result = await mcp.clickup.create_task(
            CreateTaskParams(
                list_id=list_id,
                name=f"Applicant: {applicant.full_name}",
                description=comments or f"Applicant is in the {stage} stage.",
                status=stage,
            )
        )

        await send_email(
            to=applicant.email,
            subject=f"Your Application Status: {position_title}",
            html=email_html,
            from_email=settings.sendgrid_from_email,
        )

        # applications are ordered newest first
        db.add(
            ApplicationStage(
                application_id=applicant.applications[0].id,
                stage=stage,
                notes=comments or "Updated via workflow.",
                changed_by="system",
            )
        )
        db.commit()

        return {"success": True, "taskCreated": bool(task_result.content), "emailSent": True}
    except Exception as e:
        logger.error(f"Error in workflow for applicant {applicant_id}: {e}")
        db.rollback()
        return {"success": False, "error": str(e)}
