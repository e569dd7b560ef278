"""Email sending endpoint."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from hrbuddy.api.schemas import EmailRequest
from hrbuddy.errors import EmailError
from hrbuddy.tools.email import send_email

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send")
async def send(data: EmailRequest):
    """Send an HTML email through SendGrid."""
    try:
        await send_email(
            to=data.to,
            subject=data.subject,
            html=data.html,
            from_email=data.from_email,
            cc=data.cc,
            bcc=data.bcc,
            reply_to=data.reply_to,
        )
    except EmailError as e:
        logger.error(f"Email sending error: {e}")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return {"success": True, "message": "Email sent successfully"}
