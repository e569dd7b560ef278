"""Dashboard endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hrbuddy.api.routes.applicants import list_item
from hrbuddy.api.schemas import DashboardStats
from hrbuddy.db import Applicant, Application, Position, get_db

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    """Record counts and the five most recent applicants."""
    recent = db.scalars(select(Applicant).order_by(Applicant.created_at.desc()).limit(5)).all()

    return DashboardStats(
        applicant_count=db.scalar(select(func.count()).select_from(Applicant)),
        application_count=db.scalar(select(func.count()).select_from(Application)),
        position_count=db.scalar(select(func.count()).select_from(Position)),
        recent_applicants=[list_item(a) for a in recent],
    )
