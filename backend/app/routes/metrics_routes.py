from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.metrics_service import (
    generate_summary_metrics,
    generate_defects_over_time
)
from app.core.dependencies.auth import get_current_user
from app.models.user import User
from app.schemas import SummaryMetricsResponse, DefectsOverTimeResponse

router = APIRouter(prefix="/metrics", tags=["Metrics"])


@router.get("/summary", response_model=SummaryMetricsResponse)
def get_summary_metrics(
    project_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return generate_summary_metrics(
        db=db,
        project_id=project_id
    )


@router.get("/over-time", response_model=DefectsOverTimeResponse)
def get_defects_over_time(
    project_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return generate_defects_over_time(
        db=db,
        project_id=project_id
    )
