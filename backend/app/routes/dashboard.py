"""Dashboard home page metrics."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.dependencies import get_api_key, get_db
from app.schemas.dashboard import DashboardMetricsResponse
from clinic.services._types import DashboardMetricsDict
from clinic.services.reports import ReportService

router: APIRouter = APIRouter(
    prefix="/api/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(get_api_key)],
)


@router.get("/metrics", response_model=DashboardMetricsResponse)
def get_metrics(
    today: date | None = Query(None),
    db: Session = Depends(get_db),
) -> DashboardMetricsDict:
    return ReportService(db).dashboard_metrics(today or date.today())
