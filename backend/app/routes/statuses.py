"""Status badges and lookup tables the dashboard renders from."""

from fastapi import APIRouter

from app.schemas.statuses import StatusBadgeResponse
from clinic.constants import (
    APPOINTMENT_DURATION_MINUTES,
    APPOINTMENT_STATUS_LABELS,
    ENTRY_TYPE_LABELS,
    FINANCIAL_CATEGORIES,
    PAGINATION,
    PAYMENT_METHOD_LABELS,
    WORKING_HOURS,
)
from clinic.services._types import StatusBadgeDict
from clinic.services.status import list_badges, resolve_badge

router: APIRouter = APIRouter(prefix="/api", tags=["statuses"])


@router.get("/statuses", response_model=list[StatusBadgeResponse])
def get_statuses() -> list[StatusBadgeDict]:
    return list_badges()


@router.get("/statuses/{status}", response_model=StatusBadgeResponse)
def get_status(status: str) -> StatusBadgeDict:
    return resolve_badge(status).to_dict()


@router.get("/constants")
def get_constants() -> dict[str, object]:
    return {
        "appointmentStatusLabels": APPOINTMENT_STATUS_LABELS,
        "entryTypeLabels": ENTRY_TYPE_LABELS,
        "paymentMethodLabels": PAYMENT_METHOD_LABELS,
        "financialCategories": FINANCIAL_CATEGORIES,
        "workingHours": WORKING_HOURS,
        "appointmentDurationMinutes": APPOINTMENT_DURATION_MINUTES,
        "pagination": PAGINATION,
    }
