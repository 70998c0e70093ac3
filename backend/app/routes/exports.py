"""Export endpoints — thin routes, logic in services."""

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from app.delivery import HttpDelivery
from app.dependencies import get_api_key, get_db, get_export_dir, get_export_settings
from app.schemas.exports import ExportResultResponse
from clinic.services._types import ExportResultDict
from clinic.services.delivery import DirectoryDelivery
from clinic.services.errors import DeliveryError, PeriodError, RecordShapeError
from clinic.services.export import ExportService
from clinic.services.periods import PeriodRange, default_monthly_period, parse_period
from clinic.services.schemas.results import ExportResult
from config import ExportSettings
from db.enums import AppointmentStatus, EntryType, ExportKind, PeriodType

router: APIRouter = APIRouter(
    prefix="/api/exports",
    tags=["exports"],
    dependencies=[Depends(get_api_key)],
)


def _period(
    start: str | None,
    end: str | None,
    period_type: PeriodType | None,
) -> PeriodRange | None:
    try:
        return parse_period(start, end, period_type)
    except PeriodError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _download(delivery: HttpDelivery, result: ExportResult) -> Response:
    return delivery.response(headers={"X-Export-Rows": str(result.row_count)})


def _shape_error(exc: RecordShapeError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


@router.get("/patients")
def export_patients(
    filename: str = Query("pacientes"),
    db: Session = Depends(get_db),
    settings: ExportSettings = Depends(get_export_settings),
) -> Response:
    delivery: HttpDelivery = HttpDelivery()
    try:
        result: ExportResult = ExportService(db, delivery, settings).export_patients(filename)
    except RecordShapeError as exc:
        raise _shape_error(exc) from exc
    return _download(delivery, result)


@router.get("/appointments")
def export_appointments(
    start: str | None = Query(None),
    end: str | None = Query(None),
    period_type: PeriodType | None = Query(None),
    status: AppointmentStatus | None = Query(None),
    filename: str = Query("consultas"),
    db: Session = Depends(get_db),
    settings: ExportSettings = Depends(get_export_settings),
) -> Response:
    period: PeriodRange | None = _period(start, end, period_type)
    delivery: HttpDelivery = HttpDelivery()
    try:
        result: ExportResult = ExportService(db, delivery, settings).export_appointments(
            period, status, filename
        )
    except RecordShapeError as exc:
        raise _shape_error(exc) from exc
    return _download(delivery, result)


@router.get("/financial")
def export_financial(
    start: str | None = Query(None),
    end: str | None = Query(None),
    period_type: PeriodType | None = Query(None),
    entry_type: EntryType | None = Query(None, alias="type"),
    filename: str = Query("financeiro"),
    db: Session = Depends(get_db),
    settings: ExportSettings = Depends(get_export_settings),
) -> Response:
    period: PeriodRange | None = _period(start, end, period_type)
    delivery: HttpDelivery = HttpDelivery()
    try:
        result: ExportResult = ExportService(db, delivery, settings).export_financial_entries(
            period, entry_type, filename
        )
    except RecordShapeError as exc:
        raise _shape_error(exc) from exc
    return _download(delivery, result)


@router.get("/cash-flow")
def export_cash_flow(
    start: str | None = Query(None),
    end: str | None = Query(None),
    period_type: PeriodType | None = Query(None),
    filename: str | None = Query(None),
    db: Session = Depends(get_db),
    settings: ExportSettings = Depends(get_export_settings),
) -> Response:
    period: PeriodRange = _period(start, end, period_type) or default_monthly_period()
    delivery: HttpDelivery = HttpDelivery()
    try:
        result: ExportResult = ExportService(db, delivery, settings).export_cash_flow(
            period, filename
        )
    except RecordShapeError as exc:
        raise _shape_error(exc) from exc
    return _download(delivery, result)


@router.get("/report")
def export_report(
    start: str | None = Query(None),
    end: str | None = Query(None),
    period_type: PeriodType | None = Query(None),
    filename: str | None = Query(None),
    db: Session = Depends(get_db),
    settings: ExportSettings = Depends(get_export_settings),
) -> Response:
    period: PeriodRange = _period(start, end, period_type) or default_monthly_period()
    delivery: HttpDelivery = HttpDelivery()
    try:
        result: ExportResult = ExportService(db, delivery, settings).export_report(
            period, filename
        )
    except RecordShapeError as exc:
        raise _shape_error(exc) from exc
    return _download(delivery, result)


@router.post("/{kind}", response_model=ExportResultResponse)
def archive_export(
    kind: ExportKind,
    start: str | None = Query(None),
    end: str | None = Query(None),
    period_type: PeriodType | None = Query(None),
    status: AppointmentStatus | None = Query(None),
    entry_type: EntryType | None = Query(None, alias="type"),
    filename: str | None = Query(None),
    db: Session = Depends(get_db),
    settings: ExportSettings = Depends(get_export_settings),
    export_dir: Path = Depends(get_export_dir),
) -> ExportResultDict:
    """Write the export into the server's export directory instead of downloading it."""
    period: PeriodRange | None = _period(start, end, period_type)
    svc: ExportService = ExportService(db, DirectoryDelivery(export_dir), settings)
    try:
        result: ExportResult = svc.export(kind, period, filename, status, entry_type)
    except RecordShapeError as exc:
        raise _shape_error(exc) from exc
    except DeliveryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return result.to_dict()
