"""Export service: gathers clinic records, projects them and delivers CSVs."""

from collections.abc import Callable, Sequence
from datetime import date
from typing import Optional

import structlog
from sqlalchemy import and_, select
from sqlalchemy.orm import Session, selectinload

from clinic.services._helpers import underscore_whitespace
from clinic.services.delivery import FileDelivery
from clinic.services.periods import PeriodRange, default_monthly_period
from clinic.services.projections import (
    project_appointment,
    project_cash_flow_entry,
    project_financial_entry,
    project_patient,
)
from clinic.services.reports import ReportService
from clinic.services.schemas.results import ExportResult
from clinic.services.tabular import (
    ExportArtifact,
    ExportRecord,
    ShapePolicy,
    TabularExporter,
)
from config import ExportSettings, get_settings
from db.enums import AppointmentStatus, EntryType, ExportKind
from db.models import Appointments, FinancialEntries, Patients

logger = structlog.get_logger(__name__)

CASH_FLOW_DELIMITER = ";"

DEFAULT_FILENAMES: dict[ExportKind, str] = {
    ExportKind.PATIENTS: "pacientes",
    ExportKind.APPOINTMENTS: "consultas",
    ExportKind.FINANCIAL: "financeiro",
}


class ExportService:
    """Exports patients, appointments and financial data through a FileDelivery."""

    def __init__(
        self,
        session: Session,
        delivery: FileDelivery,
        settings: Optional[ExportSettings] = None,
    ):
        self.session = session
        self.delivery = delivery
        self.settings = settings if settings is not None else get_settings().export

    def exporter(self, delimiter: Optional[str] = None, bom: bool = False) -> TabularExporter:
        return TabularExporter(
            self.delivery,
            delimiter=delimiter or self.settings.delimiter,
            extension=self.settings.extension,
            media_type=self.settings.media_type,
            encoding=self.settings.encoding,
            bom=bom,
            shape_policy=ShapePolicy(self.settings.shape_policy),
        )

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def _get_patients(self) -> list[Patients]:
        stmt = select(Patients).order_by(Patients.name, Patients.created_at)
        return list(self.session.scalars(stmt).all())

    def _get_appointments(
        self,
        period: Optional[PeriodRange] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> list[Appointments]:
        conditions: list = []
        if period:
            start, end = period.iso_bounds()
            conditions.append(Appointments.date >= start)
            conditions.append(Appointments.date <= end)
        if status:
            conditions.append(Appointments.status == status.value)

        stmt = (
            select(Appointments)
            .options(selectinload(Appointments.patient))
            .order_by(Appointments.date, Appointments.time)
        )
        if conditions:
            stmt = stmt.where(and_(*conditions))
        return list(self.session.scalars(stmt).all())

    def _get_financial_entries(
        self,
        period: Optional[PeriodRange] = None,
        entry_type: Optional[EntryType] = None,
    ) -> list[FinancialEntries]:
        conditions: list = []
        if period:
            start, end = period.iso_bounds()
            conditions.append(FinancialEntries.date >= start)
            conditions.append(FinancialEntries.date <= end)
        if entry_type:
            conditions.append(FinancialEntries.type == entry_type.value)

        stmt = select(FinancialEntries).order_by(FinancialEntries.date, FinancialEntries.created_at)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        return list(self.session.scalars(stmt).all())

    # ------------------------------------------------------------------
    # Export runner
    # ------------------------------------------------------------------

    def _run(
        self,
        kind: ExportKind,
        records: Sequence[ExportRecord],
        filename: str,
        exporter: Optional[TabularExporter] = None,
    ) -> ExportResult:
        exporter = exporter or self.exporter()
        artifact: ExportArtifact | None = exporter.export(records, filename)

        if artifact is None:
            logger.info("export_empty", kind=kind.value, filename=filename)
            return ExportResult(
                kind=kind,
                filename=exporter.filename_for(filename),
                media_type=exporter.media_type,
                row_count=0,
                columns=[],
                byte_size=0,
                destination=None,
            )

        for warning in artifact.warnings:
            logger.warning("export_warning", kind=kind.value, detail=warning)

        return ExportResult(
            kind=kind,
            filename=artifact.filename,
            media_type=artifact.media_type,
            row_count=artifact.row_count,
            columns=artifact.columns,
            byte_size=artifact.byte_size,
            destination=artifact.destination,
            warnings=artifact.warnings,
        )

    @staticmethod
    def _project(items: Sequence[object], projection: Callable[..., ExportRecord]) -> list[ExportRecord]:
        return [projection(item) for item in items]

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------

    def export_patients(self, filename: str = "pacientes") -> ExportResult:
        patients: list[Patients] = self._get_patients()
        return self._run(ExportKind.PATIENTS, self._project(patients, project_patient), filename)

    def export_appointments(
        self,
        period: Optional[PeriodRange] = None,
        status: Optional[AppointmentStatus] = None,
        filename: str = "consultas",
    ) -> ExportResult:
        appointments: list[Appointments] = self._get_appointments(period, status)
        return self._run(
            ExportKind.APPOINTMENTS,
            self._project(appointments, project_appointment),
            filename,
        )

    def export_financial_entries(
        self,
        period: Optional[PeriodRange] = None,
        entry_type: Optional[EntryType] = None,
        filename: str = "financeiro",
    ) -> ExportResult:
        entries: list[FinancialEntries] = self._get_financial_entries(period, entry_type)
        return self._run(
            ExportKind.FINANCIAL,
            self._project(entries, project_financial_entry),
            filename,
        )

    def export_cash_flow(
        self,
        period: PeriodRange,
        filename: Optional[str] = None,
    ) -> ExportResult:
        """Spreadsheet-friendly cash flow: ``;`` delimited with a UTF-8 BOM."""
        if filename is None:
            filename = "financeiro_" + underscore_whitespace(period.label)
        entries: list[FinancialEntries] = self._get_financial_entries(period)
        return self._run(
            ExportKind.CASH_FLOW,
            self._project(entries, project_cash_flow_entry),
            filename,
            exporter=self.exporter(delimiter=CASH_FLOW_DELIMITER, bom=True),
        )

    def export_report(
        self,
        period: PeriodRange,
        filename: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ExportResult:
        if filename is None:
            filename = f"relatorio-clinictech-{period.type.value}-{(today or date.today()).isoformat()}"
        records: list[dict[str, str | int]] = ReportService(self.session).summary_records(period)
        return self._run(ExportKind.REPORT, records, filename)

    # ------------------------------------------------------------------
    # Dispatch (CLI / archive endpoint)
    # ------------------------------------------------------------------

    def export(
        self,
        kind: ExportKind,
        period: Optional[PeriodRange] = None,
        filename: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
        entry_type: Optional[EntryType] = None,
    ) -> ExportResult:
        """Run the export for ``kind``; cash flow and report default to this month."""
        if kind is ExportKind.PATIENTS:
            return self.export_patients(filename or DEFAULT_FILENAMES[kind])
        if kind is ExportKind.APPOINTMENTS:
            return self.export_appointments(period, status, filename or DEFAULT_FILENAMES[kind])
        if kind is ExportKind.FINANCIAL:
            return self.export_financial_entries(
                period, entry_type, filename or DEFAULT_FILENAMES[kind]
            )
        if kind is ExportKind.CASH_FLOW:
            return self.export_cash_flow(period or default_monthly_period(), filename)
        return self.export_report(period or default_monthly_period(), filename)
