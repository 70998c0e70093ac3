"""Period summary report and the dashboard's headline metrics."""

from collections import Counter, defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

import structlog
from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from clinic.constants import DAILY_APPOINTMENT_SLOTS
from clinic.services._types import DashboardMetricsDict, GeneralStatsDict, ReportSummaryDict
from clinic.services.periods import PeriodRange, default_monthly_period
from clinic.services.projections import format_brl
from db.enums import AppointmentStatus, EntryType, PatientStatus
from db.models import Appointments, FinancialEntries, Patients

logger = structlog.get_logger(__name__)

SECTION_GENERAL = "Métricas Gerais"
SECTION_BY_DOCTOR = "Consultas por Médico"
SECTION_REVENUE = "Receitas por Categoria"
SECTION_EXPENSES = "Despesas por Categoria"

# Patient status on the day, from the status of their appointment that day.
PATIENT_STATUS_BY_APPOINTMENT: dict[str, PatientStatus] = {
    AppointmentStatus.CONFIRMED.value: PatientStatus.WAITING,
    AppointmentStatus.WAITING.value: PatientStatus.WAITING,
    AppointmentStatus.IN_PROGRESS.value: PatientStatus.IN_CONSULTATION,
    AppointmentStatus.COMPLETED.value: PatientStatus.COMPLETED,
}

# When a patient has several appointments that day, the highest one decides.
APPOINTMENT_PRIORITY: dict[str, int] = {
    AppointmentStatus.IN_PROGRESS.value: 5,
    AppointmentStatus.CONFIRMED.value: 4,
    AppointmentStatus.WAITING.value: 4,
    AppointmentStatus.SCHEDULED.value: 3,
    AppointmentStatus.COMPLETED.value: 2,
    AppointmentStatus.CANCELLED.value: 1,
    AppointmentStatus.NO_SHOW.value: 1,
}

PRESENT_TODAY = (PatientStatus.WAITING, PatientStatus.IN_CONSULTATION, PatientStatus.COMPLETED)
UPCOMING = (AppointmentStatus.SCHEDULED.value, AppointmentStatus.CONFIRMED.value)


class ReportService:
    """Aggregates clinic activity over a period."""

    def __init__(self, session: Session):
        self.session = session

    def _appointments(self, period: PeriodRange) -> list[Appointments]:
        start, end = period.iso_bounds()
        stmt = (
            select(Appointments)
            .where(and_(Appointments.date >= start, Appointments.date <= end))
            .order_by(Appointments.date, Appointments.time)
        )
        return list(self.session.scalars(stmt).all())

    def _financial_entries(self, period: PeriodRange) -> list[FinancialEntries]:
        start, end = period.iso_bounds()
        stmt = (
            select(FinancialEntries)
            .where(and_(FinancialEntries.date >= start, FinancialEntries.date <= end))
            .order_by(FinancialEntries.date)
        )
        return list(self.session.scalars(stmt).all())

    def summary(self, period: PeriodRange) -> ReportSummaryDict:
        appointments: list[Appointments] = self._appointments(period)
        entries: list[FinancialEntries] = self._financial_entries(period)
        total_patients: int = self.session.scalar(select(func.count()).select_from(Patients)) or 0

        by_status: Counter[str] = Counter(a.status for a in appointments)
        by_doctor: Counter[str] = Counter(a.doctor_name for a in appointments)

        revenue: defaultdict[str, float] = defaultdict(float)
        expenses: defaultdict[str, float] = defaultdict(float)
        for entry in entries:
            if entry.type == EntryType.INCOME.value:
                revenue[entry.category] += entry.amount
            elif entry.type == EntryType.EXPENSE.value:
                expenses[entry.category] += entry.amount

        general: GeneralStatsDict = {
            "total_patients": total_patients,
            "total_appointments": len(appointments),
            "completed_appointments": by_status.get(AppointmentStatus.COMPLETED.value, 0),
            "cancelled_appointments": by_status.get(AppointmentStatus.CANCELLED.value, 0),
            "total_revenue": sum(revenue.values()),
            "total_expenses": sum(expenses.values()),
        }

        logger.debug(
            "report_summary",
            period=period.label,
            appointments=len(appointments),
            entries=len(entries),
        )
        return {
            "period_label": period.label,
            "general": general,
            "appointments_by_doctor": dict(by_doctor),
            "appointments_by_status": dict(by_status),
            "revenue_by_category": dict(revenue),
            "expenses_by_category": dict(expenses),
        }

    def summary_records(self, period: PeriodRange) -> list[dict[str, str | int]]:
        """Flatten the summary into ``Seção, Item, Valor`` rows."""
        summary: ReportSummaryDict = self.summary(period)
        general: GeneralStatsDict = summary["general"]
        net: float = general["total_revenue"] - general["total_expenses"]

        rows: list[tuple[str, str, str | int]] = [
            (SECTION_GENERAL, "Período", summary["period_label"]),
            (SECTION_GENERAL, "Total de Pacientes", general["total_patients"]),
            (SECTION_GENERAL, "Total de Consultas", general["total_appointments"]),
            (SECTION_GENERAL, "Consultas Finalizadas", general["completed_appointments"]),
            (SECTION_GENERAL, "Consultas Canceladas", general["cancelled_appointments"]),
            (SECTION_GENERAL, "Receita Total", format_brl(general["total_revenue"])),
            (SECTION_GENERAL, "Despesas Totais", format_brl(general["total_expenses"])),
            (SECTION_GENERAL, "Resultado Líquido", format_brl(net)),
        ]
        rows.extend(
            (SECTION_BY_DOCTOR, doctor, count)
            for doctor, count in summary["appointments_by_doctor"].items()
        )
        rows.extend(
            (SECTION_REVENUE, category, format_brl(amount))
            for category, amount in summary["revenue_by_category"].items()
        )
        rows.extend(
            (SECTION_EXPENSES, category, format_brl(amount))
            for category, amount in summary["expenses_by_category"].items()
        )
        return [{"Seção": section, "Item": item, "Valor": value} for section, item, value in rows]

    # -- Dashboard ---------------------------------------------------------

    def patient_statuses(self, today: date) -> dict[str, PatientStatus]:
        """Status of every patient with an appointment on ``today``, keyed by patient id."""
        stmt = select(Appointments).where(Appointments.date == today.isoformat())
        chosen: dict[str, Appointments] = {}
        for appointment in self.session.scalars(stmt).all():
            current: Appointments | None = chosen.get(appointment.patient_id)
            rank: int = APPOINTMENT_PRIORITY.get(appointment.status, 0)
            if current is None or rank > APPOINTMENT_PRIORITY.get(current.status, 0):
                chosen[appointment.patient_id] = appointment
        return {
            patient_id: PATIENT_STATUS_BY_APPOINTMENT.get(a.status, PatientStatus.SCHEDULED)
            for patient_id, a in chosen.items()
        }

    def dashboard_metrics(self, today: date) -> DashboardMetricsDict:
        """Headline numbers of the dashboard home page for ``today``."""
        statuses: Counter[PatientStatus] = Counter(self.patient_statuses(today).values())
        today_patients: int = sum(statuses[s] for s in PRESENT_TODAY)

        upcoming_stmt = (
            select(Appointments)
            .where(Appointments.status.in_(UPCOMING), Appointments.date >= today.isoformat())
            .order_by(Appointments.date, Appointments.time)
        )
        upcoming: list[Appointments] = list(self.session.scalars(upcoming_stmt).all())

        month: PeriodRange = default_monthly_period(today)
        monthly_revenue: float = sum(
            (e.amount for e in self._financial_entries(month) if e.type == EntryType.INCOME.value),
            0.0,
        )

        occupancy: Decimal = Decimal(today_patients * 100) / DAILY_APPOINTMENT_SLOTS

        logger.debug("dashboard_metrics", today=today.isoformat(), patients=today_patients)
        return {
            "today_patients": today_patients,
            "scheduled_appointments": len(upcoming),
            "waiting_patients": statuses[PatientStatus.WAITING],
            "in_consultation_patients": statuses[PatientStatus.IN_CONSULTATION],
            "completed_today": statuses[PatientStatus.COMPLETED],
            "monthly_revenue": monthly_revenue,
            "occupancy_rate": int(occupancy.quantize(Decimal(1), rounding=ROUND_HALF_UP)),
            "next_appointment": upcoming[0].time if upcoming else None,
        }
