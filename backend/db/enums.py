"""Enumeration types for the clinic backend."""

from enum import Enum


class AppointmentStatus(str, Enum):
    """Lifecycle status of an appointment."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    WAITING = "waiting"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class PatientStatus(str, Enum):
    """Front-desk status of a patient on the day of the visit."""

    WAITING = "waiting"
    IN_CONSULTATION = "in-consultation"
    COMPLETED = "completed"
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


class AppointmentType(str, Enum):
    CONSULTATION = "consultation"
    EXAM = "exam"
    PROCEDURE = "procedure"
    RETURN = "return"


class EntryType(str, Enum):
    """Direction of a financial entry."""

    INCOME = "income"
    EXPENSE = "expense"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    PIX = "pix"
    INSURANCE = "insurance"
    BANK_TRANSFER = "bank_transfer"


class RecurringFrequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ExportKind(str, Enum):
    """Which dataset an export was produced from."""

    PATIENTS = "patients"
    APPOINTMENTS = "appointments"
    FINANCIAL = "financial"
    CASH_FLOW = "cash-flow"
    REPORT = "report"


class PeriodType(str, Enum):
    """Reporting period granularity."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"
