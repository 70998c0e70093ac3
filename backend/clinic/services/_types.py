"""Typed dicts for service-layer return values.

Keeps route-facing methods explicit about their shape instead of returning bare dicts.
"""

import sys

if sys.version_info >= (3, 12):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict

# -- Status taxonomy -------------------------------------------------------


class StatusBadgeDict(TypedDict):
    key: str
    label: str
    tone: str
    icon: str
    pulse: bool


# -- Exports ---------------------------------------------------------------


class ExportResultDict(TypedDict):
    kind: str
    filename: str
    media_type: str
    row_count: int
    columns: list[str]
    byte_size: int
    delivered: bool
    destination: str | None
    warnings: list[str]


# -- Reports ---------------------------------------------------------------


class GeneralStatsDict(TypedDict):
    total_patients: int
    total_appointments: int
    completed_appointments: int
    cancelled_appointments: int
    total_revenue: float
    total_expenses: float


class ReportSummaryDict(TypedDict):
    period_label: str
    general: GeneralStatsDict
    appointments_by_doctor: dict[str, int]
    appointments_by_status: dict[str, int]
    revenue_by_category: dict[str, float]
    expenses_by_category: dict[str, float]


# -- Dashboard -------------------------------------------------------------


class DashboardMetricsDict(TypedDict):
    today_patients: int
    scheduled_appointments: int
    waiting_patients: int
    in_consultation_patients: int
    completed_today: int
    monthly_revenue: float
    occupancy_rate: int
    next_appointment: str | None


# -- Health ----------------------------------------------------------------


class DbInfoDict(TypedDict, total=False):
    backend_type: str
    database_url_or_path: str | None
    tables_present: list[str]
    tables_missing: list[str]
    schema_initialized: bool
    error: str
    pid: int
