"""Dashboard schemas."""

from app.schemas.common import CamelModel


class DashboardMetricsResponse(CamelModel):
    today_patients: int
    scheduled_appointments: int
    waiting_patients: int
    in_consultation_patients: int
    completed_today: int
    monthly_revenue: float
    occupancy_rate: int
    next_appointment: str | None
