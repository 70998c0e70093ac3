"""Status badge schemas."""

from app.schemas.common import CamelModel


class StatusBadgeResponse(CamelModel):
    key: str
    label: str
    tone: str
    icon: str
    pulse: bool
