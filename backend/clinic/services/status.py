"""Display metadata for appointment and patient statuses."""

from dataclasses import asdict, dataclass

from clinic.services._types import StatusBadgeDict

FALLBACK_STATUS = "scheduled"


@dataclass(frozen=True)
class StatusBadge:
    key: str
    label: str
    tone: str
    icon: str
    pulse: bool

    def to_dict(self) -> StatusBadgeDict:
        return StatusBadgeDict(**asdict(self))


STATUS_BADGES: dict[str, StatusBadge] = {
    badge.key: badge
    for badge in (
        StatusBadge("waiting", "Aguardando", "amber", "clock", True),
        StatusBadge("in-consultation", "Em Consulta", "indigo", "user", True),
        StatusBadge("in-progress", "Em Andamento", "indigo", "play", True),
        StatusBadge("completed", "Finalizado", "emerald", "check", False),
        StatusBadge("scheduled", "Agendado", "slate", "calendar", False),
        StatusBadge("confirmed", "Confirmado", "amber", "clock", True),
        StatusBadge("cancelled", "Cancelado", "red", "x-circle", False),
        StatusBadge("no-show", "Não Compareceu", "slate", "x-circle", False),
    )
}


def resolve_badge(status: str | None) -> StatusBadge:
    """Badge for ``status``; unknown statuses get the scheduled badge."""
    if status is None:
        return STATUS_BADGES[FALLBACK_STATUS]
    return STATUS_BADGES.get(status, STATUS_BADGES[FALLBACK_STATUS])


def list_badges() -> list[StatusBadgeDict]:
    return [badge.to_dict() for badge in STATUS_BADGES.values()]
