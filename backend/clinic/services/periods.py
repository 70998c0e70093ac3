"""Reporting periods: defaults relative to a reference day, pt-BR labels."""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from clinic.services.errors import PeriodError
from db.enums import PeriodType

MONTHS_PT: tuple[str, ...] = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)
MONTHS_PT_SHORT: tuple[str, ...] = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)


@dataclass(frozen=True)
class PeriodRange:
    type: PeriodType
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise PeriodError(f"Period start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def iso_bounds(self) -> tuple[str, str]:
        return self.start.isoformat(), self.end.isoformat()

    @property
    def label(self) -> str:
        return format_period_label(self)


def default_daily_period(today: date | None = None) -> PeriodRange:
    day: date = today or date.today()
    return PeriodRange(PeriodType.DAY, day, day)


def default_weekly_period(today: date | None = None) -> PeriodRange:
    """Monday to Sunday of the week containing ``today``."""
    day: date = today or date.today()
    start: date = day - timedelta(days=day.weekday())
    return PeriodRange(PeriodType.WEEK, start, start + timedelta(days=6))


def default_monthly_period(today: date | None = None) -> PeriodRange:
    day: date = today or date.today()
    last_day: int = calendar.monthrange(day.year, day.month)[1]
    return PeriodRange(PeriodType.MONTH, day.replace(day=1), day.replace(day=last_day))


def default_period(period_type: PeriodType, today: date | None = None) -> PeriodRange:
    if period_type is PeriodType.DAY:
        return default_daily_period(today)
    if period_type is PeriodType.WEEK:
        return default_weekly_period(today)
    if period_type is PeriodType.MONTH:
        return default_monthly_period(today)
    raise PeriodError("A custom period needs explicit start and end dates")


def _short(day: date) -> str:
    return f"{day.day:02d} {MONTHS_PT_SHORT[day.month - 1]}"


def format_period_label(period: PeriodRange) -> str:
    start, end = period.start, period.end
    if period.type is PeriodType.DAY:
        return f"{start.day:02d} de {MONTHS_PT[start.month - 1]} de {start.year}"
    if period.type is PeriodType.WEEK:
        return f"{_short(start)} - {_short(end)} {end.year}"
    if period.type is PeriodType.MONTH:
        return f"{MONTHS_PT[start.month - 1]} de {start.year}"
    return f"{_short(start)} {start.year} - {_short(end)} {end.year}"


def parse_period(
    start: str | None,
    end: str | None,
    period_type: PeriodType | str | None = None,
    today: date | None = None,
) -> PeriodRange | None:
    """Build a period from query-style strings.

    No dates and no type (or ``custom``) means "no period". No dates with a
    day/week/month type gives the default period around ``today``.
    """
    try:
        ptype: PeriodType | None = PeriodType(period_type) if period_type else None
    except ValueError as exc:
        raise PeriodError(f"Unknown period type {period_type!r}") from exc

    if start is None and end is None:
        if ptype is None or ptype is PeriodType.CUSTOM:
            return None
        return default_period(ptype, today)
    if start is None or end is None:
        raise PeriodError("Both start and end dates are required")

    try:
        start_day: date = date.fromisoformat(start)
        end_day: date = date.fromisoformat(end)
    except ValueError as exc:
        raise PeriodError(f"Invalid period date: {exc}") from exc
    return PeriodRange(ptype or PeriodType.CUSTOM, start_day, end_day)
