"""Shared exception hierarchy for clinic services."""

# ── Export ────────────────────────────────────────────────────────────────────


class ExportError(Exception):
    """Base exception for export errors."""


class RecordShapeError(ExportError):
    """Records passed to one export do not share the same field set."""

    def __init__(self, index: int, missing: list[str], extra: list[str]) -> None:
        self.index = index
        self.missing = missing
        self.extra = extra
        parts: list[str] = []
        if missing:
            parts.append(f"missing {missing}")
        if extra:
            parts.append(f"unexpected {extra}")
        super().__init__(f"Record {index} does not match the header: {', '.join(parts)}")


class DeliveryError(ExportError):
    """The rendered document could not be handed over as a file."""


# ── Periods ───────────────────────────────────────────────────────────────────


class PeriodError(ValueError):
    """A reporting period is malformed."""
