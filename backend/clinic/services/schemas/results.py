"""Result dataclasses returned by service operations."""

from dataclasses import dataclass, field

from clinic.services._types import ExportResultDict
from db.enums import ExportKind


@dataclass
class ExportResult:
    kind: ExportKind
    filename: str
    media_type: str
    row_count: int
    columns: list[str]
    byte_size: int
    destination: str | None
    warnings: list[str] = field(default_factory=list)

    @property
    def delivered(self) -> bool:
        return self.row_count > 0

    def to_dict(self) -> ExportResultDict:
        return ExportResultDict(
            kind=self.kind.value,
            filename=self.filename,
            media_type=self.media_type,
            row_count=self.row_count,
            columns=list(self.columns),
            byte_size=self.byte_size,
            delivered=self.delivered,
            destination=self.destination,
            warnings=list(self.warnings),
        )
