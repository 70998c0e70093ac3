"""Export request/response schemas."""

from app.schemas.common import CamelModel


class ExportResultResponse(CamelModel):
    kind: str
    filename: str
    media_type: str
    row_count: int
    columns: list[str]
    byte_size: int
    delivered: bool
    destination: str | None
    warnings: list[str]
