"""Delimited-text rendering of export records and file hand-off.

A document is a header line (field names) followed by one line per record.
Cells are joined with the delimiter and lines with ``\\n``. Text cells that
contain the delimiter, a double quote or a line break are wrapped in double
quotes with embedded quotes doubled; ``None`` and absent keys become empty
cells; everything else goes through ``str()``.

The header comes from the first record. How later records with a different
field set are treated is decided by :class:`ShapePolicy`.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

import structlog

from clinic.services.delivery import FileDelivery
from clinic.services.errors import RecordShapeError

logger = structlog.get_logger(__name__)

Scalar = str | int | float | Decimal | bool | None
ExportRecord = Mapping[str, Scalar]

LINE_SEPARATOR = "\n"
QUOTE = '"'


class ShapePolicy(str, Enum):
    """How records whose keys differ from the first record are handled."""

    UNION = "union"  # append unseen keys to the header, blank cells elsewhere
    STRICT = "strict"  # raise RecordShapeError
    FIRST = "first"  # header from the first record only, extra keys dropped


@dataclass
class RenderedDocument:
    text: str
    columns: list[str]
    row_count: int
    warnings: list[str] = field(default_factory=list)


@dataclass
class ExportArtifact:
    filename: str
    media_type: str
    columns: list[str]
    row_count: int
    content: bytes
    destination: str | None
    warnings: list[str] = field(default_factory=list)

    @property
    def byte_size(self) -> int:
        return len(self.content)


def format_cell(value: object, delimiter: str = ",") -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        if (
            delimiter in value
            or QUOTE in value
            or "\n" in value
            or "\r" in value
        ):
            return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
        return value
    return str(value)


def format_row(cells: Iterable[object], delimiter: str = ",") -> str:
    return delimiter.join(format_cell(cell, delimiter) for cell in cells)


def resolve_header(
    records: list[ExportRecord],
    policy: ShapePolicy = ShapePolicy.UNION,
) -> tuple[list[str], list[str]]:
    """Return ``(header, warnings)`` for a non-empty record list."""
    header: list[str] = list(records[0].keys())
    first_keys: set[str] = set(header)
    known: set[str] = set(header)
    mismatched: int = 0
    added: list[str] = []

    for index, record in enumerate(records[1:], start=1):
        missing: list[str] = [k for k in header if k in first_keys and k not in record]
        extra: list[str] = [k for k in record if k not in first_keys]
        if not missing and not extra:
            continue

        if policy is ShapePolicy.STRICT:
            raise RecordShapeError(index, missing, extra)

        mismatched += 1
        if policy is ShapePolicy.UNION:
            for key in extra:
                if key not in known:
                    known.add(key)
                    header.append(key)
                    added.append(key)

    warnings: list[str] = []
    if mismatched:
        message: str = f"{mismatched} record(s) do not match the fields of the first record"
        if added:
            message += f"; added columns {added}"
        elif policy is ShapePolicy.FIRST:
            message += "; extra fields dropped"
        warnings.append(message)
        logger.warning(
            "export_shape_mismatch",
            policy=policy.value,
            mismatched=mismatched,
            added_columns=added,
        )
    return header, warnings


def render_document(
    records: Iterable[ExportRecord],
    delimiter: str = ",",
    policy: ShapePolicy = ShapePolicy.UNION,
) -> RenderedDocument | None:
    """Render records as delimited text. Returns None for an empty input."""
    rows: list[ExportRecord] = list(records)
    if not rows:
        return None

    header, warnings = resolve_header(rows, policy)
    lines: list[str] = [format_row(header, delimiter)]
    for record in rows:
        lines.append(format_row((record.get(name) for name in header), delimiter))

    return RenderedDocument(
        text=LINE_SEPARATOR.join(lines),
        columns=header,
        row_count=len(rows),
        warnings=warnings,
    )


class TabularExporter:
    """Renders export records and hands the document to a FileDelivery."""

    def __init__(
        self,
        delivery: FileDelivery,
        *,
        delimiter: str = ",",
        extension: str = ".csv",
        media_type: str = "text/csv",
        encoding: str = "utf-8",
        bom: bool = False,
        shape_policy: ShapePolicy = ShapePolicy.UNION,
    ) -> None:
        self.delivery = delivery
        self.delimiter = delimiter
        self.extension = extension
        self.media_type = media_type
        self.encoding = encoding
        self.bom = bom
        self.shape_policy = shape_policy

    def render(self, records: Iterable[ExportRecord]) -> RenderedDocument | None:
        return render_document(records, self.delimiter, self.shape_policy)

    def encode(self, document: RenderedDocument) -> bytes:
        text: str = document.text
        if self.bom:
            text = "\ufeff" + text
        return text.encode(self.encoding)

    def filename_for(self, base_name: str) -> str:
        return f"{base_name}{self.extension}"

    def export(
        self,
        records: Iterable[ExportRecord],
        filename: str,
    ) -> ExportArtifact | None:
        """Render ``records`` and deliver them as ``filename`` + extension.

        An empty input is a no-op and returns None. Delivery errors are not
        caught here.
        """
        document: RenderedDocument | None = self.render(records)
        name: str = self.filename_for(filename)
        if document is None:
            logger.info("export_skipped_empty", filename=name)
            return None

        content: bytes = self.encode(document)
        destination: str | None = self.delivery.deliver(content, name, self.media_type)

        logger.info(
            "export_delivered",
            filename=name,
            rows=document.row_count,
            columns=len(document.columns),
            bytes=len(content),
            destination=destination,
        )
        return ExportArtifact(
            filename=name,
            media_type=self.media_type,
            columns=document.columns,
            row_count=document.row_count,
            content=content,
            destination=destination,
            warnings=document.warnings,
        )
