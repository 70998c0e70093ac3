"""Shared dataclasses for clinic services."""

from clinic.services.schemas.results import ExportResult

__all__ = [
    "ExportResult",
]
