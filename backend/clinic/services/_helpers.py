"""Shared utilities for the service layer."""

import re
from datetime import date

_WHITESPACE = re.compile(r"\s")


def parse_iso_date(raw: str | None) -> date | None:
    """Parse the date part of an ISO date or datetime string."""
    if not raw:
        return None
    return date.fromisoformat(raw[:10])


def underscore_whitespace(text: str) -> str:
    """``"março de 2026"`` -> ``"março_de_2026"``; used to build download names."""
    return _WHITESPACE.sub("_", text)
