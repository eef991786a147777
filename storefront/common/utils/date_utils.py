"""Utility functions for date manipulation."""

from datetime import date, datetime


def parse_release_date(value: str | date | None) -> date | None:
    """Parses an ISO date or datetime string from the catalog API into a date."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        # The catalog may send a bare date or a full timestamp with Z or an offset
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except (ValueError, TypeError, AttributeError):
        return None


def format_release_date(value: date | None) -> str | None:
    """Formats a release date for the catalog API."""
    if value is None:
        return None
    return value.strftime("%Y-%m-%d")
