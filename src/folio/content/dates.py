"""Date helpers — year grouping for the index and form date parsing."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from folio._errors import ValidationError
from folio.content.models import Project


def group_by_year(projects: Iterable[Project]) -> list[tuple[int, list[Project]]]:
    """Group projects by the calendar year of their start date.

    Years are returned most recent first.  Within a year, projects keep the
    relative order they arrived in (the store yields them date-descending).

    Example::

        >>> [(y, [p.title for p in ps]) for y, ps in group_by_year(projects)]
        [(2024, ['Gamma']), (2023, ['Beta', 'Alpha'])]

    """
    years: dict[int, list[Project]] = {}
    for project in projects:
        years.setdefault(project.year, []).append(project)
    return [(year, years[year]) for year in sorted(years, reverse=True)]


def parse_date(text: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` date from a form field.

    Raises:
        ValidationError: If the text is empty or not an ISO date.

    """
    try:
        return date.fromisoformat(text.strip())
    except ValueError as exc:
        msg = f"Invalid date {text!r}, expected YYYY-MM-DD"
        raise ValidationError(msg) from exc


def parse_date_option(text: str | None) -> date | None:
    """Parse an optional date field; blank or unparseable input is ``None``."""
    if text is None or not text.strip():
        return None
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return None
