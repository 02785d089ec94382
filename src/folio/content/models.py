"""Domain records handed between the store, the site context, and templates.

All records are frozen.  They are detached from any database session, so
they can cross thread boundaries during a parallel export.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime

from folio._errors import ValidationError
from folio._types import BlockType, RecordID, Slug
from folio.content.blocks import BlockContent, block_type_of
from folio.content.blocks import preview as block_preview

# Letters, digits, dashes and underscores; no leading/trailing dash
_SLUG_RE = re.compile(r"[A-Za-z0-9_]+(?:-[A-Za-z0-9_]+)*")


def is_valid_slug(slug: str) -> bool:
    """True if ``slug`` is safe to use as a single URL path segment."""
    return _SLUG_RE.fullmatch(slug) is not None


@dataclass(frozen=True, slots=True)
class Project:
    """A portfolio project.

    Attributes:
        id: Opaque unique identifier.
        title: Display title.
        slug: Unique URL key (``/project/<slug>/``).
        start_date: Drives ordering and year grouping.
        description: Optional summary.
        end_date: Optional; never before ``start_date``.
        thumbnail_url: Optional hosted image URL.

    """

    id: RecordID
    title: str
    slug: Slug
    start_date: date
    description: str | None = None
    end_date: date | None = None
    thumbnail_url: str | None = None

    @property
    def year(self) -> int:
        return self.start_date.year


@dataclass(frozen=True, slots=True)
class Page:
    """A standalone page keyed by slug (``about``, ``contact``, ``footer``)."""

    slug: Slug
    title: str
    content: str
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """One ordered section of a project's detail page."""

    id: RecordID
    project_id: RecordID
    content: BlockContent
    sort_order: int = 0

    @property
    def block_type(self) -> BlockType:
        return block_type_of(self.content)

    @property
    def preview(self) -> str:
        return block_preview(self.content)


@dataclass(frozen=True, slots=True)
class ProjectFields:
    """Editable project fields, as submitted by the admin.

    Call :meth:`validate` before writing; the store does.
    """

    title: str
    slug: Slug
    start_date: date
    description: str | None = None
    end_date: date | None = None
    thumbnail_url: str | None = None

    def validate(self) -> None:
        """Raise ValidationError if the fields cannot be stored."""
        if not self.title.strip():
            msg = "Project title must not be empty"
            raise ValidationError(msg)
        if not is_valid_slug(self.slug):
            msg = f"Project slug {self.slug!r} is not URL-safe"
            raise ValidationError(msg)
        if self.end_date is not None and self.end_date < self.start_date:
            msg = (
                f"Project end date {self.end_date.isoformat()} is before "
                f"start date {self.start_date.isoformat()}"
            )
            raise ValidationError(msg)
