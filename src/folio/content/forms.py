"""Admin form payloads — flat string mappings to typed writes.

The HTTP layer hands over whatever the browser posted (a ``Mapping`` of
field name to string).  These helpers turn that into the typed values the
store accepts.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from folio._errors import ValidationError
from folio.content.blocks import BlockContent, decode, to_form_text
from folio.content.dates import parse_date, parse_date_option
from folio.content.models import ContentBlock, ProjectFields


def _optional(form: Mapping[str, str], key: str) -> str | None:
    value = form.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


def project_fields_from_form(form: Mapping[str, str]) -> ProjectFields:
    """Build validated ProjectFields from a submitted project form.

    Required: ``title``, ``slug``, ``start_date``.  Optional fields that are
    blank become ``None``.

    Raises:
        ValidationError: On a missing required field, a bad start date, or
            any :meth:`ProjectFields.validate` failure.

    """
    for key in ("title", "slug", "start_date"):
        if not (form.get(key) or "").strip():
            msg = f"Missing required field {key!r}"
            raise ValidationError(msg)

    fields = ProjectFields(
        title=form["title"].strip(),
        slug=form["slug"].strip(),
        start_date=parse_date(form["start_date"]),
        description=_optional(form, "description"),
        end_date=parse_date_option(form.get("end_date")),
        thumbnail_url=_optional(form, "thumbnail_url"),
    )
    fields.validate()
    return fields


@dataclass(frozen=True, slots=True)
class BlockForm:
    """A submitted block editor form.

    Attributes:
        block_type: Requested variant (case-insensitive).
        raw_content: The flat text of the content field.
        sort_order: Explicit position, or ``None`` to append.

    """

    block_type: str
    raw_content: str
    sort_order: int | None = None

    @classmethod
    def from_mapping(cls, form: Mapping[str, str]) -> BlockForm:
        raw_order = (form.get("sort_order") or "").strip()
        try:
            sort_order = int(raw_order) if raw_order else None
        except ValueError as exc:
            msg = f"sort_order must be an integer, got {raw_order!r}"
            raise ValidationError(msg) from exc
        return cls(
            block_type=form.get("block_type") or "text",
            raw_content=form.get("content") or "",
            sort_order=sort_order,
        )

    def content(self) -> BlockContent:
        """Decode the submitted text; malformed input degrades, never raises."""
        return decode(self.block_type, self.raw_content)


def block_form_text(block: ContentBlock) -> str:
    """Text to pre-fill the content field when editing an existing block."""
    return to_form_text(block.content)
