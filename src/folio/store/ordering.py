"""Ordering engine — display order of a project's content blocks.

Blocks are always ordered by ``(sort_order, id)``.  ``sort_order`` values
need not be contiguous; the ``id`` tie-break keeps equal values stable.

Reorders are applied pair by pair, each in its own commit.  A pair that the
database rejects is rolled back and dropped; the rest of the batch still
applies.  A batch is therefore not atomic, and the next reorder from the
editor overwrites every position again.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from folio.store.schema import ContentBlockRow

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from folio.content.models import ContentBlock

# sort_order is a 32-bit INTEGER column.
SORT_ORDER_MIN = -(2**31)
SORT_ORDER_MAX = 2**31 - 1


@dataclass(frozen=True, slots=True)
class ReorderUpdate:
    """Move one block to a new ``sort_order``."""

    block_id: str
    sort_order: int


def block_order() -> tuple[sa.ColumnElement, ...]:
    """``ORDER BY`` clause for display order."""
    return (ContentBlockRow.sort_order.asc(), ContentBlockRow.id.asc())


def sort_key(block: ContentBlock) -> tuple[int, str]:
    """In-memory equivalent of :func:`block_order`."""
    return (block.sort_order, block.id)


def next_sort_order(session: Session, project_id: str) -> int:
    """Position that appends a new block after the project's existing ones.

    ``max(sort_order) + 1``, or ``0`` for a project with no blocks.
    """
    current = session.scalar(
        sa.select(sa.func.max(ContentBlockRow.sort_order)).where(
            ContentBlockRow.project_id == project_id,
        ),
    )
    return 0 if current is None else current + 1


def parse_reorder_request(payload: object) -> list[ReorderUpdate]:
    """Read ``{"updates": [{"id": ..., "sort_order": ...}, ...]}``.

    Items missing either key, or whose ``sort_order`` is not an integer
    that fits the column, are dropped.
    """
    if not isinstance(payload, Mapping):
        return []
    items = payload.get("updates")
    if not isinstance(items, list):
        return []

    updates: list[ReorderUpdate] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        block_id = item.get("id")
        order = item.get("sort_order")
        if block_id is None or isinstance(order, bool) or not isinstance(order, int):
            continue
        if not SORT_ORDER_MIN <= order <= SORT_ORDER_MAX:
            continue
        updates.append(ReorderUpdate(block_id=str(block_id), sort_order=order))
    return updates


def apply_reorder(
    session: Session,
    updates: Iterable[ReorderUpdate],
    *,
    project_id: str | None = None,
) -> int:
    """Apply each update independently and return how many rows moved.

    An update for a block that no longer exists (or that belongs to a
    different project when ``project_id`` is given) changes nothing.  An
    update the database rejects is rolled back and skipped.
    """
    moved = 0
    for update in updates:
        stmt = (
            sa.update(ContentBlockRow)
            .where(ContentBlockRow.id == update.block_id)
            .values(sort_order=update.sort_order)
        )
        if project_id is not None:
            stmt = stmt.where(ContentBlockRow.project_id == project_id)
        try:
            result = session.execute(stmt)
            session.commit()
        except (SQLAlchemyError, OverflowError):
            session.rollback()
            continue
        moved += result.rowcount or 0
    return moved
