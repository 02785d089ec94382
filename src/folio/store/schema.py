"""Relational schema — ``projects``, ``pages``, ``content_blocks``.

Rows convert to the frozen domain records in :mod:`folio.content.models`
via ``to_record()``; nothing outside :mod:`folio.store` sees a row.

``content_blocks.block_type`` is redundant with the tag inside
``content``.  It is only ever written from ``block_type_of(content)``
(see :meth:`ContentBlockRow.set_content`), and on read the payload wins.

Foreign keys carry no ``ON DELETE CASCADE``: the store deletes a project's
blocks itself before deleting the project.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from folio.content.blocks import BlockContent, block_type_of, decode_persisted, encode
from folio.content.models import ContentBlock, Page, Project

# Naming conventions keep constraint names stable across backends
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = sa.MetaData(naming_convention=convention)


def generate_id() -> str:
    return str(uuid.uuid4())


class ProjectRow(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(sa.CHAR(36), primary_key=True, default=generate_id)
    title: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    slug: Mapped[str] = mapped_column(sa.String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False, index=True)
    end_date: Mapped[date | None] = mapped_column(sa.Date, nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    def to_record(self) -> Project:
        return Project(
            id=self.id,
            title=self.title,
            slug=self.slug,
            start_date=self.start_date,
            description=self.description,
            end_date=self.end_date,
            thumbnail_url=self.thumbnail_url,
        )


class PageRow(Base):
    __tablename__ = "pages"

    slug: Mapped[str] = mapped_column(sa.String(255), primary_key=True)
    title: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    content: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    updated_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True,
    )

    def to_record(self) -> Page:
        return Page(
            slug=self.slug,
            title=self.title,
            content=self.content,
            updated_at=self.updated_at,
        )


class ContentBlockRow(Base):
    __tablename__ = "content_blocks"
    __table_args__ = (
        sa.Index("ix_content_blocks_project_order", "project_id", "sort_order", "id"),
    )

    id: Mapped[str] = mapped_column(sa.CHAR(36), primary_key=True, default=generate_id)
    project_id: Mapped[str] = mapped_column(
        sa.CHAR(36), sa.ForeignKey("projects.id"), nullable=False,
    )
    block_type: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    content: Mapped[dict] = mapped_column(sa.JSON, nullable=False)
    sort_order: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)

    def set_content(self, content: BlockContent) -> None:
        """Write the payload and its discriminant together."""
        self.content = encode(content)
        self.block_type = block_type_of(content)

    def to_record(self) -> ContentBlock:
        return ContentBlock(
            id=self.id,
            project_id=self.project_id,
            content=decode_persisted(self.content),
            sort_order=self.sort_order,
        )


def create_schema(engine: Engine) -> None:
    """Create any missing tables.

    A bootstrap for tests and first runs, not a migration system.
    """
    Base.metadata.create_all(engine)
