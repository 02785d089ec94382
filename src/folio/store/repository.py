"""Content store — typed reads and writes over the relational schema.

Every method opens its own short-lived session and returns detached,
frozen records.  There is no transaction spanning several calls: a caller
that makes several reads (the exporter does) sees each query's own
snapshot, and concurrent admin edits may land between them.

Thread Safety:
    A ``ContentStore`` holds only a ``sessionmaker``; sessions are never
    shared.  Safe to call from several worker threads at once.  Connections
    come from the engine's bounded pool; when it is exhausted, callers
    wait up to ``pool_timeout`` seconds for a free connection.

"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, ParamSpec, TypeVar

import sqlalchemy as sa
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from folio._errors import ConflictError, NotFoundError, StoreError
from folio.store.ordering import (
    ReorderUpdate,
    apply_reorder,
    block_order,
    next_sort_order,
)
from folio.store.schema import ContentBlockRow, PageRow, ProjectRow

if TYPE_CHECKING:
    from folio.content.blocks import BlockContent
    from folio.content.models import ContentBlock, Page, Project, ProjectFields

P = ParamSpec("P")
R = TypeVar("R")


def _translate_errors(method: Callable[P, R]) -> Callable[P, R]:
    """Surface driver and pool failures as StoreError.

    IntegrityError passes through; methods that can violate a constraint
    map it to ConflictError themselves.
    """

    @functools.wraps(method)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return method(*args, **kwargs)
        except IntegrityError:
            raise
        except OperationalError as exc:
            msg = f"Content store unavailable: {exc.orig or exc}"
            raise StoreError(msg) from exc
        except PoolTimeoutError as exc:
            msg = f"Content store unavailable: no free connection ({exc})"
            raise StoreError(msg) from exc
        except DBAPIError as exc:
            msg = f"Content store query failed: {exc.orig or exc}"
            raise StoreError(msg) from exc

    return wrapper


class ContentStore:
    """CRUD over projects, pages, and content blocks.

    Args:
        sessions: Session factory bound to the content database.
        engine: Optional engine to dispose in :meth:`close`.

    """

    __slots__ = ("_engine", "_sessions")

    def __init__(
        self,
        sessions: sessionmaker[Session],
        engine: sa.Engine | None = None,
    ) -> None:
        self._sessions = sessions
        self._engine = engine

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        pool_size: int = 5,
        pool_timeout: float = 30.0,
    ) -> ContentStore:
        """Open a store on a database URL with a bounded connection pool."""
        from folio.store.engine import create_store_engine

        engine = create_store_engine(url, pool_size=pool_size, pool_timeout=pool_timeout)
        return cls(sessionmaker(bind=engine, expire_on_commit=False), engine=engine)

    @property
    def engine(self) -> sa.Engine | None:
        return self._engine

    def close(self) -> None:
        """Release pooled connections."""
        if self._engine is not None:
            self._engine.dispose()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self._sessions() as session:
            try:
                yield session
            except Exception:
                session.rollback()
                raise

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    @_translate_errors
    def list_projects(self) -> list[Project]:
        """All projects, newest ``start_date`` first (``id`` breaks ties)."""
        stmt = sa.select(ProjectRow).order_by(
            ProjectRow.start_date.desc(), ProjectRow.id.asc(),
        )
        with self._session() as session:
            return [row.to_record() for row in session.scalars(stmt)]

    @_translate_errors
    def get_project(self, project_id: str) -> Project | None:
        with self._session() as session:
            row = session.get(ProjectRow, project_id)
            return row.to_record() if row is not None else None

    @_translate_errors
    def get_project_by_slug(self, slug: str) -> Project | None:
        stmt = sa.select(ProjectRow).where(ProjectRow.slug == slug)
        with self._session() as session:
            row = session.scalars(stmt).first()
            return row.to_record() if row is not None else None

    @_translate_errors
    def create_project(self, fields: ProjectFields) -> Project:
        """Insert a project.

        Raises:
            ValidationError: If the fields fail validation.
            ConflictError: If the slug is already taken.

        """
        fields.validate()
        row = ProjectRow()
        _assign_fields(row, fields)
        with self._session() as session:
            session.add(row)
            _commit_or_conflict(session, fields.slug)
            return row.to_record()

    @_translate_errors
    def update_project(self, project_id: str, fields: ProjectFields) -> Project | None:
        """Overwrite a project's fields; ``None`` if it does not exist."""
        fields.validate()
        with self._session() as session:
            row = session.get(ProjectRow, project_id)
            if row is None:
                return None
            _assign_fields(row, fields)
            _commit_or_conflict(session, fields.slug)
            return row.to_record()

    @_translate_errors
    def delete_project(self, project_id: str) -> bool:
        """Delete a project and, first, every block it owns.

        Both deletes share one transaction.  Returns ``False`` if the
        project did not exist.
        """
        with self._session() as session:
            row = session.get(ProjectRow, project_id)
            if row is None:
                return False
            session.execute(
                sa.delete(ContentBlockRow).where(ContentBlockRow.project_id == project_id),
            )
            session.delete(row)
            session.commit()
            return True

    @_translate_errors
    def next_older(self, start_date: date) -> Project | None:
        """The project with the greatest ``start_date`` strictly before ``start_date``."""
        stmt = (
            sa.select(ProjectRow)
            .where(ProjectRow.start_date < start_date)
            .order_by(ProjectRow.start_date.desc(), ProjectRow.id.asc())
            .limit(1)
        )
        with self._session() as session:
            row = session.scalars(stmt).first()
            return row.to_record() if row is not None else None

    @_translate_errors
    def next_newer(self, start_date: date) -> Project | None:
        """The project with the least ``start_date`` strictly after ``start_date``."""
        stmt = (
            sa.select(ProjectRow)
            .where(ProjectRow.start_date > start_date)
            .order_by(ProjectRow.start_date.asc(), ProjectRow.id.asc())
            .limit(1)
        )
        with self._session() as session:
            row = session.scalars(stmt).first()
            return row.to_record() if row is not None else None

    # ------------------------------------------------------------------
    # Content blocks
    # ------------------------------------------------------------------

    @_translate_errors
    def list_blocks(self, project_id: str) -> list[ContentBlock]:
        """A project's blocks in display order."""
        stmt = (
            sa.select(ContentBlockRow)
            .where(ContentBlockRow.project_id == project_id)
            .order_by(*block_order())
        )
        with self._session() as session:
            return [row.to_record() for row in session.scalars(stmt)]

    @_translate_errors
    def get_block(self, block_id: str) -> ContentBlock | None:
        with self._session() as session:
            row = session.get(ContentBlockRow, block_id)
            return row.to_record() if row is not None else None

    @_translate_errors
    def add_block(
        self,
        project_id: str,
        content: BlockContent,
        sort_order: int | None = None,
    ) -> ContentBlock:
        """Attach a new block to a project.

        With ``sort_order=None`` the block is appended after the project's
        current last block.

        Raises:
            NotFoundError: If the project does not exist.

        """
        with self._session() as session:
            if session.get(ProjectRow, project_id) is None:
                msg = f"Project {project_id!r} not found"
                raise NotFoundError(msg)
            if sort_order is None:
                sort_order = next_sort_order(session, project_id)
            row = ContentBlockRow(project_id=project_id, sort_order=sort_order)
            row.set_content(content)
            session.add(row)
            session.commit()
            return row.to_record()

    @_translate_errors
    def update_block(
        self,
        block_id: str,
        content: BlockContent,
        sort_order: int | None = None,
    ) -> ContentBlock | None:
        """Replace a block's content (and position, if given)."""
        with self._session() as session:
            row = session.get(ContentBlockRow, block_id)
            if row is None:
                return None
            row.set_content(content)
            if sort_order is not None:
                row.sort_order = sort_order
            session.commit()
            return row.to_record()

    @_translate_errors
    def delete_block(self, block_id: str) -> bool:
        with self._session() as session:
            row = session.get(ContentBlockRow, block_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    @_translate_errors
    def reorder_blocks(
        self,
        updates: Iterable[ReorderUpdate],
        *,
        project_id: str | None = None,
    ) -> int:
        """Apply a reorder batch; returns the number of blocks moved."""
        with self._session() as session:
            return apply_reorder(session, updates, project_id=project_id)

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    @_translate_errors
    def get_page(self, slug: str, default: Page | None = None) -> Page | None:
        """The page stored under ``slug``, or ``default`` when absent."""
        with self._session() as session:
            row = session.get(PageRow, slug)
            return row.to_record() if row is not None else default

    @_translate_errors
    def list_pages(self) -> list[Page]:
        stmt = sa.select(PageRow).order_by(PageRow.slug.asc())
        with self._session() as session:
            return [row.to_record() for row in session.scalars(stmt)]

    @_translate_errors
    def save_page(self, slug: str, title: str, content: str) -> Page:
        """Create or overwrite the page at ``slug``."""
        with self._session() as session:
            row = session.get(PageRow, slug)
            if row is None:
                row = PageRow(slug=slug)
                session.add(row)
            row.title = title
            row.content = content
            row.updated_at = datetime.now(UTC)
            session.commit()
            return row.to_record()


def _assign_fields(row: ProjectRow, fields: ProjectFields) -> None:
    row.title = fields.title
    row.slug = fields.slug
    row.description = fields.description
    row.start_date = fields.start_date
    row.end_date = fields.end_date
    row.thumbnail_url = fields.thumbnail_url


def _commit_or_conflict(session: Session, slug: str) -> None:
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        msg = f"Project slug {slug!r} is already in use"
        raise ConflictError(msg) from exc
