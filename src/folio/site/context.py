"""Site context — the data each public page is rendered from.

Each ``load_*`` function reads what one page needs from the store and
returns a frozen context object.  The same contexts feed the static
exporter and any live handler the HTTP layer wires up.

Well-known page slugs (``about``, ``contact``, ``footer``) never fail to
load: when the store has no row for them a built-in default is used.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from folio._errors import NotFoundError
from folio.content.dates import group_by_year
from folio.content.models import ContentBlock, Page, Project

if TYPE_CHECKING:
    from collections.abc import Callable

    from folio.store.repository import ContentStore

FOOTER_SLUG = "footer"
ABOUT_SLUG = "about"
CONTACT_SLUG = "contact"

DEFAULT_FOOTER = "<p>&copy; 2024</p>"

DEFAULT_PAGES: dict[str, Page] = {
    ABOUT_SLUG: Page(slug=ABOUT_SLUG, title="About", content="<p>About info missing.</p>"),
    CONTACT_SLUG: Page(
        slug=CONTACT_SLUG, title="Contact", content="<p>Contact info missing.</p>",
    ),
}


@dataclass(frozen=True, slots=True)
class IndexContext:
    """Home page: projects grouped by start year, newest year first."""

    grouped_projects: list[tuple[int, list[Project]]]
    footer: str

    @property
    def projects(self) -> list[Project]:
        return [project for _year, group in self.grouped_projects for project in group]

    def only(self, keep: Callable[[Project], bool]) -> IndexContext:
        """The same index without the projects ``keep`` rejects; emptied years drop out."""
        grouped = [
            (year, kept)
            for year, group in self.grouped_projects
            if (kept := [project for project in group if keep(project)])
        ]
        return IndexContext(grouped_projects=grouped, footer=self.footer)


@dataclass(frozen=True, slots=True)
class ProjectContext:
    """Project detail page.

    Attributes:
        project: The project being shown.
        blocks: Its content blocks in display order.
        next_project: Chronologically next-older project, if any.
        prev_project: Chronologically next-newer project, if any.
        footer: Shared footer markup.

    """

    project: Project
    blocks: list[ContentBlock]
    next_project: Project | None
    prev_project: Project | None
    footer: str


@dataclass(frozen=True, slots=True)
class PageContext:
    """A standalone page (about, contact)."""

    page: Page
    footer: str


def get_footer(store: ContentStore) -> str:
    page = store.get_page(FOOTER_SLUG)
    return page.content if page is not None else DEFAULT_FOOTER


def load_index(store: ContentStore) -> IndexContext:
    return IndexContext(
        grouped_projects=group_by_year(store.list_projects()),
        footer=get_footer(store),
    )


def load_project(store: ContentStore, slug: str) -> ProjectContext | None:
    """Everything the detail page for ``slug`` needs, or ``None`` if absent."""
    project = store.get_project_by_slug(slug)
    if project is None:
        return None
    return ProjectContext(
        project=project,
        blocks=store.list_blocks(project.id),
        next_project=store.next_older(project.start_date),
        prev_project=store.next_newer(project.start_date),
        footer=get_footer(store),
    )


def require_project(store: ContentStore, slug: str) -> ProjectContext:
    """Like :func:`load_project`, for request handlers that must answer 404.

    Raises:
        NotFoundError: If no project has this slug.

    """
    context = load_project(store, slug)
    if context is None:
        msg = f"Project {slug!r} not found"
        raise NotFoundError(msg)
    return context


def load_page(store: ContentStore, slug: str) -> PageContext:
    """A standalone page with its well-known default as fallback.

    Raises:
        NotFoundError: If ``slug`` is absent and has no built-in default.

    """
    page = store.get_page(slug, default=DEFAULT_PAGES.get(slug))
    if page is None:
        msg = f"Page {slug!r} not found"
        raise NotFoundError(msg)
    return PageContext(page=page, footer=get_footer(store))
