"""Shared test fixtures for folio."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest

from folio.config import FolioConfig
from folio.content.models import Project, ProjectFields
from folio.site.context import IndexContext, PageContext, ProjectContext
from folio.store.repository import ContentStore
from folio.store.schema import create_schema


@pytest.fixture
def store(tmp_path: Path) -> Iterator[ContentStore]:
    """An empty content store on a SQLite file.

    A file (not ``:memory:``) so worker threads see the same database.
    """
    content_store = ContentStore.from_url(f"sqlite:///{tmp_path / 'folio.db'}")
    create_schema(content_store.engine)
    yield content_store
    content_store.close()


@pytest.fixture
def seeded_store(store: ContentStore) -> ContentStore:
    """Three projects across two years: Alpha, Beta (2023) and Gamma (2024)."""
    make_project(store, "Alpha", "alpha", date(2023, 1, 1))
    make_project(store, "Beta", "beta", date(2023, 6, 1))
    make_project(store, "Gamma", "gamma", date(2024, 3, 1))
    return store


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """A site root with a static/ directory holding one stylesheet."""
    root = tmp_path / "site"
    static = root / "static" / "css"
    static.mkdir(parents=True)
    (static / "style.css").write_text("body { margin: 0; }\n")
    return root


@pytest.fixture
def site_config(tmp_site: Path) -> FolioConfig:
    return FolioConfig(root=tmp_site, database_url="sqlite://")


def make_project(
    store: ContentStore,
    title: str,
    slug: str,
    start_date: date,
    **extra: object,
) -> Project:
    """Create a project through the store's public API."""
    return store.create_project(
        ProjectFields(title=title, slug=slug, start_date=start_date, **extra),  # type: ignore[arg-type]
    )


class StubRenderer:
    """Deterministic renderer: one line per fact the page depends on."""

    def render_index(self, context: IndexContext) -> str:
        lines = ["INDEX"]
        for year, projects in context.grouped_projects:
            lines.append(f"{year}: {', '.join(p.slug for p in projects)}")
        lines.append(f"footer={context.footer}")
        return "\n".join(lines)

    def render_project(self, context: ProjectContext) -> str:
        lines = [f"PROJECT {context.project.slug}"]
        lines.extend(f"block {b.block_type} {b.preview}" for b in context.blocks)
        lines.append(f"prev={context.prev_project.slug if context.prev_project else '-'}")
        lines.append(f"next={context.next_project.slug if context.next_project else '-'}")
        lines.append(f"footer={context.footer}")
        return "\n".join(lines)

    def render_page(self, context: PageContext) -> str:
        return f"PAGE {context.page.slug}\n{context.page.content}\nfooter={context.footer}"


@pytest.fixture
def renderer() -> StubRenderer:
    return StubRenderer()
