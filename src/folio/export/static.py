"""Static export — render the public portfolio to plain HTML files.

Reads the content store through the site context loaders, renders every
public page through a :class:`~folio.render.SiteRenderer`, and writes the
result as a clean-URL directory tree suitable for any static host::

    index.html
    project/<slug>/index.html
    about/index.html
    contact/index.html
    admin/index.html          redirect stub to the external admin app
    static/...                verbatim copy of the asset directory
"""

from __future__ import annotations

import html
import json
import shutil
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from folio._errors import ExportError
from folio.content.models import is_valid_slug
from folio.export.assets import copy_assets
from folio.export.records import ExportedFile, ExportResult
from folio.observability.collector import ExportCollector
from folio.site.context import ABOUT_SLUG, CONTACT_SLUG, load_index, load_page, load_project

if TYPE_CHECKING:
    from collections.abc import Callable

    from folio._types import ExportKind
    from folio.config import FolioConfig
    from folio.content.models import Project
    from folio.observability.events import ExportStage
    from folio.render.base import SiteRenderer
    from folio.store.repository import ContentStore

STANDALONE_PAGES = (ABOUT_SLUG, CONTACT_SLUG)


class SiteExporter:
    """Exports the portfolio held in a content store as static files.

    Args:
        store: Content store to read projects, blocks and pages from.
        renderer: Turns page contexts into markup.
        config: Frozen folio configuration (output, static dir, admin URL, workers).
        collector: Event sink; a fresh quiet-by-default collector if omitted.

    """

    __slots__ = ("_collector", "_config", "_renderer", "_store")

    def __init__(
        self,
        store: ContentStore,
        renderer: SiteRenderer,
        config: FolioConfig,
        collector: ExportCollector | None = None,
    ) -> None:
        self._store = store
        self._renderer = renderer
        self._config = config
        self._collector = collector if collector is not None else ExportCollector()

    @property
    def collector(self) -> ExportCollector:
        return self._collector

    def export(self) -> ExportResult:
        """Run the full export pipeline and return the result.

        Pipeline order:
            1. Reset the output directory
            2. Copy static assets
            3. Render the index
            4. Render one page per project listed on the index
            5. Render the standalone pages (about, contact)
            6. Write the admin redirect stub

        A failure in any stage aborts the run.  Files written by earlier
        stages are left in place.

        Returns:
            ExportResult with metadata about all exported files.

        Raises:
            ExportError: If any step of the pipeline fails.

        """
        start = time.perf_counter()
        output_dir = self._config.output_path
        self._collector.begin_run()

        self._stage("reset", lambda: self._reset_output(output_dir))

        all_files: list[ExportedFile] = []
        all_files.extend(self._stage("assets", lambda: self._copy_assets(output_dir)))

        index_files, listed = self._stage("index", lambda: self._render_index(output_dir))
        all_files.extend(index_files)

        all_files.extend(
            self._stage("projects", lambda: self._render_projects(output_dir, listed)),
        )
        position = {project.slug: i for i, project in enumerate(listed)}
        skipped = sorted(self._collector.skipped_slugs(), key=position.__getitem__)

        all_files.extend(self._stage("pages", lambda: self._render_pages(output_dir)))
        all_files.extend(self._stage("admin", lambda: self._write_admin_stub(output_dir)))

        elapsed = (time.perf_counter() - start) * 1000

        return ExportResult(
            files=tuple(all_files),
            total_pages=sum(1 for f in all_files if f.source_type != "asset"),
            total_assets=sum(1 for f in all_files if f.source_type == "asset"),
            skipped=tuple(skipped),
            duration_ms=elapsed,
            output_dir=output_dir,
        )

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _reset_output(self, output_dir: Path) -> list[ExportedFile]:
        """Remove and recreate the output directory."""
        try:
            if output_dir.exists():
                shutil.rmtree(output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Cannot reset output directory {output_dir}: {exc}"
            raise ExportError(msg) from exc
        return []

    def _copy_assets(self, output_dir: Path) -> list[ExportedFile]:
        static_path = self._config.static_path
        try:
            copied = copy_assets(static_path, output_dir)
        except OSError as exc:
            msg = f"Failed to copy static assets from {static_path}: {exc}"
            raise ExportError(msg) from exc
        if copied is None:
            self._collector.record_assets_missing(str(static_path))
            return []
        return list(copied)

    def _render_index(self, output_dir: Path) -> tuple[list[ExportedFile], list[Project]]:
        t0 = time.perf_counter()
        try:
            context = load_index(self._store)
            markup = self._renderer.render_index(
                context.only(lambda project: is_valid_slug(project.slug)),
            )
        except Exception as exc:
            msg = f"Failed to render the index page: {exc}"
            raise ExportError(msg) from exc
        exported = self._emit("/", markup, "index", output_dir, t0)
        return [exported], context.projects

    def _render_projects(
        self,
        output_dir: Path,
        projects: list[Project],
    ) -> list[ExportedFile]:
        """Render a detail page for every project listed on the index.

        With ``workers > 1`` projects render on a thread pool.  Results
        keep index order; a failure is raised once every submitted
        project has finished.  Skipped projects are recorded through the
        collector.
        """
        slugs = [project.slug for project in projects]
        workers = min(self._config.workers, len(slugs))

        if workers <= 1:
            outcomes = [self._render_project(output_dir, slug) for slug in slugs]
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="folio-export") as pool:
                futures = [pool.submit(self._render_project, output_dir, slug) for slug in slugs]
            outcomes = [future.result() for future in futures]

        return [exported for exported in outcomes if exported is not None]

    def _render_project(self, output_dir: Path, slug: str) -> ExportedFile | None:
        """Render one project page, or ``None`` when it must be skipped."""
        permalink = f"/project/{slug}/"
        if not is_valid_slug(slug):
            self._collector.record_skip(slug, "slug is not safe as a path segment")
            return None

        t0 = time.perf_counter()
        try:
            context = load_project(self._store, slug)
            if context is None:
                self._collector.record_skip(slug, "project no longer exists")
                return None
            markup = self._renderer.render_project(context)
        except Exception as exc:
            msg = f"Failed to render project page {permalink!r}: {exc}"
            raise ExportError(msg) from exc
        return self._emit(permalink, markup, "project", output_dir, t0)

    def _render_pages(self, output_dir: Path) -> list[ExportedFile]:
        results: list[ExportedFile] = []
        for slug in STANDALONE_PAGES:
            permalink = f"/{slug}/"
            t0 = time.perf_counter()
            try:
                markup = self._renderer.render_page(load_page(self._store, slug))
            except Exception as exc:
                msg = f"Failed to render page {permalink!r}: {exc}"
                raise ExportError(msg) from exc
            results.append(self._emit(permalink, markup, "page", output_dir, t0))
        return results

    def _write_admin_stub(self, output_dir: Path) -> list[ExportedFile]:
        t0 = time.perf_counter()
        markup = render_admin_redirect(self._config.admin_url)
        return [self._emit("/admin/", markup, "admin", output_dir, t0)]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _stage[T](self, stage: ExportStage, step: Callable[[], T]) -> T:
        """Run one pipeline stage and record its completion."""
        t0 = time.perf_counter()
        result = step()
        files = result[0] if isinstance(result, tuple) else result
        self._collector.record_stage(
            stage,
            files_written=len(files),
            duration_ms=(time.perf_counter() - t0) * 1000,
        )
        return result

    def _emit(
        self,
        permalink: str,
        markup: str,
        kind: ExportKind,
        output_dir: Path,
        t0: float,
    ) -> ExportedFile:
        """Write rendered markup for ``permalink`` and record it."""
        filepath = self._permalink_to_filepath(permalink, output_dir)
        try:
            size = self._write_html(filepath, markup)
        except OSError as exc:
            msg = f"Cannot write {filepath}: {exc}"
            raise ExportError(msg) from exc
        elapsed = (time.perf_counter() - t0) * 1000
        self._collector.record_page(permalink, size_bytes=size, duration_ms=elapsed)
        return ExportedFile(
            source_path=permalink,
            output_path=filepath,
            source_type=kind,
            size_bytes=size,
            duration_ms=elapsed,
        )

    @staticmethod
    def _permalink_to_filepath(permalink: str, output_dir: Path) -> Path:
        """Convert a URL permalink to an output file path.

        Clean URL convention:
            ``/``                  -> ``output/index.html``
            ``/about/``            -> ``output/about/index.html``
            ``/project/alpha/``    -> ``output/project/alpha/index.html``

        """
        clean = permalink.strip("/")
        if not clean:
            return output_dir / "index.html"
        return output_dir / clean / "index.html"

    @staticmethod
    def _write_html(filepath: Path, markup: str) -> int:
        """Write HTML to a file, creating parent dirs as needed.

        Returns the size in bytes of the written file.

        """
        filepath.parent.mkdir(parents=True, exist_ok=True)
        data = markup.encode("utf-8")
        filepath.write_bytes(data)
        return len(data)


def admin_login_url(admin_url: str) -> str:
    """The login entry point of the external admin application."""
    return admin_url.rstrip("/") + "/login"


def render_admin_redirect(admin_url: str) -> str:
    """Markup for ``admin/index.html``: send the visitor to the admin login.

    Redirects three ways (meta refresh, script, and a plain link) so the
    stub works with scripting disabled.
    """
    target = admin_login_url(admin_url)
    attr = html.escape(target, quote=True)
    script_target = json.dumps(target).replace("</", "<\\/")
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f'<meta http-equiv="refresh" content="0; url={attr}">\n'
        "<title>Redirecting to admin</title>\n"
        f"<script>window.location.replace({script_target});</script>\n"
        "</head>\n"
        "<body>\n"
        f'<p>Redirecting to <a href="{attr}">the admin login</a>.</p>\n'
        "</body>\n"
        "</html>\n"
    )
