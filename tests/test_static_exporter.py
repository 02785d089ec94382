"""Tests for folio.export.static — SiteExporter and data types."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from folio._errors import ExportError, StoreError
from folio.config import FolioConfig
from folio.content.blocks import GalleryContent, TextContent
from folio.content.models import Project
from folio.export.records import ExportedFile, ExportResult
from folio.export.static import SiteExporter, admin_login_url, render_admin_redirect
from folio.observability.collector import ExportCollector
from folio.observability.events import ProjectSkipped, StageCompleted
from folio.store.repository import ContentStore

from .conftest import StubRenderer, make_project


def _tree(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


# ---------------------------------------------------------------------------
# Data type tests
# ---------------------------------------------------------------------------


class TestExportRecords:
    """ExportedFile / ExportResult — frozen dataclasses."""

    def test_exported_file_frozen(self) -> None:
        ef = ExportedFile("/", Path("/out/index.html"), "index", 100, 1.5)
        with pytest.raises(AttributeError):
            ef.source_path = "/other"  # type: ignore[misc]

    def test_result_fields(self) -> None:
        f1 = ExportedFile("/", Path("/o/index.html"), "index", 10, 1.0)
        f2 = ExportedFile("/static/s.css", Path("/o/static/s.css"), "asset", 20, 0.5)
        er = ExportResult(
            files=(f1, f2),
            total_pages=1,
            total_assets=1,
            skipped=("gone",),
            duration_ms=5.0,
            output_dir=Path("/out"),
        )
        assert er.skipped == ("gone",)
        assert len(er.files) == 2


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestPermalinkToFilepath:
    """SiteExporter._permalink_to_filepath — clean URL convention."""

    def test_root_path(self, tmp_path: Path) -> None:
        assert SiteExporter._permalink_to_filepath("/", tmp_path) == tmp_path / "index.html"

    def test_project_path(self, tmp_path: Path) -> None:
        result = SiteExporter._permalink_to_filepath("/project/alpha/", tmp_path)
        assert result == tmp_path / "project" / "alpha" / "index.html"

    def test_without_trailing_slash(self, tmp_path: Path) -> None:
        result = SiteExporter._permalink_to_filepath("/about", tmp_path)
        assert result == tmp_path / "about" / "index.html"


class TestWriteHtml:
    """SiteExporter._write_html — file writing with directory creation."""

    def test_writes_file(self, tmp_path: Path) -> None:
        filepath = tmp_path / "out" / "page" / "index.html"
        size = SiteExporter._write_html(filepath, "<p>café</p>")
        assert filepath.read_text(encoding="utf-8") == "<p>café</p>"
        assert size == len("<p>café</p>".encode())


class TestAdminRedirect:
    """render_admin_redirect — stub sending visitors to the admin login."""

    def test_login_url(self) -> None:
        assert admin_login_url("https://admin.example/admin") == "https://admin.example/admin/login"
        assert admin_login_url("https://admin.example/admin/") == "https://admin.example/admin/login"

    def test_three_redirects(self) -> None:
        markup = render_admin_redirect("https://admin.example/admin")
        assert '<meta http-equiv="refresh" content="0; url=https://admin.example/admin/login">' in markup
        assert 'href="https://admin.example/admin/login"' in markup
        assert 'window.location.replace("https://admin.example/admin/login")' in markup

    def test_escapes_target(self) -> None:
        markup = render_admin_redirect('https://x.example/"><script>alert(1)</script>')
        assert "&quot;&gt;&lt;script&gt;" in markup
        assert markup.count("</script>") == 1
        assert "alert(1)<\\/script>" in markup


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------


class TestExport:
    """SiteExporter.export — the six stages end to end."""

    def test_output_tree(
        self, seeded_store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        result = SiteExporter(seeded_store, renderer, site_config).export()

        out = site_config.output_path
        assert result.output_dir == out
        assert sorted(_tree(out)) == [
            "about/index.html",
            "admin/index.html",
            "contact/index.html",
            "index.html",
            "project/alpha/index.html",
            "project/beta/index.html",
            "project/gamma/index.html",
            "static/css/style.css",
        ]
        assert result.total_pages == 7
        assert result.total_assets == 1
        assert result.skipped == ()

    def test_index_grouping(
        self, seeded_store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        SiteExporter(seeded_store, renderer, site_config).export()
        index = (site_config.output_path / "index.html").read_text()
        assert index.splitlines()[1:3] == ["2024: gamma", "2023: beta, alpha"]

    def test_project_pages(
        self, seeded_store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        beta = seeded_store.get_project_by_slug("beta")
        assert beta is not None
        seeded_store.add_block(beta.id, GalleryContent(("a.jpg", "b.jpg")))
        seeded_store.add_block(beta.id, TextContent("<p>Notes</p>"), sort_order=-1)

        SiteExporter(seeded_store, renderer, site_config).export()
        page = (site_config.output_path / "project" / "beta" / "index.html").read_text()
        assert page.splitlines() == [
            "PROJECT beta",
            "block text pNotes/p",
            "block gallery 2 images",
            "prev=gamma",
            "next=alpha",
            "footer=<p>&copy; 2024</p>",
        ]

    def test_default_pages(
        self, store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        SiteExporter(store, renderer, site_config).export()
        about = (site_config.output_path / "about" / "index.html").read_text()
        assert "<p>About info missing.</p>" in about
        contact = (site_config.output_path / "contact" / "index.html").read_text()
        assert "<p>Contact info missing.</p>" in contact

    def test_empty_store_still_exports(
        self, store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        result = SiteExporter(store, renderer, site_config).export()
        assert result.total_pages == 4
        assert not (site_config.output_path / "project").exists()

    def test_admin_stub_uses_config(
        self, store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        config = replace(site_config, admin_url="https://cms.example/admin")
        SiteExporter(store, renderer, config).export()
        stub = (config.output_path / "admin" / "index.html").read_text()
        assert "https://cms.example/admin/login" in stub

    def test_assets_copied_verbatim(
        self, store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        binary = bytes(range(256))
        (site_config.static_path / "img").mkdir()
        (site_config.static_path / "img" / "logo.bin").write_bytes(binary)
        SiteExporter(store, renderer, site_config).export()
        assert (site_config.output_path / "static" / "img" / "logo.bin").read_bytes() == binary

    def test_missing_static_dir_warns(
        self,
        store: ContentStore,
        renderer: StubRenderer,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        config = FolioConfig(root=tmp_path / "bare", database_url="sqlite://")
        result = SiteExporter(store, renderer, config).export()
        assert result.total_assets == 0
        assert "static directory" in capsys.readouterr().err

    def test_idempotent(
        self, seeded_store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        exporter = SiteExporter(seeded_store, renderer, site_config)
        exporter.export()
        first = _tree(site_config.output_path)
        exporter.export()
        assert _tree(site_config.output_path) == first

    def test_deleted_project_page_removed(
        self, seeded_store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        exporter = SiteExporter(seeded_store, renderer, site_config)
        exporter.export()
        stale = site_config.output_path / "project" / "beta" / "index.html"
        assert stale.exists()

        beta = seeded_store.get_project_by_slug("beta")
        assert beta is not None
        seeded_store.delete_project(beta.id)
        exporter.export()
        assert not stale.exists()
        assert not stale.parent.exists()

    def test_stray_output_files_removed(
        self, store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        out = site_config.output_path
        out.mkdir(parents=True)
        (out / "leftover.txt").write_text("old")
        SiteExporter(store, renderer, site_config).export()
        assert not (out / "leftover.txt").exists()

    def test_workers_match_sequential(
        self, seeded_store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        for i in range(6):
            make_project(seeded_store, f"Extra {i}", f"extra-{i}", date(2019, 1 + i, 1))

        sequential = SiteExporter(seeded_store, renderer, site_config).export()
        expected = _tree(site_config.output_path)

        parallel_config = replace(site_config, workers=4)
        parallel = SiteExporter(seeded_store, renderer, parallel_config).export()

        assert _tree(parallel_config.output_path) == expected
        assert [f.source_path for f in parallel.files] == [f.source_path for f in sequential.files]


class TestExportSkips:
    """Projects that cannot be rendered are skipped, not fatal."""

    def test_project_deleted_mid_export(
        self, seeded_store: ContentStore, site_config: FolioConfig,
    ) -> None:
        beta = seeded_store.get_project_by_slug("beta")
        assert beta is not None

        class DeletingRenderer(StubRenderer):
            def render_index(self, context):  # type: ignore[no-untyped-def]
                seeded_store.delete_project(beta.id)
                return super().render_index(context)

        collector = ExportCollector(quiet=True)
        result = SiteExporter(seeded_store, DeletingRenderer(), site_config, collector).export()

        assert result.skipped == ("beta",)
        assert not (site_config.output_path / "project" / "beta").exists()
        assert (site_config.output_path / "project" / "alpha" / "index.html").exists()
        skips = collector.log.query(event_type=ProjectSkipped)
        assert [e.path for e in skips] == ["/project/beta/"]

    def test_unsafe_slug_skipped(self, site_config: FolioConfig, renderer: StubRenderer) -> None:
        listed = Project(id="x", title="X", slug="../escape", start_date=date(2020, 1, 1))
        store = MagicMock(spec=ContentStore)
        store.list_projects.return_value = [listed]
        store.get_page.side_effect = lambda slug, default=None: default

        collector = ExportCollector(quiet=True)
        result = SiteExporter(store, renderer, site_config, collector).export()

        assert result.skipped == ("../escape",)
        assert not (site_config.output_path / "escape").exists()
        store.get_project_by_slug.assert_not_called()

    def test_unsafe_slug_left_off_index(
        self, site_config: FolioConfig, renderer: StubRenderer,
    ) -> None:
        safe = Project(id="s", title="S", slug="safe", start_date=date(2021, 5, 1))
        unsafe = Project(id="x", title="X", slug="../escape", start_date=date(2020, 1, 1))
        store = MagicMock(spec=ContentStore)
        store.list_projects.return_value = [safe, unsafe]
        store.get_project_by_slug.return_value = None
        store.get_page.side_effect = lambda slug, default=None: default

        result = SiteExporter(store, renderer, site_config, ExportCollector(quiet=True)).export()

        index = (site_config.output_path / "index.html").read_text()
        assert "2021: safe" in index
        assert "escape" not in index
        assert "2020" not in index
        assert result.skipped == ("safe", "../escape")

    def test_skips_follow_index_order_with_workers(
        self, seeded_store: ContentStore, site_config: FolioConfig,
    ) -> None:
        class VanishingStoreRenderer(StubRenderer):
            def render_index(self, context):  # type: ignore[no-untyped-def]
                for project in context.projects:
                    seeded_store.delete_project(project.id)
                return super().render_index(context)

        config = replace(site_config, workers=3)
        result = SiteExporter(
            seeded_store, VanishingStoreRenderer(), config, ExportCollector(quiet=True),
        ).export()
        assert result.skipped == ("gamma", "beta", "alpha")

    def test_shared_collector_reports_current_run(
        self, seeded_store: ContentStore, site_config: FolioConfig,
    ) -> None:
        beta = seeded_store.get_project_by_slug("beta")
        assert beta is not None

        class DeletingRenderer(StubRenderer):
            def render_index(self, context):  # type: ignore[no-untyped-def]
                seeded_store.delete_project(beta.id)
                return super().render_index(context)

        collector = ExportCollector(quiet=True)
        first = SiteExporter(seeded_store, DeletingRenderer(), site_config, collector).export()
        second = SiteExporter(seeded_store, StubRenderer(), site_config, collector).export()

        assert first.skipped == ("beta",)
        assert second.skipped == ()
        assert len(collector.log.query(ProjectSkipped)) == 1


class TestExportFailures:
    """Fatal errors abort the run as ExportError."""

    def test_renderer_error(self, seeded_store: ContentStore, site_config: FolioConfig) -> None:
        renderer = MagicMock()
        renderer.render_index.return_value = "INDEX"
        renderer.render_project.side_effect = RuntimeError("template exploded")

        with pytest.raises(ExportError, match="template exploded") as excinfo:
            SiteExporter(seeded_store, renderer, site_config).export()
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_renderer_error_with_workers(
        self, seeded_store: ContentStore, site_config: FolioConfig,
    ) -> None:
        renderer = MagicMock()
        renderer.render_index.return_value = "INDEX"
        renderer.render_project.side_effect = RuntimeError("boom")
        config = replace(site_config, workers=3)

        with pytest.raises(ExportError, match="boom"):
            SiteExporter(seeded_store, renderer, config).export()
        assert renderer.render_project.call_count == 3

    def test_store_error(self, renderer: StubRenderer, site_config: FolioConfig) -> None:
        store = MagicMock(spec=ContentStore)
        store.list_projects.side_effect = StoreError("Content store unavailable: refused")

        with pytest.raises(ExportError, match="index") as excinfo:
            SiteExporter(store, renderer, site_config).export()
        assert isinstance(excinfo.value.__cause__, StoreError)

    def test_earlier_output_kept_on_failure(
        self, seeded_store: ContentStore, site_config: FolioConfig,
    ) -> None:
        renderer = MagicMock()
        renderer.render_index.return_value = "INDEX"
        renderer.render_project.return_value = "PROJECT"
        renderer.render_page.side_effect = RuntimeError("page failed")

        with pytest.raises(ExportError):
            SiteExporter(seeded_store, renderer, site_config).export()
        assert (site_config.output_path / "index.html").read_text() == "INDEX"
        assert (site_config.output_path / "project" / "alpha" / "index.html").exists()


class TestExportEvents:
    """Stage and page events recorded through the collector."""

    def test_stage_order(
        self, seeded_store: ContentStore, renderer: StubRenderer, site_config: FolioConfig,
    ) -> None:
        collector = ExportCollector(quiet=True)
        SiteExporter(seeded_store, renderer, site_config, collector).export()

        stages = collector.log.query(event_type=StageCompleted)
        assert [e.stage for e in stages] == [
            "reset", "assets", "index", "projects", "pages", "admin",
        ]
        by_stage = {e.stage: e.files_written for e in stages}
        assert by_stage == {
            "reset": 0, "assets": 1, "index": 1, "projects": 3, "pages": 2, "admin": 1,
        }
