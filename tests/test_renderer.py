"""Tests for folio.render and folio.theme — template lookup and rendering."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

from folio._errors import ConfigError
from folio.config import FolioConfig
from folio.content.models import Page, Project
from folio.render.templates import KidaRenderer
from folio.site.context import IndexContext, PageContext, ProjectContext
from folio.theme import bundled_templates_path, get_template_dirs

ALPHA = Project(id="a", title="Alpha", slug="alpha", start_date=date(2023, 1, 1))


def _write_templates(directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "index.html").write_text("{{ footer }}|{{ grouped_projects | length }}")
    (directory / "project.html").write_text("{{ project.title }}|{{ blocks | length }}")
    (directory / "page.html").write_text("{{ page.title }}")
    return directory


class TestTemplateDirs:
    """get_template_dirs — user templates first, bundled theme last."""

    def test_bundled_theme_ships_all_templates(self) -> None:
        bundled = bundled_templates_path()
        for name in ("index.html", "project.html", "page.html"):
            assert (bundled / name).is_file()

    def test_without_user_dir(self, tmp_path: Path) -> None:
        assert get_template_dirs(FolioConfig(root=tmp_path)) == [bundled_templates_path()]

    def test_user_dir_first(self, tmp_path: Path) -> None:
        (tmp_path / "templates").mkdir()
        dirs = get_template_dirs(FolioConfig(root=tmp_path))
        assert dirs == [tmp_path / "templates", bundled_templates_path()]


class TestKidaMissing:
    """KidaRenderer — clear error when the engine is not installed."""

    def test_config_error(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setitem(sys.modules, "kida", None)
        with pytest.raises(ConfigError, match="kida-templates"):
            KidaRenderer([tmp_path])


class TestKidaRenderer:
    """KidaRenderer — contexts rendered through Kida templates."""

    @pytest.fixture
    def renderer(self, tmp_path: Path) -> KidaRenderer:
        pytest.importorskip("kida")
        return KidaRenderer([_write_templates(tmp_path / "templates")])

    def test_render_index(self, renderer: KidaRenderer) -> None:
        context = IndexContext(grouped_projects=[(2023, [ALPHA])], footer="Studio")
        assert renderer.render_index(context) == "Studio|1"

    def test_render_project(self, renderer: KidaRenderer) -> None:
        context = ProjectContext(
            project=ALPHA, blocks=[], next_project=None, prev_project=None, footer="",
        )
        assert renderer.render_project(context) == "Alpha|0"

    def test_render_page(self, renderer: KidaRenderer) -> None:
        page = Page(slug="about", title="About", content="")
        assert renderer.render_page(PageContext(page=page, footer="")) == "About"

    def test_autoescapes(self, renderer: KidaRenderer) -> None:
        page = Page(slug="about", title="<b>Me</b>", content="")
        html = renderer.render_page(PageContext(page=page, footer=""))
        assert "<b>" not in html
        assert "&lt;b&gt;" in html

    def test_user_template_overrides_fallback(self, tmp_path: Path) -> None:
        pytest.importorskip("kida")
        fallback = _write_templates(tmp_path / "fallback")
        user = tmp_path / "user"
        user.mkdir()
        (user / "page.html").write_text("custom {{ page.slug }}")

        renderer = KidaRenderer([user, fallback])
        page = Page(slug="contact", title="Contact", content="")
        assert renderer.render_page(PageContext(page=page, footer="")) == "custom contact"
        context = IndexContext(grouped_projects=[], footer="F")
        assert renderer.render_index(context) == "F|0"
