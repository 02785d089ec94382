"""Kida-backed renderer.

Template names:
    ``index.html``    grouped_projects, footer
    ``project.html``  project, blocks, next_project, prev_project, footer
    ``page.html``     page, footer

Templates are looked up through every directory in ``template_dirs`` in
order, so a user ``templates/`` directory can override any bundled file.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from folio._errors import ConfigError

if TYPE_CHECKING:
    from folio.site.context import IndexContext, PageContext, ProjectContext

INDEX_TEMPLATE = "index.html"
PROJECT_TEMPLATE = "project.html"
PAGE_TEMPLATE = "page.html"


class KidaRenderer:
    """Render page contexts through a Kida environment with autoescaping.

    Args:
        template_dirs: Template directories in priority order.

    """

    __slots__ = ("_env",)

    def __init__(self, template_dirs: Sequence[Path]) -> None:
        try:
            from kida import Environment, FileSystemLoader
        except ImportError as exc:
            msg = (
                "Rendering requires Kida (Python 3.14+). "
                "Install with: pip install kida-templates"
            )
            raise ConfigError(msg) from exc

        self._env = Environment(
            loader=FileSystemLoader([str(path) for path in template_dirs]),
            autoescape=True,
        )

    def render_index(self, context: IndexContext) -> str:
        return self._render(
            INDEX_TEMPLATE,
            grouped_projects=context.grouped_projects,
            footer=context.footer,
        )

    def render_project(self, context: ProjectContext) -> str:
        return self._render(
            PROJECT_TEMPLATE,
            project=context.project,
            blocks=context.blocks,
            next_project=context.next_project,
            prev_project=context.prev_project,
            footer=context.footer,
        )

    def render_page(self, context: PageContext) -> str:
        return self._render(PAGE_TEMPLATE, page=context.page, footer=context.footer)

    def _render(self, template_name: str, **context: Any) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context)
