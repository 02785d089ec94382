"""Renderer protocol shared by the exporter and live handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from folio.site.context import IndexContext, PageContext, ProjectContext


class SiteRenderer(Protocol):
    """Pure function family from page context to markup.

    Implementations receive structured, unescaped data and own the
    escaping policy.  They are expected not to fail on well-formed input;
    any exception they raise aborts an export.
    """

    def render_index(self, context: IndexContext) -> str: ...

    def render_project(self, context: ProjectContext) -> str: ...

    def render_page(self, context: PageContext) -> str: ...
