"""Site layer — page contexts assembled from the content store."""

from folio.site.context import (
    DEFAULT_FOOTER,
    DEFAULT_PAGES,
    IndexContext,
    PageContext,
    ProjectContext,
    get_footer,
    load_index,
    load_page,
    load_project,
    require_project,
)

__all__ = [
    "DEFAULT_FOOTER",
    "DEFAULT_PAGES",
    "IndexContext",
    "PageContext",
    "ProjectContext",
    "get_footer",
    "load_index",
    "load_page",
    "load_project",
    "require_project",
]
