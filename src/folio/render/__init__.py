"""Template rendering — typed page contexts in, markup out.

The exporter depends only on the :class:`SiteRenderer` protocol.
:class:`KidaRenderer` is the default implementation over Kida templates.
"""

from folio.render.base import SiteRenderer
from folio.render.templates import KidaRenderer

__all__ = ["KidaRenderer", "SiteRenderer"]
