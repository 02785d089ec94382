"""Static export of the public portfolio."""

from folio.export.assets import copy_assets
from folio.export.records import ExportedFile, ExportResult
from folio.export.static import SiteExporter, admin_login_url, render_admin_redirect

__all__ = [
    "ExportResult",
    "ExportedFile",
    "SiteExporter",
    "admin_login_url",
    "copy_assets",
    "render_admin_redirect",
]
