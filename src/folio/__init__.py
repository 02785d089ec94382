"""Folio — a database-backed artist portfolio, exported as a static site.

Projects made of ordered content blocks (text, galleries, video, audio,
files) live in a relational store; the public site is pre-rendered to
plain HTML for any static host.

Quick start::

    import folio

    folio.build("my-site/", database_url="sqlite:///portfolio.db")

Library use::

    from folio import ContentStore, SiteExporter

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "ContentStore",
    "FolioConfig",
    "SiteExporter",
    "__version__",
    "build",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import folio`` fast; SQLAlchemy and Kida load on first use.
    """
    if name == "FolioConfig":
        from folio.config import FolioConfig

        return FolioConfig

    if name == "ContentStore":
        from folio.store.repository import ContentStore

        return ContentStore

    if name == "SiteExporter":
        from folio.export.static import SiteExporter

        return SiteExporter

    if name == "build":
        from folio.app import build

        return build

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
