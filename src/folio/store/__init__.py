"""Content store — relational persistence for projects, pages, and blocks.

Quick Start:
    >>> from folio.store import ContentStore, create_schema
    >>> store = ContentStore.from_url("sqlite:///folio.db")
    >>> create_schema(store.engine)
    >>> store.list_projects()
    []

"""

from folio.store.ordering import ReorderUpdate, parse_reorder_request
from folio.store.repository import ContentStore
from folio.store.schema import create_schema

__all__ = [
    "ContentStore",
    "ReorderUpdate",
    "create_schema",
    "parse_reorder_request",
]
