"""Content model — projects, pages, and polymorphic content blocks.

Pure data and conversions; no I/O.  The store persists these records and
the exporter renders them.
"""

from folio.content.blocks import (
    BLOCK_TYPES,
    AudioContent,
    BlockContent,
    FileContent,
    GalleryContent,
    TextContent,
    VideoContent,
    block_type_of,
    decode,
    decode_persisted,
    encode,
    preview,
    to_form_text,
)
from folio.content.dates import group_by_year
from folio.content.models import ContentBlock, Page, Project, ProjectFields

__all__ = [
    "BLOCK_TYPES",
    "AudioContent",
    "BlockContent",
    "ContentBlock",
    "FileContent",
    "GalleryContent",
    "Page",
    "Project",
    "ProjectFields",
    "TextContent",
    "VideoContent",
    "block_type_of",
    "decode",
    "decode_persisted",
    "encode",
    "group_by_year",
    "preview",
    "to_form_text",
]
