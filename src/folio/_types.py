"""Shared type definitions for folio."""

from typing import Literal

# Discriminant of a content block's variant payload
type BlockType = Literal["text", "gallery", "video", "audio", "file"]

# Opaque record identifier (UUID string)
type RecordID = str

# Human-chosen, URL-safe project or page key
type Slug = str

# (url, label) pair carried by audio and file blocks
type LabelledURL = tuple[str, str]

# Category of a file written during export
type ExportKind = Literal["index", "project", "page", "admin", "asset"]
