"""Block content variants — the tagged payload carried by a content block.

A block holds exactly one of five shapes.  This module converts between
the variant value, its persisted JSON form, and the flat text an admin
form submits:

    form text --decode()--> BlockContent --encode()--> {"type", "data"}
                                  ^                           |
                                  +----decode_persisted()-----+

The discriminant (``"text"``, ``"gallery"`` ...) is always derived from the
variant via :func:`block_type_of`; nothing stores it independently.

Malformed admin input never raises: list variants degrade to their empty
form and unknown block types fall back to text.

"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, assert_never

from folio._types import BlockType, LabelledURL

BLOCK_TYPES: tuple[BlockType, ...] = ("text", "gallery", "video", "audio", "file")

# Characters of a text block shown in admin listings
PREVIEW_LENGTH = 50


@dataclass(frozen=True, slots=True)
class TextContent:
    """Raw rich-text HTML."""

    body: str


@dataclass(frozen=True, slots=True)
class GalleryContent:
    """Image URLs, displayed in list order."""

    images: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class VideoContent:
    """A single embed URL."""

    url: str


@dataclass(frozen=True, slots=True)
class AudioContent:
    """``(url, title)`` pairs."""

    tracks: tuple[LabelledURL, ...] = ()


@dataclass(frozen=True, slots=True)
class FileContent:
    """``(url, description)`` pairs."""

    files: tuple[LabelledURL, ...] = ()


type BlockContent = (
    TextContent
    | GalleryContent
    | VideoContent
    | AudioContent
    | FileContent
)


def block_type_of(content: BlockContent) -> BlockType:
    """Return the discriminant for a variant value."""
    match content:
        case TextContent():
            return "text"
        case GalleryContent():
            return "gallery"
        case VideoContent():
            return "video"
        case AudioContent():
            return "audio"
        case FileContent():
            return "file"
        case _:
            assert_never(content)


# ---------------------------------------------------------------------------
# Form text <-> variant
# ---------------------------------------------------------------------------


def decode(block_type: str, raw: str) -> BlockContent:
    """Build a variant from a block type and the raw text a form submitted.

    ``gallery`` expects a JSON list of strings; ``audio`` and ``file`` expect
    a JSON list of ``[url, label]`` pairs.  Anything else for those types
    yields the empty collection.  ``text`` and ``video`` keep the raw text
    verbatim.  Unknown types are treated as ``text``.

    """
    kind = block_type.strip().lower()
    if kind == "gallery":
        return GalleryContent(_url_list(_loads(raw)))
    if kind == "audio":
        return AudioContent(_pair_list(_loads(raw)))
    if kind == "file":
        return FileContent(_pair_list(_loads(raw)))
    if kind == "video":
        return VideoContent(raw)
    return TextContent(raw)


def to_form_text(content: BlockContent) -> str:
    """Return the flat text an edit form is pre-filled with.

    Inverse of :func:`decode`: ``decode(block_type_of(c), to_form_text(c))``
    equals ``c``.
    """
    match content:
        case TextContent(body=body):
            return body
        case VideoContent(url=url):
            return url
        case GalleryContent(images=images):
            return _dumps(list(images))
        case AudioContent(tracks=tracks):
            return _dumps([list(pair) for pair in tracks])
        case FileContent(files=files):
            return _dumps([list(pair) for pair in files])
        case _:
            assert_never(content)


# ---------------------------------------------------------------------------
# Persisted form
# ---------------------------------------------------------------------------


def encode(content: BlockContent) -> dict[str, Any]:
    """Serialize a variant to its persisted ``{"type", "data"}`` form.

    The ``type`` tag is always ``block_type_of(content)``.
    """
    match content:
        case TextContent(body=body):
            data: Any = body
        case VideoContent(url=url):
            data = url
        case GalleryContent(images=images):
            data = list(images)
        case AudioContent(tracks=tracks):
            data = [list(pair) for pair in tracks]
        case FileContent(files=files):
            data = [list(pair) for pair in files]
        case _:
            assert_never(content)
    return {"type": block_type_of(content), "data": data}


def decode_persisted(payload: object) -> BlockContent:
    """Rebuild a variant from its persisted form.

    Accepts the lowercase tags written by :func:`encode` as well as the
    capitalised tags of older rows (``{"type": "Gallery", ...}``).  A
    payload that is not a mapping, or whose data does not fit its tag,
    degrades the same way :func:`decode` does.

    """
    if isinstance(payload, str):
        payload = _loads(payload)
    if not isinstance(payload, dict):
        return TextContent("")

    kind = str(payload.get("type", "")).lower()
    data = payload.get("data")

    if kind == "gallery":
        return GalleryContent(_url_list(data))
    if kind == "audio":
        return AudioContent(_pair_list(data))
    if kind == "file":
        return FileContent(_pair_list(data))
    if kind == "video":
        return VideoContent(data if isinstance(data, str) else "")
    return TextContent(data if isinstance(data, str) else "")


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


def preview(content: BlockContent) -> str:
    """Short, tag-free summary of a block for admin listings."""
    match content:
        case TextContent(body=body):
            stripped = "".join(ch for ch in body if ch not in "<>")
            return stripped[:PREVIEW_LENGTH]
        case VideoContent(url=url):
            return f"Video: {url}"
        case GalleryContent(images=images):
            return f"{len(images)} images"
        case AudioContent(tracks=tracks):
            return f"{len(tracks)} audio files"
        case FileContent(files=files):
            return f"{len(files)} files"
        case _:
            assert_never(content)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _loads(raw: str) -> object:
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return None


def _dumps(value: object) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _url_list(data: object) -> tuple[str, ...]:
    """All-or-nothing: any non-string item empties the list."""
    if not isinstance(data, list):
        return ()
    if not all(isinstance(item, str) for item in data):
        return ()
    return tuple(data)


def _pair_list(data: object) -> tuple[LabelledURL, ...]:
    """All-or-nothing: every item must be a two-string list."""
    if not isinstance(data, list):
        return ()
    pairs: list[LabelledURL] = []
    for item in data:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            return ()
        url, label = item
        if not isinstance(url, str) or not isinstance(label, str):
            return ()
        pairs.append((url, label))
    return tuple(pairs)
