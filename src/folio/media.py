"""Media uploads — attach hosted files to content blocks.

The admin uploads a file to an external media host and gets a public URL
back; that URL is then appended to the block being edited.  The host
itself sits behind :class:`MediaUploader` so any service (or a test
double) can be plugged in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, assert_never

from folio._errors import ValidationError
from folio.content.blocks import (
    AudioContent,
    BlockContent,
    FileContent,
    GalleryContent,
    TextContent,
    VideoContent,
)

type ResourceType = Literal["image", "video", "raw", "auto"]


@dataclass(frozen=True, slots=True)
class UploadResult:
    """Outcome of one upload: a hosted URL or an error message."""

    url: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.url is not None and self.error is None


class MediaUploader(Protocol):
    """Uploads raw bytes to a media host."""

    def upload(
        self, data: bytes, filename: str, resource_type: ResourceType,
    ) -> UploadResult: ...


def attach_upload(content: BlockContent, url: str, label: str = "") -> BlockContent:
    """Return ``content`` with the hosted ``url`` added.

    Galleries, audio and file blocks get the URL appended (``label`` is the
    track title or file description); a video block has its URL replaced.

    Raises:
        ValidationError: If ``url`` is empty or ``content`` is a text block.

    """
    if not url:
        msg = "Upload returned no URL"
        raise ValidationError(msg)
    match content:
        case GalleryContent(images=images):
            return GalleryContent(images=(*images, url))
        case AudioContent(tracks=tracks):
            return AudioContent(tracks=(*tracks, (url, label)))
        case FileContent(files=files):
            return FileContent(files=(*files, (url, label)))
        case VideoContent():
            return VideoContent(url=url)
        case TextContent():
            msg = "Text blocks cannot hold uploaded media"
            raise ValidationError(msg)
        case _:
            assert_never(content)


def upload_and_attach(
    uploader: MediaUploader,
    content: BlockContent,
    data: bytes,
    filename: str,
    *,
    resource_type: ResourceType = "auto",
    label: str = "",
) -> BlockContent:
    """Upload ``data`` and attach the resulting URL to ``content``.

    Raises:
        ValidationError: If the upload failed or the block cannot hold media.

    """
    result = uploader.upload(data, filename, resource_type)
    if result.url is None or result.error is not None:
        msg = f"Upload of {filename!r} failed: {result.error or 'no URL returned'}"
        raise ValidationError(msg)
    return attach_upload(content, result.url, label or filename)
