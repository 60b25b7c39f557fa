"""Shared builder contract for per-block content builders."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from h5pbook.compiler.models import ContentBlock, ContentMetadata, ContentObject, ContentType, LibraryTable, Unavailable


@runtime_checkable
class BlockBuilder(Protocol):
    """Protocol that every content block builder must implement."""

    content_type: ContentType
    label: str

    async def build(self, block: ContentBlock, libraries: LibraryTable) -> ContentObject | Unavailable:
        """Build the content object, or report the library as unavailable."""

    def fallback_markdown(self, block: ContentBlock) -> str:
        """Markdown rendered in place of the block when its library is missing."""


def make_object(library: str, params: dict, *, title: str, content_type: str) -> ContentObject:
    return ContentObject(
        library=library,
        params=params,
        metadata=ContentMetadata(title=title, content_type=content_type),
    )
