"""Chapter assembly: build each block and wrap the results in a column."""

from __future__ import annotations

import logging

from h5pbook.compiler.builders import BlockBuilder, TextBuilder, build_default_builders
from h5pbook.compiler.builders.base import make_object
from h5pbook.compiler.models import (
    BlockKind,
    Chapter,
    ContentBlock,
    ContentObject,
    ContentType,
    LibraryTable,
    Unavailable,
)
from h5pbook.compiler.segments import parse_segments

logger = logging.getLogger(__name__)

EMPTY_CHAPTER_MARKDOWN = "<p>(Empty Chapter)</p>"
SEPARATOR_MODE = "auto"


class ChapterAssembler:
    """Turn a chapter into an ``H5P.Column`` content object.

    Blocks are built in source order. A block whose library is missing is
    replaced by an annotated text rendering of its own lines.
    """

    def __init__(
        self,
        text_builder: TextBuilder | None = None,
        builders: dict[BlockKind, BlockBuilder] | None = None,
    ) -> None:
        self._text_builder = text_builder or TextBuilder()
        self._builders = builders or build_default_builders(self._text_builder)

    @property
    def text_builder(self) -> TextBuilder:
        return self._text_builder

    async def assemble(self, chapter: Chapter, libraries: LibraryTable) -> ContentObject:
        column = libraries.identifier(ContentType.COLUMN)
        if column is None:
            raise LookupError("Column library is not available in the template")

        wrappers: list[dict] = []
        for block in parse_segments(chapter.body_lines):
            content = await self.build_block(block, libraries)
            wrappers.append({"content": content.to_dict(), "useSeparator": SEPARATOR_MODE})

        if not wrappers:
            placeholder = await self._text_builder.build_text(EMPTY_CHAPTER_MARKDOWN, libraries)
            wrappers.append({"content": placeholder.to_dict(), "useSeparator": SEPARATOR_MODE})

        return make_object(column, {"content": wrappers}, title=chapter.title, content_type="Column")

    async def build_block(self, block: ContentBlock, libraries: LibraryTable) -> ContentObject:
        builder = self._builders.get(block.kind)
        if builder is None:
            raise LookupError(f"No builder registered for block kind: {block.kind.value}")

        result = await builder.build(block, libraries)
        if isinstance(result, Unavailable):
            logger.info("Substituting text for %s block: library unavailable", block.kind.value)
            return await self._text_builder.build_text(
                builder.fallback_markdown(block),
                libraries,
                fallback_title=result.fallback_title,
            )
        return result
