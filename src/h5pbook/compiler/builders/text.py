"""Text builder rendering Markdown into H5P advanced-text content."""

from __future__ import annotations

from h5pbook.compiler.builders.base import make_object
from h5pbook.compiler.models import ContentBlock, ContentObject, ContentType, LibraryTable
from h5pbook.compiler.rendering import EMPTY_HTML, MarkdownRenderer, render_html, render_markdown

_MISSING_NOTICE_STYLE = (
    "border:1px solid #e2e8f0; padding: 10px; background: #fff1f2; "
    "border-radius: 4px; color: #be123c; margin-bottom: 10px;"
)


def missing_library_notice(fallback_title: str) -> str:
    return f'<div style="{_MISSING_NOTICE_STYLE}"><strong>Missing Library:</strong> {fallback_title}</div>'


class TextBuilder:
    """Render Markdown lines into a text content object."""

    content_type = ContentType.TEXT
    label = "Text"

    def __init__(self, renderer: MarkdownRenderer = render_markdown) -> None:
        self._renderer = renderer

    async def build(self, block: ContentBlock, libraries: LibraryTable) -> ContentObject:
        return await self.build_text(self.fallback_markdown(block), libraries)

    def fallback_markdown(self, block: ContentBlock) -> str:
        return "\n".join(block.lines)

    async def build_text(
        self,
        markdown_text: str,
        libraries: LibraryTable,
        *,
        fallback_title: str | None = None,
        title: str = "Text",
    ) -> ContentObject:
        """Build a text object; ``fallback_title`` prepends a missing-library notice."""

        library = libraries.identifier(ContentType.TEXT)
        if library is None:
            raise LookupError("Text library is not available in the template")

        html = await render_html(markdown_text, self._renderer)
        if fallback_title:
            html = missing_library_notice(fallback_title) + html

        return make_object(library, {"text": html or EMPTY_HTML}, title=title, content_type="Text")
