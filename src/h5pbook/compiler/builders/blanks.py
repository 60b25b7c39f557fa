"""Fill-in-the-blanks and drag-the-words builders.

Both keep ``*word*`` markers verbatim; the H5P runtime interprets them.
"""

from __future__ import annotations

from h5pbook.compiler.builders.base import make_object
from h5pbook.compiler.models import ContentBlock, ContentObject, ContentType, LibraryTable, Unavailable

BLANKS_BEHAVIOUR = {
    "enableRetry": True,
    "enableSolutionsButton": True,
    "autoRetry": True,
    "caseSensitive": False,
    "showSolutionsRequiresInput": True,
    "separateLines": False,
}

DRAG_TEXT_BEHAVIOUR = {
    "enableRetry": True,
    "enableSolutionsButton": True,
    "instantFeedback": False,
}

DRAG_TEXT_DESCRIPTION = "Drag the words into the correct boxes."


class BlanksBuilder:
    content_type = ContentType.BLANKS
    label = "Fill in the Blanks"

    async def build(self, block: ContentBlock, libraries: LibraryTable) -> ContentObject | Unavailable:
        library = libraries.identifier(self.content_type)
        if library is None:
            return Unavailable(self.content_type, self.label)

        questions = [f"<p>{line.strip()}</p>" for line in block.lines if line.strip()]
        params = {"questions": questions, "behaviour": dict(BLANKS_BEHAVIOUR)}
        return make_object(library, params, title="Cloze Test", content_type="Fill in the Blanks")

    def fallback_markdown(self, block: ContentBlock) -> str:
        return "\n".join(block.lines)


class DragTextBuilder:
    content_type = ContentType.DRAG_TEXT
    label = "Drag the Words"

    async def build(self, block: ContentBlock, libraries: LibraryTable) -> ContentObject | Unavailable:
        library = libraries.identifier(self.content_type)
        if library is None:
            return Unavailable(self.content_type, self.label)

        params = {
            "textField": "\n".join(block.lines),
            "taskDescription": DRAG_TEXT_DESCRIPTION,
            "behaviour": dict(DRAG_TEXT_BEHAVIOUR),
        }
        return make_object(library, params, title="Drag Text", content_type="Drag the Words")

    def fallback_markdown(self, block: ContentBlock) -> str:
        return "\n".join(block.lines)
