"""Content block builder implementations and contracts."""

from h5pbook.compiler.builders.accordion import AccordionBuilder
from h5pbook.compiler.builders.base import BlockBuilder
from h5pbook.compiler.builders.blanks import BlanksBuilder, DragTextBuilder
from h5pbook.compiler.builders.media import ImageBuilder, VideoBuilder
from h5pbook.compiler.builders.quiz import QuizBuilder
from h5pbook.compiler.builders.text import TextBuilder
from h5pbook.compiler.models import BlockKind
from h5pbook.compiler.rendering import MarkdownRenderer, render_markdown


def build_default_builders(text_builder: TextBuilder | None = None) -> dict[BlockKind, BlockBuilder]:
    """Return the builder for every block kind, sharing one text builder."""

    text = text_builder or TextBuilder()
    return {
        BlockKind.TEXT: text,
        BlockKind.ACCORDION: AccordionBuilder(text),
        BlockKind.QUIZ: QuizBuilder(),
        BlockKind.IMAGE: ImageBuilder(),
        BlockKind.VIDEO: VideoBuilder(),
        BlockKind.FILL: BlanksBuilder(),
        BlockKind.DRAG: DragTextBuilder(),
    }


__all__ = [
    "AccordionBuilder",
    "BlanksBuilder",
    "BlockBuilder",
    "DragTextBuilder",
    "ImageBuilder",
    "MarkdownRenderer",
    "QuizBuilder",
    "TextBuilder",
    "VideoBuilder",
    "build_default_builders",
    "render_markdown",
]
