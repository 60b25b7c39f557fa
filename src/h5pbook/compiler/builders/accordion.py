"""Accordion builder splitting a block into titled panels."""

from __future__ import annotations

from dataclasses import dataclass, field
import re

from h5pbook.compiler.builders.base import make_object
from h5pbook.compiler.builders.text import TextBuilder
from h5pbook.compiler.models import ContentBlock, ContentObject, ContentType, LibraryTable, Unavailable

PANEL_MARKER = "+++"
DEFAULT_PANEL_TITLE = "Panel"

_MARKER_RE = re.compile(r"^\+{3,}\s*")


@dataclass(slots=True)
class Panel:
    title: str
    lines: list[str] = field(default_factory=list)


def split_panels(lines: list[str]) -> list[Panel]:
    """Group lines under ``+++Title`` markers; lines before the first marker are dropped."""

    panels: list[Panel] = []
    current: Panel | None = None

    for line in lines:
        stripped = line.strip()
        if stripped.startswith(PANEL_MARKER):
            current = Panel(title=_MARKER_RE.sub("", stripped).strip() or DEFAULT_PANEL_TITLE)
            panels.append(current)
        elif current is not None:
            current.lines.append(line)

    return panels


class AccordionBuilder:
    content_type = ContentType.ACCORDION
    label = "Accordion"

    def __init__(self, text_builder: TextBuilder) -> None:
        self._text_builder = text_builder

    async def build(self, block: ContentBlock, libraries: LibraryTable) -> ContentObject | Unavailable:
        library = libraries.identifier(self.content_type)
        if library is None:
            return Unavailable(self.content_type, self.label)

        panels = []
        for panel in split_panels(block.lines):
            content = await self._text_builder.build_text("\n".join(panel.lines), libraries, title="Panel Content")
            panels.append({"title": panel.title, "content": content.to_dict()})

        return make_object(library, {"panels": panels, "hTag": "h2"}, title="Accordion", content_type="Accordion")

    def fallback_markdown(self, block: ContentBlock) -> str:
        return "\n".join(block.lines)
