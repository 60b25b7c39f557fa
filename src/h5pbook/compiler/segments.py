"""Tag-driven segmentation of chapter bodies into typed content blocks."""

from __future__ import annotations

import re

from h5pbook.compiler.models import BlockKind, ContentBlock
from h5pbook.compiler.normalization import is_blank

SENTINEL_TAGS: dict[str, BlockKind] = {
    "[ACCORDION]": BlockKind.ACCORDION,
    "[QUIZ]": BlockKind.QUIZ,
    "[VIDEO]": BlockKind.VIDEO,
    "[FILL]": BlockKind.FILL,
    "[DRAG]": BlockKind.DRAG,
    "[TEXT]": BlockKind.TEXT,
}

IMAGE_LINE_RE = re.compile(r"^!\[(.*?)\]\((.*?)\)")


class _Segmenter:
    def __init__(self) -> None:
        self.blocks: list[ContentBlock] = []
        self._kind = BlockKind.TEXT
        self._lines: list[str] = []
        self._tagged = False

    def flush(self, next_kind: BlockKind, *, tagged: bool) -> None:
        if self._kind is BlockKind.TEXT:
            if any(not is_blank(line) for line in self._lines):
                self.blocks.append(ContentBlock(kind=self._kind, lines=self._lines))
        elif self._tagged or self._lines:
            self.blocks.append(ContentBlock(kind=self._kind, lines=self._lines))
        self._kind = next_kind
        self._lines = []
        self._tagged = tagged

    def feed(self, line: str) -> None:
        stripped = line.strip()
        tag_kind = SENTINEL_TAGS.get(stripped)
        if tag_kind is not None:
            self.flush(tag_kind, tagged=True)
            return

        if self._kind is BlockKind.TEXT and IMAGE_LINE_RE.match(stripped):
            self.flush(BlockKind.TEXT, tagged=False)
            self.blocks.append(ContentBlock(kind=BlockKind.IMAGE, lines=[stripped]))
            return

        self._lines.append(line)


def parse_segments(lines: list[str]) -> list[ContentBlock]:
    """Split chapter body lines into blocks in source order.

    Text blocks made only of blank lines are dropped; a tagged block is
    always emitted, even when no lines follow its tag.
    """

    segmenter = _Segmenter()
    for line in lines:
        segmenter.feed(line)
    segmenter.flush(BlockKind.TEXT, tagged=False)
    return segmenter.blocks
