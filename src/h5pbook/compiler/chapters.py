"""Split a source document into chapters at level-1 heading boundaries."""

from __future__ import annotations

from dataclasses import dataclass
import re

from h5pbook.compiler.models import Chapter
from h5pbook.compiler.normalization import is_blank, split_lines

IMPLICIT_CHAPTER_TITLE = "Introduction"

_HEADING_PREFIX = "# "
_HEADING_RE = re.compile(r"^#\s+")


@dataclass(slots=True)
class NoChaptersFound(Exception):
    """Raised when the document yields no chapter at all."""

    message: str = "No chapters found. Use '# Chapter Title' to create pages."

    def __str__(self) -> str:
        return self.message


def _is_heading(line: str) -> bool:
    return line.strip().startswith(_HEADING_PREFIX)


def _heading_title(line: str) -> str:
    return _HEADING_RE.sub("", line.strip()).strip()


def split_chapters(text: str) -> list[Chapter]:
    """Return chapters in document order.

    Lines before the first heading belong to an implicit "Introduction"
    chapter, which is kept only when it holds at least one non-blank line.
    """

    chapters: list[Chapter] = []
    title = IMPLICIT_CHAPTER_TITLE
    body: list[str] = []
    implicit = True

    def _emit() -> None:
        if not title:
            return
        if implicit and all(is_blank(line) for line in body):
            return
        chapters.append(Chapter(title=title, body_lines=body))

    for line in split_lines(text):
        if _is_heading(line):
            _emit()
            title = _heading_title(line)
            body = []
            implicit = False
        else:
            body.append(line)
    _emit()

    if not chapters:
        raise NoChaptersFound()
    return chapters
