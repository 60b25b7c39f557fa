"""Markdown dialect compiler interfaces."""

from .assembler import ChapterAssembler
from .chapters import NoChaptersFound, split_chapters
from .segments import parse_segments

__all__ = ["ChapterAssembler", "NoChaptersFound", "parse_segments", "split_chapters"]
