"""Line normalization helpers used before chapter splitting."""

from __future__ import annotations

import re

_LINE_BREAK_RE = re.compile(r"\r\n?")


def normalize_newlines(text: str) -> str:
    """Unify CRLF and lone CR line terminators to LF."""

    return _LINE_BREAK_RE.sub("\n", text)


def split_lines(text: str) -> list[str]:
    return normalize_newlines(text).split("\n")


def is_blank(line: str) -> bool:
    return not line.strip()
