"""Source document loading with encoding detection."""

from __future__ import annotations

from pathlib import Path

from charset_normalizer import from_bytes

from h5pbook.compiler.normalization import normalize_newlines

PACKAGE_SUFFIX = ".h5p"
_UTF8_BOM = b"\xef\xbb\xbf"


def decode_source(raw: bytes) -> str:
    """Decode source bytes, preferring UTF-8 and falling back to detection."""

    if raw.startswith(_UTF8_BOM):
        raw = raw[len(_UTF8_BOM) :]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best and best.encoding:
        return raw.decode(best.encoding)
    raise ValueError("Could not detect source document encoding")


def read_source(path: str | Path) -> str:
    """Read a Markdown source file and normalize its line terminators."""

    return normalize_newlines(decode_source(Path(path).read_bytes()))


def output_name_for(source: str | Path) -> str:
    """Package file name for a source document, e.g. ``book.md -> book.h5p``."""

    return Path(source).stem + PACKAGE_SUFFIX
