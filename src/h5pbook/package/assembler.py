"""Merge generated chapters into a working copy of the template archive."""

from __future__ import annotations

from dataclasses import dataclass
import io
import json
import logging
from typing import Any
from zipfile import ZIP_DEFLATED, ZIP_STORED, ZipFile, ZipInfo

from h5pbook.compiler.builders.media import PLACEHOLDER_IMAGE_PATH
from h5pbook.config import DEFAULT_COMPRESSION_LEVEL
from h5pbook.package.assets import PLACEHOLDER_IMAGE_BYTES, PLACEHOLDER_IMAGE_ENTRY
from h5pbook.package.template import CONTENT_DOCUMENT_PATH, CONTENT_ROOT, TemplatePackage

logger = logging.getLogger(__name__)

FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)
_FILE_MODE = 0o644 << 16


@dataclass(slots=True)
class AssemblyError(Exception):
    """Domain error raised when the output archive cannot be produced."""

    stage: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (stage={self.stage})"


def load_content_document(package: TemplatePackage) -> dict[str, Any]:
    """Existing ``content/content.json`` if it is a JSON object, else an empty document."""

    raw = package.read(CONTENT_DOCUMENT_PATH)
    if raw is None:
        return {}
    try:
        document = json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.warning("Template content document is unreadable; starting from an empty document")
        return {}
    return document if isinstance(document, dict) else {}


def remove_content_directory_entries(package: TemplatePackage) -> list[str]:
    """Drop explicit directory entries under the content root.

    Only the directory markers are removed; files beneath them stay at their
    paths. Raises ``AssemblyError`` if any file entry went missing.
    """

    files_before = package.file_names()
    removed = [
        name
        for name, entry in package.entries.items()
        if name.startswith(CONTENT_ROOT) and entry.is_dir
    ]
    for name in removed:
        package.remove(name)

    lost = files_before - package.file_names()
    if lost:
        raise AssemblyError("repair", f"Directory repair removed file entries: {sorted(lost)}")
    return removed


def serialize_package(package: TemplatePackage, *, compression_level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """Write entries in order with stable headers so equal input gives equal bytes."""

    buffer = io.BytesIO()
    with ZipFile(buffer, "w", ZIP_DEFLATED, compresslevel=compression_level) as archive:
        for name, entry in package.entries.items():
            info = ZipInfo(name, date_time=entry.info.date_time or FIXED_DATE_TIME)
            info.external_attr = entry.info.external_attr or _FILE_MODE
            info.create_system = entry.info.create_system
            if entry.is_dir:
                info.compress_type = ZIP_STORED
                archive.writestr(info, b"")
            else:
                info.compress_type = ZIP_DEFLATED
                archive.writestr(info, entry.data, compresslevel=compression_level)
    return buffer.getvalue()


def _new_entry_info(name: str) -> ZipInfo:
    info = ZipInfo(name, date_time=FIXED_DATE_TIME)
    info.external_attr = _FILE_MODE
    info.create_system = 3
    return info


def assemble_package(
    template: TemplatePackage,
    chapters: list[dict[str, Any]],
    *,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
) -> bytes:
    """Return the output archive bytes; the template itself is never modified."""

    package = template.copy()
    stage = "content"
    try:
        document = load_content_document(package)
        document["chapters"] = chapters
        serialized = json.dumps(document, ensure_ascii=False)
        info = None if CONTENT_DOCUMENT_PATH in package else _new_entry_info(CONTENT_DOCUMENT_PATH)
        package.write(CONTENT_DOCUMENT_PATH, serialized.encode("utf-8"), info=info)

        stage = "assets"
        if PLACEHOLDER_IMAGE_PATH in serialized and PLACEHOLDER_IMAGE_ENTRY not in package:
            package.write(PLACEHOLDER_IMAGE_ENTRY, PLACEHOLDER_IMAGE_BYTES, info=_new_entry_info(PLACEHOLDER_IMAGE_ENTRY))

        stage = "repair"
        removed = remove_content_directory_entries(package)
        if removed:
            logger.info("Removed %d directory entries under %s", len(removed), CONTENT_ROOT)

        stage = "serialize"
        return serialize_package(package, compression_level=compression_level)
    except AssemblyError:
        raise
    except Exception as exc:
        raise AssemblyError(stage, f"Package assembly failed: {exc}") from exc
