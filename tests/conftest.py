from __future__ import annotations

import io
import json
from typing import Callable
from zipfile import ZIP_DEFLATED, ZipFile

import pytest

from h5pbook.compiler.models import ContentType, LibraryRef, LibraryTable

DEFAULT_DEPENDENCIES: list[tuple[str, int, int]] = [
    ("H5P.InteractiveBook", 1, 7),
    ("H5P.Column", 1, 16),
    ("H5P.AdvancedText", 1, 1),
    ("H5P.Accordion", 1, 0),
    ("H5P.SingleChoiceSet", 1, 11),
    ("H5P.Image", 1, 1),
    ("H5P.Video", 1, 6),
    ("H5P.Blanks", 1, 14),
    ("H5P.DragText", 1, 10),
]


def build_template_bytes(
    *,
    main_library: str = "H5P.InteractiveBook",
    dependencies: list[tuple[str, int, int]] | None = None,
    folders: tuple[str, ...] = (),
    content: dict | None = None,
    include_manifest: bool = True,
    extra_files: dict[str, bytes] | None = None,
) -> bytes:
    """Zip laid out like an exported Interactive Book, with explicit folder entries."""

    deps = DEFAULT_DEPENDENCIES if dependencies is None else dependencies
    manifest = {
        "title": "Template",
        "mainLibrary": main_library,
        "preloadedDependencies": [
            {"machineName": name, "majorVersion": major, "minorVersion": minor} for name, major, minor in deps
        ],
    }

    buffer = io.BytesIO()
    with ZipFile(buffer, "w", ZIP_DEFLATED) as archive:
        if include_manifest:
            archive.writestr("h5p.json", json.dumps(manifest))
        archive.writestr("content/", b"")
        archive.writestr("content/content.json", json.dumps(content if content is not None else {"chapters": []}))
        for folder in folders:
            archive.writestr(f"{folder}/", b"")
            archive.writestr(f"{folder}/library.json", b"{}")
        for name, data in (extra_files or {}).items():
            archive.writestr(name, data)
    return buffer.getvalue()


def full_library_table(**overrides: LibraryRef | None) -> LibraryTable:
    entries = {
        ContentType.COLUMN: LibraryRef("H5P.Column", 1, 16),
        ContentType.TEXT: LibraryRef("H5P.AdvancedText", 1, 1),
        ContentType.ACCORDION: LibraryRef("H5P.Accordion", 1, 0),
        ContentType.SINGLE_CHOICE: LibraryRef("H5P.SingleChoiceSet", 1, 11),
        ContentType.IMAGE: LibraryRef("H5P.Image", 1, 1),
        ContentType.VIDEO: LibraryRef("H5P.Video", 1, 6),
        ContentType.BLANKS: LibraryRef("H5P.Blanks", 1, 14),
        ContentType.DRAG_TEXT: LibraryRef("H5P.DragText", 1, 10),
    }
    for key, value in overrides.items():
        entries[ContentType(key)] = value
    return LibraryTable(entries=entries, is_advanced_text=True)


@pytest.fixture
def make_template() -> Callable[..., bytes]:
    return build_template_bytes


@pytest.fixture
def libraries() -> LibraryTable:
    return full_library_table()


@pytest.fixture
def make_libraries() -> Callable[..., LibraryTable]:
    return full_library_table


def collect_sub_content_ids(node: object) -> list[str]:
    found: list[str] = []
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "subContentId":
                found.append(value)
            else:
                found.extend(collect_sub_content_ids(value))
    elif isinstance(node, list):
        for item in node:
            found.extend(collect_sub_content_ids(item))
    return found


@pytest.fixture
def sub_content_ids() -> Callable[[object], list[str]]:
    return collect_sub_content_ids
