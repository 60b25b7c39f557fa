"""Resolve content-type libraries to the versions shipped in a template."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from h5pbook.compiler.models import ContentType, LibraryRef, LibraryTable
from h5pbook.package.template import Dependency, MissingCoreLibrary, TemplateManifest, TemplatePackage

logger = logging.getLogger(__name__)

ADVANCED_TEXT_LIBRARY = "H5P.AdvancedText"

# Candidate machine names per content type, tried in order.
KNOWN_LIBRARIES: dict[ContentType, tuple[str, ...]] = {
    ContentType.COLUMN: ("H5P.Column",),
    ContentType.TEXT: (ADVANCED_TEXT_LIBRARY, "H5P.Text"),
    ContentType.ACCORDION: ("H5P.Accordion",),
    ContentType.SINGLE_CHOICE: ("H5P.SingleChoiceSet",),
    ContentType.IMAGE: ("H5P.Image",),
    ContentType.VIDEO: ("H5P.Video",),
    ContentType.BLANKS: ("H5P.Blanks",),
    ContentType.DRAG_TEXT: ("H5P.DragText",),
}

CORE_CONTENT_TYPES = (ContentType.COLUMN, ContentType.TEXT)


def find_dependency(dependencies: Iterable[Dependency], machine_name: str) -> LibraryRef | None:
    for dependency in dependencies:
        if dependency.machine_name == machine_name:
            return LibraryRef(dependency.machine_name, dependency.major, dependency.minor)
    return None


def find_installed_folder(entry_names: Iterable[str], machine_name: str) -> LibraryRef | None:
    """Find a top-level ``<machineName>-<major>.<minor>/`` folder; the highest version wins."""

    folder_re = re.compile(rf"^{re.escape(machine_name)}-(\d+)\.(\d+)/")
    versions = set()
    for name in entry_names:
        match = folder_re.match(name)
        if match:
            versions.add((int(match.group(1)), int(match.group(2))))

    if not versions:
        return None
    major, minor = max(versions)
    return LibraryRef(machine_name, major, minor)


def resolve_library(
    machine_name: str,
    dependencies: Iterable[Dependency],
    entry_names: Iterable[str],
) -> LibraryRef | None:
    return find_dependency(dependencies, machine_name) or find_installed_folder(entry_names, machine_name)


def resolve_libraries(manifest: TemplateManifest, entry_names: Iterable[str]) -> LibraryTable:
    """Build the library table for a template. Never raises for missing libraries."""

    names = list(entry_names)
    entries: dict[ContentType, LibraryRef | None] = {}

    for content_type, candidates in KNOWN_LIBRARIES.items():
        resolved = None
        for machine_name in candidates:
            resolved = resolve_library(machine_name, manifest.dependencies, names)
            if resolved is not None:
                break
        if resolved is None:
            logger.warning("Library for %s not found in template (tried %s)", content_type.value, ", ".join(candidates))
        entries[content_type] = resolved

    text = entries[ContentType.TEXT]
    is_advanced = text is not None and text.machine_name == ADVANCED_TEXT_LIBRARY
    return LibraryTable(entries=entries, is_advanced_text=is_advanced)


def resolve_template_libraries(package: TemplatePackage) -> LibraryTable:
    return resolve_libraries(package.manifest(), package.entry_names())


def validate_libraries(libraries: LibraryTable) -> LibraryTable:
    """Raise ``MissingCoreLibrary`` unless the chapter column and text libraries resolved."""

    missing_core = [content_type.value for content_type in CORE_CONTENT_TYPES if not libraries.is_available(content_type)]
    if missing_core:
        raise MissingCoreLibrary(f"Template lacks required libraries: {', '.join(missing_core)}")
    return libraries
