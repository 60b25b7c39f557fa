"""Template archive handling and package assembly."""

from .assembler import AssemblyError, assemble_package
from .libraries import resolve_libraries
from .template import (
    CorruptTemplate,
    InvalidTemplate,
    MissingCoreLibrary,
    MissingManifest,
    TemplateError,
    TemplatePackage,
)

__all__ = [
    "AssemblyError",
    "CorruptTemplate",
    "InvalidTemplate",
    "MissingCoreLibrary",
    "MissingManifest",
    "TemplateError",
    "TemplatePackage",
    "assemble_package",
    "resolve_libraries",
]
