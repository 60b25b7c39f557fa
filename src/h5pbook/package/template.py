"""In-memory H5P template archive with manifest validation."""

from __future__ import annotations

from dataclasses import dataclass, field
import io
import json
import logging
from pathlib import Path
from typing import Any
from zipfile import BadZipFile, ZipFile, ZipInfo
import zlib

logger = logging.getLogger(__name__)

MANIFEST_PATH = "h5p.json"
CONTENT_ROOT = "content/"
CONTENT_DOCUMENT_PATH = "content/content.json"
MAIN_LIBRARY_PREFIX = "H5P.InteractiveBook"


@dataclass(slots=True)
class TemplateError(Exception):
    """Domain error for templates that cannot be used to build a book."""

    message: str

    def __str__(self) -> str:
        return self.message


class MissingManifest(TemplateError):
    pass


class InvalidTemplate(TemplateError):
    pass


class CorruptTemplate(TemplateError):
    pass


class MissingCoreLibrary(TemplateError):
    pass


@dataclass(frozen=True, slots=True)
class Dependency:
    machine_name: str
    major: int
    minor: int


@dataclass(slots=True)
class TemplateManifest:
    """Parsed ``h5p.json``."""

    main_library: str
    title: str | None = None
    dependencies: list[Dependency] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "TemplateManifest":
        if not isinstance(payload, dict):
            raise CorruptTemplate("Corrupt template file: h5p.json is not an object")

        raw_dependencies = payload.get("preloadedDependencies") or []
        if not isinstance(raw_dependencies, list):
            raise CorruptTemplate("Corrupt template file: preloadedDependencies is not a list")

        dependencies: list[Dependency] = []
        for raw in raw_dependencies:
            if not isinstance(raw, dict):
                raise CorruptTemplate(f"Corrupt template file: dependency entry is not an object: {raw!r}")
            try:
                dependencies.append(
                    Dependency(
                        machine_name=str(raw["machineName"]),
                        major=int(raw["majorVersion"]),
                        minor=int(raw["minorVersion"]),
                    )
                )
            except (KeyError, TypeError, ValueError):
                logger.warning("Ignoring malformed dependency in h5p.json: %r", raw)

        title = payload.get("title")
        return cls(
            main_library=str(payload.get("mainLibrary") or ""),
            title=str(title) if title is not None else None,
            dependencies=dependencies,
        )


@dataclass(slots=True)
class ArchiveEntry:
    info: ZipInfo
    data: bytes

    @property
    def is_dir(self) -> bool:
        return self.info.is_dir()


class TemplatePackage:
    """Ordered archive entries held in memory.

    The template bytes are read once; ``copy()`` returns an independent
    working copy that can be mutated without touching the original.
    """

    def __init__(self, entries: dict[str, ArchiveEntry]) -> None:
        self._entries = entries

    @classmethod
    def load(cls, data: bytes) -> "TemplatePackage":
        entries: dict[str, ArchiveEntry] = {}
        try:
            with ZipFile(io.BytesIO(data)) as archive:
                for info in archive.infolist():
                    entries[info.filename] = ArchiveEntry(info=info, data=archive.read(info))
        except (BadZipFile, zlib.error, EOFError, OSError, ValueError, NotImplementedError, RuntimeError) as exc:
            raise CorruptTemplate(f"Corrupt template file: {exc}") from exc
        return cls(entries)

    @classmethod
    def open(cls, path: str | Path) -> "TemplatePackage":
        return cls.load(Path(path).read_bytes())

    def copy(self) -> "TemplatePackage":
        return TemplatePackage(dict(self._entries))

    @property
    def entries(self) -> dict[str, ArchiveEntry]:
        return dict(self._entries)

    def entry_names(self) -> list[str]:
        return list(self._entries)

    def file_names(self) -> set[str]:
        return {name for name, entry in self._entries.items() if not entry.is_dir}

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def read(self, name: str) -> bytes | None:
        entry = self._entries.get(name)
        return entry.data if entry is not None else None

    def write(self, name: str, data: bytes, *, info: ZipInfo | None = None) -> None:
        """Add or overwrite a file entry, keeping the old entry's header when replacing."""

        existing = self._entries.get(name)
        if info is None:
            info = existing.info if existing is not None else ZipInfo(name)
        self._entries[name] = ArchiveEntry(info=info, data=data)

    def remove(self, name: str) -> None:
        """Remove exactly one entry; entries nested under a directory are untouched."""

        del self._entries[name]

    def manifest(self) -> TemplateManifest:
        raw = self.read(MANIFEST_PATH)
        if raw is None:
            raise MissingManifest("Invalid H5P: h5p.json missing.")
        try:
            payload = json.loads(raw.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptTemplate(f"Corrupt template file: {exc}") from exc
        return TemplateManifest.from_payload(payload)

    def validate(self) -> TemplateManifest:
        """Return the manifest if this is an Interactive Book template."""

        manifest = self.manifest()
        if not manifest.main_library.startswith(MAIN_LIBRARY_PREFIX):
            raise InvalidTemplate(
                f"Template is not an Interactive Book. Main library is: {manifest.main_library or None}"
            )
        return manifest
