"""Build entrypoint: source text plus template archive to an H5P package."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import tempfile

from h5pbook.compiler.assembler import ChapterAssembler
from h5pbook.compiler.chapters import split_chapters
from h5pbook.compiler.models import ContentObject, LibraryTable
from h5pbook.compiler.source import output_name_for, read_source
from h5pbook.config import DEFAULT_COMPRESSION_LEVEL
from h5pbook.package.assembler import assemble_package
from h5pbook.package.libraries import resolve_libraries, validate_libraries
from h5pbook.package.template import TemplateManifest, TemplatePackage

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BookBuildResult:
    """Finished package bytes plus what went into them."""

    output_name: str
    data: bytes
    chapter_titles: list[str] = field(default_factory=list)
    missing_libraries: list[str] = field(default_factory=list)


class BookBuilder:
    """Validated template plus resolved libraries, ready to build books."""

    def __init__(
        self,
        template: TemplatePackage,
        *,
        assembler: ChapterAssembler | None = None,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
    ) -> None:
        self._template = template
        self._manifest = template.validate()
        self._libraries = validate_libraries(resolve_libraries(self._manifest, template.entry_names()))
        self._assembler = assembler or ChapterAssembler()
        self._compression_level = compression_level

        logger.info("Using libraries: %s", self._libraries.as_dict())

    @classmethod
    def from_template_bytes(cls, data: bytes, **kwargs) -> "BookBuilder":
        """Load and validate a template; raises ``TemplateError`` before any building."""

        return cls(TemplatePackage.load(data), **kwargs)

    @classmethod
    async def open(cls, path: str | Path, **kwargs) -> "BookBuilder":
        data = await asyncio.to_thread(Path(path).read_bytes)
        return await asyncio.to_thread(cls.from_template_bytes, data, **kwargs)

    @property
    def manifest(self) -> TemplateManifest:
        return self._manifest

    @property
    def libraries(self) -> LibraryTable:
        return self._libraries

    async def build_chapters(self, text: str) -> list[ContentObject]:
        """Assemble chapters concurrently; results keep document order."""

        chapters = split_chapters(text)
        return list(await asyncio.gather(*(self._assembler.assemble(chapter, self._libraries) for chapter in chapters)))

    async def build(self, text: str, *, source_name: str = "book.md") -> BookBuildResult:
        containers = await self.build_chapters(text)
        data = await asyncio.to_thread(
            assemble_package,
            self._template,
            [container.to_dict() for container in containers],
            compression_level=self._compression_level,
        )
        return BookBuildResult(
            output_name=output_name_for(source_name),
            data=data,
            chapter_titles=[container.metadata.title for container in containers],
            missing_libraries=[content_type.value for content_type in self._libraries.missing()],
        )

    async def build_file(self, source_path: str | Path, output_dir: str | Path | None = None) -> tuple[Path, BookBuildResult]:
        """Build a source file and write the package next to it or into ``output_dir``."""

        source = Path(source_path)
        text = await asyncio.to_thread(read_source, source)
        result = await self.build(text, source_name=source.name)

        target_dir = Path(output_dir) if output_dir is not None else source.parent
        target = target_dir / result.output_name
        await asyncio.to_thread(write_package, target, result.data)
        logger.info("Wrote %s (%d chapters)", target, len(result.chapter_titles))
        return target, result


def write_package(path: Path, data: bytes) -> None:
    """Write via a temporary file in the same directory so readers never see a partial archive."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
