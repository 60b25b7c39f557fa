"""Canonical data structures shared by the compiler and package stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping
import uuid


class BlockKind(str, Enum):
    """Kinds of content blocks recognized by the segmentation parser."""

    TEXT = "text"
    ACCORDION = "accordion"
    QUIZ = "quiz"
    IMAGE = "image"
    VIDEO = "video"
    FILL = "fill"
    DRAG = "drag"


class ContentType(str, Enum):
    """Content types whose library versions are resolved from the template."""

    COLUMN = "column"
    TEXT = "text"
    ACCORDION = "accordion"
    SINGLE_CHOICE = "single_choice"
    IMAGE = "image"
    VIDEO = "video"
    BLANKS = "blanks"
    DRAG_TEXT = "drag_text"


def new_sub_content_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Chapter:
    """One book page: a level-1 heading and the lines below it."""

    title: str
    body_lines: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ContentBlock:
    """A contiguous span of chapter lines handled by one builder."""

    kind: BlockKind
    lines: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LibraryRef:
    """Version-qualified library identifier, e.g. ``H5P.Accordion 1.0``."""

    machine_name: str
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.machine_name} {self.major}.{self.minor}"


@dataclass(frozen=True, slots=True)
class LibraryTable:
    """Resolved library identifiers keyed by content type.

    A missing or ``None`` entry marks the content type as unavailable in the
    template; builders for that type refuse and the caller substitutes text.
    """

    entries: Mapping[ContentType, LibraryRef | None]
    is_advanced_text: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def get(self, content_type: ContentType) -> LibraryRef | None:
        return self.entries.get(content_type)

    def identifier(self, content_type: ContentType) -> str | None:
        ref = self.get(content_type)
        return str(ref) if ref is not None else None

    def is_available(self, content_type: ContentType) -> bool:
        return self.get(content_type) is not None

    def missing(self) -> list[ContentType]:
        return [content_type for content_type in ContentType if not self.is_available(content_type)]

    def as_dict(self) -> dict[str, str | None]:
        return {content_type.value: self.identifier(content_type) for content_type in ContentType}


@dataclass(slots=True)
class ContentMetadata:
    title: str
    content_type: str
    license: str = "U"
    authors: list[Any] = field(default_factory=list)
    changes: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "license": self.license,
            "title": self.title,
            "authors": list(self.authors),
            "changes": list(self.changes),
            "contentType": self.content_type,
        }


@dataclass(slots=True)
class ContentObject:
    """Type-tagged output unit in the H5P content tree."""

    library: str
    params: dict[str, Any]
    metadata: ContentMetadata
    sub_content_id: str = field(default_factory=new_sub_content_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "library": self.library,
            "params": self.params,
            "subContentId": self.sub_content_id,
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class Unavailable:
    """Builder result when the template lacks the block's library."""

    content_type: ContentType
    label: str

    @property
    def fallback_title(self) -> str:
        return f"{self.label} (Library missing)"
