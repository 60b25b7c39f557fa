"""Image and video placeholder builders."""

from __future__ import annotations

from h5pbook.compiler.builders.base import make_object
from h5pbook.compiler.models import ContentBlock, ContentObject, ContentType, LibraryTable, Unavailable
from h5pbook.compiler.segments import IMAGE_LINE_RE

PLACEHOLDER_IMAGE_PATH = "images/missing.jpg"
PLACEHOLDER_IMAGE_MIME = "image/jpeg"
DEFAULT_ALT_TEXT = "Image"
VIDEO_PLACEHOLDER_MARKDOWN = "[VIDEO PLACEHOLDER]"


def image_alt_text(line: str) -> str:
    match = IMAGE_LINE_RE.match(line.strip())
    return match.group(1) if match else DEFAULT_ALT_TEXT


class ImageBuilder:
    """Image block pointing at the bundled placeholder asset, never the source path."""

    content_type = ContentType.IMAGE
    label = "Image"

    async def build(self, block: ContentBlock, libraries: LibraryTable) -> ContentObject | Unavailable:
        library = libraries.identifier(self.content_type)
        if library is None:
            return Unavailable(self.content_type, self.label)

        params = {
            "alt": image_alt_text(self.fallback_markdown(block)),
            "contentName": "Image",
            "file": {
                "path": PLACEHOLDER_IMAGE_PATH,
                "mime": PLACEHOLDER_IMAGE_MIME,
                "copyright": {"license": "U"},
            },
        }
        return make_object(library, params, title="Image Placeholder", content_type="Image")

    def fallback_markdown(self, block: ContentBlock) -> str:
        return block.lines[0] if block.lines else ""


class VideoBuilder:
    content_type = ContentType.VIDEO
    label = "Video"

    async def build(self, block: ContentBlock, libraries: LibraryTable) -> ContentObject | Unavailable:
        library = libraries.identifier(self.content_type)
        if library is None:
            return Unavailable(self.content_type, self.label)

        params = {
            "sources": [],
            "visuals": {"fit": True, "controls": True},
            "playback": {"autoplay": False, "loop": False},
        }
        return make_object(library, params, title="Video Placeholder", content_type="Video")

    def fallback_markdown(self, block: ContentBlock) -> str:
        return VIDEO_PLACEHOLDER_MARKDOWN
