"""Bundled binary assets injected into generated packages."""

from __future__ import annotations

import base64

from h5pbook.compiler.builders.media import PLACEHOLDER_IMAGE_PATH
from h5pbook.package.template import CONTENT_ROOT

# 1x1 JPEG.
_PLACEHOLDER_JPEG_B64 = (
    "/9j/4AAQSkZJRgABAQEASABIAAD/2wBDAAMCAgICAgMCAgIDAwMDBAYEBAQEBAgGBgUGCQgKCgkICQkKDA8MCgsOCwkJDRENDg8Q"
    "EBEQCgwSExIQEw8QEBD/yQALCAABAAEBAREA/8wABgAQEAX/2gAIAQEAAD8A0s8g/9k="
)

PLACEHOLDER_IMAGE_BYTES = base64.b64decode(_PLACEHOLDER_JPEG_B64)
PLACEHOLDER_IMAGE_ENTRY = CONTENT_ROOT + PLACEHOLDER_IMAGE_PATH
