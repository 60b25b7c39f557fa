"""Markdown rendering and HTML post-processing for text content."""

from __future__ import annotations

import asyncio
import re
from typing import Callable

from bs4 import BeautifulSoup
import markdown

MarkdownRenderer = Callable[[str], str]

EMPTY_HTML = "<p>&nbsp;</p>"
TABLE_CLASS = "h5p-table"

_PLACEHOLDER_STYLE = (
    "background-color:#f8fafc;border:1px dashed #cbd5e1;border-radius:8px;padding:16px;"
    "margin:16px 0;text-align:center;color:#64748b;font-family:sans-serif;font-size:0.9em;"
)
_PLACEHOLDER_LABEL_STYLE = "margin:0;font-weight:600;"
_PATH_SPLIT_RE = re.compile(r"[/\\]")

_MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "sane_lists"]


def render_markdown(text: str) -> str:
    """Default Markdown-to-HTML renderer."""

    return markdown.markdown(text, extensions=_MARKDOWN_EXTENSIONS)


def _image_filename(src: str | None) -> str:
    if not src:
        return "Image"
    return _PATH_SPLIT_RE.split(src)[-1] or "Image"


def postprocess_html(raw_html: str) -> str:
    """Swap images for labelled placeholders and tag tables with the H5P class.

    The input is parsed as a fragment; every other node is kept as written.
    """

    soup = BeautifulSoup(raw_html, "html.parser")

    for img in soup.find_all("img"):
        placeholder = soup.new_tag("div", attrs={"style": _PLACEHOLDER_STYLE})
        label = soup.new_tag("p", attrs={"style": _PLACEHOLDER_LABEL_STYLE})
        label.string = f"Image Placeholder: {_image_filename(img.get('src'))}"
        placeholder.append(label)
        img.replace_with(placeholder)

    for table in soup.find_all("table"):
        classes = list(table.get("class") or [])
        if TABLE_CLASS not in classes:
            classes.append(TABLE_CLASS)
        table["class"] = classes

    return str(soup).strip()


async def render_html(text: str, renderer: MarkdownRenderer = render_markdown) -> str:
    """Render Markdown off the event loop and post-process the result."""

    raw_html = await asyncio.to_thread(renderer, text)
    return postprocess_html(raw_html)
