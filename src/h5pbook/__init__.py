"""Compile tag-annotated Markdown into H5P Interactive Book packages."""

from h5pbook.builder import BookBuildResult, BookBuilder

__all__ = ["BookBuildResult", "BookBuilder"]

__version__ = "0.1.0"
