"""Automation services for folder-based rebuild workflows."""

from h5pbook.automation.watcher import DebouncedSourceHandler, SourceFolderWatcher

__all__ = ["DebouncedSourceHandler", "SourceFolderWatcher"]
