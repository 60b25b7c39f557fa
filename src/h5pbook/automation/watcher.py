"""Debounced Markdown folder watcher bridged onto an asyncio queue."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
import threading
from typing import Awaitable, Callable

from watchdog.events import FileSystemEvent, PatternMatchingEventHandler
from watchdog.observers import Observer


LOGGER = logging.getLogger(__name__)

SOURCE_PATTERNS = ["*.md", "*.markdown"]
IGNORE_PATTERNS = ["*.tmp", "*.swp", ".*", "*~"]


class DebouncedSourceHandler(PatternMatchingEventHandler):
    """Collapse bursts of editor writes into one queued path per file."""

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        queue: asyncio.Queue[Path],
        debounce_seconds: float = 2.0,
    ) -> None:
        super().__init__(
            patterns=SOURCE_PATTERNS,
            ignore_patterns=IGNORE_PATTERNS,
            ignore_directories=True,
            case_sensitive=False,
        )
        self._loop = loop
        self._queue = queue
        self._debounce_seconds = debounce_seconds
        self._pending: dict[str, threading.Timer] = {}
        self._lock = threading.Lock()

    def _enqueue(self, raw_path: str) -> None:
        with self._lock:
            self._pending.pop(raw_path, None)
        self._loop.call_soon_threadsafe(self._queue.put_nowait, Path(raw_path))

    def _schedule(self, raw_path: str) -> None:
        with self._lock:
            previous = self._pending.pop(raw_path, None)
            if previous is not None:
                previous.cancel()

            timer = threading.Timer(self._debounce_seconds, self._enqueue, args=(raw_path,))
            timer.daemon = True
            self._pending[raw_path] = timer
            timer.start()

    def on_created(self, event: FileSystemEvent) -> None:
        self._schedule(str(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:
        self._schedule(str(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        dest = str(getattr(event, "dest_path", "") or "")
        if Path(dest).suffix.lower() in {".md", ".markdown"}:
            self._schedule(dest)

    def close(self) -> None:
        with self._lock:
            pending = list(self._pending.values())
            self._pending.clear()
        for timer in pending:
            timer.cancel()


class SourceFolderWatcher:
    """Run a coroutine for every Markdown file created or changed in a folder."""

    def __init__(
        self,
        watch_dir: str | Path,
        callback: Callable[[Path], Awaitable[None]],
        debounce_seconds: float = 2.0,
    ) -> None:
        self._watch_dir = Path(watch_dir)
        self._callback = callback
        self._debounce_seconds = debounce_seconds
        self._queue: asyncio.Queue[Path] | None = None
        self._handler: DebouncedSourceHandler | None = None
        self._observer: Observer | None = None
        self._consumer_task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    async def _consume(self) -> None:
        assert self._queue is not None
        while True:
            path = await self._queue.get()
            try:
                await self._callback(path)
            except Exception:
                LOGGER.exception("Rebuild failed for %s", path)
            finally:
                self._queue.task_done()

    async def start(self) -> None:
        if self._observer is not None:
            return
        if not self._watch_dir.is_dir():
            raise ValueError(f"Watch directory does not exist or is not a directory: {self._watch_dir}")

        self._queue = asyncio.Queue()
        self._handler = DebouncedSourceHandler(
            loop=asyncio.get_running_loop(),
            queue=self._queue,
            debounce_seconds=self._debounce_seconds,
        )

        observer = Observer()
        observer.schedule(self._handler, str(self._watch_dir), recursive=False)
        observer.start()
        self._observer = observer
        self._consumer_task = asyncio.create_task(self._consume())

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5.0)
            self._observer = None

        if self._handler is not None:
            self._handler.close()
            self._handler = None

        if self._consumer_task is not None:
            self._consumer_task.cancel()
            self._consumer_task = None
