"""CLI entrypoint rebuilding packages whenever a Markdown source changes."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from h5pbook.automation.watcher import SourceFolderWatcher
from h5pbook.builder import BookBuilder
from h5pbook.compiler.chapters import NoChaptersFound
from h5pbook.config import BuildSettings
from h5pbook.package.assembler import AssemblyError
from h5pbook.package.template import TemplateError


load_dotenv()

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None, settings: BuildSettings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch a folder and rebuild H5P packages from Markdown")
    parser.add_argument("--watch-dir", required=True, help="Directory holding Markdown sources")
    parser.add_argument("--template", default=str(settings.template_path), help="Interactive Book template (.h5p)")
    parser.add_argument(
        "--output-dir",
        default=str(settings.output_dir) if settings.output_dir else None,
        help="Directory for built packages (default: next to each source)",
    )
    parser.add_argument(
        "--debounce",
        type=float,
        default=settings.watch_debounce_seconds,
        help="Debounce delay in seconds",
    )
    return parser.parse_args(argv)


async def _run_watcher(args: argparse.Namespace, settings: BuildSettings) -> int:
    watch_dir = Path(args.watch_dir)
    if not watch_dir.is_dir():
        LOGGER.error("watch-dir must exist and be a directory: %s", watch_dir)
        return 2

    try:
        builder = await BookBuilder.open(args.template, compression_level=settings.compression_level)
    except (TemplateError, OSError) as exc:
        LOGGER.error("Template rejected: %s", exc)
        return 2

    async def _on_source_changed(file_path: Path) -> None:
        if not file_path.is_file():
            return
        LOGGER.info("Rebuilding %s", file_path)
        try:
            output_path, result = await builder.build_file(file_path, args.output_dir)
        except (NoChaptersFound, AssemblyError, OSError, ValueError) as exc:
            LOGGER.error("Build failed for %s: %s", file_path, exc)
            return
        if result.missing_libraries:
            LOGGER.warning("Built %s with text fallbacks for: %s", output_path, ", ".join(result.missing_libraries))

    watcher = SourceFolderWatcher(
        watch_dir=watch_dir,
        callback=_on_source_changed,
        debounce_seconds=float(args.debounce),
    )

    await watcher.start()
    LOGGER.info("Watching %s (debounce %.1fs)", watch_dir, float(args.debounce))

    try:
        while True:
            await asyncio.sleep(1.0)
    finally:
        watcher.stop()
        LOGGER.info("Watcher stopped cleanly")


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    try:
        settings = BuildSettings.from_env()
    except ValueError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2

    args = _parse_args(argv, settings)
    try:
        return asyncio.run(_run_watcher(args, settings))
    except KeyboardInterrupt:
        LOGGER.info("Shutdown requested")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
