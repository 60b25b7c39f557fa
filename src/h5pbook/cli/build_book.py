"""CLI command building H5P Interactive Book packages from Markdown sources."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from h5pbook.builder import BookBuilder
from h5pbook.compiler.chapters import NoChaptersFound
from h5pbook.config import BuildSettings
from h5pbook.package.assembler import AssemblyError
from h5pbook.package.template import TemplateError


load_dotenv()

LOGGER = logging.getLogger(__name__)

_SOURCE_SUFFIXES = {".md", ".markdown"}


def _collect_inputs(target: Path) -> list[Path]:
    if target.is_file():
        return [target]
    if target.is_dir():
        return sorted(path for path in target.rglob("*") if path.is_file() and path.suffix.lower() in _SOURCE_SUFFIXES)
    return []


def _parse_args(argv: list[str] | None, settings: BuildSettings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build H5P Interactive Book packages from Markdown")
    parser.add_argument("--path", required=True, help="Markdown file or directory of Markdown files")
    parser.add_argument("--template", default=str(settings.template_path), help="Interactive Book template (.h5p)")
    parser.add_argument(
        "--output-dir",
        default=str(settings.output_dir) if settings.output_dir else None,
        help="Directory for built packages (default: next to each source)",
    )
    parser.add_argument(
        "--compression-level",
        type=int,
        choices=range(10),
        default=settings.compression_level,
        help="Deflate level for the output archive",
    )
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    source_path = Path(args.path)
    payload: dict[str, object] = {"path": str(source_path), "template": args.template}

    try:
        builder = await BookBuilder.open(args.template, compression_level=args.compression_level)
    except (TemplateError, OSError) as exc:
        LOGGER.error("Template rejected: %s", exc)
        payload.update({"processed": 0, "results": [], "errors": [{"source_path": args.template, "error": str(exc)}]})
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 1

    results: list[dict[str, object]] = []
    errors: list[dict[str, str]] = []
    files = _collect_inputs(source_path)
    if not files:
        errors.append({"source_path": str(source_path), "error": "No Markdown sources found"})

    for file_path in files:
        try:
            output_path, built = await builder.build_file(file_path, args.output_dir)
        except (NoChaptersFound, AssemblyError, OSError, ValueError) as exc:
            LOGGER.error("Build failed for %s: %s", file_path, exc)
            errors.append({"source_path": str(file_path), "error": str(exc)})
            continue

        results.append(
            {
                "source_path": str(file_path),
                "output_path": str(output_path),
                "chapters": built.chapter_titles,
                "missing_libraries": built.missing_libraries,
                "size_bytes": len(built.data),
            }
        )

    payload.update({"processed": len(results), "results": results, "errors": errors})
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if not errors else 1


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    try:
        settings = BuildSettings.from_env()
    except ValueError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2

    args = _parse_args(argv, settings)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
