"""CLI command validating an Interactive Book template and listing its libraries."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from h5pbook.config import BuildSettings
from h5pbook.package.libraries import resolve_libraries, validate_libraries
from h5pbook.package.template import TemplateError, TemplatePackage


load_dotenv()

LOGGER = logging.getLogger(__name__)


def check_template(path: Path) -> dict[str, object]:
    """Report whether ``path`` is usable by the book builder.

    A template passes only when the builder would accept it: a readable
    Interactive Book manifest with the column and text libraries resolved.
    """

    report: dict[str, object] = {"template": str(path), "valid": False, "error": None}
    try:
        package = TemplatePackage.open(path)
        manifest = package.validate()
    except (TemplateError, OSError) as exc:
        LOGGER.warning("Template check failed for %s: %s", path, exc)
        report["error"] = str(exc)
        return report

    libraries = resolve_libraries(manifest, package.entry_names())
    report.update(
        {
            "title": manifest.title,
            "main_library": manifest.main_library,
            "libraries": libraries.as_dict(),
            "is_advanced_text": libraries.is_advanced_text,
        }
    )
    try:
        validate_libraries(libraries)
    except TemplateError as exc:
        LOGGER.warning("Template check failed for %s: %s", path, exc)
        report["error"] = str(exc)
        return report

    report["valid"] = True
    return report


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(message)s")
    try:
        settings = BuildSettings.from_env()
    except ValueError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2

    parser = argparse.ArgumentParser(description="Validate an H5P Interactive Book template")
    parser.add_argument("--template", default=str(settings.template_path), help="Template archive (.h5p)")
    args = parser.parse_args(argv)

    report = check_template(Path(args.template))
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0 if report["valid"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
