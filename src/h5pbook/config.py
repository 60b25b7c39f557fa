"""Runtime configuration for book builds and the folder watcher."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping


DEFAULT_TEMPLATE_PATH = "template.h5p"
DEFAULT_COMPRESSION_LEVEL = 6
DEFAULT_WATCH_DEBOUNCE_SECONDS = 2.0


def _parse_compression_level(raw_value: str) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError("H5PBOOK_COMPRESSION_LEVEL must be an integer") from exc
    if not 0 <= value <= 9:
        raise ValueError("H5PBOOK_COMPRESSION_LEVEL must be between 0 and 9")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class BuildSettings:
    """Validated build settings."""

    template_path: Path
    output_dir: Path | None = None
    compression_level: int = DEFAULT_COMPRESSION_LEVEL
    watch_debounce_seconds: float = DEFAULT_WATCH_DEBOUNCE_SECONDS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BuildSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        template_raw = source.get("H5PBOOK_TEMPLATE_PATH", DEFAULT_TEMPLATE_PATH).strip()
        if not template_raw:
            raise ValueError("H5PBOOK_TEMPLATE_PATH cannot be empty")

        output_raw = source.get("H5PBOOK_OUTPUT_DIR", "").strip()
        level_raw = source.get("H5PBOOK_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL)).strip()
        debounce_raw = source.get("H5PBOOK_WATCH_DEBOUNCE_SECONDS", str(DEFAULT_WATCH_DEBOUNCE_SECONDS)).strip()

        return cls(
            template_path=Path(template_raw),
            output_dir=Path(output_raw) if output_raw else None,
            compression_level=_parse_compression_level(level_raw),
            watch_debounce_seconds=_parse_positive_float(
                name="H5PBOOK_WATCH_DEBOUNCE_SECONDS",
                raw_value=debounce_raw,
            ),
        )
