"""Directory scanner for discovering plugin archives."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from extreg.config import DEFAULT_ARCHIVE_SUFFIXES
from extreg.registry.types import LoadDiagnostic, LoadErrorKind

logger = logging.getLogger(__name__)

__all__ = ["scan_archives", "split_plugin_dirs"]


def split_plugin_dirs(value: str | Iterable[str]) -> list[str]:
    """Split a comma-separated directory list, dropping blank parts."""
    parts = value.split(",") if isinstance(value, str) else list(value)
    return [p.strip() for p in parts if p and p.strip()]


def scan_archives(
    roots: Iterable[str | Path],
    suffixes: Iterable[str] = DEFAULT_ARCHIVE_SUFFIXES,
    diagnostics: list[LoadDiagnostic] | None = None,
) -> list[Path]:
    """Recursively collect canonical paths of plugin archives under ``roots``.

    Roots are walked depth-first in the order given. Missing, unreadable or
    empty directories and files whose path cannot be resolved are logged and
    skipped; failures are appended to ``diagnostics`` when a list is passed.
    """
    suffixes = tuple(s.lower() for s in suffixes)
    results: list[Path] = []
    seen: set[Path] = set()
    visited_dirs: set[Path] = set()

    def _record(kind: LoadErrorKind, source: str, message: str) -> None:
        if diagnostics is not None:
            diagnostics.append(LoadDiagnostic(kind=kind, source=source, message=message))

    def _scan_dir(dir_path: Path) -> None:
        try:
            real = dir_path.resolve()
        except (OSError, RuntimeError) as e:
            logger.warning("Unable to resolve plugin directory %s: %s", dir_path, e)
            _record(LoadErrorKind.IO_ERROR, str(dir_path), str(e))
            return
        if real in visited_dirs:
            logger.warning("Directory %s already scanned as %s, skipping", dir_path, real)
            return
        visited_dirs.add(real)

        try:
            with os.scandir(dir_path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except (FileNotFoundError, NotADirectoryError):
            logger.info("No plugin detected in %s", dir_path)
            return
        except PermissionError as e:
            logger.info("Unable to read plugin directory %s: %s", dir_path, e)
            _record(LoadErrorKind.ACCESS_DENIED, str(dir_path), str(e))
            return
        except OSError as e:
            logger.info("Unable to read plugin directory %s: %s", dir_path, e)
            _record(LoadErrorKind.IO_ERROR, str(dir_path), str(e))
            return

        if not entries:
            logger.info("No plugin detected in %s", dir_path)
            return

        for entry in entries:
            try:
                is_file = entry.is_file()
                is_dir = entry.is_dir()
            except OSError as e:
                logger.warning("OS error accessing %s: %s", entry.path, e)
                _record(LoadErrorKind.IO_ERROR, entry.path, str(e))
                continue

            if is_file and entry.name.lower().endswith(suffixes):
                try:
                    canonical = Path(entry.path).resolve(strict=True)
                except (OSError, RuntimeError) as e:
                    logger.warning("Unable to read plugin %s: %s", entry.path, e)
                    _record(LoadErrorKind.IO_ERROR, entry.path, str(e))
                    continue
                if canonical in seen:
                    logger.debug("Archive %s already found, skipping", canonical)
                    continue
                seen.add(canonical)
                results.append(canonical)
                logger.info("Scan found plugin: %s", canonical)
            elif is_dir:
                _scan_dir(Path(entry.path))
            else:
                logger.debug("Ignore: %s", entry.path)

    for root in roots:
        _scan_dir(Path(root))

    return results
