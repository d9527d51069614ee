"""Process-wide registry of discovered extension function classes."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable

from extreg.config import DEFAULT_ARCHIVE_SUFFIXES
from extreg.function import ExtensionFunctionDefinition
from extreg.registry.archive import load_archive
from extreg.registry.scanner import scan_archives
from extreg.registry.types import LoadDiagnostic, RegistryState, ScanReport

logger = logging.getLogger(__name__)

__all__ = ["CapabilityRegistry", "get_default_registry"]


class CapabilityRegistry:
    """Registry of extension function classes, populated by exactly one scan.

    The first call to :meth:`ensure_populated` moves the registry to
    POPULATING and walks the plugin directories. Callers arriving during the
    scan wait on the registry's condition until it finishes; callers arriving
    after it reuse its result. Directories passed after the first scan are
    ignored. There is no way back from POPULATED.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._state = RegistryState.EMPTY
        self._report = ScanReport()
        self._scan_count = 0

    @property
    def state(self) -> RegistryState:
        with self._cond:
            return self._state

    @property
    def scan_count(self) -> int:
        """Number of physical scans performed (0 or 1 once populated)."""
        with self._cond:
            return self._scan_count

    @property
    def roots(self) -> tuple[str, ...]:
        """Directories used by the scan that populated the registry."""
        with self._cond:
            return self._report.roots

    @property
    def implementations(self) -> tuple[type[ExtensionFunctionDefinition], ...]:
        with self._cond:
            return tuple(self._report.implementations)

    @property
    def diagnostics(self) -> tuple[LoadDiagnostic, ...]:
        with self._cond:
            return tuple(self._report.diagnostics)

    def __len__(self) -> int:
        return len(self.implementations)

    def ensure_populated(
        self,
        roots: Iterable[str | Path],
        suffixes: Iterable[str] = DEFAULT_ARCHIVE_SUFFIXES,
    ) -> ScanReport:
        """Scan ``roots`` unless a scan has already run, and return the scan report.

        Raises:
            Exception: Anything unexpected raised by the scan itself. The
                registry goes back to EMPTY so a later caller can retry.
        """
        roots = tuple(str(r) for r in roots)
        with self._cond:
            while self._state is RegistryState.POPULATING:
                self._cond.wait()
            if self._state is RegistryState.POPULATED:
                if roots != self._report.roots:
                    logger.debug(
                        "Registry already populated from %s, ignoring %s",
                        list(self._report.roots),
                        list(roots),
                    )
                return self._report
            self._state = RegistryState.POPULATING

        try:
            report = self._scan(roots, tuple(suffixes))
        except BaseException:
            with self._cond:
                self._state = RegistryState.EMPTY
                self._cond.notify_all()
            raise

        with self._cond:
            self._report = report
            self._scan_count += 1
            self._state = RegistryState.POPULATED
            self._cond.notify_all()
        return report

    def _scan(self, roots: tuple[str, ...], suffixes: tuple[str, ...]) -> ScanReport:
        report = ScanReport(roots=roots)
        report.archives = scan_archives(roots, suffixes=suffixes, diagnostics=report.diagnostics)
        for archive in report.archives:
            report.merge(load_archive(archive))
        logger.info(
            "Found %d extension function(s) in %d plugin archive(s)",
            len(report.implementations),
            len(report.archives),
        )
        return report


_default_registry = CapabilityRegistry()


def get_default_registry() -> CapabilityRegistry:
    """Return the process-wide registry shared by plugin loaders."""
    return _default_registry
